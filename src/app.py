"""
Diagnostics Admin Console
Server-rendered administration of the remote record store: collection lists,
create/edit forms, deletes, mailing list export and public catalog reads.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS
from api.routes import health, admin, mailing_list, catalog
from schema.registry import MAILING_LIST
from utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# FastAPI app initialization
app = FastAPI(
    title="Diagnostics Admin Console",
    description="Admin console for pages, users, teams, tests, carts, testimonials and leads",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include routes; the mailing list must precede the generic collection routes
app.include_router(health.router, tags=["Health"])
app.include_router(mailing_list.router, prefix=f"/admin/{MAILING_LIST}", tags=["Mailing List"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])

# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
