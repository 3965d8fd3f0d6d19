"""
Configuration settings for the Diagnostics Admin Console
"""

import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD or QA
ADMIN_API_BASE = os.getenv("ADMIN_API_BASE", "").rstrip("/")
PORT = int(os.getenv("PORT", 8080))

# Wall-clock zone used by datetime-local inputs
ADMIN_TIMEZONE = os.getenv("ADMIN_TIMEZONE", "UTC")

# Where non-admins are sent (silently)
AUTH_REDIRECT_PATH = os.getenv("AUTH_REDIRECT_PATH", "/auth")
AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "admin_token")

# Record store limits
LIST_PAGE_SIZE = int(os.getenv("LIST_PAGE_SIZE", 100))
RELATION_OPTIONS_LIMIT = int(os.getenv("RELATION_OPTIONS_LIMIT", 500))
MAILING_LIST_LIMIT = int(os.getenv("MAILING_LIST_LIMIT", 500))
NAV_PAGES_LIMIT = int(os.getenv("NAV_PAGES_LIMIT", 200))

# Outbound HTTP timeout in seconds (httpx default)
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 5.0))

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

logger.info(f"Environment: {ENV}")
logger.info(f"Record store: {ADMIN_API_BASE or '<unset>'}, timezone: {ADMIN_TIMEZONE}")

# Validate required environment variables
if not ADMIN_API_BASE:
    raise ValueError("ADMIN_API_BASE environment variable is required")
