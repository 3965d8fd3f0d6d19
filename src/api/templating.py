"""
Jinja2 template environment for the console pages
"""

import os
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from schema.registry import get_menu

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

templates = Jinja2Templates(directory=TEMPLATE_DIR)

def render(
    request: Request,
    name: str,
    context: Dict[str, Any],
    active: Optional[str] = None,
    status_code: int = 200
):
    """Render a console page with the side navigation filled in"""
    page = {"menu": get_menu(), "active": active}
    page.update(context)
    return templates.TemplateResponse(request, name, page, status_code=status_code)
