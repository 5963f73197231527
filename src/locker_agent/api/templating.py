"""Jinja2 template environment for the console pages."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from ..config import settings

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def format_timestamp(value: str | None) -> str:
    """Render an ISO-8601 timestamp as ``DD/MM/YYYY HH:MM``; unparseable values pass through."""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%d/%m/%Y %H:%M")


templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.filters["timestamp"] = format_timestamp
templates.env.globals["app_name"] = settings.app_name
templates.env.globals["backend_url"] = settings.api_base_url
