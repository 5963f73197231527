"""Shared FastAPI dependencies."""

from __future__ import annotations

from ..config import settings
from ..services.backend_client import BackendClient


def get_backend_client() -> BackendClient:
    """One client per request, bound to the configured backend base URL."""
    return BackendClient(base_url=settings.api_base_url)
