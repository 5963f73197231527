"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.backend_client import BackendClient, check_health
from ..dependencies import get_backend_client

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/backend", status_code=status.HTTP_200_OK)
def health_backend(client: BackendClient = Depends(get_backend_client)) -> dict:
    """Check that the Smart Locker backend is reachable."""
    return {"service": "backend", "baseUrl": client.base_url, "healthy": check_health(client)}
