"""Locker pool page and raw backend debug proxy."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from ...services.backend_client import BackendClient, BackendError, BackendUnavailableError
from ...services.intake.catalog import normalize_lockers
from ..dependencies import get_backend_client
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["lockers"])


@router.get("/lockers", response_class=HTMLResponse)
def list_lockers(request: Request, client: BackendClient = Depends(get_backend_client)) -> HTMLResponse:
    status_text = ""
    debug = None
    try:
        code, payload = client.get_lockers_raw()
        lockers = normalize_lockers(payload)
        logger.info(f"/lockers -> fetched {len(lockers)} lockers (status {code})")
        if not lockers:
            debug = json.dumps({"status": code, "data": payload}, indent=2, ensure_ascii=False)
    except BackendError as exc:
        logger.error(f"Failed to fetch lockers: HTTP {exc.status_code} {exc.message}")
        lockers = []
        status_text = "Gagal mengambil daftar locker."
        debug = json.dumps(exc.payload, indent=2, ensure_ascii=False) if exc.payload is not None else exc.message
    except BackendUnavailableError as exc:
        logger.error(f"Failed to fetch lockers: {exc}")
        lockers = []
        status_text = "Gagal mengambil daftar locker."
        debug = str(exc)

    return templates.TemplateResponse(
        request,
        "lockers.html",
        {
            "active_tab": "lockers",
            "lockers": lockers,
            "status_text": status_text,
            "status_class": "err" if status_text else "",
            "debug": debug,
        },
    )


@router.get("/debug/lockers")
def debug_lockers(client: BackendClient = Depends(get_backend_client)) -> JSONResponse:
    """Proxy the raw backend locker response."""
    try:
        code, payload = client.get_lockers_raw()
    except BackendError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": exc.payload if exc.payload is not None else exc.message},
        )
    except BackendUnavailableError as exc:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"ok": False, "error": str(exc)})
    return JSONResponse(content={"ok": True, "status": code, "data": payload})
