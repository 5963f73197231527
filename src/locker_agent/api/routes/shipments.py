"""Shipment list page."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ...config import settings
from ...services.backend_client import BackendClient, BackendError, BackendUnavailableError
from ...services.intake.catalog import normalize_shipments
from ..dependencies import get_backend_client
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["shipments"])


@router.get("/list", response_class=HTMLResponse)
def list_shipments(request: Request, client: BackendClient = Depends(get_backend_client)) -> HTMLResponse:
    status_text = ""
    try:
        shipments = normalize_shipments(client.get_shipments(limit=settings.shipment_list_limit))
    except (BackendError, BackendUnavailableError) as exc:
        logger.error(f"Failed to fetch shipments: {exc}")
        shipments = []
        status_text = "Gagal mengambil data shipments dari backend."
    return templates.TemplateResponse(
        request,
        "shipments.html",
        {
            "active_tab": "list",
            "shipments": shipments,
            "status_text": status_text,
            "status_class": "err" if status_text else "",
        },
    )
