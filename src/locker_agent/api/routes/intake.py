"""Shipment-intake form endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse

from ...services.backend_client import BackendClient, BackendError, BackendUnavailableError
from ...services.intake import (
    FormCatalogs,
    FormStateController,
    SubmissionOutcome,
    load_form_catalogs,
    match_resi,
    stale_resi_outcome,
    submit_shipment,
)
from ...services.intake.form_state import LOCKABLE_FIELDS
from ..dependencies import get_backend_client
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["intake"])


def _render_unavailable(request: Request, exc: Exception) -> HTMLResponse:
    """Page-level error when a required catalog (couriers, lockers, customers) is missing."""
    if isinstance(exc, BackendError):
        detail = f"Backend returned HTTP {exc.status_code}: {exc.message}"
        code = status.HTTP_502_BAD_GATEWAY
    else:
        detail = str(exc)
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    logger.error(f"Cannot render intake form, required catalog unavailable: {detail}")
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "active_tab": "form",
            "title": "Input Pengiriman",
            "message": "The courier, locker or customer list could not be loaded from the backend.",
            "detail": detail,
        },
        status_code=code,
    )


def _render_form(
    request: Request,
    catalogs: FormCatalogs,
    controller: FormStateController,
    *,
    warning: Optional[str] = None,
    outcome: Optional[SubmissionOutcome] = None,
) -> HTMLResponse:
    response_json = ""
    if outcome is not None and outcome.response is not None:
        response_json = json.dumps(outcome.response, indent=2, ensure_ascii=False)
    return templates.TemplateResponse(
        request,
        "form.html",
        {
            "active_tab": "form",
            "catalogs": catalogs,
            "controller": controller,
            "state": controller.state,
            "match": controller.match,
            "warning": warning,
            "outcome": outcome,
            "response_json": response_json,
        },
    )


def _apply_resi_selection(catalogs: FormCatalogs, controller: FormStateController, resi: Optional[str]) -> Optional[str]:
    if not resi:
        return None
    entry = catalogs.find_resi(resi)
    if entry is None:
        return f"Resi {resi} is no longer in the active list; continue with manual entry."
    controller.select_resi(entry)
    return None


@router.get("/", response_class=HTMLResponse)
def intake_form(
    request: Request,
    resi: Optional[str] = Query(default=None, description="Active resi to pre-fill from"),
    customer: Optional[str] = Query(default=None, description="Existing customer to pre-fill from"),
    client: BackendClient = Depends(get_backend_client),
) -> HTMLResponse:
    try:
        catalogs = load_form_catalogs(client)
    except (BackendError, BackendUnavailableError) as exc:
        return _render_unavailable(request, exc)

    controller = FormStateController(catalogs.couriers, catalogs.lockers)
    warning = _apply_resi_selection(catalogs, controller, resi)
    if customer:
        warning = controller.choose_customer(catalogs.find_customer(customer)) or warning
    return _render_form(request, catalogs, controller, warning=warning)


@router.post("/", response_class=HTMLResponse)
def submit_intake_form(
    request: Request,
    selected_resi: str = Form(default="", alias="selectedResi"),
    existing_customer: str = Form(default="", alias="existingCustomer"),
    locker_id: str = Form(default="", alias="lockerId"),
    courier_id: str = Form(default="", alias="courierId"),
    customer_id: str = Form(default="", alias="customerId"),
    receiver_name: str = Form(default="", alias="receiverName"),
    receiver_phone: str = Form(default="", alias="receiverPhone"),
    item_type: str = Form(default="", alias="itemType"),
    resi_list: str = Form(default="", alias="resiList"),
    client: BackendClient = Depends(get_backend_client),
) -> HTMLResponse:
    try:
        catalogs = load_form_catalogs(client)
    except (BackendError, BackendUnavailableError) as exc:
        return _render_unavailable(request, exc)

    controller = FormStateController(catalogs.couriers, catalogs.lockers)
    entry = catalogs.find_resi(selected_resi) if selected_resi else None
    if entry is not None:
        controller.select_resi(entry)
    warning = None
    if existing_customer:
        warning = controller.choose_customer(catalogs.find_customer(existing_customer))

    # Locked fields keep the values copied from the selected resi
    user_fields: dict[str, Any] = {
        "locker_id": locker_id,
        "courier_id": courier_id,
        "customer_id": customer_id,
        "receiver_name": receiver_name,
        "receiver_phone": receiver_phone,
        "item_type": item_type,
        "tracking_numbers": resi_list,
    }
    for name, value in user_fields.items():
        controller.edit_field(name, value)

    if selected_resi and entry is None:
        # The service-type check needs the resi; never fall back to a manual submission
        outcome = stale_resi_outcome(selected_resi)
    else:
        outcome = submit_shipment(client, controller.state, catalogs.couriers)
    return _render_form(request, catalogs, controller, warning=warning, outcome=outcome)


@router.get("/api/form/match")
def match_preview(
    resi: str = Query(..., min_length=1, description="Tracking number from the active-resi list"),
    client: BackendClient = Depends(get_backend_client),
) -> dict:
    """Matching engine output for one active resi."""
    try:
        catalogs = load_form_catalogs(client)
    except BackendUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc

    entry = catalogs.find_resi(resi)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Resi {resi} is not active")

    match = match_resi(entry, catalogs.couriers, catalogs.lockers)
    locker = match.suggested_locker
    return {
        "resi": entry.tracking_number,
        "serviceType": match.service_type,
        "customerId": entry.customer_id,
        "receiverName": entry.customer_name,
        "receiverPhone": entry.customer_phone,
        "noActiveCourier": match.no_active_courier,
        "couriers": [
            {"courierId": c.courier_id, "serviceType": c.service_type, "name": c.name, "plate": c.plate}
            for c in match.couriers
        ],
        "suggestedLocker": (
            {"lockerId": locker.locker_id, "pendingCount": locker.pending_count} if locker else None
        ),
        "lockedFields": sorted(LOCKABLE_FIELDS),
    }
