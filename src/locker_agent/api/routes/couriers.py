"""Courier pool pages."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from ...schemas.backend import CourierCreateRequest
from ...services.backend_client import BackendClient, BackendError, BackendUnavailableError
from ...services.intake.catalog import load_couriers
from ..dependencies import get_backend_client
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/couriers", tags=["couriers"])

COURIER_COMPANIES: dict[str, str] = {
    "anteraja": "AnterAja",
    "jne": "JNE",
    "jnt": "J&T Express",
    "sicepat": "SiCepat",
    "tiki": "TIKI",
    "ninja": "Ninja Xpress",
    "lionparcel": "Lion Parcel",
    "wahana": "Wahana",
    "pos": "POS Indonesia",
}


def _render(
    request: Request,
    client: BackendClient,
    *,
    status_text: str = "",
    status_class: str = "",
    form_data: dict | None = None,
) -> HTMLResponse:
    try:
        couriers = load_couriers(client)
    except (BackendError, BackendUnavailableError) as exc:
        logger.error(f"Failed to fetch couriers: {exc}")
        couriers = []
        if not status_text:
            status_text, status_class = "Gagal mengambil daftar kurir.", "err"
    return templates.TemplateResponse(
        request,
        "couriers.html",
        {
            "active_tab": "couriers",
            "couriers": couriers,
            "companies": COURIER_COMPANIES,
            "status_text": status_text,
            "status_class": status_class,
            "form_data": form_data or {},
        },
    )


@router.get("", response_class=HTMLResponse)
def list_couriers(request: Request, client: BackendClient = Depends(get_backend_client)) -> HTMLResponse:
    return _render(request, client)


@router.post("", response_class=HTMLResponse)
def add_courier(
    request: Request,
    company: str = Form(default=""),
    name: str = Form(default=""),
    plate: str = Form(default=""),
    client: BackendClient = Depends(get_backend_client),
) -> HTMLResponse:
    form_data = {"company": company.strip().lower(), "name": name.strip(), "plate": plate.strip()}
    if not all(form_data.values()):
        return _render(
            request,
            client,
            status_text="Perusahaan, nama kurir dan plat wajib diisi.",
            status_class="err",
            form_data=form_data,
        )
    if form_data["company"] not in COURIER_COMPANIES:
        return _render(
            request,
            client,
            status_text=f"Perusahaan kurir '{company}' tidak dikenal.",
            status_class="err",
            form_data=form_data,
        )

    try:
        client.create_courier(CourierCreateRequest(**form_data).model_dump())
    except BackendError as exc:
        logger.error(f"Backend rejected courier {form_data['name']}: {exc.message}")
        return _render(
            request,
            client,
            status_text=f"Gagal menambah kurir: {exc.message}",
            status_class="err",
            form_data=form_data,
        )
    except BackendUnavailableError as exc:
        logger.error(f"Add courier failed, backend unreachable: {exc}")
        return _render(
            request,
            client,
            status_text=f"Gagal menambah kurir: {exc}",
            status_class="err",
            form_data=form_data,
        )
    return _render(request, client, status_text="Kurir berhasil ditambahkan.", status_class="ok")
