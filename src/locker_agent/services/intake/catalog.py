"""Catalog loading for the shipment-intake form.

The active-resi catalog is optional infrastructure and degrades to an empty
list. Couriers, lockers and customers are required to render the form; a
connectivity failure on any of them propagates to the page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ValidationError

from ...models.domain import (
    ActiveResiEntry,
    CourierCandidate,
    CustomerRecord,
    LockerCandidate,
    ShipmentRecord,
)
from ...schemas.backend import (
    ActiveResiPayload,
    CourierPayload,
    CustomerPayload,
    LockerPayload,
    ShipmentPayload,
    unwrap_list,
)
from ..backend_client import BackendClient, BackendError, BackendUnavailableError
from .matching import active_couriers as _active_couriers

logger = logging.getLogger(__name__)

# Statuses meaning "this backend has no active-resi endpoint".
UNSUPPORTED_STATUSES = frozenset({404, 405, 501})

T = TypeVar("T")


@dataclass(slots=True)
class FormCatalogs:
    """Everything fetched once per render of the intake form."""

    active_resi: list[ActiveResiEntry] = field(default_factory=list)
    couriers: list[CourierCandidate] = field(default_factory=list)
    lockers: list[LockerCandidate] = field(default_factory=list)
    customers: list[CustomerRecord] = field(default_factory=list)

    @property
    def active_couriers(self) -> list[CourierCandidate]:
        return _active_couriers(self.couriers)

    def find_resi(self, tracking_number: str | None) -> ActiveResiEntry | None:
        if not tracking_number:
            return None
        wanted = tracking_number.strip()
        for entry in self.active_resi:
            if entry.tracking_number == wanted:
                return entry
        return None

    def find_courier(self, courier_id: str | None) -> CourierCandidate | None:
        if not courier_id:
            return None
        for courier in self.couriers:
            if courier.courier_id == courier_id:
                return courier
        return None

    def find_customer(self, customer_id: str | None) -> CustomerRecord | None:
        if not customer_id:
            return None
        for customer in self.customers:
            if customer.customer_id == customer_id:
                return customer
        return None


def _normalize(payload: Any, model: type[BaseModel], convert: Callable[[Any], T], kind: str) -> list[T]:
    records: list[T] = []
    for row in unwrap_list(payload):
        if not isinstance(row, dict):
            logger.warning(f"Skipping non-object {kind} row: {row!r}")
            continue
        try:
            records.append(convert(model.model_validate(row)))
        except ValidationError as exc:
            # Skip invalid rows but keep the rest of the catalog usable
            logger.warning(f"Skipping invalid {kind} row: {exc.errors()[0].get('msg', exc)}")
    return records


def normalize_active_resi(payload: Any) -> list[ActiveResiEntry]:
    return _normalize(payload, ActiveResiPayload, lambda item: item.to_domain(), "active-resi")


def normalize_couriers(payload: Any) -> list[CourierCandidate]:
    return _normalize(payload, CourierPayload, lambda item: item.to_domain(), "courier")


def normalize_lockers(payload: Any) -> list[LockerCandidate]:
    """Accepts both the bare-array and the ``{"data": [...]}`` locker shapes."""
    return _normalize(payload, LockerPayload, lambda item: item.to_domain(), "locker")


def normalize_customers(payload: Any) -> list[CustomerRecord]:
    return _normalize(payload, CustomerPayload, lambda item: item.to_domain(), "customer")


def normalize_shipments(payload: Any) -> list[ShipmentRecord]:
    rows = [row for row in unwrap_list(payload) if isinstance(row, dict)]
    return [ShipmentPayload.model_validate(row).to_domain(row) for row in rows]


def load_active_resi(client: BackendClient) -> list[ActiveResiEntry]:
    """Fetch outstanding tracking numbers once; never raises."""
    try:
        payload = client.get_active_resi()
    except BackendError as exc:
        if exc.status_code in UNSUPPORTED_STATUSES:
            logger.info(f"Active-resi catalog not available on backend (HTTP {exc.status_code}); using empty list")
        else:
            logger.warning(f"Active-resi catalog request failed (HTTP {exc.status_code}): {exc.message}")
        return []
    except BackendUnavailableError as exc:
        logger.warning(f"Active-resi catalog unreachable, continuing with manual entry: {exc}")
        return []
    return normalize_active_resi(payload)


def load_couriers(client: BackendClient) -> list[CourierCandidate]:
    return normalize_couriers(client.get_couriers())


def load_lockers(client: BackendClient) -> list[LockerCandidate]:
    return normalize_lockers(client.get_lockers())


def load_customers(client: BackendClient) -> list[CustomerRecord]:
    return normalize_customers(client.get_customers())


def load_form_catalogs(client: BackendClient) -> FormCatalogs:
    """Load every catalog the intake form needs.

    Raises ``BackendUnavailableError`` or ``BackendError`` when one of the
    required lists cannot be fetched.
    """
    return FormCatalogs(
        active_resi=load_active_resi(client),
        couriers=load_couriers(client),
        lockers=load_lockers(client),
        customers=load_customers(client),
    )
