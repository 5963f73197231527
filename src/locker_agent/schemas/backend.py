"""Wire schemas for the Smart Locker backend API.

The backend has shipped several field spellings over time, so each payload
model accepts the known aliases and converts itself into the canonical
domain record with ``to_domain()``.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..models.domain import (
    ActiveResiEntry,
    CourierCandidate,
    CustomerRecord,
    LockerCandidate,
    ShipmentRecord,
)

_COURIER_STATES = {"active", "ongoing", "inactive"}
_ONLINE_STATES = {"online", "offline"}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ActiveResiPayload(_Payload):
    tracking_number: str = Field(validation_alias=AliasChoices("trackingNumber", "resi", "tracking_number"))
    courier_service_type: str = Field(
        default="",
        validation_alias=AliasChoices("courierServiceType", "courierType", "serviceType", "courier"),
    )
    customer_id: str = Field(default="", validation_alias=AliasChoices("customerId", "customer_id"))
    customer_name: str = Field(default="", validation_alias=AliasChoices("customerName", "receiverName", "name"))
    customer_phone: str = Field(default="", validation_alias=AliasChoices("customerPhone", "receiverPhone", "phone"))
    display_label: str = Field(default="", validation_alias=AliasChoices("displayLabel", "label"))

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    def to_domain(self) -> ActiveResiEntry:
        service_type = self.courier_service_type.lower()
        label = self.display_label
        if not label:
            label = f"{self.tracking_number} ({service_type.upper() or '-'})"
            if self.customer_name:
                label = f"{label} – {self.customer_name}"
        return ActiveResiEntry(
            tracking_number=self.tracking_number,
            courier_service_type=service_type,
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            display_label=label,
        )


class CourierPayload(_Payload):
    courier_id: str = Field(validation_alias=AliasChoices("courierId", "id", "_id"))
    service_type: str = Field(default="", validation_alias=AliasChoices("serviceType", "company", "courierType"))
    name: str = ""
    plate: str = ""
    state: Optional[str] = Field(default=None, validation_alias=AliasChoices("state", "status"))

    @field_validator("courier_id", "service_type", "name", "plate", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    def to_domain(self) -> CourierCandidate:
        # Older backends carry no lifecycle state; every listed courier was usable.
        state = (self.state or "active").strip().lower()
        if state not in _COURIER_STATES:
            state = "inactive"
        return CourierCandidate(
            courier_id=self.courier_id,
            service_type=self.service_type.lower(),
            name=self.name,
            plate=self.plate,
            state=state,  # type: ignore[arg-type]
        )


class LockerPayload(_Payload):
    locker_id: str = Field(validation_alias=AliasChoices("lockerId", "id", "_id"))
    pending_count: Optional[int] = Field(default=None, validation_alias=AliasChoices("pendingCount", "pending"))
    pending_resi: Optional[List[Any]] = Field(default=None, validation_alias=AliasChoices("pendingResi",))
    online_status: Optional[str] = Field(default=None, validation_alias=AliasChoices("onlineStatus", "status"))
    is_online: Optional[bool] = Field(default=None, validation_alias=AliasChoices("isOnline", "online"))
    is_active: Optional[bool] = Field(default=None, validation_alias=AliasChoices("isActive",))
    locker_token: Optional[str] = Field(default=None, validation_alias=AliasChoices("lockerToken", "token"))
    last_heartbeat: Optional[str] = Field(default=None, validation_alias=AliasChoices("lastHeartbeat",))

    @field_validator("locker_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return _text(value)

    @field_validator("last_heartbeat", "locker_token", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        text = _text(value)
        return text or None

    def _resolved_pending(self) -> int:
        # An empty pendingResi list does not override a reported pendingCount
        if self.pending_resi:
            return len(self.pending_resi)
        return max(self.pending_count or 0, 0)

    def _resolved_status(self) -> str:
        status = (self.online_status or "").strip().lower()
        if status in _ONLINE_STATES:
            return status
        if self.is_online is not None:
            return "online" if self.is_online else "offline"
        if self.is_active is not None:
            return "online" if self.is_active else "offline"
        return "unknown"

    def to_domain(self) -> LockerCandidate:
        return LockerCandidate(
            locker_id=self.locker_id,
            pending_count=self._resolved_pending(),
            online_status=self._resolved_status(),  # type: ignore[arg-type]
            token=self.locker_token,
            last_heartbeat=self.last_heartbeat,
        )


class CustomerPayload(_Payload):
    customer_id: str = Field(validation_alias=AliasChoices("customerId", "id", "_id"))
    name: str = ""
    phone: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    def to_domain(self) -> CustomerRecord:
        return CustomerRecord(customer_id=self.customer_id, name=self.name, phone=self.phone)


class ShipmentPayload(_Payload):
    locker_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("lockerId",))
    courier_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("courierType",))
    courier_plate: Optional[str] = Field(default=None, validation_alias=AliasChoices("courierPlate",))
    resi: Optional[str] = None
    receiver_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("receiverName",))
    receiver_phone: Optional[str] = Field(default=None, validation_alias=AliasChoices("receiverPhone",))
    item_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("itemType",))
    created_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("createdAt",))

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        text = _text(value)
        return text or None

    def to_domain(self, raw: dict) -> ShipmentRecord:
        return ShipmentRecord(
            locker_id=self.locker_id,
            courier_type=self.courier_type,
            courier_plate=self.courier_plate,
            resi=self.resi,
            receiver_name=self.receiver_name,
            receiver_phone=self.receiver_phone,
            item_type=self.item_type,
            created_at=self.created_at,
            raw=raw,
        )


class ShipmentCreateRequest(BaseModel):
    """Body of ``POST /api/shipments``; optional fields are omitted when empty."""

    lockerId: str
    courierType: str
    courierPlate: str = ""
    courierId: str
    receiverName: Optional[str] = None
    receiverPhone: Optional[str] = None
    customerId: Optional[str] = None
    itemType: Optional[str] = None
    resiList: List[str]

    def to_body(self) -> dict:
        return self.model_dump(exclude_none=True)


class CourierCreateRequest(BaseModel):
    company: str
    name: str
    plate: str


def unwrap_list(payload: Any) -> list:
    """Return the record list from either a bare array or a ``{"data": [...]}`` envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
    return []
