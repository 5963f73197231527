"""Canonical domain records for the shipment-intake workflow.

Every backend payload is normalized into one of these shapes right after it
is fetched; nothing downstream looks at raw JSON.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional

CourierState = Literal["active", "ongoing", "inactive"]
OnlineStatus = Literal["online", "offline", "unknown"]


@dataclass(slots=True, frozen=True)
class ActiveResiEntry:
    """An outstanding tracking number that has not reached a locker yet."""

    tracking_number: str
    courier_service_type: str
    customer_id: str
    customer_name: str
    customer_phone: str
    display_label: str


@dataclass(slots=True, frozen=True)
class CourierCandidate:
    """A courier pool record; only ``active`` couriers can take a shipment."""

    courier_id: str
    service_type: str
    name: str
    plate: str
    state: CourierState = "active"

    @property
    def is_active(self) -> bool:
        return self.state == "active"


@dataclass(slots=True, frozen=True)
class LockerCandidate:
    """A locker device with its current pending load and heartbeat status."""

    locker_id: str
    pending_count: int
    online_status: OnlineStatus
    token: Optional[str] = None
    last_heartbeat: Optional[str] = None

    @property
    def is_online(self) -> bool:
        return self.online_status == "online"


@dataclass(slots=True, frozen=True)
class CustomerRecord:
    customer_id: str
    name: str
    phone: str


@dataclass(slots=True)
class ShipmentRecord:
    """A shipment row as listed by the backend."""

    locker_id: Optional[str]
    courier_type: Optional[str]
    courier_plate: Optional[str]
    resi: Optional[str]
    receiver_name: Optional[str]
    receiver_phone: Optional[str]
    item_type: Optional[str]
    created_at: Optional[str]
    raw: dict = field(default_factory=dict)
