"""Form state machine for the shipment-intake page.

The form is either in ``MANUAL`` mode (every field editable) or in
``RESI_SELECTED`` mode, where the customer, receiver and tracking-number
fields are copied from an active resi entry and locked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from ...models.domain import ActiveResiEntry, CourierCandidate, CustomerRecord, LockerCandidate
from .matching import MatchResult, active_couriers, match_resi

logger = logging.getLogger(__name__)

LOCKABLE_FIELDS = frozenset({"customer_id", "receiver_name", "receiver_phone", "tracking_numbers"})
EDITABLE_FIELDS = frozenset(
    {"locker_id", "courier_id", "customer_id", "receiver_name", "receiver_phone", "item_type", "tracking_numbers"}
)


class FormMode(str, Enum):
    MANUAL = "manual"
    RESI_SELECTED = "resi_selected"


def parse_tracking_numbers(text: str | None) -> list[str]:
    """Split a textarea value into tracking numbers, one per non-blank line."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


@dataclass(slots=True)
class FormState:
    selected_resi: Optional[ActiveResiEntry] = None
    locker_id: str = ""
    courier_id: str = ""
    customer_id: str = ""
    receiver_name: str = ""
    receiver_phone: str = ""
    item_type: str = ""
    tracking_numbers: list[str] = field(default_factory=list)
    manual_customer_id: Optional[str] = None
    field_lock: set[str] = field(default_factory=set)

    @property
    def mode(self) -> FormMode:
        return FormMode.RESI_SELECTED if self.selected_resi is not None else FormMode.MANUAL

    def is_locked(self, name: str) -> bool:
        return name in self.field_lock

    @property
    def tracking_text(self) -> str:
        return "\n".join(self.tracking_numbers)


@dataclass(slots=True, frozen=True)
class _ManualSnapshot:
    customer_id: str
    receiver_name: str
    receiver_phone: str
    tracking_numbers: tuple[str, ...]
    manual_customer_id: Optional[str]


class FormStateController:
    """Single authority over which intake fields are editable."""

    def __init__(
        self,
        couriers: Sequence[CourierCandidate],
        lockers: Sequence[LockerCandidate],
        state: FormState | None = None,
    ) -> None:
        self.couriers = list(couriers)
        self.lockers = list(lockers)
        self.state = state or FormState()
        self.courier_choices: list[CourierCandidate] = active_couriers(self.couriers)
        self.match: Optional[MatchResult] = None
        self._snapshot: Optional[_ManualSnapshot] = None

    @property
    def mode(self) -> FormMode:
        return self.state.mode

    @property
    def suggested_locker_id(self) -> Optional[str]:
        if self.match and self.match.suggested_locker:
            return self.match.suggested_locker.locker_id
        return None

    def select_resi(self, entry: ActiveResiEntry | None) -> MatchResult | None:
        """Enter resi-selected mode; an empty selection returns to manual mode."""
        if entry is None:
            self.clear_resi()
            return None

        state = self.state
        if state.mode is FormMode.MANUAL:
            self._snapshot = _ManualSnapshot(
                customer_id=state.customer_id,
                receiver_name=state.receiver_name,
                receiver_phone=state.receiver_phone,
                tracking_numbers=tuple(state.tracking_numbers),
                manual_customer_id=state.manual_customer_id,
            )

        state.selected_resi = entry
        state.customer_id = entry.customer_id
        state.receiver_name = entry.customer_name
        state.receiver_phone = entry.customer_phone
        state.tracking_numbers = [entry.tracking_number]
        # Resi-driven and existing-customer entry are mutually exclusive
        state.manual_customer_id = None
        state.field_lock = set(LOCKABLE_FIELDS)

        self.match = match_resi(entry, self.couriers, self.lockers)
        self.courier_choices = list(self.match.couriers)
        choice_ids = {courier.courier_id for courier in self.courier_choices}
        if state.courier_id not in choice_ids:
            state.courier_id = self.courier_choices[0].courier_id if self.courier_choices else ""
        state.locker_id = self.suggested_locker_id or ""

        if self.match.no_active_courier:
            logger.info(f"No active courier for service type '{entry.courier_service_type}' (resi {entry.tracking_number})")
        return self.match

    def clear_resi(self) -> None:
        """Return to manual mode, restoring the values held before the resi was selected."""
        state = self.state
        if state.mode is FormMode.RESI_SELECTED:
            snapshot = self._snapshot
            state.selected_resi = None
            if snapshot is not None:
                state.customer_id = snapshot.customer_id
                state.receiver_name = snapshot.receiver_name
                state.receiver_phone = snapshot.receiver_phone
                state.tracking_numbers = list(snapshot.tracking_numbers)
                state.manual_customer_id = snapshot.manual_customer_id
        state.field_lock = set()
        self._snapshot = None
        self.match = None
        self.courier_choices = active_couriers(self.couriers)

    def reset(self) -> None:
        self.state = FormState()
        self._snapshot = None
        self.match = None
        self.courier_choices = active_couriers(self.couriers)

    def choose_customer(self, customer: CustomerRecord | None) -> Optional[str]:
        """Apply an existing-customer selection.

        Returns a warning message, leaving the state untouched, when a resi is
        selected.
        """
        state = self.state
        if state.mode is FormMode.RESI_SELECTED:
            return (
                f"Resi {state.selected_resi.tracking_number} is selected; "
                "clear it before choosing an existing customer."
            )
        if customer is None:
            state.manual_customer_id = None
            return None
        state.manual_customer_id = customer.customer_id
        state.customer_id = customer.customer_id
        state.receiver_name = customer.name
        state.receiver_phone = customer.phone
        return None

    def edit_field(self, name: str, value: str) -> bool:
        """Set a field from user input. Locked fields are refused and left unchanged."""
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown form field '{name}'")
        if self.state.is_locked(name):
            return False
        if name == "tracking_numbers":
            self.state.tracking_numbers = parse_tracking_numbers(value)
        else:
            setattr(self.state, name, (value or "").strip())
        return True
