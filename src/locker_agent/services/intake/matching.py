"""Courier filtering and locker suggestion for a selected tracking number."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ...models.domain import ActiveResiEntry, CourierCandidate, LockerCandidate


@dataclass(slots=True)
class MatchResult:
    """Outcome of matching one tracking number against the courier/locker pools."""

    service_type: str
    couriers: list[CourierCandidate] = field(default_factory=list)
    suggested_locker: Optional[LockerCandidate] = None

    @property
    def no_active_courier(self) -> bool:
        """True when no active courier serves this tracking number's carrier."""
        return not self.couriers

    @property
    def has_locker_suggestion(self) -> bool:
        return self.suggested_locker is not None


def active_couriers(couriers: Sequence[CourierCandidate]) -> list[CourierCandidate]:
    return [courier for courier in couriers if courier.is_active]


def filter_couriers(couriers: Sequence[CourierCandidate], service_type: str) -> list[CourierCandidate]:
    """Return active couriers of ``service_type`` (case-insensitive), keeping input order."""
    wanted = (service_type or "").strip().lower()
    return [
        courier
        for courier in couriers
        if courier.is_active and courier.service_type.strip().lower() == wanted
    ]


def suggest_locker(lockers: Sequence[LockerCandidate]) -> Optional[LockerCandidate]:
    """Return the online locker with the fewest pending shipments.

    Ties go to the locker listed first. Returns ``None`` when no locker is online.
    """
    best: Optional[LockerCandidate] = None
    for locker in lockers:
        if not locker.is_online:
            continue
        # Strict comparison keeps the earliest locker on ties
        if best is None or locker.pending_count < best.pending_count:
            best = locker
    return best


def match_resi(
    entry: ActiveResiEntry,
    couriers: Sequence[CourierCandidate],
    lockers: Sequence[LockerCandidate],
) -> MatchResult:
    return MatchResult(
        service_type=entry.courier_service_type,
        couriers=filter_couriers(couriers, entry.courier_service_type),
        suggested_locker=suggest_locker(lockers),
    )
