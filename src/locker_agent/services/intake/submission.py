"""Submit-time validation and the create-shipment call."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Sequence

from ...models.domain import CourierCandidate
from ...schemas.backend import ShipmentCreateRequest
from ..backend_client import BackendClient, BackendError, BackendUnavailableError
from .form_state import FormState

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["created", "invalid", "rejected", "unavailable"]


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(slots=True, frozen=True)
class ResiCheck:
    """Backend verdict for one tracking number."""

    tracking_number: str
    valid: bool
    message: str


@dataclass(slots=True)
class SubmissionOutcome:
    status: OutcomeStatus
    errors: list[FieldError] = field(default_factory=list)
    message: str = ""
    request: Optional[ShipmentCreateRequest] = None
    response: Any = None
    validation: list[ResiCheck] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "created"

    def errors_for(self, name: str) -> list[str]:
        return [error.message for error in self.errors if error.field == name]


def _find_courier(couriers: Sequence[CourierCandidate], courier_id: str) -> CourierCandidate | None:
    for courier in couriers:
        if courier.courier_id == courier_id:
            return courier
    return None


def validate_submission(state: FormState, couriers: Sequence[CourierCandidate]) -> list[FieldError]:
    """Return every reason the form cannot be submitted; empty means it can."""
    errors: list[FieldError] = []
    if not state.locker_id.strip():
        errors.append(FieldError("locker_id", "Locker ID is required."))
    if not state.courier_id.strip():
        errors.append(FieldError("courier_id", "Select a courier."))
    if not [number for number in state.tracking_numbers if number.strip()]:
        errors.append(FieldError("tracking_numbers", "At least one tracking number is required."))

    if not state.courier_id.strip():
        return errors

    courier = _find_courier(couriers, state.courier_id)
    if courier is None:
        errors.append(FieldError("courier_id", f"Courier '{state.courier_id}' is not in the courier pool."))
        return errors
    if not courier.is_active:
        errors.append(FieldError("courier_id", f"Courier '{courier.name or courier.courier_id}' is not active ({courier.state})."))

    resi = state.selected_resi
    if resi is not None:
        expected = resi.courier_service_type.strip().lower()
        chosen = courier.service_type.strip().lower()
        if expected != chosen:
            errors.append(
                FieldError(
                    "courier_id",
                    f"Resi {resi.tracking_number} is a '{expected}' shipment but the chosen courier "
                    f"serves '{chosen}'. Choose a '{expected}' courier.",
                )
            )
    return errors


def build_shipment_request(state: FormState, courier: CourierCandidate) -> ShipmentCreateRequest:
    return ShipmentCreateRequest(
        lockerId=state.locker_id.strip(),
        courierType=courier.service_type,
        courierPlate=courier.plate,
        courierId=courier.courier_id,
        receiverName=state.receiver_name.strip() or None,
        receiverPhone=state.receiver_phone.strip() or None,
        customerId=state.customer_id.strip() or None,
        itemType=state.item_type.strip() or None,
        resiList=[number.strip() for number in state.tracking_numbers if number.strip()],
    )


def stale_resi_outcome(tracking_number: str) -> SubmissionOutcome:
    """Outcome for a submission whose selected resi is missing from the active list."""
    error = FieldError(
        "selected_resi",
        f"Resi {tracking_number} is no longer in the active list. Select it again or clear it before submitting.",
    )
    return SubmissionOutcome(status="invalid", errors=[error], message=error.message)


def check_tracking_numbers(client: BackendClient, service_type: str, numbers: Sequence[str]) -> list[ResiCheck]:
    """Run the backend resi check for every tracking number, one call each."""
    results: list[ResiCheck] = []
    for number in numbers:
        try:
            payload = client.validate_resi(service_type, number)
        except BackendError as exc:
            logger.warning(f"Resi check for {number} returned HTTP {exc.status_code}: {exc.message}")
            results.append(ResiCheck(number, False, exc.message))
            continue
        except BackendUnavailableError as exc:
            logger.error(f"Resi check for {number} failed, backend unreachable: {exc}")
            results.append(ResiCheck(number, False, "Validation failed (backend unreachable)."))
            continue

        if not isinstance(payload, dict):
            results.append(ResiCheck(number, False, "Unexpected response from the resi check."))
            continue
        valid = bool(payload.get("valid"))
        message = str(payload.get("error") or ("OK" if valid else "Invalid tracking number."))
        results.append(ResiCheck(number, valid, message))
    return results


def submit_shipment(
    client: BackendClient,
    state: FormState,
    couriers: Sequence[CourierCandidate],
) -> SubmissionOutcome:
    """Validate, check each resi with the backend and, when all pass, create the shipment.

    Never retries. Any failed resi check blocks the create call.
    """
    errors = validate_submission(state, couriers)
    courier = _find_courier(couriers, state.courier_id)
    if errors or courier is None:
        return SubmissionOutcome(status="invalid", errors=errors, message=errors[0].message if errors else "")

    request = build_shipment_request(state, courier)

    checks = check_tracking_numbers(client, courier.service_type, request.resiList)
    if not all(check.valid for check in checks):
        rejected = [check.tracking_number for check in checks if not check.valid]
        logger.info(f"Shipment for locker {request.lockerId} blocked, resi check failed for {', '.join(rejected)}")
        return SubmissionOutcome(
            status="invalid",
            message="Some tracking numbers did not pass the backend check. See the results table below.",
            request=request,
            validation=checks,
        )

    try:
        payload = client.create_shipment(request.to_body())
    except BackendError as exc:
        logger.error(f"Backend rejected shipment for locker {request.lockerId}: {exc.message}")
        return SubmissionOutcome(
            status="rejected", message=exc.message, request=request, response=exc.payload, validation=checks
        )
    except BackendUnavailableError as exc:
        logger.error(f"Shipment submission failed, backend unreachable: {exc}")
        return SubmissionOutcome(status="unavailable", message=str(exc), request=request, validation=checks)

    logger.info(f"Shipment created for locker {request.lockerId} with {len(request.resiList)} resi")
    return SubmissionOutcome(status="created", request=request, response=payload, validation=checks)
