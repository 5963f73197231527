from src.locker_agent.models.domain import ActiveResiEntry, CourierCandidate
from src.locker_agent.services.backend_client import BackendError, BackendUnavailableError
from src.locker_agent.services.intake.form_state import FormState
from src.locker_agent.services.intake.submission import stale_resi_outcome, submit_shipment, validate_submission

COURIERS = [
    CourierCandidate(courier_id="C-JNE", service_type="jne", name="Budi", plate="B 1 AA"),
    CourierCandidate(courier_id="C-SCP", service_type="sicepat", name="Joko", plate="B 2 BB"),
    CourierCandidate(courier_id="C-OFF", service_type="jne", name="Tono", plate="B 3 CC", state="inactive"),
]


class RecordingClient:
    def __init__(self, result=None, error: Exception | None = None, verdicts=None, check_error: Exception | None = None):
        self.calls: list[dict] = []
        self.checks: list[tuple[str, str]] = []
        self.result = result if result is not None else {"ok": True, "data": {"shipmentId": "S1"}}
        self.error = error
        self.verdicts = verdicts or {}
        self.check_error = check_error

    def validate_resi(self, courier: str, resi: str):
        self.checks.append((courier, resi))
        if self.check_error is not None:
            raise self.check_error
        return self.verdicts.get(resi, {"valid": True})

    def create_shipment(self, body: dict):
        self.calls.append(body)
        if self.error is not None:
            raise self.error
        return self.result


def _resi(service: str = "jne") -> ActiveResiEntry:
    return ActiveResiEntry(
        tracking_number="JNE123",
        courier_service_type=service,
        customer_id="CUST-1",
        customer_name="Siti",
        customer_phone="0812",
        display_label="JNE123",
    )


def _state(**overrides) -> FormState:
    values = dict(locker_id="L1", courier_id="C-JNE", tracking_numbers=["JNE123"])
    values.update(overrides)
    return FormState(**values)


def test_missing_tracking_numbers_blocks_submission_without_call():
    client = RecordingClient()

    outcome = submit_shipment(client, _state(tracking_numbers=[]), COURIERS)

    assert outcome.status == "invalid"
    assert outcome.errors_for("tracking_numbers")
    assert not outcome.errors_for("locker_id")
    assert client.calls == []


def test_every_missing_required_field_is_reported():
    errors = validate_submission(_state(locker_id=" ", courier_id="", tracking_numbers=["  "]), COURIERS)

    assert {error.field for error in errors} == {"locker_id", "courier_id", "tracking_numbers"}


def test_service_type_mismatch_rejected_without_call():
    client = RecordingClient()
    state = _state(selected_resi=_resi("jne"), courier_id="C-SCP")

    outcome = submit_shipment(client, state, COURIERS)

    assert outcome.status == "invalid"
    messages = outcome.errors_for("courier_id")
    assert len(messages) == 1
    assert "jne" in messages[0] and "sicepat" in messages[0]
    assert client.calls == []
    # field values kept for correction
    assert state.courier_id == "C-SCP"
    assert state.tracking_numbers == ["JNE123"]


def test_service_type_comparison_ignores_case():
    state = _state(selected_resi=_resi("JNE"), courier_id="C-JNE")

    assert validate_submission(state, COURIERS) == []


def test_inactive_or_unknown_courier_is_rejected():
    assert validate_submission(_state(courier_id="C-OFF"), COURIERS)[0].field == "courier_id"
    assert validate_submission(_state(courier_id="NOPE"), COURIERS)[0].field == "courier_id"


def test_matching_submission_posts_shipment():
    client = RecordingClient()
    state = _state(
        selected_resi=_resi("jne"),
        customer_id="CUST-1",
        receiver_name="Siti",
        receiver_phone="0812",
    )

    outcome = submit_shipment(client, state, COURIERS)

    assert outcome.ok
    assert outcome.response == {"ok": True, "data": {"shipmentId": "S1"}}
    assert client.calls == [
        {
            "lockerId": "L1",
            "courierType": "jne",
            "courierPlate": "B 1 AA",
            "courierId": "C-JNE",
            "receiverName": "Siti",
            "receiverPhone": "0812",
            "customerId": "CUST-1",
            "resiList": ["JNE123"],
        }
    ]


def test_manual_submission_without_resi_skips_type_check():
    client = RecordingClient()

    outcome = submit_shipment(client, _state(courier_id="C-SCP", tracking_numbers=["A", "B"]), COURIERS)

    assert outcome.ok
    assert client.calls[0]["resiList"] == ["A", "B"]
    assert "receiverName" not in client.calls[0]


def test_backend_rejection_is_reported_verbatim_once():
    client = RecordingClient(error=BackendError(400, "Resi sudah terdaftar", {"error": "Resi sudah terdaftar"}))

    outcome = submit_shipment(client, _state(), COURIERS)

    assert outcome.status == "rejected"
    assert outcome.message == "Resi sudah terdaftar"
    assert outcome.request is not None
    assert len(client.calls) == 1


def test_unreachable_backend_is_reported():
    client = RecordingClient(error=BackendUnavailableError("connection refused"))

    outcome = submit_shipment(client, _state(), COURIERS)

    assert outcome.status == "unavailable"
    assert "connection refused" in outcome.message
    assert len(client.calls) == 1


def test_every_tracking_number_is_checked_before_create():
    client = RecordingClient()

    outcome = submit_shipment(client, _state(courier_id="C-SCP", tracking_numbers=["A", "B"]), COURIERS)

    assert outcome.ok
    assert client.checks == [("sicepat", "A"), ("sicepat", "B")]
    assert [(check.tracking_number, check.valid, check.message) for check in outcome.validation] == [
        ("A", True, "OK"),
        ("B", True, "OK"),
    ]


def test_invalid_resi_check_blocks_create():
    client = RecordingClient(verdicts={"B": {"valid": False, "error": "Format resi JNE tidak dikenal"}})

    outcome = submit_shipment(client, _state(tracking_numbers=["A", "B"]), COURIERS)

    assert outcome.status == "invalid"
    assert client.calls == []
    assert [(check.tracking_number, check.valid) for check in outcome.validation] == [("A", True), ("B", False)]
    assert outcome.validation[1].message == "Format resi JNE tidak dikenal"
    assert outcome.request is not None


def test_resi_check_connection_error_blocks_create():
    client = RecordingClient(check_error=BackendUnavailableError("connection refused"))

    outcome = submit_shipment(client, _state(), COURIERS)

    assert outcome.status == "invalid"
    assert client.calls == []
    assert not outcome.validation[0].valid
    assert "unreachable" in outcome.validation[0].message


def test_resi_check_error_status_blocks_create():
    client = RecordingClient(check_error=BackendError(500, "validator crashed"))

    outcome = submit_shipment(client, _state(), COURIERS)

    assert outcome.status == "invalid"
    assert client.calls == []
    assert outcome.validation[0].message == "validator crashed"


def test_resi_check_skipped_when_form_is_invalid():
    client = RecordingClient()

    submit_shipment(client, _state(selected_resi=_resi("jne"), courier_id="C-SCP"), COURIERS)

    assert client.checks == []


def test_stale_resi_outcome_is_invalid():
    outcome = stale_resi_outcome("JNE123")

    assert outcome.status == "invalid"
    assert "JNE123" in outcome.errors_for("selected_resi")[0]
