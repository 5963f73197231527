import pytest

from src.locker_agent.models.domain import ActiveResiEntry, CourierCandidate, CustomerRecord, LockerCandidate
from src.locker_agent.services.intake.form_state import (
    FormMode,
    FormStateController,
    LOCKABLE_FIELDS,
    parse_tracking_numbers,
)


def _courier(cid: str, service: str, state: str = "active") -> CourierCandidate:
    return CourierCandidate(courier_id=cid, service_type=service, name=f"Courier {cid}", plate=f"B {cid} XX", state=state)


def _resi(number: str = "JNE0001", service: str = "jne") -> ActiveResiEntry:
    return ActiveResiEntry(
        tracking_number=number,
        courier_service_type=service,
        customer_id="CUST-9",
        customer_name="Siti Aminah",
        customer_phone="081234567890",
        display_label=f"{number} (JNE)",
    )


@pytest.fixture
def controller() -> FormStateController:
    couriers = [
        _courier("C1", "sicepat"),
        _courier("C2", "jne"),
        _courier("C3", "jne", state="ongoing"),
        _courier("C4", "jne"),
    ]
    lockers = [
        LockerCandidate(locker_id="L1", pending_count=4, online_status="online"),
        LockerCandidate(locker_id="L2", pending_count=2, online_status="online"),
        LockerCandidate(locker_id="L3", pending_count=0, online_status="offline"),
    ]
    return FormStateController(couriers, lockers)


def test_starts_in_manual_mode_with_full_active_courier_list(controller):
    assert controller.mode is FormMode.MANUAL
    assert controller.state.field_lock == set()
    assert [c.courier_id for c in controller.courier_choices] == ["C1", "C2", "C4"]


def test_select_resi_copies_and_locks_derived_fields(controller):
    match = controller.select_resi(_resi())
    state = controller.state

    assert controller.mode is FormMode.RESI_SELECTED
    assert state.customer_id == "CUST-9"
    assert state.receiver_name == "Siti Aminah"
    assert state.receiver_phone == "081234567890"
    assert state.tracking_numbers == ["JNE0001"]
    assert state.field_lock == set(LOCKABLE_FIELDS)
    assert [c.courier_id for c in controller.courier_choices] == ["C2", "C4"]
    assert state.courier_id == "C2"
    assert state.locker_id == "L2"
    assert controller.suggested_locker_id == "L2"
    assert match is controller.match


def test_select_then_clear_restores_manual_state(controller):
    controller.edit_field("customer_id", "typed-customer")
    controller.edit_field("tracking_numbers", "AAA\nBBB")

    controller.select_resi(_resi())
    controller.clear_resi()

    assert controller.mode is FormMode.MANUAL
    assert controller.state.field_lock == set()
    assert [c.courier_id for c in controller.courier_choices] == ["C1", "C2", "C4"]
    assert controller.suggested_locker_id is None
    assert controller.state.customer_id == "typed-customer"
    assert controller.state.tracking_numbers == ["AAA", "BBB"]


def test_empty_selection_behaves_like_clear(controller):
    controller.select_resi(_resi())

    assert controller.select_resi(None) is None
    assert controller.mode is FormMode.MANUAL
    assert controller.state.field_lock == set()


def test_selecting_resi_clears_existing_customer_selection(controller):
    controller.choose_customer(CustomerRecord(customer_id="CUST-1", name="Andi", phone="0811"))
    assert controller.state.manual_customer_id == "CUST-1"

    controller.select_resi(_resi())

    assert controller.state.manual_customer_id is None
    assert controller.state.customer_id == "CUST-9"


def test_choose_customer_rejected_while_resi_selected(controller):
    controller.select_resi(_resi())
    before = (
        controller.state.customer_id,
        controller.state.receiver_name,
        controller.state.manual_customer_id,
        set(controller.state.field_lock),
    )

    warning = controller.choose_customer(CustomerRecord(customer_id="CUST-1", name="Andi", phone="0811"))

    assert warning is not None
    assert "JNE0001" in warning
    after = (
        controller.state.customer_id,
        controller.state.receiver_name,
        controller.state.manual_customer_id,
        controller.state.field_lock,
    )
    assert after == before


def test_choose_customer_fills_fields_in_manual_mode(controller):
    warning = controller.choose_customer(CustomerRecord(customer_id="CUST-1", name="Andi", phone="0811"))

    assert warning is None
    assert controller.state.customer_id == "CUST-1"
    assert controller.state.receiver_name == "Andi"
    assert controller.state.receiver_phone == "0811"


def test_locked_fields_refuse_edits(controller):
    controller.select_resi(_resi())

    assert controller.edit_field("receiver_name", "Someone Else") is False
    assert controller.edit_field("tracking_numbers", "OTHER") is False
    assert controller.state.receiver_name == "Siti Aminah"
    assert controller.state.tracking_numbers == ["JNE0001"]

    assert controller.edit_field("locker_id", "L1") is True
    assert controller.state.locker_id == "L1"


def test_edit_field_rejects_unknown_names(controller):
    with pytest.raises(ValueError):
        controller.edit_field("selected_resi", "x")


def test_no_active_courier_for_resi_type(controller):
    match = controller.select_resi(_resi("TK001", "tiki"))

    assert match.no_active_courier
    assert controller.courier_choices == []
    assert controller.state.courier_id == ""


def test_reset_returns_to_blank_manual_form(controller):
    controller.select_resi(_resi())
    controller.edit_field("item_type", "Dokumen")

    controller.reset()

    assert controller.mode is FormMode.MANUAL
    assert controller.state.tracking_numbers == []
    assert controller.state.item_type == ""
    assert controller.state.field_lock == set()
    assert len(controller.courier_choices) == 3


def test_parse_tracking_numbers_drops_blank_lines():
    assert parse_tracking_numbers("  A1 \r\n\n B2\n   \n") == ["A1", "B2"]
    assert parse_tracking_numbers("") == []
    assert parse_tracking_numbers(None) == []
