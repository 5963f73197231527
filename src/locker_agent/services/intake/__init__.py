"""Shipment-intake workflow: catalogs, matching, form state and submission."""

from .catalog import FormCatalogs, load_active_resi, load_form_catalogs
from .form_state import FormMode, FormState, FormStateController, parse_tracking_numbers
from .matching import MatchResult, filter_couriers, match_resi, suggest_locker
from .submission import (
    FieldError,
    ResiCheck,
    SubmissionOutcome,
    check_tracking_numbers,
    stale_resi_outcome,
    submit_shipment,
    validate_submission,
)

__all__ = [
    "FormCatalogs",
    "load_active_resi",
    "load_form_catalogs",
    "FormMode",
    "FormState",
    "FormStateController",
    "parse_tracking_numbers",
    "MatchResult",
    "filter_couriers",
    "match_resi",
    "suggest_locker",
    "FieldError",
    "ResiCheck",
    "SubmissionOutcome",
    "check_tracking_numbers",
    "stale_resi_outcome",
    "submit_shipment",
    "validate_submission",
]
