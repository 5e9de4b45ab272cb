"""Business logic services package."""

from .admission import ClaimAdmissionHandler
from .authorization import AuthorizationValidator
from .selector import (evaluate, evaluate_fields, evaluate_labels,
                       field_lookup, item_passes, label_lookup,
                       selector_matches)

__all__ = [
    # Admission
    "ClaimAdmissionHandler",
    "AuthorizationValidator",
    # Selector
    "evaluate",
    "evaluate_fields",
    "evaluate_labels",
    "field_lookup",
    "label_lookup",
    "item_passes",
    "selector_matches",
]
