"""Data models for Accessor policies, scopes and admission reviews."""

from .accessor import (Accessor, AccessorSpec, FieldExpression,
                       FieldExpressions, FieldName, MatchExpression,
                       MatchExpressions, Operator, ScopeSelector)
from .admission import (AdmissionDialect, AdmissionOutcome, AdmissionRequest,
                        AdmissionResponse, AdmissionReview, ClaimRequest,
                        Operation, decode_claim)
from .scope import ScopeKind, ScopeObject

__all__ = [
    # Accessor
    "Accessor",
    "AccessorSpec",
    "ScopeSelector",
    "MatchExpressions",
    "MatchExpression",
    "FieldExpressions",
    "FieldExpression",
    "Operator",
    "FieldName",
    # Scope
    "ScopeKind",
    "ScopeObject",
    # Admission
    "AdmissionDialect",
    "AdmissionReview",
    "AdmissionRequest",
    "AdmissionResponse",
    "AdmissionOutcome",
    "ClaimRequest",
    "Operation",
    "decode_claim",
]
