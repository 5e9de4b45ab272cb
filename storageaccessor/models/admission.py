"""Admission review envelope and claim request models."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from storageaccessor.core.exceptions import (AdmissionDecodeError,
                                             UnsupportedDialectError)

CLAIM_KIND = "PersistentVolumeClaim"


class Operation(str, Enum):
    """Admission operations."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


class GroupVersionKind(BaseModel):
    group: str = ""
    version: str = ""
    kind: str = ""


class GroupVersionResource(BaseModel):
    group: str = ""
    version: str = ""
    resource: str = ""


class AdmissionRequest(BaseModel):
    """Request half of an admission review."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str
    kind: Optional[GroupVersionKind] = None
    resource: Optional[GroupVersionResource] = None
    name: str = ""
    namespace: str = ""
    operation: str
    object: Optional[Any] = None
    old_object: Optional[Any] = Field(None, alias="oldObject")
    dry_run: Optional[bool] = Field(None, alias="dryRun")


class AdmissionStatus(BaseModel):
    """Result detail attached to a response."""

    message: str = ""
    code: Optional[int] = None
    reason: Optional[str] = None


class AdmissionResponse(BaseModel):
    """Response half of an admission review."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str
    allowed: bool
    result: Optional[AdmissionStatus] = Field(None, alias="status")
    warnings: Optional[List[str]] = None


class AdmissionReview(BaseModel):
    """Outer admission review envelope."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_version: str = Field("", alias="apiVersion")
    kind: str = ""
    request: Optional[AdmissionRequest] = None
    response: Optional[AdmissionResponse] = None


@dataclass
class ClaimRequest:
    """Fields of a claim creation that Accessors are evaluated against."""

    resource_kind: str
    name: str
    namespace: str
    operation: str
    storage_class_name: str


@dataclass
class AdmissionOutcome:
    """Allow/deny decision with a human-readable reason."""

    allowed: bool
    message: str = ""

    @classmethod
    def allow(cls, message: str = "") -> "AdmissionOutcome":
        return cls(allowed=True, message=message)

    @classmethod
    def deny(cls, message: str) -> "AdmissionOutcome":
        return cls(allowed=False, message=message or "denied")


# ============================================================================
# DIALECTS
# ============================================================================


def _decode_v1(payload: Dict[str, Any]) -> AdmissionReview:
    try:
        review = AdmissionReview.model_validate(payload)
    except ValidationError as e:
        raise AdmissionDecodeError(f"invalid admission review: {e}") from e
    if review.request is None:
        raise AdmissionDecodeError("admission review carries no request")
    return review


def _encode_v1(
    dialect: "AdmissionDialect", uid: str, outcome: AdmissionOutcome
) -> Dict[str, Any]:
    response = AdmissionResponse(uid=uid, allowed=outcome.allowed)
    if not outcome.allowed:
        response.result = AdmissionStatus(message=outcome.message, code=403)
    elif outcome.message:
        response.result = AdmissionStatus(message=outcome.message)

    review = AdmissionReview(
        api_version=dialect.api_version, kind=dialect.kind, response=response
    )
    return review.model_dump(by_alias=True, exclude_none=True)


class AdmissionDialect(Enum):
    """Served admission review versions, each with its codec pair."""

    V1 = ("admission.k8s.io/v1", "AdmissionReview")

    def __init__(self, api_version: str, kind: str):
        self.api_version = api_version
        self.kind = kind

    @classmethod
    def detect(cls, payload: Any) -> "AdmissionDialect":
        """Pick the dialect from the envelope's apiVersion/kind."""
        if not isinstance(payload, dict):
            raise AdmissionDecodeError("admission review must be a JSON object")

        tag = (payload.get("apiVersion"), payload.get("kind"))
        for dialect in cls:
            if (dialect.api_version, dialect.kind) == tag:
                return dialect
        raise UnsupportedDialectError(
            f"unsupported admission review {tag[0]}/{tag[1]}"
        )

    @property
    def codec(
        self,
    ) -> Tuple[
        Callable[[Dict[str, Any]], AdmissionReview],
        Callable[["AdmissionDialect", str, AdmissionOutcome], Dict[str, Any]],
    ]:
        return _CODECS[self]

    def decode(self, payload: Dict[str, Any]) -> AdmissionReview:
        return self.codec[0](payload)

    def encode(self, uid: str, outcome: AdmissionOutcome) -> Dict[str, Any]:
        return self.codec[1](self, uid, outcome)


_CODECS = {
    AdmissionDialect.V1: (_decode_v1, _encode_v1),
}


def decode_claim(raw: Any) -> Dict[str, Any]:
    """Decode the embedded object of a request as a PersistentVolumeClaim."""
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise AdmissionDecodeError(f"cannot decode object: {e}") from e

    if not isinstance(raw, dict):
        raise AdmissionDecodeError("admission request carries no object")

    kind = raw.get("kind")
    if kind != CLAIM_KIND:
        raise AdmissionDecodeError(
            f"expected object of kind {CLAIM_KIND}, got {kind or 'unknown'}"
        )
    return raw
