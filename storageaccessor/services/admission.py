"""Admission decisions for PersistentVolumeClaim creation."""

from typing import Any, Dict

from storageaccessor.core.exceptions import (AdmissionDecodeError,
                                             PolicyResolutionError,
                                             ResolutionError)
from storageaccessor.core.logging import get_logger, log_event
from storageaccessor.core.metrics import (admission_decisions,
                                          admission_review_duration)
from storageaccessor.models.admission import (CLAIM_KIND, AdmissionOutcome,
                                              AdmissionRequest, ClaimRequest,
                                              Operation, decode_claim)
from storageaccessor.repositories.accessor import AccessorRepository
from storageaccessor.services.authorization import AuthorizationValidator

logger = get_logger(__name__)


def operation_label(operation: str) -> str:
    """Metric label for an operation; unknown values share one bucket."""
    try:
        return Operation(operation).value
    except ValueError:
        return "other"


class ClaimAdmissionHandler:
    """Validates claim creation against the Accessors of its storage class."""

    def __init__(
        self,
        accessors: AccessorRepository,
        validator: AuthorizationValidator,
        storage_class_annotation: str = "volume.beta.kubernetes.io/storage-class",
    ):
        self.accessors = accessors
        self.validator = validator
        self.storage_class_annotation = storage_class_annotation

    def decide(self, request: AdmissionRequest) -> AdmissionOutcome:
        """Decide one admission request. Never raises for resolution errors."""
        with admission_review_duration.time():
            outcome = self._decide(request)

        decision = "allowed" if outcome.allowed else "denied"
        admission_decisions.labels(
            operation=operation_label(request.operation), decision=decision
        ).inc()
        log_event(
            logger,
            "info" if outcome.allowed else "warning",
            f"admission_{decision}",
            uid=request.uid,
            operation=request.operation,
            namespace=request.namespace,
            reason=outcome.message,
        )
        return outcome

    def _decide(self, request: AdmissionRequest) -> AdmissionOutcome:
        # Only creation is restricted
        if request.operation != Operation.CREATE.value:
            return AdmissionOutcome.allow()

        try:
            obj = decode_claim(request.object)
        except AdmissionDecodeError as e:
            return AdmissionOutcome.deny(str(e))

        claim = self.build_claim(request, obj)

        try:
            accessors = self.accessors.policies_for(claim.storage_class_name)
        except PolicyResolutionError as e:
            return AdmissionOutcome.deny(str(e))

        if not accessors:
            return AdmissionOutcome.allow()

        try:
            reason = self.validator.authorize_all(claim, accessors)
        except ResolutionError as e:
            return AdmissionOutcome.deny(str(e))

        if reason is not None:
            return AdmissionOutcome.deny(reason)
        return AdmissionOutcome.allow()

    def build_claim(
        self, request: AdmissionRequest, obj: Dict[str, Any]
    ) -> ClaimRequest:
        """Extract the fields Accessors are evaluated against."""
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        annotations = metadata.get("annotations") or {}

        storage_class = spec.get("storageClassName")
        if storage_class is None:
            storage_class = annotations.get(self.storage_class_annotation, "")

        return ClaimRequest(
            resource_kind=obj.get("kind", CLAIM_KIND),
            name=metadata.get("name") or metadata.get("generateName") or request.name,
            namespace=metadata.get("namespace") or request.namespace,
            operation=request.operation,
            storage_class_name=storage_class,
        )
