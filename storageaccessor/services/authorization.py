"""Namespace and workspace authorization against Accessor policies."""

from typing import Iterable, Optional

from storageaccessor.core.logging import get_logger
from storageaccessor.models.accessor import Accessor
from storageaccessor.models.admission import ClaimRequest
from storageaccessor.repositories.scope import ScopeRepository
from storageaccessor.services.selector import selector_matches

logger = get_logger(__name__)


class AuthorizationValidator:
    """Checks a claim's namespace, then its workspace, against an Accessor."""

    def __init__(self, scopes: ScopeRepository, workspace_label_key: str):
        self.scopes = scopes
        self.workspace_label_key = workspace_label_key

    def authorize(self, claim: ClaimRequest, accessor: Accessor) -> Optional[str]:
        """
        Authorize a claim against one Accessor.

        Returns:
            None if authorized, otherwise the denial reason.

        Raises:
            ScopeResolutionError if the namespace or workspace cannot be read.
        """
        namespace = self.scopes.namespace(claim.namespace)

        if not selector_matches(accessor.spec.namespace_selector, namespace):
            logger.debug(
                f"Namespace {namespace.name} rejected by accessor {accessor.name}"
            )
            return (
                f"{claim.resource_kind} {claim.name!r} operation {claim.operation} "
                f"denied in namespace {claim.namespace!r}: storage class "
                f"{claim.storage_class_name!r} is restricted by accessor "
                f"{accessor.name!r}"
            )

        workspace_name = namespace.workspace(self.workspace_label_key)
        if workspace_name is None:
            return None

        workspace = self.scopes.workspace(workspace_name)

        if not selector_matches(accessor.spec.workspace_selector, workspace):
            logger.debug(
                f"Workspace {workspace.name} rejected by accessor {accessor.name}"
            )
            return (
                f"{claim.resource_kind} {claim.name!r} operation {claim.operation} "
                f"denied in namespace {claim.namespace!r}: workspace "
                f"{workspace_name!r} may not use storage class "
                f"{claim.storage_class_name!r} (accessor {accessor.name!r})"
            )

        return None

    def authorize_all(
        self, claim: ClaimRequest, accessors: Iterable[Accessor]
    ) -> Optional[str]:
        """Every Accessor must authorize; the first denial is returned."""
        for accessor in accessors:
            reason = self.authorize(claim, accessor)
            if reason is not None:
                return reason
        return None
