"""Namespace and workspace lookup."""

from typing import Any, Callable, Dict

from kubernetes.client.exceptions import ApiException

from storageaccessor.core.exceptions import (ScopeNotFoundError,
                                             ScopeResolutionError)
from storageaccessor.core.logging import get_logger
from storageaccessor.core.metrics import resolution_errors
from storageaccessor.models.scope import ScopeKind, ScopeObject

from .kube_base import KubeRepository

logger = get_logger(__name__)


class ScopeRepository(KubeRepository):
    """Pass-through reads of namespaces and workspaces. No retry, no cache."""

    def _fetch(
        self, kind: ScopeKind, name: str, getter: Callable[[str], Dict[str, Any]]
    ) -> ScopeObject:
        try:
            obj = getter(name)
        except ScopeResolutionError:
            resolution_errors.labels(source=kind.value.lower()).inc()
            raise
        except ApiException as e:
            resolution_errors.labels(source=kind.value.lower()).inc()
            if e.status == 404:
                raise ScopeNotFoundError(kind.value, name) from e
            raise ScopeResolutionError(
                kind.value, name, f"failed to get {kind.value} {name!r}: {e.reason}"
            ) from e
        except Exception as e:
            resolution_errors.labels(source=kind.value.lower()).inc()
            logger.error(f"Failed to get {kind.value} {name}: {e}")
            raise ScopeResolutionError(
                kind.value, name, f"failed to get {kind.value} {name!r}: {e}"
            ) from e

        return ScopeObject.from_object(kind, obj or {})

    def namespace(self, name: str) -> ScopeObject:
        return self._fetch(ScopeKind.NAMESPACE, name, self.client.get_namespace)

    def workspace(self, name: str) -> ScopeObject:
        return self._fetch(ScopeKind.WORKSPACE, name, self.client.get_workspace)
