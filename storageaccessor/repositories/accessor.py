"""Accessor policy lookup."""

from typing import List

from pydantic import ValidationError

from storageaccessor.core.exceptions import PolicyResolutionError
from storageaccessor.core.logging import get_logger
from storageaccessor.core.metrics import resolution_errors
from storageaccessor.models.accessor import Accessor

from .kube_base import KubeRepository

logger = get_logger(__name__)


class AccessorRepository(KubeRepository):
    """Resolves the Accessors that govern a storage class."""

    def list_accessors(self) -> List[Accessor]:
        """List every Accessor in the cluster, in store order."""
        try:
            items = self.client.list_accessors()
        except Exception as e:
            resolution_errors.labels(source="accessor").inc()
            logger.error(f"Failed to list accessors: {e}")
            raise PolicyResolutionError(f"failed to list accessors: {e}") from e

        try:
            return [Accessor.from_object(item) for item in items]
        except ValidationError as e:
            resolution_errors.labels(source="accessor").inc()
            raise PolicyResolutionError(f"malformed accessor: {e}") from e

    def policies_for(self, storage_class_name: str) -> List[Accessor]:
        """Accessors whose storageClassName equals the given name."""
        accessors = [
            accessor
            for accessor in self.list_accessors()
            if accessor.spec.storage_class_name == storage_class_name
        ]
        logger.debug(
            f"Found {len(accessors)} accessors for storage class {storage_class_name!r}"
        )
        return accessors
