"""Namespace and workspace views used for selector evaluation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

WORKSPACE_GROUP = "tenant.kubesphere.io"
WORKSPACE_VERSION = "v1alpha1"
WORKSPACE_KIND = "Workspace"


class ScopeKind(str, Enum):
    """Kinds of scope an Accessor can restrict."""

    NAMESPACE = "Namespace"
    WORKSPACE = "Workspace"


@dataclass
class ScopeObject:
    """Name, labels and phase of a namespace or workspace."""

    kind: ScopeKind
    name: str
    labels: Dict[str, str] = field(default_factory=dict)
    phase: str = ""

    @classmethod
    def from_object(cls, kind: ScopeKind, obj: Dict[str, Any]) -> "ScopeObject":
        metadata = obj.get("metadata") or {}
        status = obj.get("status") or {}
        return cls(
            kind=kind,
            name=metadata.get("name", ""),
            labels=dict(metadata.get("labels") or {}),
            phase=str(status.get("phase") or ""),
        )

    def workspace(self, label_key: str) -> Optional[str]:
        """Workspace this namespace belongs to, if labelled."""
        if self.kind != ScopeKind.NAMESPACE:
            return None
        return self.labels.get(label_key) or None
