"""Accessor policy models (storage.kubesphere.io/v1alpha1)."""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

ACCESSOR_GROUP = "storage.kubesphere.io"
ACCESSOR_VERSION = "v1alpha1"
ACCESSOR_KIND = "Accessor"
ACCESSOR_PLURAL = "accessors"


class Operator(str, Enum):
    """Selector operators with defined semantics."""

    IN = "In"
    NOT_IN = "NotIn"


class FieldName(str, Enum):
    """Object fields a field expression may reference."""

    NAME = "name"
    STATUS = "status"


WILDCARD = "*"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        # Go clients serialize empty slices as null
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class MatchExpression(_CamelModel):
    """Label requirement: key, operator, values."""

    key: str = ""
    operator: str = ""
    values: List[str] = Field(default_factory=list)


class FieldExpression(_CamelModel):
    """Field requirement: field, operator, values."""

    field: str = ""
    operator: str = ""
    values: List[str] = Field(default_factory=list)


class MatchExpressions(_CamelModel):
    """One label rule group; every expression must hold."""

    match_expressions: List[MatchExpression] = Field(
        default_factory=list, alias="matchExpressions"
    )


class FieldExpressions(_CamelModel):
    """One field rule group; every expression must hold."""

    field_expressions: List[FieldExpression] = Field(
        default_factory=list, alias="fieldExpressions"
    )


class ScopeSelector(_CamelModel):
    """Label and field rule groups for a namespace or workspace."""

    label_selector: List[MatchExpressions] = Field(
        default_factory=list, alias="labelSelector"
    )
    field_selector: List[FieldExpressions] = Field(
        default_factory=list, alias="fieldSelector"
    )

    @property
    def label_groups(self) -> List[List[MatchExpression]]:
        return [group.match_expressions for group in self.label_selector]

    @property
    def field_groups(self) -> List[List[FieldExpression]]:
        return [group.field_expressions for group in self.field_selector]

    def is_empty(self) -> bool:
        """Check if selector places no restriction."""
        return not self.label_selector and not self.field_selector


class AccessorSpec(_CamelModel):
    """Accessor spec."""

    storage_class_name: str = Field("", alias="storageClassName")
    namespace_selector: ScopeSelector = Field(
        default_factory=ScopeSelector, alias="namespaceSelector"
    )
    workspace_selector: ScopeSelector = Field(
        default_factory=ScopeSelector, alias="workspaceSelector"
    )


class Accessor(_CamelModel):
    """Cluster-scoped policy binding a storage class to scope selectors."""

    name: str
    spec: AccessorSpec = Field(default_factory=AccessorSpec)

    @classmethod
    def from_object(cls, obj: Dict[str, Any]) -> "Accessor":
        """Build from a raw Kubernetes object."""
        metadata = obj.get("metadata") or {}
        return cls(
            name=metadata.get("name", ""),
            spec=AccessorSpec.model_validate(obj.get("spec") or {}),
        )
