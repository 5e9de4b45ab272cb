"""Unit tests for Accessor parsing."""

import pytest

from storageaccessor.models.accessor import Accessor
from storageaccessor.models.scope import ScopeKind, ScopeObject


@pytest.mark.unit
class TestAccessor:
    """Test parsing of the CRD wire shape."""

    def test_full_object(self):
        accessor = Accessor.from_object(
            {
                "apiVersion": "storage.kubesphere.io/v1alpha1",
                "kind": "Accessor",
                "metadata": {"name": "csi-qingcloud", "resourceVersion": "42"},
                "spec": {
                    "storageClassName": "csi-qingcloud",
                    "namespaceSelector": {
                        "fieldSelector": [
                            {
                                "fieldExpressions": [
                                    {"field": "Status", "operator": "In", "values": ["Active"]}
                                ]
                            }
                        ]
                    },
                    "workspaceSelector": {
                        "labelSelector": [
                            {
                                "matchExpressions": [
                                    {"key": "tier", "operator": "NotIn", "values": ["free"]}
                                ]
                            },
                            {
                                "matchExpressions": [
                                    {"key": "tier", "operator": "In", "values": ["*"]}
                                ]
                            },
                        ]
                    },
                },
            }
        )

        assert accessor.name == "csi-qingcloud"
        assert accessor.spec.storage_class_name == "csi-qingcloud"
        field_groups = accessor.spec.namespace_selector.field_groups
        assert field_groups[0][0].field == "Status"
        assert accessor.spec.namespace_selector.label_groups == []
        assert len(accessor.spec.workspace_selector.label_groups) == 2

    def test_missing_spec_defaults_to_no_restriction(self):
        accessor = Accessor.from_object({"metadata": {"name": "bare"}})

        assert accessor.spec.storage_class_name == ""
        assert accessor.spec.namespace_selector.is_empty()
        assert accessor.spec.workspace_selector.is_empty()


@pytest.mark.unit
class TestScopeObject:
    """Test namespace/workspace views."""

    def test_from_namespace(self):
        scope = ScopeObject.from_object(
            ScopeKind.NAMESPACE,
            {
                "metadata": {"name": "team-a", "labels": None},
                "status": {"phase": "Terminating"},
            },
        )

        assert scope.name == "team-a"
        assert scope.labels == {}
        assert scope.phase == "Terminating"
        assert scope.workspace("kubesphere.io/workspace") is None
