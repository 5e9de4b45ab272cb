"""Unit tests for ScopeRepository."""

import pytest
from kubernetes.client.exceptions import ApiException

from storageaccessor.core.exceptions import (ScopeNotFoundError,
                                             ScopeResolutionError)
from storageaccessor.models.scope import ScopeKind


@pytest.mark.unit
class TestScopeRepository:
    """Test namespace and workspace lookups."""

    def test_namespace(self, scope_repository, fake_cluster):
        fake_cluster.add_namespace("checkout", labels={"env": "prod"}, workspace="ws-1")

        namespace = scope_repository.namespace("checkout")

        assert namespace.kind == ScopeKind.NAMESPACE
        assert namespace.name == "checkout"
        assert namespace.labels["env"] == "prod"
        assert namespace.phase == "Active"
        assert namespace.workspace("kubesphere.io/workspace") == "ws-1"

    def test_workspace(self, scope_repository, fake_cluster):
        fake_cluster.add_workspace("ws-1", labels={"tier": "gold"})

        workspace = scope_repository.workspace("ws-1")

        assert workspace.kind == ScopeKind.WORKSPACE
        assert workspace.labels == {"tier": "gold"}
        assert workspace.phase == ""
        # Workspaces never belong to a workspace
        assert workspace.workspace("kubesphere.io/workspace") is None

    def test_namespace_not_found(self, scope_repository):
        with pytest.raises(ScopeNotFoundError) as exc_info:
            scope_repository.namespace("ghost")

        assert exc_info.value.kind == "Namespace"
        assert exc_info.value.name == "ghost"

    def test_workspace_not_found(self, scope_repository):
        with pytest.raises(ScopeNotFoundError):
            scope_repository.workspace("ghost-ws")

    def test_api_error_is_wrapped(self, scope_repository, fake_cluster):
        fake_cluster.fail("get_namespace", ApiException(status=500, reason="Internal"))

        with pytest.raises(ScopeResolutionError) as exc_info:
            scope_repository.namespace("checkout")

        assert not isinstance(exc_info.value, ScopeNotFoundError)
        assert "Internal" in str(exc_info.value)

    def test_transport_error_is_wrapped(self, scope_repository, fake_cluster):
        fake_cluster.fail("get_workspace", TimeoutError("read timed out"))

        with pytest.raises(ScopeResolutionError) as exc_info:
            scope_repository.workspace("ws-1")

        assert "read timed out" in str(exc_info.value)

    def test_no_caching_between_calls(self, scope_repository, fake_cluster):
        fake_cluster.add_namespace("checkout", labels={"env": "prod"})
        scope_repository.namespace("checkout")

        fake_cluster.add_namespace("checkout", labels={"env": "dev"})

        assert scope_repository.namespace("checkout").labels["env"] == "dev"
        assert fake_cluster.calls.count("get_namespace") == 2
