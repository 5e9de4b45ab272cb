"""Pytest configuration and shared fixtures for storage accessor tests."""

import uuid
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from kubernetes.client.exceptions import ApiException

from storageaccessor.core.config import Settings, get_settings
from storageaccessor.main import build_admission_handler, create_app
from storageaccessor.repositories import AccessorRepository, ScopeRepository
from storageaccessor.services import AuthorizationValidator

WORKSPACE_LABEL = "kubesphere.io/workspace"

# ============================================================================
# Fake Cluster
# ============================================================================


class FakeClusterClient:
    """In-memory ClusterClient recording every lookup."""

    def __init__(self):
        self.accessors: List[Dict[str, Any]] = []
        self.namespaces: Dict[str, Dict[str, Any]] = {}
        self.workspaces: Dict[str, Dict[str, Any]] = {}
        self.errors: Dict[str, Exception] = {}
        self.calls: List[str] = []

    def add_accessor(
        self,
        name: str,
        storage_class: str,
        namespace_selector: Optional[Dict[str, Any]] = None,
        workspace_selector: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        accessor = {
            "apiVersion": "storage.kubesphere.io/v1alpha1",
            "kind": "Accessor",
            "metadata": {"name": name},
            "spec": {
                "storageClassName": storage_class,
                "namespaceSelector": namespace_selector or {},
                "workspaceSelector": workspace_selector or {},
            },
        }
        self.accessors.append(accessor)
        return accessor

    def add_namespace(
        self,
        name: str,
        labels: Optional[Dict[str, str]] = None,
        workspace: Optional[str] = None,
        phase: str = "Active",
    ) -> Dict[str, Any]:
        labels = dict(labels or {})
        if workspace:
            labels[WORKSPACE_LABEL] = workspace
        namespace = {
            "apiVersion": "v1",
            "kind": "Namespace",
            "metadata": {"name": name, "labels": labels},
            "status": {"phase": phase},
        }
        self.namespaces[name] = namespace
        return namespace

    def add_workspace(
        self, name: str, labels: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        workspace = {
            "apiVersion": "tenant.kubesphere.io/v1alpha1",
            "kind": "Workspace",
            "metadata": {"name": name, "labels": dict(labels or {})},
        }
        self.workspaces[name] = workspace
        return workspace

    def fail(self, operation: str, error: Exception) -> None:
        self.errors[operation] = error

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.errors:
            raise self.errors[operation]

    def list_accessors(self) -> List[Dict[str, Any]]:
        self._check("list_accessors")
        return list(self.accessors)

    def get_namespace(self, name: str) -> Dict[str, Any]:
        self._check("get_namespace")
        if name not in self.namespaces:
            raise ApiException(status=404, reason="Not Found")
        return self.namespaces[name]

    def get_workspace(self, name: str) -> Dict[str, Any]:
        self._check("get_workspace")
        if name not in self.workspaces:
            raise ApiException(status=404, reason="Not Found")
        return self.workspaces[name]


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def settings():
    """Settings independent of the test runner's environment."""
    return Settings(
        _env_file=None,
        workspace_label_key=WORKSPACE_LABEL,
        metrics_enabled=True,
    )


@pytest.fixture
def fake_cluster():
    """Empty fake cluster."""
    return FakeClusterClient()


@pytest.fixture
def accessor_repository(fake_cluster):
    return AccessorRepository(fake_cluster)


@pytest.fixture
def scope_repository(fake_cluster):
    return ScopeRepository(fake_cluster)


@pytest.fixture
def validator(scope_repository):
    return AuthorizationValidator(scope_repository, workspace_label_key=WORKSPACE_LABEL)


@pytest.fixture
def admission_handler(settings, fake_cluster):
    return build_admission_handler(settings, fake_cluster)


# ============================================================================
# Admission Review Fixtures
# ============================================================================


def claim_object(
    name: str = "data",
    namespace: str = "default",
    storage_class: Optional[str] = "fast-ssd",
) -> Dict[str, Any]:
    """PersistentVolumeClaim as embedded in an admission request."""
    spec: Dict[str, Any] = {
        "accessModes": ["ReadWriteOnce"],
        "resources": {"requests": {"storage": "1Gi"}},
    }
    if storage_class is not None:
        spec["storageClassName"] = storage_class
    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec,
    }


def admission_request(
    obj: Optional[Dict[str, Any]] = None,
    operation: str = "CREATE",
    uid: Optional[str] = None,
) -> Dict[str, Any]:
    """Request half of an admission review for a claim."""
    obj = claim_object() if obj is None else obj
    metadata = obj.get("metadata", {}) if isinstance(obj, dict) else {}
    return {
        "uid": uid or str(uuid.uuid4()),
        "kind": {"group": "", "version": "v1", "kind": "PersistentVolumeClaim"},
        "resource": {
            "group": "",
            "version": "v1",
            "resource": "persistentvolumeclaims",
        },
        "name": metadata.get("name", ""),
        "namespace": metadata.get("namespace", ""),
        "operation": operation,
        "object": obj,
    }


def admission_review(request: Dict[str, Any]) -> Dict[str, Any]:
    """Full admission.k8s.io/v1 envelope."""
    return {
        "apiVersion": "admission.k8s.io/v1",
        "kind": "AdmissionReview",
        "request": request,
    }


@pytest.fixture
def make_claim():
    return claim_object


@pytest.fixture
def make_request():
    return admission_request


@pytest.fixture
def make_review():
    return admission_review


# ============================================================================
# Scenario Fixtures
# ============================================================================


@pytest.fixture
def env_prod_cluster(fake_cluster):
    """fast-ssd restricted to namespaces labelled env=prod."""
    fake_cluster.add_accessor(
        "fast-ssd-prod-only",
        "fast-ssd",
        namespace_selector={
            "labelSelector": [
                {
                    "matchExpressions": [
                        {"key": "env", "operator": "In", "values": ["prod"]}
                    ]
                }
            ]
        },
    )
    fake_cluster.add_namespace("checkout", labels={"env": "prod"})
    fake_cluster.add_namespace("sandbox", labels={"env": "dev"})
    return fake_cluster


@pytest.fixture
def restricted_workspace_cluster(fake_cluster):
    """fast-ssd denied to workspace restricted-ws."""
    fake_cluster.add_accessor(
        "no-restricted-ws",
        "fast-ssd",
        workspace_selector={
            "fieldSelector": [
                {
                    "fieldExpressions": [
                        {
                            "field": "name",
                            "operator": "NotIn",
                            "values": ["restricted-ws"],
                        }
                    ]
                }
            ]
        },
    )
    fake_cluster.add_workspace("restricted-ws")
    fake_cluster.add_workspace("open-ws")
    fake_cluster.add_namespace("team-a", workspace="restricted-ws")
    fake_cluster.add_namespace("team-b", workspace="open-ws")
    fake_cluster.add_namespace("team-c")
    return fake_cluster


# ============================================================================
# API Test Client Fixtures
# ============================================================================


@pytest.fixture
def app(settings, fake_cluster):
    return create_app(settings, cluster_client=fake_cluster)


@pytest.fixture
def test_client(app):
    """Provide a test client over the fake cluster."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_lru_caches():
    """Reset LRU caches between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Markers
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
