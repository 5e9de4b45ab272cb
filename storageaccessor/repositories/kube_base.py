"""Base repository over the Kubernetes API."""

from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol

from kubernetes import client, config
from kubernetes.dynamic import DynamicClient

from storageaccessor.core.config import get_settings
from storageaccessor.core.logging import get_logger
from storageaccessor.models.accessor import ACCESSOR_GROUP, ACCESSOR_KIND, ACCESSOR_VERSION
from storageaccessor.models.scope import (WORKSPACE_GROUP, WORKSPACE_KIND,
                                          WORKSPACE_VERSION)

logger = get_logger(__name__)


class ClusterClient(Protocol):
    """Read-only view of the cluster state an admission decision needs."""

    def list_accessors(self) -> List[Dict[str, Any]]: ...

    def get_namespace(self, name: str) -> Dict[str, Any]: ...

    def get_workspace(self, name: str) -> Dict[str, Any]: ...


def load_api_client(kubeconfig: Optional[str] = None) -> client.ApiClient:
    """Build an API client from in-cluster config, falling back to kubeconfig."""
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    except config.ConfigException:
        config.load_kube_config(config_file=kubeconfig)
        logger.info("Loaded local Kubernetes config")
    return client.ApiClient()


class KubernetesClusterClient:
    """ClusterClient backed by the kubernetes python client."""

    def __init__(self, api_client: client.ApiClient, request_timeout: float = 10.0):
        self.api_client = api_client
        self.request_timeout = request_timeout
        self.core_v1 = client.CoreV1Api(api_client)
        self._dynamic: Optional[DynamicClient] = None

    @property
    def dynamic(self) -> DynamicClient:
        # Discovery runs on construction, so defer it to first use
        if self._dynamic is None:
            self._dynamic = DynamicClient(self.api_client)
        return self._dynamic

    def _resource(self, group: str, version: str, kind: str):
        return self.dynamic.resources.get(api_version=f"{group}/{version}", kind=kind)

    def list_accessors(self) -> List[Dict[str, Any]]:
        resource = self._resource(ACCESSOR_GROUP, ACCESSOR_VERSION, ACCESSOR_KIND)
        result = resource.get(_request_timeout=self.request_timeout)
        return list(result.to_dict().get("items") or [])

    def get_namespace(self, name: str) -> Dict[str, Any]:
        namespace = self.core_v1.read_namespace(
            name, _request_timeout=self.request_timeout
        )
        return self.api_client.sanitize_for_serialization(namespace)

    def get_workspace(self, name: str) -> Dict[str, Any]:
        resource = self._resource(WORKSPACE_GROUP, WORKSPACE_VERSION, WORKSPACE_KIND)
        return resource.get(name=name, _request_timeout=self.request_timeout).to_dict()


@lru_cache(maxsize=1)
def get_cluster_client() -> KubernetesClusterClient:
    """Get cluster client with shared API connection pool."""
    settings = get_settings()
    return KubernetesClusterClient(
        load_api_client(settings.kubeconfig),
        request_timeout=settings.kube_request_timeout,
    )


class KubeRepository:
    """Base repository holding the cluster client."""

    def __init__(self, cluster_client: ClusterClient):
        self.client = cluster_client
