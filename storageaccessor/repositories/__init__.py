"""Repositories package for cluster data access."""

from .accessor import AccessorRepository
from .kube_base import (ClusterClient, KubeRepository, KubernetesClusterClient,
                        get_cluster_client, load_api_client)
from .scope import ScopeRepository

__all__ = [
    "AccessorRepository",
    "ScopeRepository",
    "ClusterClient",
    "KubeRepository",
    "KubernetesClusterClient",
    "get_cluster_client",
    "load_api_client",
]
