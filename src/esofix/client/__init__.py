"""Control-plane clients used to persist fixture resources."""

from .base import ControlPlaneClient, resource_key
from .memory import InMemoryControlPlane
from .kubernetes import KubernetesControlPlane

__all__ = [
    "ControlPlaneClient",
    "resource_key",
    "InMemoryControlPlane",
    "KubernetesControlPlane",
]
