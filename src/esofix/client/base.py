from __future__ import annotations

from typing import Protocol

from ..resources.models import Resource


class ControlPlaneClient(Protocol):
    """Create-only view of the cluster API used by the fixtures."""

    def create(self, resource: Resource) -> Resource:
        """Persist a new resource; raise ControlPlaneError if it cannot be created."""


def resource_key(resource: Resource) -> tuple[str, str | None, str]:
    """Identity of a resource on the control plane: (kind, namespace, name)."""
    return (resource.kind, resource.namespace, resource.name)


__all__ = ["ControlPlaneClient", "resource_key"]
