from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.errors import AlreadyExistsError
from ..resources.models import Resource
from .base import resource_key


@dataclass
class InMemoryControlPlane:
    """Records created resources; rejects a second create of the same identity."""

    resources: Dict[tuple[str, Optional[str], str], Resource] = field(default_factory=dict)
    history: List[Resource] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._log = logging.getLogger(__name__)

    def create(self, resource: Resource) -> Resource:
        key = resource_key(resource)
        if key in self.resources:
            raise AlreadyExistsError(
                f"{resource.kind} {resource.name!r} already exists", status_code=409
            )
        self.resources[key] = resource
        self.history.append(resource)
        self._log.debug("Stored %s %s (namespace=%s)", resource.kind, resource.name, resource.namespace)
        return resource

    def get(self, kind: str, name: str, namespace: Optional[str] = None) -> Optional[Resource]:
        return self.resources.get((kind, namespace, name))

    def exists(self, kind: str, name: str, namespace: Optional[str] = None) -> bool:
        return (kind, namespace, name) in self.resources


__all__ = ["InMemoryControlPlane"]
