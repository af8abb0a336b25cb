from __future__ import annotations

from dataclasses import dataclass, field

from ..client.base import ControlPlaneClient
from ..resources.models import ExternalSecret


@dataclass
class Framework:
    """Per-test context: the namespace allocated for the test and the cluster client."""

    namespace: str
    client: ControlPlaneClient


@dataclass
class TestCase:
    """A pending test case whose ExternalSecret has not been submitted yet."""

    __test__ = False  # keep pytest from collecting this class

    framework: Framework
    external_secret: ExternalSecret = field(init=False)

    def __post_init__(self) -> None:
        self.external_secret = ExternalSecret(name="e2e-es", namespace=self.framework.namespace)


__all__ = ["Framework", "TestCase"]
