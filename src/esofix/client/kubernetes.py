"""Control-plane client backed by the official kubernetes Python client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..core.errors import AlreadyExistsError, ControlPlaneError
from ..resources.models import (
    API_GROUP,
    API_VERSION,
    ClusterSecretStore,
    Resource,
    Secret,
    SecretStore,
)

SECRET_STORE_PLURAL = "secretstores"
CLUSTER_SECRET_STORE_PLURAL = "clustersecretstores"


def _kube():
    try:
        import kubernetes  # type: ignore
    except Exception as e:  # pragma: no cover - exercised via tests mocking import
        raise ControlPlaneError(
            "kubernetes dependency not installed. Install it with: pip install kubernetes"
        ) from e
    return kubernetes


@dataclass
class KubernetesControlPlane:
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    in_cluster: bool = False
    api_client: Any = None

    def __post_init__(self) -> None:
        self._log = logging.getLogger(__name__)
        self._core = None
        self._custom = None

    def _apis(self):
        if self._core is None or self._custom is None:
            kubernetes = _kube()
            api_client = self.api_client
            if api_client is None:
                if self.in_cluster:
                    kubernetes.config.load_incluster_config()
                else:
                    kubernetes.config.load_kube_config(
                        config_file=self.kubeconfig, context=self.context
                    )
                api_client = kubernetes.client.ApiClient()
            self._core = kubernetes.client.CoreV1Api(api_client)
            self._custom = kubernetes.client.CustomObjectsApi(api_client)
        return self._core, self._custom

    def create(self, resource: Resource) -> Resource:
        core, custom = self._apis()
        body = resource.to_manifest()
        try:
            if isinstance(resource, Secret):
                core.create_namespaced_secret(resource.namespace, body)
            elif isinstance(resource, SecretStore):
                custom.create_namespaced_custom_object(
                    API_GROUP, API_VERSION, resource.namespace, SECRET_STORE_PLURAL, body
                )
            elif isinstance(resource, ClusterSecretStore):
                custom.create_cluster_custom_object(
                    API_GROUP, API_VERSION, CLUSTER_SECRET_STORE_PLURAL, body
                )
            else:
                raise ControlPlaneError(f"Unsupported resource type: {type(resource).__name__}")
        except ControlPlaneError:
            raise
        except Exception as e:
            raise _translate_api_exception(e) from e
        self._log.debug("Created %s %s (namespace=%s)", resource.kind, resource.name, resource.namespace)
        return resource


def _translate_api_exception(exc: Exception) -> ControlPlaneError:
    status = getattr(exc, "status", None)
    reason = getattr(exc, "reason", None) or str(exc)
    if status == 409:
        return AlreadyExistsError(f"already exists: {reason}", status_code=409)
    return ControlPlaneError(f"control plane request failed: {reason}", status_code=status)


__all__ = [
    "SECRET_STORE_PLURAL",
    "CLUSTER_SECRET_STORE_PLURAL",
    "KubernetesControlPlane",
]
