from __future__ import annotations

import logging

from ..client.base import ControlPlaneClient
from ..core.errors import ControlPlaneError, ResourceCreationError
from ..observability.logging import log_resource_created
from ..resources.models import AccessOpts, Secret
from .naming import KEY_ID, SECRET_ACCESS_KEY, SESSION_TOKEN

_log = logging.getLogger(__name__)


def build_credentials(access: AccessOpts, name: str, namespace: str) -> Secret:
    """Credential secret holding the access material under the kid/sak/st keys."""
    return Secret(
        name=name,
        namespace=namespace,
        string_data={
            KEY_ID: access.kid,
            SECRET_ACCESS_KEY: access.sak,
            SESSION_TOKEN: access.st,
        },
    )


def create_credentials(
    client: ControlPlaneClient, access: AccessOpts, name: str, namespace: str
) -> Secret:
    """Create the credential secret. An existing secret of the same name is an error."""
    secret = build_credentials(access, name, namespace)
    _log.debug("Creating credential secret %s/%s", namespace, name)
    try:
        client.create(secret)
    except ControlPlaneError as e:
        raise ResourceCreationError(secret.kind, name, namespace, cause=e) from e
    log_resource_created(secret.kind, name, namespace)
    return secret


__all__ = ["build_credentials", "create_credentials"]
