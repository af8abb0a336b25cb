from __future__ import annotations

import logging
from typing import Union

from ..client.base import ControlPlaneClient
from ..core.errors import ControlPlaneError, ProviderConfigError, ResourceCreationError
from ..observability.logging import log_resource_created
from ..resources.models import AwsProvider, ClusterSecretStore, ProviderStrategy, SecretStore
from .naming import EXTERNAL_ID_STORE_NAME, SESSION_TAGS_STORE_NAME, STATIC_STORE_NAME

_log = logging.getLogger(__name__)

Store = Union[SecretStore, ClusterSecretStore]

# A plain assumed role (no external id, no tags) is accepted by both assumed-role stores.
_STATIC = (ProviderStrategy.STATIC,)
_EXTERNAL_ID = (ProviderStrategy.ASSUMED_ROLE_EXTERNAL_ID, ProviderStrategy.ASSUMED_ROLE)
_SESSION_TAGS = (ProviderStrategy.ASSUMED_ROLE_SESSION_TAGS, ProviderStrategy.ASSUMED_ROLE)


def _require(provider: AwsProvider, allowed: tuple[ProviderStrategy, ...], store: str) -> None:
    if provider.strategy not in allowed:
        raise ProviderConfigError(
            f"{store} store needs a {allowed[0].value} provider, got {provider.strategy.value}"
        )


def build_static_store(namespace: str, provider: AwsProvider, name: str = STATIC_STORE_NAME) -> SecretStore:
    _require(provider, _STATIC, "static")
    return SecretStore(name=name, namespace=namespace, provider=provider)


def build_external_id_store(
    namespace: str, provider: AwsProvider, name: str = EXTERNAL_ID_STORE_NAME
) -> SecretStore:
    _require(provider, _EXTERNAL_ID, "external-id")
    return SecretStore(name=name, namespace=namespace, provider=provider)


def build_session_tags_store(
    namespace: str, provider: AwsProvider, name: str = SESSION_TAGS_STORE_NAME
) -> SecretStore:
    _require(provider, _SESSION_TAGS, "session-tags")
    return SecretStore(name=name, namespace=namespace, provider=provider)


def build_referent_static_store(name: str, provider: AwsProvider) -> ClusterSecretStore:
    """Cluster store whose credential selectors carry no namespace.

    The provider looks the secret up in the namespace of the consuming
    ExternalSecret, so the same store serves every namespace holding a
    matching credential secret.
    """
    _require(provider, _STATIC, "referent-static")
    return ClusterSecretStore(name=name, provider=provider)


def persist_store(client: ControlPlaneClient, store: Store) -> Store:
    """Issue the single create call for a built store."""
    _log.debug(
        "Creating %s %s referencing secret %s",
        store.kind,
        store.name,
        store.provider.credential_secret_name,
    )
    try:
        client.create(store)
    except ControlPlaneError as e:
        raise ResourceCreationError(store.kind, store.name, store.namespace, cause=e) from e
    log_resource_created(store.kind, store.name, store.namespace)
    return store


def create_static_store(
    client: ControlPlaneClient,
    namespace: str,
    provider: AwsProvider,
    name: str = STATIC_STORE_NAME,
) -> SecretStore:
    return persist_store(client, build_static_store(namespace, provider, name))


def create_external_id_store(
    client: ControlPlaneClient,
    namespace: str,
    provider: AwsProvider,
    name: str = EXTERNAL_ID_STORE_NAME,
) -> SecretStore:
    return persist_store(client, build_external_id_store(namespace, provider, name))


def create_session_tags_store(
    client: ControlPlaneClient,
    namespace: str,
    provider: AwsProvider,
    name: str = SESSION_TAGS_STORE_NAME,
) -> SecretStore:
    return persist_store(client, build_session_tags_store(namespace, provider, name))


def create_referent_static_store(
    client: ControlPlaneClient, name: str, provider: AwsProvider
) -> ClusterSecretStore:
    return persist_store(client, build_referent_static_store(name, provider))


__all__ = [
    "Store",
    "build_static_store",
    "build_external_id_store",
    "build_session_tags_store",
    "build_referent_static_store",
    "persist_store",
    "create_static_store",
    "create_external_id_store",
    "create_session_tags_store",
    "create_referent_static_store",
]
