"""Setup entry points for the AWS secret-store fixtures.

Each entry point builds and validates the store before touching the cluster,
then creates the credential secret first and the store second; the store only
names the secret, so the order is what keeps the store resolvable. A rejected
provider configuration therefore creates nothing. Failures surface as
ResourceCreationError and are never retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from ..observability.logging import get_logger
from ..resources.models import (
    CLUSTER_SECRET_STORE_KIND,
    SECRET_STORE_KIND,
    AccessOpts,
    AwsServiceType,
    ClusterSecretStore,
    Secret,
    SecretStore,
    SecretStoreRef,
    Tag,
)
from .credentials import create_credentials
from .framework import Framework, TestCase
from .naming import (
    EXTERNAL_ID_CREDENTIALS_SECRET_NAME,
    EXTERNAL_ID_STORE_NAME,
    SESSION_TAGS_CREDENTIALS_SECRET_NAME,
    SESSION_TAGS_STORE_NAME,
    STATIC_CREDENTIALS_SECRET_NAME,
    STATIC_REFERENT_CREDENTIALS_SECRET_NAME,
    STATIC_STORE_NAME,
    NamespaceLike,
    mounted_irsa_store_name,
    referenced_irsa_store_name,
    referent_store_name,
)
from .provider import new_store_provider
from .stores import (
    build_external_id_store,
    build_referent_static_store,
    build_session_tags_store,
    build_static_store,
    persist_store,
)


@dataclass(frozen=True)
class Fixture:
    secret: Secret
    store: Union[SecretStore, ClusterSecretStore]


def setup_static_store(
    f: Framework,
    access: AccessOpts,
    service_type: AwsServiceType | str,
    *,
    store_name: str = STATIC_STORE_NAME,
    secret_name: str = STATIC_CREDENTIALS_SECRET_NAME,
) -> Fixture:
    """Namespaced store authenticating with static credentials from a secret."""
    ns = f.namespace
    with get_logger().operation("setup_static_store", namespace=ns, store=store_name):
        provider = new_store_provider(service_type, access.region, secret_name)
        store = build_static_store(ns, provider, name=store_name)
        secret = create_credentials(f.client, access, secret_name, ns)
        persist_store(f.client, store)
    return Fixture(secret=secret, store=store)


def setup_external_id_store(
    f: Framework,
    access: AccessOpts,
    external_id: str,
    session_tags: Optional[Sequence[Tag]],
    service_type: AwsServiceType | str,
    *,
    store_name: str = EXTERNAL_ID_STORE_NAME,
    secret_name: str = EXTERNAL_ID_CREDENTIALS_SECRET_NAME,
) -> Fixture:
    """Namespaced store with static credentials that assumes ``access.role``
    confirming the trust with ``external_id``.
    """
    ns = f.namespace
    with get_logger().operation(
        "setup_external_id_store", namespace=ns, store=store_name, role=access.role
    ):
        provider = new_store_provider(
            service_type, access.region, secret_name, access.role, external_id, session_tags
        )
        store = build_external_id_store(ns, provider, name=store_name)
        secret = create_credentials(f.client, access, secret_name, ns)
        persist_store(f.client, store)
    return Fixture(secret=secret, store=store)


def setup_session_tags_store(
    f: Framework,
    access: AccessOpts,
    session_tags: Sequence[Tag],
    service_type: AwsServiceType | str,
    *,
    store_name: str = SESSION_TAGS_STORE_NAME,
    secret_name: str = SESSION_TAGS_CREDENTIALS_SECRET_NAME,
) -> Fixture:
    """Namespaced store with static credentials that assumes ``access.role``
    and attaches ``session_tags`` to the session.
    """
    ns = f.namespace
    with get_logger().operation(
        "setup_session_tags_store", namespace=ns, store=store_name, role=access.role
    ):
        provider = new_store_provider(
            service_type, access.region, secret_name, access.role, "", session_tags
        )
        store = build_session_tags_store(ns, provider, name=store_name)
        secret = create_credentials(f.client, access, secret_name, ns)
        persist_store(f.client, store)
    return Fixture(secret=secret, store=store)


def create_referent_static_store(
    f: Framework,
    access: AccessOpts,
    service_type: AwsServiceType | str,
    *,
    secret_name: str = STATIC_REFERENT_CREDENTIALS_SECRET_NAME,
) -> Fixture:
    """ClusterSecretStore using referent auth.

    The credential secret is created in the ExternalSecret's namespace; the
    cluster store only names it. The store name is derived from the namespace,
    and tests sharing one namespace must not run this concurrently.
    """
    ns = f.namespace
    store_name = referent_store_name(f)
    with get_logger().operation("create_referent_static_store", namespace=ns, store=store_name):
        provider = new_store_provider(service_type, access.region, secret_name)
        store = build_referent_static_store(store_name, provider)
        secret = create_credentials(f.client, access, secret_name, ns)
        persist_store(f.client, store)
    return Fixture(secret=secret, store=store)


def referenced_irsa_store_ref(ns: NamespaceLike) -> SecretStoreRef:
    return SecretStoreRef(kind=CLUSTER_SECRET_STORE_KIND, name=referenced_irsa_store_name(ns))


def mounted_irsa_store_ref(ns: NamespaceLike) -> SecretStoreRef:
    return SecretStoreRef(kind=SECRET_STORE_KIND, name=mounted_irsa_store_name(ns))


def use_cluster_secret_store(tc: TestCase) -> None:
    """Point the pending ExternalSecret at the referenced-IRSA ClusterSecretStore."""
    tc.external_secret.spec.secret_store_ref = referenced_irsa_store_ref(tc.framework)


def use_mounted_irsa_store(tc: TestCase) -> None:
    """Point the pending ExternalSecret at the mounted-IRSA SecretStore."""
    tc.external_secret.spec.secret_store_ref = mounted_irsa_store_ref(tc.framework)


__all__ = [
    "Fixture",
    "setup_static_store",
    "setup_external_id_store",
    "setup_session_tags_store",
    "create_referent_static_store",
    "referenced_irsa_store_ref",
    "mounted_irsa_store_ref",
    "use_cluster_secret_store",
    "use_mounted_irsa_store",
]
