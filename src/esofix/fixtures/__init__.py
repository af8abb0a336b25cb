"""AWS secret-store fixtures: naming, credentials, provider config, stores and setup."""

from .naming import *  # noqa: F401,F403
from .naming import __all__ as _naming_all
from .credentials import build_credentials, create_credentials
from .provider import ProviderStrategy, classify_strategy, new_store_provider, secret_ref_for
from .stores import (
    build_external_id_store,
    build_session_tags_store,
    build_static_store,
    create_external_id_store,
    create_session_tags_store,
    create_static_store,
)
from .framework import Framework, TestCase
from .setup import (
    Fixture,
    create_referent_static_store,
    mounted_irsa_store_ref,
    referenced_irsa_store_ref,
    setup_external_id_store,
    setup_session_tags_store,
    setup_static_store,
    use_cluster_secret_store,
    use_mounted_irsa_store,
)

__all__ = list(_naming_all) + [
    "build_credentials",
    "create_credentials",
    "ProviderStrategy",
    "classify_strategy",
    "new_store_provider",
    "secret_ref_for",
    "create_static_store",
    "create_external_id_store",
    "create_session_tags_store",
    "build_static_store",
    "build_external_id_store",
    "build_session_tags_store",
    "Framework",
    "TestCase",
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
