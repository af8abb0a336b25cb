from __future__ import annotations

from typing import Optional, Sequence

from ..resources.models import (
    AwsAuthSecretRef,
    AwsProvider,
    AwsServiceType,
    ProviderStrategy,
    SecretKeySelector,
    Tag,
    classify_strategy,
)
from .naming import KEY_ID, SECRET_ACCESS_KEY, SESSION_TOKEN


def secret_ref_for(secret_name: str) -> AwsAuthSecretRef:
    """Selectors pointing at the three credential keys of ``secret_name``."""
    return AwsAuthSecretRef(
        access_key_id=SecretKeySelector(name=secret_name, key=KEY_ID),
        secret_access_key=SecretKeySelector(name=secret_name, key=SECRET_ACCESS_KEY),
        session_token=SecretKeySelector(name=secret_name, key=SESSION_TOKEN),
    )


def new_store_provider(
    service_type: AwsServiceType | str,
    region: str,
    secret_name: str,
    role: str = "",
    external_id: str = "",
    session_tags: Optional[Sequence[Tag]] = None,
) -> AwsProvider:
    """Build the AWS provider block for a store backed by a credential secret.

    The secret is referenced by name only; its values are resolved by the
    provider when the store is used. Raises ProviderConfigError when the
    role/external id/session tags combination matches no strategy.
    """
    return AwsProvider(
        service=AwsServiceType(service_type),
        region=region,
        role=role,
        external_id=external_id,
        session_tags=list(session_tags) if session_tags is not None else None,
        secret_ref=secret_ref_for(secret_name),
    )


__all__ = [
    "ProviderStrategy",
    "classify_strategy",
    "secret_ref_for",
    "new_store_provider",
]
