"""Resource names shared by the AWS store fixtures.

Namespaced stores use fixed names and are isolated by their namespace. Stores
derived from a namespace are only as unique as that namespace.
"""

from __future__ import annotations

from typing import Any, Union

WITH_REFERENCED_IRSA = "with referenced IRSA"
WITH_MOUNTED_IRSA = "with mounted IRSA"

STATIC_CREDENTIALS_SECRET_NAME = "provider-secret"
STATIC_REFERENT_CREDENTIALS_SECRET_NAME = "referent-provider-secret"
EXTERNAL_ID_CREDENTIALS_SECRET_NAME = "provider-secret-ext-id"
SESSION_TAGS_CREDENTIALS_SECRET_NAME = "provider-secret-sess-tags"

STATIC_STORE_NAME = "aws-static-creds"
EXTERNAL_ID_STORE_NAME = "aws-ext-id"
SESSION_TAGS_STORE_NAME = "aws-sess-tags"

IAM_ROLE_EXTERNAL_ID = "arn:aws:iam::783882199045:role/eso-e2e-external-id"
IAM_ROLE_SESSION_TAGS = "arn:aws:iam::783882199045:role/eso-e2e-session-tags"
IAM_TRUSTED_EXTERNAL_ID = "eso-e2e-ext-id"

# Credential field keys inside the provider secret
KEY_ID = "kid"
SECRET_ACCESS_KEY = "sak"
SESSION_TOKEN = "st"

NamespaceLike = Union[str, Any]


def namespace_of(ns: NamespaceLike) -> str:
    """Accept a namespace name or anything carrying a ``namespace`` attribute."""
    if isinstance(ns, str):
        return ns
    return ns.namespace


def referenced_irsa_store_name(ns: NamespaceLike) -> str:
    return "irsa-ref-" + namespace_of(ns)


def mounted_irsa_store_name(ns: NamespaceLike) -> str:
    return "irsa-mounted-" + namespace_of(ns)


def referent_store_name(ns: NamespaceLike) -> str:
    # No separator after the prefix; existing clusters rely on this exact name.
    return "referent-auth" + namespace_of(ns)


__all__ = [
    "WITH_REFERENCED_IRSA",
    "WITH_MOUNTED_IRSA",
    "STATIC_CREDENTIALS_SECRET_NAME",
    "STATIC_REFERENT_CREDENTIALS_SECRET_NAME",
    "EXTERNAL_ID_CREDENTIALS_SECRET_NAME",
    "SESSION_TAGS_CREDENTIALS_SECRET_NAME",
    "STATIC_STORE_NAME",
    "EXTERNAL_ID_STORE_NAME",
    "SESSION_TAGS_STORE_NAME",
    "IAM_ROLE_EXTERNAL_ID",
    "IAM_ROLE_SESSION_TAGS",
    "IAM_TRUSTED_EXTERNAL_ID",
    "KEY_ID",
    "SECRET_ACCESS_KEY",
    "SESSION_TOKEN",
    "namespace_of",
    "referenced_irsa_store_name",
    "mounted_irsa_store_name",
    "referent_store_name",
]
