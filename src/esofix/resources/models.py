from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.errors import ProviderConfigError

API_GROUP = "external-secrets.io"
API_VERSION = "v1"

SECRET_STORE_KIND = "SecretStore"
CLUSTER_SECRET_STORE_KIND = "ClusterSecretStore"

StoreKind = Literal["SecretStore", "ClusterSecretStore"]


class AwsServiceType(str, Enum):
    SECRETS_MANAGER = "SecretsManager"
    PARAMETER_STORE = "ParameterStore"


class ProviderStrategy(str, Enum):
    """Authentication strategy carried by an AWS provider configuration."""

    STATIC = "static"
    ASSUMED_ROLE = "assumed_role"
    ASSUMED_ROLE_EXTERNAL_ID = "assumed_role_external_id"
    ASSUMED_ROLE_SESSION_TAGS = "assumed_role_session_tags"


class AccessOpts(BaseModel):
    """Access material handed to a fixture by the calling test."""

    model_config = ConfigDict(frozen=True)

    kid: str
    sak: str = Field(repr=False)
    st: str = Field(default="", repr=False)
    region: str = ""
    role: str = ""


class Tag(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


def classify_strategy(role: str, external_id: str, session_tags: list[Tag] | None) -> ProviderStrategy:
    """Map role/external id/session tags onto exactly one strategy.

    Raises ProviderConfigError for combinations no single strategy covers.
    """
    if not role:
        if external_id:
            raise ProviderConfigError("external_id requires a role to assume")
        if session_tags:
            raise ProviderConfigError("session_tags require a role to assume")
        return ProviderStrategy.STATIC
    if external_id and session_tags:
        raise ProviderConfigError("external_id and session_tags are mutually exclusive")
    if external_id:
        return ProviderStrategy.ASSUMED_ROLE_EXTERNAL_ID
    if session_tags:
        return ProviderStrategy.ASSUMED_ROLE_SESSION_TAGS
    return ProviderStrategy.ASSUMED_ROLE


class SecretKeySelector(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    key: str
    namespace: str | None = None

    def to_manifest(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "key": self.key}
        if self.namespace:
            out["namespace"] = self.namespace
        return out


class AwsAuthSecretRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_key_id: SecretKeySelector
    secret_access_key: SecretKeySelector
    session_token: SecretKeySelector | None = None

    def to_manifest(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "accessKeyIDSecretRef": self.access_key_id.to_manifest(),
            "secretAccessKeySecretRef": self.secret_access_key.to_manifest(),
        }
        if self.session_token is not None:
            out["sessionTokenSecretRef"] = self.session_token.to_manifest()
        return out


class AwsProvider(BaseModel):
    """AWS provider block embedded in a store; never persisted on its own."""

    model_config = ConfigDict(frozen=True)

    service: AwsServiceType
    region: str = ""
    role: str = ""
    external_id: str = ""
    session_tags: list[Tag] | None = None
    secret_ref: AwsAuthSecretRef

    @field_validator("session_tags")
    @classmethod
    def _empty_tags_are_none(cls, value: list[Tag] | None) -> list[Tag] | None:
        return value or None

    @model_validator(mode="after")
    def _check_strategy(self) -> "AwsProvider":
        classify_strategy(self.role, self.external_id, self.session_tags)
        return self

    @property
    def strategy(self) -> ProviderStrategy:
        return classify_strategy(self.role, self.external_id, self.session_tags)

    @property
    def credential_secret_name(self) -> str:
        return self.secret_ref.access_key_id.name

    def to_manifest(self) -> dict[str, Any]:
        aws: dict[str, Any] = {"service": self.service.value, "region": self.region}
        if self.role:
            aws["role"] = self.role
        if self.external_id:
            aws["externalID"] = self.external_id
        if self.session_tags:
            aws["sessionTags"] = [{"key": t.key, "value": t.value} for t in self.session_tags]
        aws["auth"] = {"secretRef": self.secret_ref.to_manifest()}
        return {"aws": aws}


class Secret(BaseModel):
    """Opaque key/value credential resource."""

    kind: ClassVar[str] = "Secret"

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    string_data: dict[str, str] = Field(default_factory=dict, repr=False)

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "type": "Opaque",
            "stringData": dict(self.string_data),
        }


class SecretStore(BaseModel):
    kind: ClassVar[str] = SECRET_STORE_KIND

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    provider: AwsProvider

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": f"{API_GROUP}/{API_VERSION}",
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {"provider": self.provider.to_manifest()},
        }


class ClusterSecretStore(BaseModel):
    kind: ClassVar[str] = CLUSTER_SECRET_STORE_KIND

    model_config = ConfigDict(frozen=True)

    name: str
    provider: AwsProvider

    @property
    def namespace(self) -> None:
        return None

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": f"{API_GROUP}/{API_VERSION}",
            "kind": self.kind,
            "metadata": {"name": self.name},
            "spec": {"provider": self.provider.to_manifest()},
        }


Resource = Secret | SecretStore | ClusterSecretStore


class SecretStoreRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: StoreKind = SECRET_STORE_KIND
    name: str = ""


class ExternalSecretSpec(BaseModel):
    secret_store_ref: SecretStoreRef = Field(default_factory=SecretStoreRef)


class ExternalSecret(BaseModel):
    """The consuming resource of a test case; only its store reference matters here."""

    name: str
    namespace: str
    spec: ExternalSecretSpec = Field(default_factory=ExternalSecretSpec)


__all__ = [
    "API_GROUP",
    "API_VERSION",
    "SECRET_STORE_KIND",
    "CLUSTER_SECRET_STORE_KIND",
    "StoreKind",
    "AwsServiceType",
    "ProviderStrategy",
    "AccessOpts",
    "Tag",
    "classify_strategy",
    "SecretKeySelector",
    "AwsAuthSecretRef",
    "AwsProvider",
    "Secret",
    "SecretStore",
    "ClusterSecretStore",
    "Resource",
    "SecretStoreRef",
    "ExternalSecretSpec",
    "ExternalSecret",
]
