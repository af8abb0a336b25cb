from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..fixtures.naming import IAM_ROLE_EXTERNAL_ID, IAM_ROLE_SESSION_TAGS, IAM_TRUSTED_EXTERNAL_ID
from ..resources.models import AwsServiceType


class AwsAccessConfig(BaseModel):
    region: str = "eu-west-1"
    role: str = ""
    access_key_env: str = Field(default="AWS_ACCESS_KEY_ID", description="Env var holding the key id")
    secret_key_env: str = Field(default="AWS_SECRET_ACCESS_KEY", description="Env var holding the secret key")
    session_token_env: str = Field(default="AWS_SESSION_TOKEN", description="Env var holding the session token")
    env_file: Optional[str] = Field(default=None, description="Optional .env file to bootstrap from")

    model_config = ConfigDict(extra="allow")


class IamConfig(BaseModel):
    role_external_id: str = IAM_ROLE_EXTERNAL_ID
    role_session_tags: str = IAM_ROLE_SESSION_TAGS
    trusted_external_id: str = IAM_TRUSTED_EXTERNAL_ID


class KubernetesConfig(BaseModel):
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    in_cluster: bool = False


class E2EConfig(BaseModel):
    namespace: Optional[str] = None
    service_type: AwsServiceType = AwsServiceType.SECRETS_MANAGER
    aws: AwsAccessConfig = Field(default_factory=AwsAccessConfig)
    iam: IamConfig = Field(default_factory=IamConfig)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)

    model_config = ConfigDict(extra="allow")


__all__ = ["AwsAccessConfig", "IamConfig", "KubernetesConfig", "E2EConfig"]
