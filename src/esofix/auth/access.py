"""Access material for the fixtures.

Design:
    .env file (optional bootstrap) -> process environment -> AccessOpts

    1. Load the configured .env file without overriding variables already set
    2. Read key id, secret key and session token from the configured env vars
    3. Combine with region and role from config into an AccessOpts
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

from dotenv import dotenv_values

from ..config.models import AwsAccessConfig, E2EConfig
from ..core.errors import ConfigError
from ..resources.models import AccessOpts

_log = logging.getLogger(__name__)


def _redact(_: Optional[str]) -> str:
    return "****"


def bootstrap_env(env_file: Optional[str], env: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Merge ``env`` (default ``os.environ``) over the values of ``env_file``.

    Variables already present in the environment win over the file.
    """
    merged: dict[str, str] = {}
    if env_file:
        if not os.path.exists(env_file):
            raise ConfigError(f".env file not found: {env_file}")
        loaded = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
        _log.debug("Loaded %d variables from %s", len(loaded), env_file)
        merged.update(loaded)
    merged.update(os.environ if env is None else env)
    return merged


def load_access_opts(
    cfg: E2EConfig | AwsAccessConfig | None = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> AccessOpts:
    """Resolve AWS access material for a fixture.

    The role comes from config only; override it with `--set aws.role=...`.
    Raises ConfigError when the key id or secret key is missing.
    """
    aws: Any = cfg.aws if isinstance(cfg, E2EConfig) else cfg
    if aws is None:
        aws = AwsAccessConfig()

    values = bootstrap_env(aws.env_file, env)
    missing = [
        name for name in (aws.access_key_env, aws.secret_key_env) if not values.get(name)
    ]
    if missing:
        raise ConfigError(f"Missing AWS credentials in environment: {', '.join(missing)}")

    kid = values[aws.access_key_env]
    sak = values[aws.secret_key_env]
    st = values.get(aws.session_token_env, "")
    _log.debug(
        "Resolved AWS access material %s=%s %s=%s",
        aws.access_key_env,
        _redact(kid),
        aws.secret_key_env,
        _redact(sak),
    )
    return AccessOpts(
        kid=kid,
        sak=sak,
        st=st,
        region=aws.region,
        role=aws.role,
    )


__all__ = ["bootstrap_env", "load_access_opts"]
