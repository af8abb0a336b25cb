"""Access material loading for the fixtures."""

from .access import bootstrap_env, load_access_opts

__all__ = ["bootstrap_env", "load_access_opts"]
