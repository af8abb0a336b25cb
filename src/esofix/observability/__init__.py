"""Observability module for fixture provisioning."""

from .logging import (
    E2ELogger,
    get_logger,
    set_verbose,
    log_config_fingerprint,
    log_resource_created,
)

__all__ = [
    "E2ELogger",
    "get_logger",
    "set_verbose",
    "log_config_fingerprint",
    "log_resource_created",
]
