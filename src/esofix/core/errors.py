from __future__ import annotations

from typing import Optional


class EsofixError(Exception):
    """Base exception for the secret-store fixture toolkit."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ConfigError(EsofixError):
    pass


class ProviderConfigError(ConfigError):
    """Raised when role, external id and session tags describe no single strategy."""


class ControlPlaneError(EsofixError):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AlreadyExistsError(ControlPlaneError):
    pass


class ResourceCreationError(EsofixError):
    """A credential or store resource could not be persisted."""

    def __init__(
        self,
        kind: str,
        name: str,
        namespace: Optional[str] = None,
        *,
        cause: Optional[BaseException] = None,
    ) -> None:
        where = f"{namespace}/{name}" if namespace else name
        message = f"failed to create {kind} {where}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.cause = cause


EXIT_CODES: dict[type[EsofixError], int] = {
    EsofixError: 1,
    ConfigError: 2,
    ProviderConfigError: 2,
    ControlPlaneError: 3,
    AlreadyExistsError: 3,
    ResourceCreationError: 4,
}


def get_exit_code(exc: EsofixError) -> int:
    for cls in exc.__class__.__mro__:
        if cls in EXIT_CODES:
            return EXIT_CODES[cls]  # type: ignore[index]
    return 1


__all__ = [
    "EsofixError",
    "ConfigError",
    "ProviderConfigError",
    "ControlPlaneError",
    "AlreadyExistsError",
    "ResourceCreationError",
    "EXIT_CODES",
    "get_exit_code",
]
