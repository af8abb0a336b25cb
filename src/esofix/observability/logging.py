"""Structured logging for fixture provisioning."""

import json
import logging
import re
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

# Configure the root logger for esofix
logger = logging.getLogger("esofix")
logger.setLevel(logging.INFO)

# Prevent duplicate handlers
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class E2ELogger:
    """Structured logger for fixture operations with secret redaction."""

    def __init__(self, name: str = "esofix", verbose: bool = False):
        self.logger = logging.getLogger(name)
        if verbose:
            self.logger.setLevel(logging.DEBUG)
        else:
            self.logger.setLevel(logging.INFO)

        # Quoted patterns first so they win over the bare forms
        self.secret_patterns = [
            r'(?i)(?<![\w-])(?:aws[_-]?)?(secret[_-]?access[_-]?key|session[_-]?token|secret|password|token)\s*=\s*"([^"]+)"',
            r'(?i)(?<![\w-])(?:aws[_-]?)?(secret[_-]?access[_-]?key|session[_-]?token|secret|password|token)\s*:\s*"([^"]+)"',
            r'(?i)(?<![\w-])(?:aws[_-]?)?(secret[_-]?access[_-]?key|session[_-]?token|secret|password|token)\s*=\s*([^\s]+)',
            r'(?i)(?<![\w-])(?:aws[_-]?)?(secret[_-]?access[_-]?key|session[_-]?token|secret|password|token)\s*:\s*([^\s]+)',
            r'(?i)\b(sak|st)\s*=\s*([^\s]+)',
        ]

        # Exact keys holding credential material (kid/sak/st are the credential field keys)
        self.secret_exact_keys = {"kid", "sak", "st", "secret", "token", "stringdata", "string_data"}
        self.secret_keys = ['secret_access_key', 'session_token', 'password']

    def _is_secret_key(self, key: str) -> bool:
        lowered = key.lower()
        if lowered in self.secret_exact_keys:
            return True
        return any(secret_key in lowered for secret_key in self.secret_keys)

    def _redact_secrets(self, message: str) -> str:
        """Redact secrets from log messages."""
        for pattern in self.secret_patterns:
            if re.search(pattern, message, flags=re.IGNORECASE):
                return "[REDACTED: Contains secrets]"
        return message

    def _log_structured(self, level: int, message: str, **kwargs: Any) -> None:
        """Log a structured message with optional context."""
        safe_message = self._redact_secrets(message)

        log_entry = {
            "message": safe_message,
            "timestamp": time.time(),
            "level": logging.getLevelName(level),
        }

        if kwargs:
            log_entry["context"] = self._redact_dict(kwargs)

        self.logger.log(level, json.dumps(log_entry, default=str))

    def _redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively redact secrets from a dictionary."""
        redacted: Dict[str, Any] = {}
        for key, value in data.items():
            if self._is_secret_key(str(key)):
                redacted[key] = "[REDACTED]"
            elif isinstance(value, str):
                redacted[key] = "[REDACTED]" if self._redact_secrets(value) != value else value
            elif isinstance(value, dict):
                redacted[key] = self._redact_dict(value)
            elif isinstance(value, list):
                redacted[key] = [
                    self._redact_dict(item) if isinstance(item, dict)
                    else "[REDACTED]" if isinstance(item, str) and self._redact_secrets(item) != item
                    else item
                    for item in value
                ]
            else:
                redacted[key] = value
        return redacted

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log_structured(logging.ERROR, message, **kwargs)

    @contextmanager
    def operation(self, operation_name: str, **context: Any):
        """Context manager for logging operation start/stop."""
        start_time = time.time()
        self.info(f"Starting {operation_name}", operation=operation_name, **context)

        try:
            yield self
        except Exception as e:
            duration = time.time() - start_time
            self.error(
                f"Operation {operation_name} failed",
                operation=operation_name,
                error=str(e),
                duration_ms=duration * 1000,
                **context
            )
            raise
        else:
            duration = time.time() - start_time
            self.info(
                f"Completed {operation_name}",
                operation=operation_name,
                duration_ms=duration * 1000,
                **context
            )

    def config_fingerprint(self, config: Dict[str, Any]) -> None:
        """Log configuration fingerprint with secrets redacted."""
        self.info("Configuration loaded", config_fingerprint=self._redact_dict(config))

    def resource_created(self, kind: str, name: str, namespace: Optional[str] = None) -> None:
        self.info(
            f"Created {kind} {name}",
            kind=kind,
            name=name,
            namespace=namespace,
        )


# Global logger instance
_esofix_logger: Optional[E2ELogger] = None


def get_logger(name: str = "esofix", verbose: bool = False) -> E2ELogger:
    """Get or create the global esofix logger."""
    global _esofix_logger
    if _esofix_logger is None:
        _esofix_logger = E2ELogger(name, verbose)
    return _esofix_logger


def set_verbose(verbose: bool) -> None:
    """Set verbose logging mode."""
    logger = get_logger()
    if verbose:
        logger.logger.setLevel(logging.DEBUG)
    else:
        logger.logger.setLevel(logging.INFO)


def log_config_fingerprint(config: Dict[str, Any]) -> None:
    get_logger().config_fingerprint(config)


def log_resource_created(kind: str, name: str, namespace: Optional[str] = None) -> None:
    get_logger().resource_created(kind, name, namespace)
