"""
Gandalf logging utilities.

Provides configurable logging for remote host requests, git process
invocations and SSH listener decisions. Ensures credentials (API
passwords, basic-auth userinfo in URLs) are never logged.
"""

import logging
import logging.handlers
import re
from typing import Any

_gandalf_logger = logging.getLogger("gandalf")
_http_logger = logging.getLogger("gandalf.http")
_git_logger = logging.getLogger("gandalf.git")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # user:password@ in URLs
    (re.compile(r"(\w+://)[^/@\s:]+:[^/@\s]+@"), r"\1[REDACTED]@"),
    # Authorization headers
    (re.compile(r"(Authorization['\"]?\s*[:=]\s*['\"]?)(Basic|Bearer)\s+[A-Za-z0-9+/=._-]+", re.IGNORECASE), r"\1\2 [REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_SENSITIVE_KEYS = {"password", "secret", "token", "authorization", "api_key"}

SYSLOG_IDENT = "gandalf-listener"


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    git_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gandalf logging.

    Args:
        level: Default log level for all gandalf loggers (default: INFO)
        http_level: Log level for remote host request/response logging
        git_level: Log level for git process logging
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string

    Example:
        ```python
        import logging
        from gandalf.logging import configure_logging

        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _gandalf_logger.setLevel(level)
    _gandalf_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _git_logger.setLevel(git_level if git_level is not None else level)


def syslog_handler(address: str = "/dev/log") -> logging.Handler:
    """Build a syslog handler tagged with the listener ident."""
    handler = logging.handlers.SysLogHandler(address=address)
    handler.ident = f"{SYSLOG_IDENT}: "
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gandalf logger.

    Args:
        name: Logger name suffix (e.g., "http", "git", "ssh"). If None,
            returns the main gandalf logger.
    """
    if name is None:
        return _gandalf_logger
    return logging.getLogger(f"gandalf.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: password, secret,
            token, authorization, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = mask_sensitive_data(value)
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log a remote host request at DEBUG level with credentials masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {mask_sensitive_data(url)}"]

    if params:
        log_parts.append(f"params={safe_log_dict(params)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log a remote host response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {mask_sensitive_data(url)}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_git_command(args: list[str], cwd: str, returncode: int | None = None) -> None:
    """Log a git invocation at DEBUG level."""
    if not _git_logger.isEnabledFor(logging.DEBUG):
        return

    line = f"git {' '.join(args)} (cwd={cwd})"
    if returncode is not None:
        line += f" -> {returncode}"
    _git_logger.debug(mask_sensitive_data(line))


__all__ = [
    "configure_logging",
    "syslog_handler",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_git_command",
]
