"""Logging utilities with secret redaction.

Provides:
- Redaction of Vault tokens and token headers
- Structured logging helpers
- Operation ID context management
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for the operation ID (thread-safe and async-safe)
_operation_id_var: ContextVar[str | None] = ContextVar("operation_id", default=None)

# Patterns for Vault token redaction
VAULT_TOKEN_PATTERNS = [
    (re.compile(r"\bhvs\.[A-Za-z0-9_-]+"), "hvs.***REDACTED***"),  # Service tokens
    (re.compile(r"\bhvb\.[A-Za-z0-9_-]+"), "hvb.***REDACTED***"),  # Batch tokens
    (re.compile(r"\bhvr\.[A-Za-z0-9_-]+"), "hvr.***REDACTED***"),  # Recovery tokens
    (re.compile(r"\bs\.[A-Za-z0-9]{24}\b"), "s.***REDACTED***"),  # Legacy service tokens
    (re.compile(r"\bb\.[A-Za-z0-9_-]{24,}"), "b.***REDACTED***"),  # Legacy batch tokens
]

# Pattern for token-carrying header values
TOKEN_HEADER_PATTERN = re.compile(
    r"((?:X-Vault-Token|Authorization)[:=\s]+)([^\s,;]+)",
    re.IGNORECASE,
)

# Structured fields whose value is a credential; always masked
TOKEN_FIELDS = frozenset({"token", "client_token", "parent_token"})

# Structured fields holding a scoped secret path ("<mount>/<token>")
SCOPED_PATH_FIELDS = frozenset({"scoped_path"})


def redact_secrets(text: str | None) -> str:
    """Redact secrets from text (Vault tokens, token headers).

    Args:
        text: Text that may contain secrets

    Returns:
        Text with secrets redacted
    """
    if text is None:
        return ""

    if not isinstance(text, str):
        text = str(text)

    for pattern, replacement in VAULT_TOKEN_PATTERNS:
        text = pattern.sub(replacement, text)

    text = TOKEN_HEADER_PATTERN.sub(r"\1***REDACTED***", text)

    return text


def mask_token(token: str | None) -> str:
    """Mask a credential for display, keeping only its last four characters.

    Credentials that end up in structured log fields are masked with this;
    see mask_scoped_path() for paths that embed one.
    """
    if not token:
        return "<empty>"
    if len(token) <= 4:
        return "****"
    return f"****{token[-4:]}"


def mask_scoped_path(path: str | None) -> str:
    """Mask the credential that ends a scoped secret path.

    "cubbyhole/hvs.abcd1234" becomes "cubbyhole/****1234".
    """
    if not path:
        return "<empty>"
    mount, sep, token = path.rstrip("/").rpartition("/")
    if not sep:
        return mask_token(token)
    return f"{mount}/{mask_token(token)}"


def set_operation_id(operation_id: str | None = None) -> str:
    """Set the operation ID for the current context.

    Args:
        operation_id: Optional operation ID (generates one if not provided)

    Returns:
        The operation ID that was set
    """
    if operation_id is None:
        operation_id = str(uuid.uuid4())

    _operation_id_var.set(operation_id)
    return operation_id


def get_operation_id() -> str | None:
    """Get the operation ID for the current context."""
    return _operation_id_var.get()


def clear_operation_id() -> None:
    """Clear the operation ID from the current context."""
    _operation_id_var.set(None)


def _format_field(key: str, value: Any) -> str:
    if key in TOKEN_FIELDS:
        return mask_token(None if value is None else str(value))
    if key in SCOPED_PATH_FIELDS:
        return mask_scoped_path(None if value is None else str(value))
    return redact_secrets(str(value))


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **kwargs: Any,
) -> None:
    """Log a message as "message | operation_id=... | key=value ...".

    Values of TOKEN_FIELDS are masked down to their last four characters and
    SCOPED_PATH_FIELDS have their trailing credential masked. Every other value
    goes through redact_secrets().

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, logging.ERROR, etc.)
        message: Log message
        **kwargs: Structured fields, e.g. path="pki/", token=child_token
    """
    parts = [message]

    operation_id = get_operation_id()
    if operation_id:
        parts.append(f"operation_id={operation_id}")

    parts.extend(f"{key}={_format_field(key, value)}" for key, value in kwargs.items())

    logger.log(level, " | ".join(parts))


def log_info(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log an info message with structured context."""
    log_with_context(logger, logging.INFO, message, **kwargs)


def log_warning(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log a warning message with structured context."""
    log_with_context(logger, logging.WARNING, message, **kwargs)


def log_error(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log an error message with structured context."""
    log_with_context(logger, logging.ERROR, message, **kwargs)


def log_debug(logger: logging.Logger, message: str, **kwargs: Any) -> None:
    """Log a debug message with structured context."""
    log_with_context(logger, logging.DEBUG, message, **kwargs)
