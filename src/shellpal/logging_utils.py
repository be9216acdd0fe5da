"""Logging utilities with secret redaction and session context.

Provides:
- Secret redaction for API keys, bearer tokens and authorization headers
- Structured logging helpers
- Session ID context management
"""

import logging
import re
import sys
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for the active session ID
_session_id_var: ContextVar[str | None] = ContextVar("session_id", default=None)

# Patterns for secret redaction
API_KEY_PATTERNS = [
    (re.compile(r"sk-proj-[A-Za-z0-9_\-]+"), "sk-proj-***REDACTED***"),  # OpenAI project keys
    (re.compile(r"sk-[A-Za-z0-9_\-]{8,}"), "sk-***REDACTED***"),  # OpenAI keys
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE), r"\1***REDACTED***"),
]

# Pattern for Authorization header values
AUTH_HEADER_PATTERN = re.compile(
    r"(Authorization[:=\s]+)(?!Bearer\b)([^\s,;]+)",
    re.IGNORECASE,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def redact_secrets(text: str | None) -> str:
    """Redact secrets from text (API keys, bearer tokens, auth headers).

    Args:
        text: Text that may contain secrets

    Returns:
        Text with secrets redacted
    """
    if text is None:
        return ""

    if not isinstance(text, str):
        text = str(text)

    for pattern, replacement in API_KEY_PATTERNS:
        text = pattern.sub(replacement, text)

    text = AUTH_HEADER_PATTERN.sub(r"\1***REDACTED***", text)

    return text


def configure_logging(level: str | int = "WARNING") -> None:
    """Configure root logging to stderr.

    Console transcript output goes to stdout, so logs never interleave with
    command output when stdout is redirected.

    Args:
        level: Level name or number
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def set_session_id(session_id: str | None = None) -> str:
    """Set the session ID for the current context.

    Args:
        session_id: Optional session ID (generates one if not provided)

    Returns:
        The session ID that was set
    """
    if session_id is None:
        session_id = uuid.uuid4().hex[:12]

    _session_id_var.set(session_id)
    return session_id


def get_session_id() -> str | None:
    """Get the session ID for the current context."""
    return _session_id_var.get()


def clear_session_id() -> None:
    """Clear the session ID from the current context."""
    _session_id_var.set(None)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **kwargs: Any,
) -> None:
    """Log a message with structured context (session_id, state, etc.).

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, logging.ERROR, etc.)
        message: Log message
        **kwargs: Additional structured fields to include
    """
    if not logger.isEnabledFor(level):
        return

    parts = [message]

    session_id = get_session_id()
    if session_id:
        parts.append(f"session_id={session_id}")

    for key, value in kwargs.items():
        safe_value = redact_secrets(str(value))
        parts.append(f"{key}={safe_value}")

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
