"""Structured logging for the DSBmobile client, built on structlog.

JSON lines in production, console rendering during development. Modules get
their logger from get_logger() and log snake_case events with key/value
context. Credential-bearing keys are masked before rendering.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from dsbmobile.config import DSBConfig

SECRET_KEYS: frozenset[str] = frozenset({"password", "userpw", "user_pw"})

_MASK = "***"


def redact_secrets(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask values whose key names a credential."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS:
            event_dict[key] = _MASK
    return event_dict


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog processors and the stdlib bridge.

    Args:
        json_output: Render JSON lines instead of console output.
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx logs through stdlib logging
    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stdout)]
    root.setLevel(numeric_level)
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))


def configure_from(config: "DSBConfig") -> None:
    """Apply the logging fields of a DSBConfig."""
    setup_logging(json_output=config.log_json, log_level=config.log_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to a module name."""
    return structlog.get_logger(name)
