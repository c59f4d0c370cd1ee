"""Structured logging configuration using structlog.

JSON lines in production, colored console output in development. Events
pass through PIIRedactor before rendering so that backend keys, cache
connection URLs and customer contact details never reach the log.
"""

import re
import sys
from collections.abc import Mapping
from typing import Any, TextIO, cast

import structlog
from structlog.types import EventDict, WrappedLogger

REDACTED = "[REDACTED]"

# Values under these key names are replaced outright
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "secret",
    "token",
    "access_token",
    "refresh_token",
    "bearer",
    "authorization",
    "api_key",
    "apikey",
    "service_key",
    "credentials",
    "email",
    "phone",
    "phone_number",
})

# Top-level fields whose shape this package controls; never pattern-scanned.
# Timestamps and date-range cache keys would otherwise look like phone numbers.
STRUCTURAL_KEYS: frozenset[str] = frozenset({
    "event",
    "level",
    "logger",
    "timestamp",
    "key",
})

# user:password@ in redis://, postgres:// and similar URLs
URL_CREDENTIALS = re.compile(r"(?<=://)[^\s/@]+@")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# 10 to 15 digits with single space, hyphen or parenthesis separators.
# Hyphen-joined neighbours (ISO dates, product codes, UUIDs) do not match.
PHONE_PATTERN = re.compile(r"(?<![\w-])\+?\(?\d(?:[\s\-()]{0,2}\d){9,14}(?![\w-])")

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def mask_text(text: str) -> str:
    """Mask URL credentials, email addresses and phone numbers in text."""
    text = URL_CREDENTIALS.sub(f"{REDACTED}@", text)
    text = EMAIL_PATTERN.sub("[EMAIL]", text)
    return PHONE_PATTERN.sub("[PHONE]", text)


class PIIRedactor:
    """Processor that masks secrets and contact details in log events.

    Sensitive key names win at any depth. Every other string value is
    scanned with mask_text, except the top-level structural fields.
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._scrub_mapping(event_dict, top_level=True))

    def _scrub_mapping(
        self,
        data: Mapping[str, Any],
        *,
        top_level: bool = False,
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif top_level and key in STRUCTURAL_KEYS:
                result[key] = value
            else:
                result[key] = self._scrub(value)
        return result

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, list):
            return [self._scrub(item) for item in value]
        if isinstance(value, str):
            return mask_text(value)
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - "json" for production, "console" for development
        redact_pii: Whether to mask secrets and contact details
        stream: Destination of rendered lines, stderr when omitted
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            LEVELS.get(level.upper(), 20)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
