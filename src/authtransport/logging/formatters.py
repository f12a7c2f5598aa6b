"""Log formatters for JSON and console output."""

import json
import logging
import re
import sys
from datetime import UTC, date, datetime
from typing import Any

from authtransport.logging.context import get_log_context


def json_serializer(obj: Any) -> Any:
    """Serialize datetimes as ISO 8601 and everything else as a string."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return str(obj)


# Pattern to match sensitive query parameters
SENSITIVE_PARAMS_PATTERN = re.compile(
    r"([?&])(access_token|token|key|secret|password|auth)=[^&]*",
    re.IGNORECASE,
)


def sanitize_url(url: str | None) -> str | None:
    """Redact credential query parameters from a URL."""
    if not url:
        return url
    return SENSITIVE_PARAMS_PATTERN.sub(r"\1\2=[REDACTED]", url)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Sanitizes URLs and credential fields so tokens never reach the logs.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # HTTP
        "http_method",
        "http_url",
        "http_status",
        "duration_ms",
        # Token lifecycle
        "fetcher",
        "expiry",
        "token_file",
        "resource",
        "recheck_before_refresh",
        "authorization",
        # Session wiring
        "prefixes",
        # Errors
        "error",
        "error_type",
    ]

    NUMERIC_FIELDS = {
        "duration_ms": float,
        "http_status": int,
    }

    # Fields that contain URLs and should be sanitized
    URL_FIELDS = ["http_url", "url"]

    # Fields whose values are credentials
    SECRET_FIELDS = ["authorization"]

    def _sanitize_url(self, url: str) -> str:
        return sanitize_url(url)

    @staticmethod
    def _mask_secret(value: str) -> str:
        # keep the scheme of "Bearer abc..." values
        scheme, _, credential = value.partition(" ")
        if credential:
            return f"{scheme} [REDACTED]"
        return "[REDACTED]"

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if key in self.URL_FIELDS and isinstance(value, str):
            return self._sanitize_url(value)
        if key in self.SECRET_FIELDS and isinstance(value, str):
            return self._mask_secret(value)
        return value

    def _ensure_type(self, field: str, value: Any) -> Any:
        if field not in self.NUMERIC_FIELDS or value is None:
            return value
        try:
            return self.NUMERIC_FIELDS[field](value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _base_log_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
            + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    @staticmethod
    def _inject_context(log_entry: dict[str, Any], log_context: dict[str, str]) -> None:
        for field in ("component", "trace_id"):
            if log_context[field]:
                log_entry[field] = log_context[field]

    def _inject_extra_fields(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                typed_value = self._ensure_type(field, value)
                log_entry[field] = self._sanitize_value(field, typed_value)

    def _inject_exception(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        if not record.exc_info:
            return

        exc_type, exc_value, _ = record.exc_info
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "stacktrace": self.formatException(record.exc_info),
        }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = self._base_log_entry(record)
        self._inject_context(log_entry, get_log_context())

        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        self._inject_extra_fields(log_entry, record)
        self._inject_exception(log_entry, record)

        return json.dumps(log_entry, default=json_serializer, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    # ANSI color codes
    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _format_level_name(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        if not self._use_colors:
            return level_name

        color = self.COLORS.get(record.levelno, "")
        if not color:
            return level_name

        return f"{color}{level_name}{self.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output with optional color coding."""
        log_context = get_log_context()

        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            self._format_level_name(record),
        ]
        if log_context["component"]:
            parts.append(f"[{log_context['component']}]")
        prefix = " - ".join(parts)

        trace_id = getattr(record, "trace_id", None) or log_context.get("trace_id")
        message = f"{prefix} - {record.getMessage()}"
        if trace_id:
            message = f"{prefix} - [{trace_id[:8]}] {record.getMessage()}"

        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


__all__ = ["JSONFormatter", "ConsoleFormatter", "json_serializer", "sanitize_url"]
