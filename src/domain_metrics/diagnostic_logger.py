"""
Diagnostic logger for the domain metrics system.

Provides structured logging with dual-format output (JSON and human-readable
text), minimum-level filtering, and masking of API keys in both structured
data and request URLs.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, TextIO
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .enums import LogLevel


@dataclass
class LogEntry:
    """Represents a single log entry with all metadata."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)


class DiagnosticLogger:
    """
    Diagnostic logger with dual-format output.

    Supports:
    - JSON and human-readable text output formats
    - Minimum level filtering (entries below it are dropped)
    - Automatic masking of sensitive data (API keys, tokens, secrets)
    - Masking of credential query parameters inside URLs
    """

    # Keys that should be masked in log output
    SENSITIVE_KEYS = frozenset({
        'token', 'secret', 'password', 'api_key', 'apikey',
        'authorization', 'credential', 'credentials',
    })

    # Query parameters that carry provider credentials
    SENSITIVE_QUERY_PARAMS = frozenset({'token', 'key', 'apikey', 'api_key'})

    MASK_VALUE = "***MASKED***"

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.INFO,
    ):
        """
        Initialize the diagnostic logger.

        Args:
            output_format: Output format - 'json', 'text', or 'both'
            output_stream: Output stream for log entries (defaults to sys.stderr)
            min_level: Entries below this level are discarded
        """
        if output_format not in ("json", "text", "both"):
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._output_stream = output_stream or sys.stderr
        self._min_level = min_level
        self._entries: list[LogEntry] = []

    @classmethod
    def from_level_name(
        cls,
        level: str,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
    ) -> "DiagnosticLogger":
        """Create a logger from a textual level such as 'debug' or 'warn'."""
        try:
            min_level = LogLevel(level.lower())
        except ValueError:
            min_level = LogLevel.INFO
        return cls(
            output_format=output_format,
            output_stream=output_stream,
            min_level=min_level,
        )

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Get all logged entries (for testing)."""
        return self._entries.copy()

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log an entry in the configured format(s).

        Args:
            level: Log severity level
            component: Component name generating the log
            message: Human-readable log message
            data: Optional additional data to include

        Returns:
            The created LogEntry, or None if filtered out by level
        """
        if level.rank < self._min_level.rank:
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=self.mask_sensitive_data(data or {}),
        )

        self._entries.append(entry)
        self._output_entry(entry)
        return entry

    def debug(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, component, message, data)

    def info(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, component, message, data)

    def warn(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, component, message, data)

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[Exception] = None,
        request_url: Optional[str] = None,
        response_status_code: Optional[int] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log an error with full context.

        Args:
            component: Component name generating the log
            message: Human-readable error message
            error: Optional exception object
            request_url: Optional URL of the failed request
            response_status_code: Optional HTTP status code
            additional_data: Optional additional context data

        Returns:
            The created LogEntry object
        """
        data = additional_data.copy() if additional_data else {}

        if error is not None:
            data["error_message"] = str(error)
            data["error_type"] = type(error).__name__
            error_details = getattr(error, "details", None)
            if isinstance(error_details, dict) and error_details:
                data["error_details"] = error_details

        if request_url is not None:
            data["request_url"] = request_url

        if response_status_code is not None:
            data["response_status_code"] = response_status_code

        return self.log(LogLevel.ERROR, component, message, data)

    def mask_sensitive_data(self, data: dict) -> dict:
        """
        Recursively mask sensitive data in a dictionary.

        String values that look like URLs get their credential query
        parameters masked as well.
        """
        if not isinstance(data, dict):
            return data

        masked = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            is_sensitive = any(
                sensitive_key in key_lower
                for sensitive_key in self.SENSITIVE_KEYS
            )

            if is_sensitive:
                masked[key] = self.MASK_VALUE
            elif isinstance(value, dict):
                masked[key] = self.mask_sensitive_data(value)
            elif isinstance(value, list):
                masked[key] = [
                    self.mask_sensitive_data(item) if isinstance(item, dict)
                    else self._mask_if_url(item)
                    for item in value
                ]
            else:
                masked[key] = self._mask_if_url(value)

        return masked

    def mask_url(self, url: str) -> str:
        """Replace credential query parameter values in ``url`` with the mask."""
        parts = urlsplit(url)
        if not parts.query:
            return url
        query = [
            (name, self.MASK_VALUE if name.lower() in self.SENSITIVE_QUERY_PARAMS else value)
            for name, value in parse_qsl(parts.query, keep_blank_values=True)
        ]
        return urlunsplit(parts._replace(query=urlencode(query, safe="*")))

    def _mask_if_url(self, value):
        if isinstance(value, str) and "://" in value and "?" in value:
            return self.mask_url(value)
        return value

    def _output_entry(self, entry: LogEntry) -> None:
        if self._output_format in ("json", "both"):
            self._output_stream.write(self._format_json(entry) + "\n")

        if self._output_format in ("text", "both"):
            self._output_stream.write(self._format_text(entry) + "\n")

        self._output_stream.flush()

    def _format_json(self, entry: LogEntry) -> str:
        obj = {
            "timestamp": entry.timestamp,
            "level": entry.level.value,
            "component": entry.component,
            "message": entry.message,
            "data": entry.data,
        }
        return json.dumps(obj, ensure_ascii=False, default=str)

    def _format_text(self, entry: LogEntry) -> str:
        # Format: [TIMESTAMP] LEVEL [COMPONENT] MESSAGE {data}
        parts = [
            f"[{entry.timestamp}]",
            entry.level.value.upper(),
            f"[{entry.component}]",
            entry.message,
        ]

        if entry.data:
            parts.append(json.dumps(entry.data, ensure_ascii=False, default=str))

        return " ".join(parts)

    def get_json_output(self, entry: LogEntry) -> str:
        """Get JSON output for an entry (for testing)."""
        return self._format_json(entry)

    def get_text_output(self, entry: LogEntry) -> str:
        """Get text output for an entry (for testing)."""
        return self._format_text(entry)

    def clear_entries(self) -> None:
        """Clear all stored log entries (for testing)."""
        self._entries.clear()
