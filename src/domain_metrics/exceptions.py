"""
Exception classes for the domain metrics system.

All exceptions inherit from DomainMetricsError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class DomainMetricsError(Exception):
    """Base exception for all domain metrics errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainMetricsError):
    """Raised when a domain string fails syntactic validation."""

    pass


class ConfigurationError(DomainMetricsError):
    """Raised when configuration is missing or malformed."""

    pass


class ProviderError(DomainMetricsError):
    """Raised when a provider call fails (non-2xx status or unusable payload)."""

    def __init__(
        self,
        provider: str,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.provider = provider
        details = dict(details or {})
        details.setdefault("provider", provider)
        super().__init__(code, message, details)


class NetworkError(ProviderError):
    """Raised when the transport fails (connection error, timeout)."""

    pass


class ProtocolError(ProviderError):
    """Raised when a provider answers with malformed JSON or an unexpected shape."""

    pass
