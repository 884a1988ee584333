"""
Enumeration types for the domain metrics system.

These enums provide type-safe constants for provider names, error codes,
engine phases and display parameters throughout the system.
"""

from enum import Enum


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Numeric severity used for minimum-level filtering."""
        return _LOG_LEVEL_RANKS[self]


_LOG_LEVEL_RANKS = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}


class Provider(Enum):
    """External data sources queried for a domain."""

    AUTHORITY = "domdetailer"
    APPRAISAL = "godaddy_appraisal"
    SEARCH_INDEX = "search_index"
    REDIRECTS = "hostio_redirects"
    DNS_HISTORY = "completedns_history"
    WHOIS = "apilayer_whois"


class DomainValidationErrorCode(Enum):
    """Error codes for domain validation failures."""

    EMPTY_INPUT = "empty_input"
    INVALID_FORMAT = "invalid_format"


class ProviderErrorCode(Enum):
    """Error codes for provider client operations."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    PARSE_ERROR = "parse_error"


class ConfigErrorCode(Enum):
    """Error codes for configuration problems."""

    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_VALUE = "invalid_value"


class EngineState(Enum):
    """Phases of one aggregation run."""

    IDLE = "idle"
    VALIDATING = "validating"
    FETCHING = "fetching"
    PAGINATING = "paginating"
    MERGED = "merged"
    FAILED = "failed"


class ParameterKind(Enum):
    """Display parameters a consumer can select, keyed by their label."""

    DA_PA = "DA & PA"
    TF_CF = "TF & CF"
    REFERRING_DOMAINS = "Referring Domains"
    TOTAL_BACKLINKS = "Total Backlinks"
    ESTIMATED_VALUE = "Estimated Value"
    GOOGLE_INDEXED = "Google Indexed"
    DOMAIN_DROPS = "Domain Drops"
    EXPIRATION_DATE = "Expiration Date"
    DOMAIN_AGE = "Domain Age"
    REDIRECTED_DOMAINS = "Redirected Domains"

    @property
    def label(self) -> str:
        return self.value
