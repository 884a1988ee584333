"""
Domain Metrics - aggregate SEO and registration metrics for a domain.

This package queries several independent providers (authority and link
metrics, appraisal value, search-index status, redirect history, DNS-drop
history and WHOIS) concurrently and merges their answers into one record.
"""

__version__ = "0.1.0"
__author__ = "Domain Metrics Team"

from domain_metrics.exceptions import (
    DomainMetricsError,
    ValidationError,
    ConfigurationError,
    ProviderError,
    NetworkError,
    ProtocolError,
)
from domain_metrics.enums import (
    LogLevel,
    Provider,
    DomainValidationErrorCode,
    ProviderErrorCode,
    ConfigErrorCode,
    EngineState,
    ParameterKind,
)
from domain_metrics.models import (
    DomainQuery,
    SourceResult,
    CheckMetadata,
    DomainMetricsRecord,
    QueryState,
    AggregationResult,
)
from domain_metrics.domain_validator import (
    DomainValidator,
    DomainValidationResult,
    DomainValidationError,
    is_valid_domain,
)
from domain_metrics.config import (
    ProviderCredentials,
    ProviderEndpoints,
    HttpConfig,
    LoggingConfig,
    SystemConfig,
    load_config_from_env,
)
from domain_metrics.formatters import (
    NOT_AVAILABLE,
    format_currency,
    format_date,
    format_domain_age,
    format_number_with_commas,
    compute_domain_age_days,
)
from domain_metrics.diagnostic_logger import (
    DiagnosticLogger,
    LogEntry,
)
from domain_metrics.provider_client import (
    ProviderClient,
    build_async_client,
)
from domain_metrics.authority_client import AuthorityClient, AuthorityMetrics
from domain_metrics.appraisal_client import AppraisalClient, AppraisalValue
from domain_metrics.index_client import SearchIndexClient, IndexStatus
from domain_metrics.redirect_client import RedirectClient, RedirectPage
from domain_metrics.dns_history_client import DnsHistoryClient, DnsHistory
from domain_metrics.whois_client import WhoisClient, WhoisRecord
from domain_metrics.pagination import (
    RedirectPaginator,
    page_count_for,
)
from domain_metrics.merger import merge_record
from domain_metrics.parameters import (
    ParameterSpec,
    PARAMETERS,
    ALL_PARAMETERS,
    FieldSelection,
    parameter_from_label,
    render_parameter,
)
from domain_metrics.engine import (
    AggregationEngine,
    join_all_or_fail,
)
from domain_metrics.i18n import (
    get_message,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from domain_metrics.cli import (
    main as cli_main,
    create_parser,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
)

__all__ = [
    # Exceptions
    "DomainMetricsError",
    "ValidationError",
    "ConfigurationError",
    "ProviderError",
    "NetworkError",
    "ProtocolError",
    # Enums
    "LogLevel",
    "Provider",
    "DomainValidationErrorCode",
    "ProviderErrorCode",
    "ConfigErrorCode",
    "EngineState",
    "ParameterKind",
    # Models
    "DomainQuery",
    "SourceResult",
    "CheckMetadata",
    "DomainMetricsRecord",
    "QueryState",
    "AggregationResult",
    # Domain Validator
    "DomainValidator",
    "DomainValidationResult",
    "DomainValidationError",
    "is_valid_domain",
    # Configuration
    "ProviderCredentials",
    "ProviderEndpoints",
    "HttpConfig",
    "LoggingConfig",
    "SystemConfig",
    "load_config_from_env",
    # Formatters
    "NOT_AVAILABLE",
    "format_currency",
    "format_date",
    "format_domain_age",
    "format_number_with_commas",
    "compute_domain_age_days",
    # Diagnostic Logger
    "DiagnosticLogger",
    "LogEntry",
    # Provider Clients
    "ProviderClient",
    "build_async_client",
    "AuthorityClient",
    "AuthorityMetrics",
    "AppraisalClient",
    "AppraisalValue",
    "SearchIndexClient",
    "IndexStatus",
    "RedirectClient",
    "RedirectPage",
    "DnsHistoryClient",
    "DnsHistory",
    "WhoisClient",
    "WhoisRecord",
    # Pagination
    "RedirectPaginator",
    "page_count_for",
    # Merger
    "merge_record",
    # Parameters
    "ParameterSpec",
    "PARAMETERS",
    "ALL_PARAMETERS",
    "FieldSelection",
    "parameter_from_label",
    "render_parameter",
    # Engine
    "AggregationEngine",
    "join_all_or_fail",
    # I18n
    "get_message",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # CLI
    "cli_main",
    "create_parser",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
]
