"""
Configuration dataclasses for the domain metrics system.

This module defines the provider credentials and endpoints, HTTP, logging
and top-level system configuration, plus loading from environment
variables (optionally via a .env file).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .enums import ConfigErrorCode
from .exceptions import ConfigurationError


LOG_LEVELS = ("debug", "info", "warn", "error")
LOG_FORMATS = ("json", "text", "both")


@dataclass
class ProviderCredentials:
    """Static API keys for the external providers."""

    dom_detailer_api_key: str = ""
    hostio_api_key: str = ""
    complete_dns_api_key: str = ""
    whois_api_key: str = ""
    cors_proxy_url: str = ""  # Prefix prepended to relayed provider URLs


@dataclass
class ProviderEndpoints:
    """Base URLs of the external providers."""

    authority_url: str = "https://domdetailer.com/api/checkDomain.php"
    appraisal_url: str = "https://api.godaddy.com/v1/appraisal/"
    search_index_url: str = "https://trueimperium.com/is_domain_indexed/"
    redirects_url: str = "https://host.io/api/domains/redirects/"
    dns_history_url: str = "http://api.completedns.com/v2/dns-history/"
    whois_url: str = "https://api.apilayer.com/whois/query"


@dataclass
class HttpConfig:
    """HTTP client settings shared by all providers."""

    timeout_seconds: float = 15.0
    user_agent: str = "DomainMetrics/0.1"


@dataclass
class LoggingConfig:
    """Diagnostic logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    credentials: ProviderCredentials = field(default_factory=ProviderCredentials)
    endpoints: ProviderEndpoints = field(default_factory=ProviderEndpoints)
    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    redirect_page_size: int = 5
    language: str = "en"  # 'en' or 'de'
    simulation_mode: bool = False

    def missing_credentials(self) -> list[str]:
        """Return the names of API keys that are not configured."""
        required = {
            "DOM_DETAILER_API_KEY": self.credentials.dom_detailer_api_key,
            "HOSTIO_API_KEY": self.credentials.hostio_api_key,
            "COMPLETE_DNS_API_KEY": self.credentials.complete_dns_api_key,
            "WHOIS_API_KEY": self.credentials.whois_api_key,
        }
        return [name for name, value in required.items() if not value]

    def require_credentials(self) -> None:
        """
        Ensure all API keys are present unless running in simulation mode.

        Raises:
            ConfigurationError: If any key is missing
        """
        if self.simulation_mode:
            return
        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(
                code=ConfigErrorCode.MISSING_CREDENTIALS.value,
                message=f"Missing API keys: {', '.join(missing)}",
                details={"missing": missing},
            )


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or default).strip()


def _float_env(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            code=ConfigErrorCode.INVALID_VALUE.value,
            message=f"{name} must be a number, got {raw!r}",
            details={"variable": name, "value": raw},
        )


def _bool_env(name: str, default: bool) -> bool:
    raw = _env(name).lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _choice_env(name: str, default: str, choices: tuple) -> str:
    raw = _env(name, default).lower()
    if raw not in choices:
        raise ConfigurationError(
            code=ConfigErrorCode.INVALID_VALUE.value,
            message=f"{name} must be one of {', '.join(choices)}, got {raw!r}",
            details={"variable": name, "value": raw},
        )
    return raw


def load_config_from_env(env_file: Optional[Path] = None) -> SystemConfig:
    """
    Build a SystemConfig from environment variables.

    Values from ``env_file`` (or a ``.env`` in the working directory) are
    loaded first without overriding variables already set.

    Args:
        env_file: Optional path to a .env file

    Returns:
        SystemConfig populated from the environment
    """
    if env_file is not None:
        load_dotenv(dotenv_path=env_file, override=False)
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    language = _env("APP_LANGUAGE", "en").lower()
    if language not in ("en", "de"):
        language = "en"

    defaults = HttpConfig()
    return SystemConfig(
        credentials=ProviderCredentials(
            dom_detailer_api_key=_env("DOM_DETAILER_API_KEY"),
            hostio_api_key=_env("HOSTIO_API_KEY"),
            complete_dns_api_key=_env("COMPLETE_DNS_API_KEY"),
            whois_api_key=_env("WHOIS_API_KEY"),
            cors_proxy_url=_env("CORS_PROXY_URL"),
        ),
        http=HttpConfig(
            timeout_seconds=_float_env("HTTP_TIMEOUT", defaults.timeout_seconds),
            user_agent=_env("USER_AGENT", defaults.user_agent),
        ),
        logging=LoggingConfig(
            level=_choice_env("LOG_LEVEL", "info", LOG_LEVELS),
            output_format=_choice_env("LOG_FORMAT", "text", LOG_FORMATS),
        ),
        language=language,
        simulation_mode=_bool_env("SIMULATION_MODE", False),
    )
