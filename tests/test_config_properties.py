"""
Property-based tests for configuration loading.

Covers environment variables, .env files via python-dotenv, credential
checks and the JSON configuration file round trip used by the CLI.
"""

import os
import string
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_metrics.cli import (
    create_default_config,
    load_config_from_file,
    save_config_to_file,
)
from domain_metrics.config import (
    HttpConfig,
    ProviderCredentials,
    SystemConfig,
    load_config_from_env,
)
from domain_metrics.enums import ConfigErrorCode
from domain_metrics.exceptions import ConfigurationError


ALL_KEYS = {
    "DOM_DETAILER_API_KEY": "dd",
    "HOSTIO_API_KEY": "hio",
    "COMPLETE_DNS_API_KEY": "cdns",
    "WHOIS_API_KEY": "whois",
}

key_text = st.text(alphabet=string.ascii_letters + string.digits, min_size=1, max_size=32)


def load_isolated(env: dict) -> SystemConfig:
    """Load config from ``env`` only, ignoring any .env file on disk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch.dict(os.environ, env, clear=True):
            return load_config_from_env(Path(tmpdir) / "missing.env")


class TestEnvironmentLoading:

    def test_defaults(self) -> None:
        config = load_isolated({})
        assert config.credentials == ProviderCredentials()
        assert config.http == HttpConfig()
        assert config.language == "en"
        assert config.simulation_mode is False
        assert config.redirect_page_size == 5
        assert config.logging.level == "info"

    @given(dd=key_text, hio=key_text, cdns=key_text, whois=key_text)
    @settings(max_examples=50)
    def test_credentials_from_environment(self, dd, hio, cdns, whois) -> None:
        config = load_isolated({
            "DOM_DETAILER_API_KEY": dd,
            "HOSTIO_API_KEY": hio,
            "COMPLETE_DNS_API_KEY": cdns,
            "WHOIS_API_KEY": whois,
            "CORS_PROXY_URL": "https://relay.example/",
        })
        assert config.credentials.dom_detailer_api_key == dd
        assert config.credentials.hostio_api_key == hio
        assert config.credentials.complete_dns_api_key == cdns
        assert config.credentials.whois_api_key == whois
        assert config.credentials.cors_proxy_url == "https://relay.example/"
        assert config.missing_credentials() == []

    def test_settings_from_environment(self) -> None:
        config = load_isolated({
            "HTTP_TIMEOUT": "2.5",
            "SIMULATION_MODE": "yes",
            "APP_LANGUAGE": "DE",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
            "USER_AGENT": "Probe/1.0",
        })
        assert config.http.timeout_seconds == 2.5
        assert config.http.user_agent == "Probe/1.0"
        assert config.simulation_mode is True
        assert config.language == "de"
        assert config.logging.level == "debug"
        assert config.logging.output_format == "json"

    def test_unsupported_language_falls_back(self) -> None:
        assert load_isolated({"APP_LANGUAGE": "fr"}).language == "en"

    @pytest.mark.parametrize("value", ["fast", "1s", "ten"])
    def test_invalid_timeout(self, value: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_isolated({"HTTP_TIMEOUT": value})
        assert exc_info.value.code == ConfigErrorCode.INVALID_VALUE.value
        assert exc_info.value.details["variable"] == "HTTP_TIMEOUT"

    def test_env_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = Path(tmpdir) / ".env"
            env_file.write_text(
                "DOM_DETAILER_API_KEY=from-file\nHOSTIO_API_KEY=hio-file\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, {"HOSTIO_API_KEY": "from-env"}, clear=True):
                config = load_config_from_env(env_file)

        assert config.credentials.dom_detailer_api_key == "from-file"
        # Variables already set win over the file
        assert config.credentials.hostio_api_key == "from-env"


class TestCredentialChecks:

    @given(missing=st.sets(st.sampled_from(sorted(ALL_KEYS)), min_size=1))
    @settings(max_examples=30)
    def test_missing_keys_are_reported(self, missing: set) -> None:
        env = {name: value for name, value in ALL_KEYS.items() if name not in missing}
        config = load_isolated(env)

        assert set(config.missing_credentials()) == missing
        with pytest.raises(ConfigurationError) as exc_info:
            config.require_credentials()
        assert exc_info.value.code == ConfigErrorCode.MISSING_CREDENTIALS.value
        assert set(exc_info.value.details["missing"]) == missing

    def test_simulation_mode_skips_credential_check(self) -> None:
        config = load_isolated({"SIMULATION_MODE": "1"})
        config.require_credentials()

    def test_complete_credentials_pass(self) -> None:
        load_isolated(ALL_KEYS).require_credentials()


class TestConfigFile:

    @given(
        dd=key_text,
        timeout=st.floats(min_value=0.5, max_value=120, allow_nan=False),
        language=st.sampled_from(["en", "de"]),
        simulation=st.booleans(),
    )
    @settings(max_examples=50)
    def test_round_trip(self, dd, timeout, language, simulation) -> None:
        config = create_default_config(simulation_mode=simulation, language=language)
        config.credentials.dom_detailer_api_key = dd
        config.http.timeout_seconds = timeout

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "config.json"
            assert save_config_to_file(config, path)
            loaded = load_config_from_file(path)

        assert loaded == config

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_config_from_file(Path(tmpdir) / "absent.json") is None

    @pytest.mark.parametrize("content", ["{not json", "[]", '{"http": {"timeout_seconds": "slow"}}'])
    def test_malformed_file(self, content: str) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text(content, encoding="utf-8")
            assert load_config_from_file(path) is None


class TestLoggingSettings:

    @given(level=st.sampled_from(["debug", "info", "warn", "error"]), fmt=st.sampled_from(["json", "text", "both"]))
    @settings(max_examples=30)
    def test_valid_logging_settings(self, level: str, fmt: str) -> None:
        config = load_isolated({"LOG_LEVEL": level.upper(), "LOG_FORMAT": fmt})
        assert config.logging.level == level
        assert config.logging.output_format == fmt

    @pytest.mark.parametrize("name, value", [("LOG_LEVEL", "verbose"), ("LOG_FORMAT", "xml")])
    def test_invalid_logging_settings(self, name: str, value: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_isolated({name: value})
        assert exc_info.value.code == ConfigErrorCode.INVALID_VALUE.value
        assert exc_info.value.details["variable"] == name

    def test_invalid_logging_in_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text('{"logging": {"output_format": "xml"}}', encoding="utf-8")
            assert load_config_from_file(path) is None
