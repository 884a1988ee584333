"""
Command-line interface for the domain metrics system.

This module provides the main CLI entry point with commands for:
- check: Analyse a single domain and print the selected parameters
- check-list: Analyse multiple domains from a file
- interactive: Prompt loop that refuses to resubmit an unchanged domain
- parameters: List the available display parameters
- config: Configuration management
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from . import __version__
from .config import (
    LOG_FORMATS,
    LOG_LEVELS,
    HttpConfig,
    LoggingConfig,
    ProviderCredentials,
    ProviderEndpoints,
    SystemConfig,
    load_config_from_env,
)
from .diagnostic_logger import DiagnosticLogger
from .domain_validator import is_valid_domain
from .engine import AggregationEngine
from .exceptions import ConfigurationError
from .i18n import get_message
from .models import AggregationResult
from .parameters import ALL_PARAMETERS, FieldSelection


DEFAULT_CONFIG_PATH = Path.home() / ".domain_metrics" / "config.json"


def create_default_config(
    simulation_mode: bool = False,
    language: str = "en",
) -> SystemConfig:
    """Create a system configuration with default endpoints and no API keys."""
    return SystemConfig(
        credentials=ProviderCredentials(),
        endpoints=ProviderEndpoints(),
        http=HttpConfig(),
        logging=LoggingConfig(),
        language=language,
        simulation_mode=simulation_mode,
    )


def load_config_from_file(config_path: Path) -> Optional[SystemConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        credentials_data = data.get("credentials", {})
        credentials = ProviderCredentials(
            dom_detailer_api_key=credentials_data.get("dom_detailer_api_key", ""),
            hostio_api_key=credentials_data.get("hostio_api_key", ""),
            complete_dns_api_key=credentials_data.get("complete_dns_api_key", ""),
            whois_api_key=credentials_data.get("whois_api_key", ""),
            cors_proxy_url=credentials_data.get("cors_proxy_url", ""),
        )

        defaults = ProviderEndpoints()
        endpoints_data = data.get("endpoints", {})
        endpoints = ProviderEndpoints(
            authority_url=endpoints_data.get("authority_url", defaults.authority_url),
            appraisal_url=endpoints_data.get("appraisal_url", defaults.appraisal_url),
            search_index_url=endpoints_data.get("search_index_url", defaults.search_index_url),
            redirects_url=endpoints_data.get("redirects_url", defaults.redirects_url),
            dns_history_url=endpoints_data.get("dns_history_url", defaults.dns_history_url),
            whois_url=endpoints_data.get("whois_url", defaults.whois_url),
        )

        http_data = data.get("http", {})
        http = HttpConfig(
            timeout_seconds=float(http_data.get("timeout_seconds", 15.0)),
            user_agent=http_data.get("user_agent", HttpConfig().user_agent),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )
        if logging_config.level not in LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {', '.join(LOG_LEVELS)}")
        if logging_config.output_format not in LOG_FORMATS:
            raise ValueError(f"logging.output_format must be one of {', '.join(LOG_FORMATS)}")

        return SystemConfig(
            credentials=credentials,
            endpoints=endpoints,
            http=http,
            logging=logging_config,
            redirect_page_size=int(data.get("redirect_page_size", 5)),
            language=data.get("language", "en"),
            simulation_mode=data.get("simulation_mode", False),
        )

    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: SystemConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Returns:
        True if successful, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "credentials": {
                "dom_detailer_api_key": config.credentials.dom_detailer_api_key,
                "hostio_api_key": config.credentials.hostio_api_key,
                "complete_dns_api_key": config.credentials.complete_dns_api_key,
                "whois_api_key": config.credentials.whois_api_key,
                "cors_proxy_url": config.credentials.cors_proxy_url,
            },
            "endpoints": {
                "authority_url": config.endpoints.authority_url,
                "appraisal_url": config.endpoints.appraisal_url,
                "search_index_url": config.endpoints.search_index_url,
                "redirects_url": config.endpoints.redirects_url,
                "dns_history_url": config.endpoints.dns_history_url,
                "whois_url": config.endpoints.whois_url,
            },
            "http": {
                "timeout_seconds": config.http.timeout_seconds,
                "user_agent": config.http.user_agent,
            },
            "logging": {
                "level": config.logging.level,
                "output_format": config.logging.output_format,
            },
            "redirect_page_size": config.redirect_page_size,
            "language": config.language,
            "simulation_mode": config.simulation_mode,
        }

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return True

    except (OSError, TypeError) as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False


def resolve_config(args: argparse.Namespace) -> Optional[SystemConfig]:
    """Build the effective configuration from --config/--env-file and flags."""
    config = None
    if getattr(args, "config", None):
        config = load_config_from_file(Path(args.config))
        if config is None:
            print(f"Error: Could not load config from {args.config}", file=sys.stderr)
            return None

    if config is None:
        env_file = Path(args.env_file) if getattr(args, "env_file", None) else None
        try:
            config = load_config_from_env(env_file)
        except ConfigurationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return None

    if getattr(args, "dry_run", False):
        config = replace(config, simulation_mode=True)
    if getattr(args, "language", None):
        config = replace(config, language=args.language)
    return config


def create_logger(config: SystemConfig, verbose: bool) -> DiagnosticLogger:
    """Diagnostic logger on stderr at the configured level; --verbose lowers it to debug."""
    return DiagnosticLogger.from_level_name(
        "debug" if verbose else config.logging.level,
        output_format=config.logging.output_format,
        output_stream=sys.stderr,
    )


def print_result(
    result: AggregationResult,
    selection: FieldSelection,
    as_json: bool = False,
    out=None,
) -> None:
    """Render an aggregation result for the terminal."""
    out = out or sys.stdout
    if as_json:
        payload = {
            "status": result.status.value,
            "domain": result.record.domain if result.record else None,
            "errors": list(result.errors),
            "parameters": selection.to_dict(result.record) if result.record else {},
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False), file=out)
        return

    for error in result.errors:
        print(f"✖ {error}", file=out)
    if result.record is None:
        return
    for label, value in selection.render(result.record):
        print(f"{label}: {value}", file=out)


def check_credentials(config: SystemConfig) -> bool:
    try:
        config.require_credentials()
    except ConfigurationError as e:
        keys = ", ".join(e.details.get("missing", []))
        print(get_message("cli.missing_credentials", config.language, keys=keys), file=sys.stderr)
        return False
    return True


async def check_single_domain(
    domain: str,
    config: SystemConfig,
    selection: FieldSelection,
    as_json: bool = False,
    verbose: bool = False,
) -> int:
    """
    Analyse a single domain.

    Returns:
        Exit code (0 on success, 1 on invalid input or failure)
    """
    language = config.language

    if not is_valid_domain(domain):
        print(get_message("cli.invalid_domain", language, domain=domain), file=sys.stderr)
        return 1

    if not check_credentials(config):
        return 1

    if config.simulation_mode and not as_json:
        print(get_message("simulation.enabled", language))

    if not as_json:
        print(get_message("cli.analysing_domain", language, domain=domain))

    async with AggregationEngine(config=config, logger=create_logger(config, verbose)) as engine:
        result = await engine.run(domain)

    print_result(result, selection, as_json=as_json)

    if verbose and result.metadata and not as_json:
        print(f"  Duration: {result.metadata.total_duration_ms:.1f}ms")
        print(f"  Redirect page requests: {result.metadata.page_requests}")

    return 0 if result.ok else 1


async def check_domain_list(
    domains_file: Path,
    config: SystemConfig,
    output_file: Optional[Path] = None,
    verbose: bool = False,
) -> int:
    """
    Analyse multiple domains from a file, one after another.

    Returns:
        Exit code (0 if every domain succeeded, 1 otherwise)
    """
    language = config.language

    try:
        with open(domains_file, "r", encoding="utf-8") as f:
            domains = [line.strip() for line in f if line.strip() and not line.startswith("#")]
    except FileNotFoundError:
        print(f"Error: File not found: {domains_file}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    if not domains:
        print("Error: No domains found in file", file=sys.stderr)
        return 1

    if not check_credentials(config):
        return 1

    if config.simulation_mode:
        print(get_message("simulation.enabled", language))

    selection = FieldSelection.all()
    results = []
    succeeded = 0

    async with AggregationEngine(config=config, logger=create_logger(config, verbose)) as engine:
        for domain in domains:
            if not is_valid_domain(domain):
                print(get_message("cli.invalid_domain", language, domain=domain), file=sys.stderr)
                results.append({"domain": domain, "status": "invalid", "errors": []})
                continue

            print(get_message("cli.analysing_domain", language, domain=domain))
            result = await engine.run(domain)
            if result.ok:
                succeeded += 1
            for error in result.errors:
                print(f"  ✖ {error}")

            results.append({
                "domain": domain.lower(),
                "status": result.status.value,
                "errors": list(result.errors),
                "record": result.record.to_dict() if result.record else None,
                "parameters": selection.to_dict(result.record) if result.record else {},
            })

    print()
    print(get_message("cli.summary", language, succeeded=succeeded, total=len(domains)))

    if output_file:
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(results, f, indent=2, ensure_ascii=False)
            print(f"Results written to: {output_file}")
        except OSError as e:
            print(f"Error writing results: {e}", file=sys.stderr)

    return 0 if succeeded == len(domains) else 1


async def interactive_session(
    config: SystemConfig,
    selection: FieldSelection,
    read_line: Callable[[str], str] = input,
    verbose: bool = False,
) -> int:
    """
    Prompt for domains until an empty line or EOF.

    Submitting the same input twice in a row is refused; the input has to
    change before it can be submitted again.
    """
    language = config.language
    if not check_credentials(config):
        return 1

    print(get_message("cli.title", language))
    print(get_message("cli.quota_notice", language))
    if config.simulation_mode:
        print(get_message("simulation.enabled", language))

    last_submitted: Optional[str] = None

    async with AggregationEngine(config=config, logger=create_logger(config, verbose)) as engine:
        while True:
            try:
                entry = read_line(get_message("cli.prompt", language)).strip()
            except EOFError:
                break
            if not entry:
                break
            if entry == last_submitted:
                print(get_message("cli.unchanged_input", language))
                continue
            last_submitted = entry

            result = await engine.run(entry)
            if not result.accepted:
                # Invalid input is ignored; the submission can be edited and retried
                last_submitted = None
                print(get_message("cli.invalid_domain", language, domain=entry))
                continue
            print_result(result, selection)

    return 0


def _selection_from_args(args: argparse.Namespace) -> Optional[FieldSelection]:
    if getattr(args, "all", False):
        return FieldSelection.all()
    labels = getattr(args, "param", None) or []
    if not labels:
        return FieldSelection.all()
    try:
        return FieldSelection.from_labels(labels)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    selection = _selection_from_args(args)
    if selection is None:
        return 1

    return asyncio.run(check_single_domain(
        domain=args.domain,
        config=config,
        selection=selection,
        as_json=args.json,
        verbose=args.verbose,
    ))


def cmd_check_list(args: argparse.Namespace) -> int:
    """Handle the 'check-list' command."""
    config = resolve_config(args)
    if config is None:
        return 1

    output_file = Path(args.output) if args.output else None

    return asyncio.run(check_domain_list(
        domains_file=Path(args.file),
        config=config,
        output_file=output_file,
        verbose=args.verbose,
    ))


def cmd_interactive(args: argparse.Namespace) -> int:
    """Handle the 'interactive' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    selection = _selection_from_args(args)
    if selection is None:
        return 1
    return asyncio.run(interactive_session(config, selection, verbose=args.verbose))


def cmd_parameters(args: argparse.Namespace) -> int:
    """Handle the 'parameters' command."""
    for kind in ALL_PARAMETERS:
        print(kind.label)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        missing = config.missing_credentials()
        print(f"Configuration from: {config_path}")
        print(f"  Language: {config.language}")
        print(f"  Simulation mode: {config.simulation_mode}")
        print(f"  HTTP timeout: {config.http.timeout_seconds}s")
        print(f"  CORS relay: {config.credentials.cors_proxy_url or '(none)'}")
        print(f"  Missing API keys: {', '.join(missing) if missing else 'none'}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        config = create_default_config(language=args.language or "en")
        if save_config_to_file(config, config_path):
            print(f"Configuration created at: {config_path}")
            return 0
        return 1

    elif args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1
        try:
            config.require_credentials()
        except ConfigurationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to JSON configuration file",
    )
    parser.add_argument(
        "--env-file",
        help="Path to a .env file with API keys (default: ./.env)",
    )
    parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        default=None,
        help="Output language (default: from configuration, else en)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose diagnostic output",
    )


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--param", "-p",
        action="append",
        metavar="LABEL",
        help="Parameter to display, e.g. 'DA & PA' (repeatable; default: all)",
    )
    parser.add_argument(
        "--all", "-a",
        action="store_true",
        help="Display every parameter",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-metrics",
        description="Aggregate SEO and registration metrics for a domain",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'check' command
    check_parser = subparsers.add_parser(
        "check",
        help="Analyse a single domain",
    )
    check_parser.add_argument(
        "domain",
        help="Domain to analyse (e.g., example.com)",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    _add_selection_arguments(check_parser)
    _add_common_arguments(check_parser)
    check_parser.set_defaults(func=cmd_check)

    # 'check-list' command
    check_list_parser = subparsers.add_parser(
        "check-list",
        help="Analyse multiple domains from a file",
    )
    check_list_parser.add_argument(
        "file",
        help="Path to file containing domains (one per line)",
    )
    check_list_parser.add_argument(
        "--output", "-o",
        help="Path to write results as JSON",
    )
    _add_common_arguments(check_list_parser)
    check_list_parser.set_defaults(func=cmd_check_list)

    # 'interactive' command
    interactive_parser = subparsers.add_parser(
        "interactive",
        help="Analyse domains entered at a prompt",
    )
    _add_selection_arguments(interactive_parser)
    _add_common_arguments(interactive_parser)
    interactive_parser.set_defaults(func=cmd_interactive)

    # 'parameters' command
    parameters_parser = subparsers.add_parser(
        "parameters",
        help="List available display parameters",
    )
    parameters_parser.set_defaults(func=cmd_parameters)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        default=None,
        help="Default language for new configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
