"""
Aggregation engine for the domain metrics system.

This module provides the orchestration layer that turns one submitted domain
into one merged metrics record. It integrates:
- Domain validation and normalization
- Concurrent dispatch of the six initial provider calls (all-or-fail join)
- The sequential redirect pagination walk
- Record merging
- The engine-owned query state and its subscribers

Phases: IDLE -> VALIDATING -> FETCHING -> PAGINATING -> MERGED, or FAILED
from any phase after validation. Invalid input leaves the state untouched.
"""

import asyncio
import time
from dataclasses import replace
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from .appraisal_client import AppraisalClient
from .authority_client import AuthorityClient
from .config import SystemConfig
from .diagnostic_logger import DiagnosticLogger
from .dns_history_client import DnsHistoryClient
from .domain_validator import DomainValidator
from .enums import EngineState, LogLevel
from .i18n import get_message
from .index_client import SearchIndexClient
from .merger import merge_record
from .models import (
    AggregationResult,
    CheckMetadata,
    DomainQuery,
    QueryState,
    SourceResult,
)
from .pagination import RedirectPaginator
from .provider_client import ProviderClient, build_async_client
from .redirect_client import RedirectClient
from .whois_client import WhoisClient


T = TypeVar("T")

StateListener = Callable[[QueryState], None]


async def join_all_or_fail(*operations: Awaitable) -> list:
    """
    Run ``operations`` concurrently and return their results in argument order.

    The first failure cancels every operation still pending and is raised
    without waiting for the stragglers.
    """
    tasks = [asyncio.ensure_future(operation) for operation in operations]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    # Raise the first failure in argument order
    for task in tasks:
        if task.done() and not task.cancelled() and task.exception() is not None:
            raise task.exception()

    return [task.result() for task in tasks]


class AggregationEngine:
    """
    Main engine for domain metrics aggregation.

    Owns the current QueryState. The state is replaced (never mutated) at
    each transition point and pushed to subscribers, so consumers only ever
    see complete snapshots.
    """

    COMPONENT = "AggregationEngine"

    def __init__(
        self,
        config: SystemConfig,
        logger: Optional[DiagnosticLogger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the aggregation engine.

        Args:
            config: System configuration
            logger: Optional diagnostic logger
            http_client: Optional shared AsyncClient; when omitted one is
                created on first use and closed by ``close``
        """
        self._config = config
        self._logger = logger
        self._http_client = http_client
        self._owns_client = http_client is None
        self._validator = DomainValidator()
        self._state = QueryState()
        self._listeners: list[StateListener] = []
        self._clients: Optional[dict[str, ProviderClient]] = None

    async def __aenter__(self) -> "AggregationEngine":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def state(self) -> QueryState:
        """Current read-only state snapshot."""
        return self._state

    @property
    def config(self) -> SystemConfig:
        return self._config

    @property
    def domain_validator(self) -> DomainValidator:
        return self._validator

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register ``listener`` for state snapshots.

        Exceptions raised by a listener are logged and do not affect the run.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: QueryState) -> None:
        self._state = state
        self._log(LogLevel.DEBUG, f"Phase {state.phase.value}", {"domain": state.domain, "loading": state.loading})
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                if self._logger:
                    self._logger.log_error(
                        self.COMPONENT,
                        "State listener raised",
                        error=e,
                        additional_data={"phase": state.phase.value},
                    )

    def _build_clients(self) -> dict[str, ProviderClient]:
        if self._clients is not None:
            return self._clients

        if self._http_client is None and not self._config.simulation_mode:
            self._http_client = build_async_client(self._config.http)
            self._owns_client = True

        creds = self._config.credentials
        endpoints = self._config.endpoints
        common = {
            "http_client": self._http_client,
            "http_config": self._config.http,
            "simulation_mode": self._config.simulation_mode,
            "logger": self._logger,
        }
        self._clients = {
            "authority": AuthorityClient(
                api_key=creds.dom_detailer_api_key,
                base_url=endpoints.authority_url,
                **common,
            ),
            "appraisal": AppraisalClient(
                base_url=endpoints.appraisal_url,
                cors_proxy_url=creds.cors_proxy_url,
                **common,
            ),
            "search_index": SearchIndexClient(
                base_url=endpoints.search_index_url,
                **common,
            ),
            "redirects": RedirectClient(
                api_key=creds.hostio_api_key,
                base_url=endpoints.redirects_url,
                page_size=self._config.redirect_page_size,
                **common,
            ),
            "dns_history": DnsHistoryClient(
                api_key=creds.complete_dns_api_key,
                base_url=endpoints.dns_history_url,
                cors_proxy_url=creds.cors_proxy_url,
                **common,
            ),
            "whois": WhoisClient(
                api_key=creds.whois_api_key,
                base_url=endpoints.whois_url,
                **common,
            ),
        }
        return self._clients

    async def run(self, raw_domain: str) -> AggregationResult:
        """
        Analyse one domain end to end.

        This is the main entry point. It:
        1. Validates the domain (invalid input is a silent no-op)
        2. Clears the previous result and dispatches all six initial calls
        3. Walks the remaining redirect pages
        4. Merges everything into one record

        Args:
            raw_domain: The domain as entered by the user

        Returns:
            AggregationResult with the record or the user-facing error list
        """
        # Validation is not published; invalid input must leave the state untouched
        self._log(
            LogLevel.DEBUG,
            f"Phase {EngineState.VALIDATING.value}",
            {"raw_domain": raw_domain},
        )
        if not self._validator.is_valid(raw_domain):
            self._log(
                LogLevel.DEBUG,
                "Ignoring invalid domain submission",
                {"raw_domain": raw_domain},
            )
            return AggregationResult(status=EngineState.IDLE, record=None)

        domain = self._validator.normalize(raw_domain)
        start_time = time.perf_counter()
        sources: list[SourceResult] = []

        self._publish(QueryState(
            phase=EngineState.FETCHING,
            loading=True,
            domain=domain.name,
        ))
        self._log(LogLevel.INFO, f"Starting analysis for {domain.name}", {"raw_domain": raw_domain})

        clients = self._build_clients()
        paginator = RedirectPaginator(clients["redirects"], logger=self._logger)

        try:
            (
                authority,
                appraisal,
                index_status,
                first_redirects,
                dns_history,
                whois,
            ) = await join_all_or_fail(
                self._timed(clients["authority"], clients["authority"].query(domain), sources),
                self._timed(clients["appraisal"], clients["appraisal"].query(domain), sources),
                self._timed(clients["search_index"], clients["search_index"].query(domain), sources),
                self._timed(clients["redirects"], paginator.first_page(domain), sources, page=0),
                self._timed(clients["dns_history"], clients["dns_history"].query(domain), sources),
                self._timed(clients["whois"], clients["whois"].query(domain), sources),
            )

            self._publish(replace(self._state, phase=EngineState.PAGINATING))
            redirect_domains = await paginator.walk(domain, first_redirects)

            record = merge_record(
                domain=domain,
                authority=authority,
                appraisal=appraisal,
                index_status=index_status,
                dns_history=dns_history,
                whois=whois,
                redirect_domains=redirect_domains,
                now=datetime.now(timezone.utc),
            )
        except Exception as e:
            self._log_failure(domain, e)
            errors = (get_message("error.fetch_failed", self._config.language),)
            self._publish(QueryState(
                phase=EngineState.FAILED,
                loading=False,
                domain=domain.name,
                record=None,
                errors=errors,
            ))
            return AggregationResult(
                status=EngineState.FAILED,
                record=None,
                errors=errors,
                sources=tuple(sources + paginator.page_results),
                metadata=self._metadata(start_time, paginator),
            )

        metadata = self._metadata(start_time, paginator)
        self._publish(QueryState(
            phase=EngineState.MERGED,
            loading=False,
            domain=domain.name,
            record=record,
            errors=(),
        ))
        self._log(
            LogLevel.INFO,
            f"Analysis completed for {domain.name}",
            {
                "domain": domain.name,
                "redirects": record.redirect_count,
                "page_requests": metadata.page_requests,
                "duration_ms": round(metadata.total_duration_ms, 1),
            },
        )
        return AggregationResult(
            status=EngineState.MERGED,
            record=record,
            errors=(),
            sources=tuple(sources + paginator.page_results),
            metadata=metadata,
        )

    async def _timed(
        self,
        client: ProviderClient,
        operation: Awaitable[T],
        sources: list[SourceResult],
        page: Optional[int] = None,
    ) -> T:
        """Await ``operation`` and record a SourceResult for it."""
        start = time.perf_counter()
        try:
            result = await operation
        except Exception:
            sources.append(SourceResult(
                source=client.name,
                status="error",
                http_status_code=client.last_status_code,
                response_time_ms=(time.perf_counter() - start) * 1000,
                page=page,
            ))
            raise
        sources.append(SourceResult(
            source=client.name,
            status="ok",
            http_status_code=client.last_status_code,
            response_time_ms=(time.perf_counter() - start) * 1000,
            page=page,
        ))
        return result

    def _metadata(self, start_time: float, paginator: RedirectPaginator) -> CheckMetadata:
        return CheckMetadata(
            total_duration_ms=(time.perf_counter() - start_time) * 1000,
            page_requests=paginator.requests_made,
        )

    def _log_failure(self, domain: DomainQuery, error: Exception) -> None:
        if self._logger:
            self._logger.log_error(
                self.COMPONENT,
                f"Analysis failed for {domain.name}",
                error=error,
                additional_data={
                    "domain": domain.name,
                    "provider": getattr(error, "provider", None),
                    "code": getattr(error, "code", None),
                },
            )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, self.COMPONENT, message, data)

    async def close(self) -> None:
        """Close the shared HTTP client if the engine created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
        self._clients = None
