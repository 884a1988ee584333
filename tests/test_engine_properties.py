"""
Property-based tests for the aggregation engine.

The engine is driven end to end against an ``httpx.MockTransport`` that
plays all six providers, so the all-or-fail join, the pagination walk and
the published state snapshots can be observed without network access.
"""

import asyncio
import random
from dataclasses import replace
from datetime import date
from typing import Optional

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_metrics.config import ProviderCredentials, SystemConfig
from domain_metrics.diagnostic_logger import DiagnosticLogger
from domain_metrics.engine import AggregationEngine, join_all_or_fail
from domain_metrics.enums import EngineState, LogLevel
from domain_metrics.i18n import get_message
from domain_metrics.models import QueryState


REDIRECTS = [f"r{i}.com" for i in range(12)]

PROVIDER_HOSTS = [
    "domdetailer.com",
    "api.godaddy.com",
    "trueimperium.com",
    "host.io",
    "api.completedns.com",
    "api.apilayer.com",
]


class FakeProviders:
    """Routes mock requests to canned provider payloads."""

    def __init__(
        self,
        redirects: Optional[list] = None,
        fail_host: Optional[str] = None,
        fail_page: Optional[int] = None,
        max_delay: float = 0.0,
    ):
        self.redirects = REDIRECTS if redirects is None else redirects
        self.fail_host = fail_host
        self.fail_page = fail_page
        self.max_delay = max_delay
        self.requests: list = []

    def count(self, host: str) -> int:
        return sum(1 for request in self.requests if request.url.host == host)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.max_delay:
            await asyncio.sleep(random.uniform(0, self.max_delay))

        host = request.url.host
        if host == self.fail_host:
            return httpx.Response(500, json={"error": "unavailable"})

        if host == "domdetailer.com":
            return httpx.Response(200, json={
                "mozDA": 42, "mozPA": 47, "majesticTF": 31, "majesticCF": 38,
                "majesticRefDomains": 1520, "majesticLinks": 48213,
            })
        if host == "api.godaddy.com":
            return httpx.Response(200, json={"govalue": 2450})
        if host == "trueimperium.com":
            return httpx.Response(200, json={"isIndexed": True})
        if host == "host.io":
            page = request.url.params.get("page")
            number = int(page) if page is not None else 0
            if page is not None and number == self.fail_page:
                return httpx.Response(502, json={"error": "bad gateway"})
            start = number * 5
            return httpx.Response(200, json={
                "total": len(self.redirects),
                "domains": self.redirects[start:start + 5],
            })
        if host == "api.completedns.com":
            return httpx.Response(200, json={"drops": 2})
        if host == "api.apilayer.com":
            return httpx.Response(200, json={"result": {
                "creation_date": "2010-05-01 00:00:00",
                "expiration_date": "2030-05-01 00:00:00",
            }})
        return httpx.Response(404)


def make_config(language: str = "en") -> SystemConfig:
    return SystemConfig(
        credentials=ProviderCredentials(
            dom_detailer_api_key="dd-key",
            hostio_api_key="hio-token",
            complete_dns_api_key="cdns-key",
            whois_api_key="whois-key",
        ),
        language=language,
    )


def run_engine(providers: FakeProviders, inputs: list, language: str = "en", snapshots: list = None):
    """Run ``inputs`` one after another on one engine; return results and final state."""

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(providers)) as http_client:
            engine = AggregationEngine(make_config(language), http_client=http_client)
            if snapshots is not None:
                engine.subscribe(snapshots.append)
            results = [await engine.run(raw) for raw in inputs]
            return results, engine.state

    return asyncio.run(_run())


class TestSuccessfulRun:

    def test_example_domain_with_twelve_redirects(self) -> None:
        providers = FakeProviders()
        (result,), state = run_engine(providers, ["Example.com"])

        assert result.status == EngineState.MERGED
        assert result.ok
        record = result.record
        assert record.domain == "example.com"
        assert (record.moz_da, record.moz_pa) == (42, 47)
        assert (record.majestic_tf, record.majestic_cf) == (31, 38)
        assert record.majestic_ref_domains == 1520
        assert record.majestic_links == 48213
        assert record.estimated_value == 2450
        assert record.is_indexed is True
        assert record.drops == 2
        assert record.expiration_date == date(2030, 5, 1)
        assert record.domain_age_days > 0
        assert list(record.redirect_domains) == REDIRECTS

        assert providers.count("host.io") == 3
        for host in PROVIDER_HOSTS:
            if host != "host.io":
                assert providers.count(host) == 1, host
        assert result.metadata.page_requests == 3
        assert len(result.sources) == 8
        redirect_pages = [s.page for s in result.sources if s.source == "hostio_redirects"]
        assert sorted(redirect_pages) == [0, 1, 2]
        assert all(s.page is None for s in result.sources if s.source != "hostio_redirects")
        assert all(source.status == "ok" for source in result.sources)

        assert state.phase == EngineState.MERGED
        assert state.loading is False
        assert state.record == record
        assert state.errors == ()

    def test_single_page_makes_one_redirect_request(self) -> None:
        providers = FakeProviders(redirects=["a.com", "b.com", "c.com"])
        (result,), _ = run_engine(providers, ["example.com"])
        assert result.record.redirect_count == 3
        assert providers.count("host.io") == 1

    def test_credentials_reach_providers(self) -> None:
        providers = FakeProviders(redirects=[])
        run_engine(providers, ["example.com"])
        by_host = {request.url.host: request for request in providers.requests}
        assert by_host["domdetailer.com"].url.params["apikey"] == "dd-key"
        assert by_host["host.io"].url.params["token"] == "hio-token"
        assert by_host["api.completedns.com"].url.params["key"] == "cdns-key"
        assert by_host["api.apilayer.com"].headers["apikey"] == "whois-key"

    def test_snapshots_never_expose_partial_record(self) -> None:
        snapshots: list = []
        run_engine(FakeProviders(), ["example.com"], snapshots=snapshots)

        assert [s.phase for s in snapshots] == [
            EngineState.FETCHING,
            EngineState.PAGINATING,
            EngineState.MERGED,
        ]
        for snapshot in snapshots:
            assert isinstance(snapshot, QueryState)
            if snapshot.loading:
                assert snapshot.record is None
                assert snapshot.errors == ()
        assert snapshots[-1].loading is False
        assert snapshots[-1].record is not None

    @given(seed=st.integers(min_value=0, max_value=10**6))
    @settings(max_examples=10, deadline=None)
    def test_completion_order_does_not_change_record(self, seed: int) -> None:
        random.seed(seed)
        (fast,), _ = run_engine(FakeProviders(), ["example.com"])
        (slow,), _ = run_engine(FakeProviders(max_delay=0.005), ["example.com"])

        assert replace(slow.record, fetched_at="") == replace(fast.record, fetched_at="")


class TestFailures:

    @pytest.mark.parametrize("host", PROVIDER_HOSTS)
    def test_any_provider_failure_fails_the_run(self, host: str) -> None:
        providers = FakeProviders(fail_host=host)
        (result,), state = run_engine(providers, ["example.com"])

        assert result.status == EngineState.FAILED
        assert result.record is None
        assert result.errors == (get_message("error.fetch_failed", "en"),)
        assert state.phase == EngineState.FAILED
        assert state.loading is False
        assert state.record is None
        assert len(state.errors) == 1

    def test_failing_later_page_fails_the_run(self) -> None:
        providers = FakeProviders(fail_page=1)
        (result,), state = run_engine(providers, ["example.com"])

        assert result.status == EngineState.FAILED
        assert state.record is None
        # The walk stops at the failing page
        assert providers.count("host.io") == 2
        failed_pages = [s for s in result.sources if s.status == "error"]
        assert [(s.page, s.http_status_code) for s in failed_pages] == [(1, 502)]

    def test_error_message_is_localized(self) -> None:
        (result,), _ = run_engine(FakeProviders(fail_host="trueimperium.com"), ["example.com"], language="de")
        assert result.errors == (get_message("error.fetch_failed", "de"),)

    def test_errors_are_cleared_by_next_run(self) -> None:
        providers = FakeProviders(fail_host="host.io")
        snapshots: list = []

        async def _run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(providers)) as http_client:
                engine = AggregationEngine(make_config(), http_client=http_client)
                engine.subscribe(snapshots.append)
                first = await engine.run("example.com")
                providers.fail_host = None
                second = await engine.run("example.com")
                return first, second, engine.state

        first, second, state = asyncio.run(_run())

        assert first.status == EngineState.FAILED
        assert second.status == EngineState.MERGED
        assert state.errors == ()
        # The FETCHING snapshot of the second run already has no errors
        second_fetching = [s for s in snapshots if s.phase == EngineState.FETCHING][1]
        assert second_fetching.errors == ()
        assert second_fetching.record is None

    def test_failure_is_logged_with_provider(self) -> None:
        logger = DiagnosticLogger(output_format="json", output_stream=_NullStream(), min_level=LogLevel.DEBUG)

        async def _run():
            providers = FakeProviders(fail_host="api.apilayer.com")
            async with httpx.AsyncClient(transport=httpx.MockTransport(providers)) as http_client:
                engine = AggregationEngine(make_config(), logger=logger, http_client=http_client)
                return await engine.run("example.com")

        asyncio.run(_run())
        errors = [entry for entry in logger.entries if entry.level == LogLevel.ERROR]
        assert len(errors) == 1
        assert errors[0].data["provider"] == "apilayer_whois"
        assert errors[0].data["code"] == "http_status"


class _NullStream:
    def write(self, text: str) -> int:
        return len(text)

    def flush(self) -> None:
        pass


class TestSubscribers:

    def test_raising_listener_does_not_break_run(self) -> None:
        logger = DiagnosticLogger(output_format="json", output_stream=_NullStream(), min_level=LogLevel.DEBUG)
        received: list = []

        def broken(state: QueryState) -> None:
            raise RuntimeError("listener bug")

        async def _run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(FakeProviders())) as http_client:
                engine = AggregationEngine(make_config(), logger=logger, http_client=http_client)
                engine.subscribe(broken)
                engine.subscribe(received.append)
                return await engine.run("example.com"), engine.state

        result, state = asyncio.run(_run())

        assert result.status == EngineState.MERGED
        assert state.phase == EngineState.MERGED
        assert [s.phase for s in received] == [
            EngineState.FETCHING,
            EngineState.PAGINATING,
            EngineState.MERGED,
        ]
        errors = [entry for entry in logger.entries if entry.level == LogLevel.ERROR]
        assert len(errors) == 3
        assert all(entry.data["error_type"] == "RuntimeError" for entry in errors)

    def test_unsubscribe_stops_delivery(self) -> None:
        received: list = []

        async def _run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(FakeProviders(redirects=[]))) as http_client:
                engine = AggregationEngine(make_config(), http_client=http_client)
                unsubscribe = engine.subscribe(received.append)
                await engine.run("example.com")
                unsubscribe()
                await engine.run("example.org")

        asyncio.run(_run())
        assert [s.domain for s in received] == ["example.com"] * 3


class TestInvalidInput:

    @pytest.mark.parametrize("raw", ["", "   ", "http://example.com", "example", "exa mple.com", "example.c"])
    def test_invalid_input_is_a_no_op(self, raw: str) -> None:
        providers = FakeProviders()
        snapshots: list = []
        (result,), state = run_engine(providers, [raw], snapshots=snapshots)

        assert result.status == EngineState.IDLE
        assert not result.accepted
        assert result.record is None
        assert result.errors == ()
        assert state == QueryState()
        assert snapshots == []
        assert providers.requests == []

    def test_invalid_input_keeps_previous_result(self) -> None:
        providers = FakeProviders(redirects=[])
        results, state = run_engine(providers, ["example.com", "not a domain"])

        assert results[0].status == EngineState.MERGED
        assert results[1].status == EngineState.IDLE
        assert state.phase == EngineState.MERGED
        assert state.record == results[0].record
        assert len(providers.requests) == 6


class TestJoinAllOrFail:

    def test_results_keep_argument_order(self) -> None:
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        result = asyncio.run(join_all_or_fail(value("a", 0.003), value("b", 0.0), value("c", 0.001)))
        assert result == ["a", "b", "c"]

    def test_first_failure_cancels_pending(self) -> None:
        cancelled = []

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(True)
                raise

        async def failing():
            await asyncio.sleep(0)
            raise ValueError("provider down")

        async def _run():
            loop = asyncio.get_running_loop()
            start = loop.time()
            with pytest.raises(ValueError):
                await join_all_or_fail(slow(), failing(), slow())
            return loop.time() - start

        elapsed = asyncio.run(_run())
        assert cancelled == [True, True]
        assert elapsed < 5


class TestPhaseLogging:

    def test_validation_phase_is_logged_but_not_published(self) -> None:
        logger = DiagnosticLogger(output_format="json", output_stream=_NullStream(), min_level=LogLevel.DEBUG)
        snapshots: list = []

        async def _run():
            engine = AggregationEngine(make_config(), logger=logger)
            engine.subscribe(snapshots.append)
            result = await engine.run("not a domain")
            return result, engine.state

        result, state = asyncio.run(_run())

        assert result.status == EngineState.IDLE
        assert state == QueryState()
        assert snapshots == []
        messages = [entry.message for entry in logger.entries]
        assert f"Phase {EngineState.VALIDATING.value}" in messages
