"""
Data models for the domain metrics system.

This module defines the normalized query, the merged metrics record, the
per-provider call metadata and the engine-owned query state snapshot.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from .enums import EngineState


Number = Union[int, float]


@dataclass(frozen=True)
class DomainQuery:
    """A validated, lower-cased domain name."""

    name: str  # Canonical form
    raw: str = ""  # Original input

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SourceResult:
    """Outcome of a single provider call."""

    source: str  # Provider value, e.g. 'domdetailer'
    status: str  # 'ok' or 'error'
    http_status_code: Optional[int] = None
    response_time_ms: float = 0.0
    page: Optional[int] = None


@dataclass(frozen=True)
class CheckMetadata:
    """Metadata about one aggregation run."""

    total_duration_ms: float
    page_requests: int = 0


@dataclass(frozen=True)
class DomainMetricsRecord:
    """
    Merged metrics for one domain.

    Raw values are kept typed; display strings come from the parameter table.
    ``None`` means the provider had no value for that field.
    """

    domain: str
    moz_da: Optional[Number] = None
    moz_pa: Optional[Number] = None
    majestic_tf: Optional[Number] = None
    majestic_cf: Optional[Number] = None
    majestic_ref_domains: Optional[int] = None
    majestic_links: Optional[int] = None
    estimated_value: Optional[Number] = None
    is_indexed: Optional[bool] = None
    drops: int = 0
    expiration_date: Optional[date] = None
    domain_age_days: Optional[int] = None
    redirect_domains: tuple[str, ...] = ()
    fetched_at: str = ""

    @property
    def redirect_count(self) -> int:
        return len(self.redirect_domains)

    def to_dict(self) -> dict:
        """Convert the record to a JSON-serializable dictionary."""
        return {
            "domain": self.domain,
            "moz_da": self.moz_da,
            "moz_pa": self.moz_pa,
            "majestic_tf": self.majestic_tf,
            "majestic_cf": self.majestic_cf,
            "majestic_ref_domains": self.majestic_ref_domains,
            "majestic_links": self.majestic_links,
            "estimated_value": self.estimated_value,
            "is_indexed": self.is_indexed,
            "drops": self.drops,
            "expiration_date": (
                self.expiration_date.isoformat() if self.expiration_date else None
            ),
            "domain_age_days": self.domain_age_days,
            "redirect_domains": list(self.redirect_domains),
            "fetched_at": self.fetched_at,
        }


@dataclass(frozen=True)
class QueryState:
    """
    Read-only snapshot of the engine's current query state.

    A new snapshot replaces the old one at every transition; consumers
    never see a record that is still being assembled.
    """

    phase: EngineState = EngineState.IDLE
    loading: bool = False
    domain: Optional[str] = None
    record: Optional[DomainMetricsRecord] = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class AggregationResult:
    """Result of one ``AggregationEngine.run`` call."""

    status: EngineState
    record: Optional[DomainMetricsRecord]
    errors: tuple[str, ...] = ()
    sources: tuple[SourceResult, ...] = ()
    metadata: Optional[CheckMetadata] = None

    @property
    def accepted(self) -> bool:
        """False when the input was rejected by validation and nothing ran."""
        return self.status != EngineState.IDLE

    @property
    def ok(self) -> bool:
        return self.status == EngineState.MERGED and self.record is not None
