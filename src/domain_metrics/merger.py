"""
Record merger.

Combines the parsed provider responses and the full redirect list into one
immutable DomainMetricsRecord. Called only after every provider call and
the pagination walk have completed.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from .appraisal_client import AppraisalValue
from .authority_client import AuthorityMetrics
from .dns_history_client import DnsHistory
from .formatters import compute_domain_age_days, parse_timestamp
from .index_client import IndexStatus
from .models import DomainMetricsRecord, DomainQuery
from .whois_client import WhoisRecord


def merge_record(
    domain: DomainQuery,
    authority: AuthorityMetrics,
    appraisal: AppraisalValue,
    index_status: IndexStatus,
    dns_history: DnsHistory,
    whois: WhoisRecord,
    redirect_domains: Iterable[str],
    now: Optional[datetime] = None,
) -> DomainMetricsRecord:
    """
    Build the merged record for ``domain``.

    Args:
        now: Reference time for the domain age (defaults to the current UTC time)
    """
    now = now or datetime.now(timezone.utc)

    expiration = parse_timestamp(whois.expiration_date)

    return DomainMetricsRecord(
        domain=domain.name,
        moz_da=authority.moz_da,
        moz_pa=authority.moz_pa,
        majestic_tf=authority.majestic_tf,
        majestic_cf=authority.majestic_cf,
        majestic_ref_domains=authority.majestic_ref_domains,
        majestic_links=authority.majestic_links,
        estimated_value=appraisal.govalue,
        is_indexed=index_status.is_indexed,
        drops=dns_history.drops or 0,
        expiration_date=expiration.date() if expiration else None,
        domain_age_days=compute_domain_age_days(whois.creation_date, now=now),
        redirect_domains=tuple(redirect_domains),
        fetched_at=now.isoformat(),
    )
