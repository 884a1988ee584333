"""
Pagination driver for the redirect history provider.

The first page is fetched together with the other providers and counts as
page 0. The driver then walks pages ``1 .. page_count - 1`` strictly in
order, one request at a time, so the result keeps the provider's page order.
A failing page propagates its ProviderError; no partial list is returned.
"""

import math
import time
from typing import Optional

from .diagnostic_logger import DiagnosticLogger
from .models import DomainQuery, SourceResult
from .redirect_client import RedirectClient, RedirectPage


def page_count_for(total: int, page_size: int) -> int:
    """Number of pages needed to hold ``total`` items."""
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


class RedirectPaginator:
    """Materializes the full redirect-domain list for a query."""

    def __init__(
        self,
        client: RedirectClient,
        logger: Optional[DiagnosticLogger] = None,
    ) -> None:
        self._client = client
        self._logger = logger
        self.requests_made = 0
        self.page_results: list[SourceResult] = []  # Pages 1.. fetched by walk()

    @property
    def page_size(self) -> int:
        return self._client.page_size

    async def first_page(self, domain: DomainQuery) -> RedirectPage:
        """Fetch the implicit first page (page 0)."""
        page = await self._client.query(domain)
        self.requests_made += 1
        return page

    async def walk(self, domain: DomainQuery, first_page: RedirectPage) -> list[str]:
        """
        Collect every redirect domain, starting from an already fetched first page.

        Args:
            domain: Domain being analysed
            first_page: Result of the page-0 request

        Returns:
            All redirect domains in page order, duplicates preserved
        """
        redirects = list(first_page.domains)
        pages = page_count_for(first_page.total, self.page_size)

        if self._logger:
            self._logger.debug(
                "RedirectPaginator",
                f"Walking {max(pages - 1, 0)} more page(s) for {domain.name}",
                {"total": first_page.total, "page_count": pages},
            )

        for page_number in range(1, pages):
            page = await self._fetch_page(domain, page_number)
            redirects.extend(page.domains)

        return redirects

    async def collect(self, domain: DomainQuery) -> list[str]:
        """Fetch page 0 and walk the remaining pages."""
        first = await self.first_page(domain)
        return await self.walk(domain, first)

    async def _fetch_page(self, domain: DomainQuery, page_number: int) -> RedirectPage:
        start = time.perf_counter()
        status = "error"
        try:
            page = await self._client.query(domain, page=page_number)
            status = "ok"
            return page
        finally:
            self.requests_made += 1
            self.page_results.append(SourceResult(
                source=self._client.name,
                status=status,
                http_status_code=self._client.last_status_code,
                response_time_ms=(time.perf_counter() - start) * 1000,
                page=page_number,
            ))
