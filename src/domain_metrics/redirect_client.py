"""
Redirect history client (host.io).

host.io returns redirecting domains in fixed-size pages together with the
overall ``total``. Pages are numbered from 0; omitting ``page`` yields the
first page.
"""

from dataclasses import dataclass, field
from typing import Optional

from .enums import Provider
from .models import DomainQuery
from .provider_client import ProviderClient, coerce_count


@dataclass(frozen=True)
class RedirectPage:
    """One page of domains that redirect to the queried domain."""

    total: int = 0
    domains: tuple[str, ...] = ()
    page: Optional[int] = None
    raw: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict, page: Optional[int] = None) -> "RedirectPage":
        domains = payload.get("domains") or []
        if not isinstance(domains, list):
            domains = []
        return cls(
            total=coerce_count(payload.get("total")) or 0,
            domains=tuple(str(d) for d in domains),
            page=page,
            raw=payload,
        )


class RedirectClient(ProviderClient):

    provider = Provider.REDIRECTS

    # Simulated redirect set used in dry runs
    SIMULATED_REDIRECTS = (
        "old-{sld}.com",
        "{sld}.net",
        "{sld}-shop.com",
        "get{sld}.com",
        "{sld}.org",
        "www-{sld}.com",
        "my{sld}.io",
    )

    def __init__(self, api_key: str, base_url: str, page_size: int = 5, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._base_url = base_url
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    async def query(self, domain: DomainQuery, page: Optional[int] = None) -> RedirectPage:
        """
        Fetch one page of redirecting domains.

        Args:
            domain: Domain being analysed
            page: Page number (0-based); None requests the implicit first page
        """
        if self._simulation_mode:
            return self._create_simulation_response(domain, page)

        params = {"token": self._api_key}
        if page is not None:
            params["page"] = page
        payload = await self._get_json(
            f"{self._base_url.rstrip('/')}/{domain.name}",
            params=params,
        )
        return RedirectPage.from_payload(payload, page)

    def _create_simulation_response(
        self, domain: DomainQuery, page: Optional[int]
    ) -> RedirectPage:
        sld = domain.name.split(".")[0]
        names = [template.format(sld=sld) for template in self.SIMULATED_REDIRECTS]
        start = (page or 0) * self._page_size
        return RedirectPage(
            total=len(names),
            domains=tuple(names[start:start + self._page_size]),
            page=page,
            raw={"total": len(names)},
        )
