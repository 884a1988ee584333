"""DNS-drop history client (CompleteDNS, reached through the CORS relay)."""

from dataclasses import dataclass, field

from .enums import Provider
from .models import DomainQuery
from .provider_client import ProviderClient, coerce_count


@dataclass(frozen=True)
class DnsHistory:
    """Number of times the domain dropped; 0 when the provider omits it."""

    drops: int = 0
    raw: dict = field(default_factory=dict, compare=False)


class DnsHistoryClient(ProviderClient):

    provider = Provider.DNS_HISTORY

    def __init__(self, api_key: str, base_url: str, cors_proxy_url: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._base_url = base_url
        self._cors_proxy_url = cors_proxy_url

    def build_url(self, domain: DomainQuery) -> str:
        return f"{self._cors_proxy_url}{self._base_url.rstrip('/')}/{domain.name}"

    async def query(self, domain: DomainQuery) -> DnsHistory:
        if self._simulation_mode:
            return DnsHistory(drops=1, raw={"drops": 1})

        payload = await self._get_json(self.build_url(domain), params={"key": self._api_key})
        return DnsHistory(drops=coerce_count(payload.get("drops")) or 0, raw=payload)
