"""
Authority and link metrics client (DomDetailer).

Returns Moz DA/PA, Majestic TF/CF, referring domains and backlink totals.
Sub-fields the provider leaves out are reported as None, not as errors.
"""

from dataclasses import dataclass, field
from typing import Optional

from .models import DomainQuery, Number
from .provider_client import ProviderClient, coerce_count, coerce_number
from .enums import Provider


@dataclass(frozen=True)
class AuthorityMetrics:
    """Parsed DomDetailer fields."""

    moz_da: Optional[Number] = None
    moz_pa: Optional[Number] = None
    majestic_tf: Optional[Number] = None
    majestic_cf: Optional[Number] = None
    majestic_ref_domains: Optional[int] = None
    majestic_links: Optional[int] = None
    raw: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict) -> "AuthorityMetrics":
        return cls(
            moz_da=coerce_number(payload.get("mozDA")),
            moz_pa=coerce_number(payload.get("mozPA")),
            majestic_tf=coerce_number(payload.get("majesticTF")),
            majestic_cf=coerce_number(payload.get("majesticCF")),
            majestic_ref_domains=coerce_count(payload.get("majesticRefDomains")),
            majestic_links=coerce_count(payload.get("majesticLinks")),
            raw=payload,
        )


class AuthorityClient(ProviderClient):
    """Queries DomDetailer in Majestic 'root' mode."""

    provider = Provider.AUTHORITY

    APP_NAME = "DomDetailer"

    def __init__(self, api_key: str, base_url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._base_url = base_url

    async def query(self, domain: DomainQuery) -> AuthorityMetrics:
        if self._simulation_mode:
            return self._create_simulation_response(domain)

        payload = await self._get_json(
            self._base_url,
            params={
                "domain": domain.name,
                "app": self.APP_NAME,
                "apikey": self._api_key,
                "majesticChoice": "root",
            },
        )
        return AuthorityMetrics.from_payload(payload)

    def _create_simulation_response(self, domain: DomainQuery) -> AuthorityMetrics:
        return AuthorityMetrics.from_payload({
            "domain": domain.name,
            "mozDA": 42,
            "mozPA": 47,
            "majesticTF": 31,
            "majesticCF": 38,
            "majesticRefDomains": 1520,
            "majesticLinks": 48213,
        })
