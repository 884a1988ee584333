"""Appraisal value client (GoDaddy appraisal API, reached through the CORS relay)."""

from dataclasses import dataclass, field
from typing import Optional

from .enums import Provider
from .models import DomainQuery, Number
from .provider_client import ProviderClient, coerce_number


@dataclass(frozen=True)
class AppraisalValue:
    """Estimated market value of a domain in USD."""

    govalue: Optional[Number] = None
    raw: dict = field(default_factory=dict, compare=False)


class AppraisalClient(ProviderClient):

    provider = Provider.APPRAISAL

    def __init__(self, base_url: str, cors_proxy_url: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url
        self._cors_proxy_url = cors_proxy_url

    def build_url(self, domain: DomainQuery) -> str:
        return f"{self._cors_proxy_url}{self._base_url.rstrip('/')}/{domain.name}"

    async def query(self, domain: DomainQuery) -> AppraisalValue:
        if self._simulation_mode:
            return AppraisalValue(govalue=2450, raw={"govalue": 2450})

        payload = await self._get_json(self.build_url(domain))
        return AppraisalValue(govalue=coerce_number(payload.get("govalue")), raw=payload)
