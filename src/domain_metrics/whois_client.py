"""
WHOIS record client (apilayer WHOIS API).

The API key travels in an ``apikey`` header and redirects are followed.
Registration dates live under the ``result`` object of the response; a
missing date is reported as None and rendered "Not Available" downstream.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .enums import Provider
from .models import DomainQuery
from .provider_client import ProviderClient


@dataclass(frozen=True)
class WhoisRecord:
    """Registration dates as returned by the provider (unparsed strings)."""

    creation_date: Optional[str] = None
    expiration_date: Optional[str] = None
    raw: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict) -> "WhoisRecord":
        result = payload.get("result")
        if not isinstance(result, dict):
            result = {}
        return cls(
            creation_date=_first_date(result.get("creation_date")),
            expiration_date=_first_date(result.get("expiration_date")),
            raw=payload,
        )


def _first_date(value: Any) -> Optional[str]:
    """Some registries report several dates; the first one is authoritative."""
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class WhoisClient(ProviderClient):

    provider = Provider.WHOIS

    def __init__(self, api_key: str, base_url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._base_url = base_url

    async def query(self, domain: DomainQuery) -> WhoisRecord:
        """
        Fetch the WHOIS record for ``domain``.

        Raises:
            ProviderError: On network failure, non-2xx status or bad JSON
        """
        if self._simulation_mode:
            return self._get_simulated_response(domain)

        payload = await self._get_json(
            self._base_url,
            params={"domain": domain.name},
            headers={"apikey": self._api_key},
            follow_redirects=True,
        )
        return WhoisRecord.from_payload(payload)

    def _get_simulated_response(self, domain: DomainQuery) -> WhoisRecord:
        return WhoisRecord.from_payload({
            "result": {
                "domain_name": domain.name,
                "registrar": "Example Registrar",
                "creation_date": "2015-03-14 09:26:53",
                "expiration_date": "2027-03-14 09:26:53",
            }
        })
