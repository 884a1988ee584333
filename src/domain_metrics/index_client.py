"""Search-index status client."""

from dataclasses import dataclass, field
from typing import Optional

from .enums import Provider
from .models import DomainQuery
from .provider_client import ProviderClient


@dataclass(frozen=True)
class IndexStatus:
    """Whether the domain is in the search index; None when unknown."""

    is_indexed: Optional[bool] = None
    raw: dict = field(default_factory=dict, compare=False)


def _parse_flag(value) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
    if isinstance(value, int):
        return bool(value)
    return None


class SearchIndexClient(ProviderClient):

    provider = Provider.SEARCH_INDEX

    def __init__(self, base_url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._base_url = base_url

    async def query(self, domain: DomainQuery) -> IndexStatus:
        if self._simulation_mode:
            return IndexStatus(is_indexed=True, raw={"isIndexed": True})

        payload = await self._get_json(f"{self._base_url.rstrip('/')}/{domain.name}")
        return IndexStatus(is_indexed=_parse_flag(payload.get("isIndexed")), raw=payload)
