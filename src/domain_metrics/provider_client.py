"""
Shared HTTP plumbing for the provider clients.

Each provider client issues exactly one GET per call through an
``httpx.AsyncClient``, decodes the JSON body and parses its defined fields.
Any failure is raised as a ProviderError subclass; nothing is retried.
"""

import time
from typing import Any, Mapping, Optional

import httpx

from .config import HttpConfig
from .diagnostic_logger import DiagnosticLogger
from .enums import Provider, ProviderErrorCode
from .exceptions import NetworkError, ProtocolError, ProviderError
from .models import Number


def build_async_client(http_config: Optional[HttpConfig] = None) -> httpx.AsyncClient:
    """Create the shared AsyncClient used by all providers."""
    http_config = http_config or HttpConfig()
    return httpx.AsyncClient(
        verify=True,
        timeout=httpx.Timeout(http_config.timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": http_config.user_agent,
            "Accept": "application/json",
        },
    )


def coerce_number(value: Any) -> Optional[Number]:
    """Return ``value`` as int/float, parsing numeric strings; None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return None


def coerce_count(value: Any) -> Optional[int]:
    """Return ``value`` as a non-negative int, or None when absent/invalid."""
    number = coerce_number(value)
    if number is None or number < 0:
        return None
    return int(number)


class ProviderClient:
    """
    Base class for provider clients.

    Subclasses set ``provider`` and implement ``query``. The AsyncClient is
    either injected (and then owned by the caller) or created lazily and
    closed by ``close``/``__aexit__``.
    """

    provider: Provider

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        http_config: Optional[HttpConfig] = None,
        simulation_mode: bool = False,
        logger: Optional[DiagnosticLogger] = None,
    ) -> None:
        self._client = http_client
        self._owns_client = http_client is None
        self._http_config = http_config or HttpConfig()
        self._simulation_mode = simulation_mode
        self._logger = logger
        self.last_response_time_ms: float = 0.0
        self.last_status_code: Optional[int] = None

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    def simulation_mode(self) -> bool:
        return self._simulation_mode

    async def _get_json(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        follow_redirects: Optional[bool] = None,
    ) -> dict:
        """
        GET ``url`` and return the decoded JSON object.

        Raises:
            NetworkError: On connection failures or timeouts
            ProviderError: On a non-2xx status
            ProtocolError: If the body is not a JSON object
        """
        if self._client is None:
            self._client = build_async_client(self._http_config)
            self._owns_client = True

        start_time = time.perf_counter()
        self.last_status_code = None
        try:
            if follow_redirects is None:
                response = await self._client.get(url, params=params, headers=headers)
            else:
                response = await self._client.get(
                    url,
                    params=params,
                    headers=headers,
                    follow_redirects=follow_redirects,
                )
        except httpx.TimeoutException as e:
            raise NetworkError(
                provider=self.name,
                code=ProviderErrorCode.TIMEOUT.value,
                message=f"{self.name} request timed out after {self._http_config.timeout_seconds}s",
                details={"url": url, "error": str(e)},
            )
        except httpx.HTTPError as e:
            raise NetworkError(
                provider=self.name,
                code=ProviderErrorCode.NETWORK_ERROR.value,
                message=f"{self.name} connection error: {e}",
                details={"url": url, "error": str(e)},
            )
        finally:
            self.last_response_time_ms = (time.perf_counter() - start_time) * 1000

        self.last_status_code = response.status_code
        request_url = str(response.request.url)

        if self._logger:
            self._logger.debug(
                self.__class__.__name__,
                f"GET {self.name} -> {response.status_code}",
                {
                    "url": request_url,
                    "status_code": response.status_code,
                    "response_time_ms": round(self.last_response_time_ms, 1),
                },
            )

        if not response.is_success:
            raise ProviderError(
                provider=self.name,
                code=ProviderErrorCode.HTTP_STATUS.value,
                message=f"{self.name} returned HTTP {response.status_code}",
                details={"url": request_url, "status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProtocolError(
                provider=self.name,
                code=ProviderErrorCode.PARSE_ERROR.value,
                message=f"{self.name} returned malformed JSON: {e}",
                details={"url": request_url, "status_code": response.status_code},
            )

        if not isinstance(payload, dict):
            raise ProtocolError(
                provider=self.name,
                code=ProviderErrorCode.PARSE_ERROR.value,
                message=f"{self.name} returned {type(payload).__name__}, expected an object",
                details={"url": request_url, "status_code": response.status_code},
            )

        return payload

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
