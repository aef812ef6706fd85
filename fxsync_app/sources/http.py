"""Async JSON transport for the dashboard backend API."""

from typing import Any, Optional

import httpx

from ..config.defaults import ApiParams
from ..errors import MalformedDataError, TransportError
from ..logging.config import get_source_logger

logger = get_source_logger(__name__)


class ApiClient:
    """
    Thin JSON client over ``httpx.AsyncClient``.

    Every failure is classified before it leaves this class: connectivity
    problems, timeouts and non-2xx statuses become ``TransportError``; bodies
    that are not JSON become ``MalformedDataError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        user_agent: str = "fxsync-app/0.1",
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers={
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
            transport=transport,
        )

    @classmethod
    def from_params(
        cls,
        params: ApiParams,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "ApiClient":
        """Create a client from API configuration."""
        return cls(
            base_url=params.base_url,
            timeout_seconds=params.timeout_seconds,
            user_agent=params.user_agent,
            transport=transport,
        )

    async def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a path relative to the base URL and decode the JSON body."""
        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, body: dict[str, Any]) -> Any:
        """POST a JSON body to a path relative to the base URL."""
        return await self._request("POST", path, json=body)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path.lstrip("/"), **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Timeout calling {method} {path}: {e}",
                url=path,
                timed_out=True
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error calling {method} {path}: {e}", url=path) from e

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code} from {method} {path}",
                status_code=response.status_code,
                url=str(response.url)
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedDataError(
                f"Response from {method} {path} is not valid JSON",
                raw_data=response.text[:100],
                expected_format="json"
            ) from e

        logger.debug(
            "Source response received",
            method=method,
            path=path,
            status_code=response.status_code
        )
        return payload

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
