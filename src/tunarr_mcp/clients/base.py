"""Base HTTP client shared by API clients."""

from typing import Any, Optional

import httpx
from loguru import logger


class BaseClient:
    """Thin async wrapper around ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize client.

        Args:
            base_url: Service root URL
            api_key: API key, if the service needs one
            headers: Headers sent with every request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers or {},
            timeout=timeout,
        )

    async def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a GET request relative to the base URL."""
        logger.debug(f"GET {self.base_url}{path} params={params}")
        return await self._client.get(path, params=params, **kwargs)

    async def post(
        self,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a POST request with a JSON body relative to the base URL."""
        logger.debug(f"POST {self.base_url}{path}")
        return await self._client.post(path, json=json, params=params, **kwargs)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "BaseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
