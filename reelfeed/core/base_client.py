import asyncio
from typing import Any

import httpx
from loguru import logger


class BaseClient:
    """
    Base asynchronous HTTP client with retry/backoff and logging.

    Server errors and transport errors are retried; 4xx responses are raised
    immediately since repeating them cannot succeed.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_retries: int = 3,
        headers: dict[str, str] | None = None,
        backoff: float = 0.5,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.headers = headers or {}
        self.backoff = backoff
        self._client: httpx.AsyncClient | None = None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create the shared httpx.AsyncClient."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
            )
        return self._client

    async def close(self):
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        if isinstance(exc, httpx.HTTPStatusError):
            return exc.response.status_code >= 500 or exc.response.status_code == 429
        return isinstance(exc, httpx.RequestError)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        client = await self.get_client()
        tries = max(1, self.max_retries)

        for attempt in range(1, tries + 1):
            try:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response
            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                if attempt >= tries or not self._is_retryable(e):
                    logger.error(f"{method} {url} failed after {attempt} attempt(s): {e}")
                    raise
                wait_time = self.backoff * (2 ** (attempt - 1))
                logger.warning(f"{method} {url} failed: {e}. Retrying in {wait_time}s ({attempt}/{tries})")
                await asyncio.sleep(wait_time)

        raise httpx.RequestError(f"{method} {url} failed for unknown reasons")

    async def get(self, url: str, params: dict[str, Any] | None = None, **kwargs) -> Any:
        """Perform a GET request and return the decoded JSON body."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = await self._request("GET", url, params=params, **kwargs)
        return response.json()
