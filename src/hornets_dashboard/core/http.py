"""
Shared async HTTP plumbing for upstream services (BallDontLie, Auth0).

BaseApiClient wraps one lazily created ``httpx.AsyncClient`` with:

- request spacing via RateLimiter (BallDontLie enforces per-minute quotas)
- retries: 429 waits for ``Retry-After``; 5xx and transport errors back off
  exponentially; other 4xx fail immediately
- a single error type, ExternalAPIError, for everything that goes wrong

Subclasses set BASE_URL / SERVICE_NAME and expose typed methods built on
``_get`` and ``_post``. Tests pass ``transport=httpx.MockTransport(...)``.
"""

import asyncio
import logging
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Longest we will sleep on a single 429 before trying again
MAX_RATE_LIMIT_WAIT = 30
DEFAULT_RETRY_AFTER = 60


class ExternalAPIError(Exception):
    """An upstream call failed; ``status_code`` is what the caller should surface."""

    def __init__(
        self,
        message: str,
        code: str = "EXTERNAL_API_ERROR",
        status_code: int = 502,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class RateLimitError(ExternalAPIError):
    """Upstream kept answering 429 after every retry."""

    def __init__(self, message: str, retry_after: int = DEFAULT_RETRY_AFTER):
        super().__init__(message, code="RATE_LIMITED", status_code=429)
        self.retry_after = retry_after


class RateLimiter:
    """Spaces requests at least ``60 / requests_per_minute`` seconds apart."""

    def __init__(self, requests_per_minute: int = 600):
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self.interval = 60.0 / requests_per_minute
        self._next_allowed = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            wait = self._next_allowed - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_allowed = time.monotonic() + self.interval


def _retry_after_seconds(response: httpx.Response) -> int:
    try:
        return int(response.headers.get("retry-after", DEFAULT_RETRY_AFTER))
    except ValueError:
        return DEFAULT_RETRY_AFTER


class BaseApiClient:
    """
    Rate-limited, retrying JSON client for one upstream service.

    One instance lives for the whole process (see api.dependencies) and is
    closed at shutdown; the CLI uses it as an async context manager:

        async with BallDontLieNBA(api_key) as client:
            team = await client.find_team("Hornets")
    """

    BASE_URL: str = ""
    SERVICE_NAME: str = "upstream"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        requests_per_minute: int = 600,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._headers = dict(headers or {})
        self._params = dict(params or {})
        self._rate_limiter = RateLimiter(requests_per_minute)
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying httpx client, (re)created on demand."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._request("GET", path, params=params, headers=headers)

    async def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._request("POST", path, params=params, json=json, headers=headers)

    def _decode(self, response: httpx.Response, path: str) -> dict[str, Any]:
        """Decode a successful response; anything but a JSON object is an upstream failure."""
        try:
            body = response.json()
        except ValueError as e:
            raise ExternalAPIError(f"{self.SERVICE_NAME} returned invalid JSON for {path}") from e
        if not isinstance(body, dict):
            raise ExternalAPIError(
                f"{self.SERVICE_NAME} returned {type(body).__name__} instead of an object for {path}"
            )
        return body

    async def _backoff(self, path: str, attempt: int, reason: str) -> None:
        wait = 2 ** (attempt - 1)
        logger.warning(f"{self.SERVICE_NAME} {path} failed ({reason}), retry {attempt} in {wait}s")
        await asyncio.sleep(wait)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request, retrying where it can help, and decode the JSON body.

        Raises:
            RateLimitError: Still rate limited on the last attempt
            ExternalAPIError: Any other failure (4xx at once, 5xx/network on the last
                attempt, or a 2xx body that is not a JSON object)
        """
        query = {**self._params, **(params or {})}

        for attempt in range(1, self._max_retries + 1):
            last_attempt = attempt == self._max_retries
            await self._rate_limiter.acquire()

            try:
                response = await self.client.request(
                    method, path, params=query, json=json, headers=headers
                )
            except httpx.RequestError as e:
                if last_attempt:
                    raise ExternalAPIError(f"{self.SERVICE_NAME} request to {path} failed: {e}") from e
                await self._backoff(path, attempt, type(e).__name__)
                continue

            if response.status_code == 429:
                retry_after = _retry_after_seconds(response)
                if last_attempt:
                    raise RateLimitError(
                        f"{self.SERVICE_NAME} rate limit exceeded. Try again in {retry_after} seconds.",
                        retry_after=retry_after,
                    )
                wait = min(retry_after, MAX_RATE_LIMIT_WAIT)
                logger.warning(f"Rate limited by {self.SERVICE_NAME}, waiting {wait}s")
                await asyncio.sleep(wait)
                continue

            if response.is_success:
                return self._decode(response, path)

            error = ExternalAPIError(
                f"HTTP {response.status_code} for {path}: {response.text[:200]}",
                status_code=response.status_code,
            )
            if response.is_client_error or last_attempt:
                raise error
            await self._backoff(path, attempt, f"HTTP {response.status_code}")

        raise ExternalAPIError(f"{self.SERVICE_NAME} request to {path} failed after retries")
