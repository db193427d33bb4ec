"""HTTP session for the DSBmobile service.

DSBSession wraps an httpx.AsyncClient, classifies failures into transient
(retried) and permanent (raised immediately) errors, and retries transient
ones with tenacity.
"""

from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from dsbmobile.config import DSBConfig, get_config
from dsbmobile.errors import (
    DecodeError,
    PermanentError,
    RateLimitError,
    TransientError,
)
from dsbmobile.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Dalvik/2.1.0 (Linux; U; Android 8.0.0; SM-G930F Build/R16NW)",
    "Accept": "application/json, text/html, image/*;q=0.9, */*;q=0.8",
}


def _log_retry(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome else None
    logger.warning(
        "request_retry",
        attempt=state.attempt_number,
        error=str(error),
        type=type(error).__name__,
    )


class DSBSession:
    """Async HTTP transport with retry classification.

    If no client is given, one is created from the config and closed by
    aclose(). An injected client stays owned by the caller.
    """

    def __init__(
        self,
        config: DSBConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize DSBSession.

        Args:
            config: Timeout and retry settings. Defaults to get_config().
            client: Pre-built httpx client (tests pass one with a MockTransport).
        """
        self.config = config or get_config()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.config.request_timeout,
            follow_redirects=True,
            headers=DEFAULT_HEADERS,
        )

        logger.debug(
            "session_initialized",
            owns_client=self._owns_client,
            max_attempts=self.config.max_attempts,
        )

    async def post_json(self, url: str, body: dict[str, Any]) -> Any:
        """POST a JSON body and return the parsed JSON response.

        Raises:
            TransientError: If the request kept failing transiently.
            PermanentError: On a 4xx response.
            DecodeError: If the body is not JSON.
        """
        response = await self._request("POST", url, json=body)
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not JSON: {e}") from e

    async def get(self, url: str) -> httpx.Response:
        """GET a document; the caller reads .text or .content."""
        return await self._request("GET", url)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_fixed(self.config.retry_wait),
            retry=retry_if_exception_type(TransientError),
            before_sleep=_log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(method, url, **kwargs)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransientError(f"{method} {url} timed out: {e}") from e
        except httpx.TransportError as e:
            raise TransientError(f"{method} {url} failed: {e}") from e

        status = response.status_code
        if status == 429:
            raise RateLimitError(f"{method} {url} rate limited")
        if status >= 500:
            raise TransientError(f"{method} {url} returned {status}")
        if status >= 400:
            logger.error("request_rejected", method=method, url=url, status=status)
            raise PermanentError(f"{method} {url} returned {status}")

        logger.debug("request_completed", method=method, url=url, status=status)
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
            logger.debug("session_closed")
