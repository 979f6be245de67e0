"""HTTP access to the AISHub web service."""

from typing import Optional

import httpx
import structlog

from .query_builder import redact_query
from ..exceptions import FetchError, RateLimitedError

logger = structlog.get_logger(__name__)

TOO_FREQUENT_RESPONSE = b"Too frequent requests!"


class AISHubClient:
    """Performs one bounded GET per polling cycle."""

    def __init__(self, http_client: Optional[httpx.Client] = None):
        self._client = http_client or httpx.Client(follow_redirects=True)

    def fetch(self, url: str, timeout: float) -> bytes:
        """
        Fetch the raw response body for ``url``.

        Args:
            url: Fully built AISHub query URL
            timeout: Upper bound in seconds for the whole request

        Returns:
            bytes: The undecoded response body

        Raises:
            RateLimitedError: If AISHub reports too frequent requests
            FetchError: On transport failure, timeout or non-success status
        """
        safe_url = redact_query(url)
        try:
            response = self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as e:
            raise FetchError(f"Request to {safe_url} timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {safe_url} failed: {type(e).__name__}: {e}") from e

        if response.is_error:
            raise FetchError(
                f"AISHub returned HTTP {response.status_code} for {safe_url}",
                status_code=response.status_code,
            )

        body = response.content
        if body.strip() == TOO_FREQUENT_RESPONSE:
            raise RateLimitedError("AISHub rejected the request: too frequent requests",
                                   status_code=response.status_code)

        logger.debug("AISHub response received", url=safe_url, size_bytes=len(body))
        return body

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AISHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
