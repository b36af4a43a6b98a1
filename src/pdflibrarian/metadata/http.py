# ABOUTME: Async HTTP client abstraction for metadata source calls.
# ABOUTME: Wraps httpx.AsyncClient with a bounded timeout and an injectable transport for tests.

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from pdflibrarian.metadata.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class MetadataFetchError(Exception):
    """Raised when an HTTP request to a metadata source fails."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for the GET operations metadata sources need."""

    async def get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...

    async def get_text(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str: ...


class LibrarianHttpClient:
    """HTTP client for metadata API calls.

    Wraps a single httpx.AsyncClient, which is safe to share between the
    concurrently running sources of one fetch. Every request carries the
    configured timeout; there are no retries, a failed request simply raises
    MetadataFetchError for the caller to absorb.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": user_agent},
            "timeout": timeout,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> "LibrarianHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a GET request and decode the JSON body.

        Raises:
            MetadataFetchError: On transport errors, timeouts, non-2xx status,
                or a body that is not valid JSON.
        """
        response = await self._get(url, params, headers)
        try:
            return response.json()
        except (ValueError, RecursionError) as exc:
            raise MetadataFetchError(f"Invalid JSON from {url}: {exc}") from exc

    async def get_text(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """Send a GET request and return the decoded text body.

        Raises:
            MetadataFetchError: On transport errors, timeouts, or non-2xx status.
        """
        response = await self._get(url, params, headers)
        return response.text

    async def _get(
        self,
        url: str,
        params: dict[str, str] | None,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise MetadataFetchError(f"Request failed: {url}: {exc}") from exc

        if not response.is_success:
            raise MetadataFetchError(f"HTTP {response.status_code} from {url}")

        logger.debug("HTTP %d from %s", response.status_code, response.url)
        return response
