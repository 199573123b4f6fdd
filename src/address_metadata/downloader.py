"""
Downloaders for address metadata.

This module provides an async HTTP downloader with TLS enforcement and an
in-memory downloader serving fixed payloads. Transport problems never
raise: they come back as failed DownloadResults carrying a DownloadError.
"""

import time
from typing import Optional, Protocol
from urllib.parse import urlparse

import httpx

from .enums import DownloadErrorCode
from .exceptions import NetworkError
from .models import DownloadError, DownloadResult


class Downloader(Protocol):
    """Capability interface for fetching one URL."""

    async def download(self, url: str) -> DownloadResult:
        ...

    async def close(self) -> None:
        ...


def _elapsed_ms(start_time: float) -> float:
    """Calculate elapsed time in milliseconds."""
    return (time.perf_counter() - start_time) * 1000


def _failure(
    url: str,
    code: DownloadErrorCode,
    message: str,
    start_time: float,
    http_status_code: Optional[int] = None,
) -> DownloadResult:
    return DownloadResult(
        success=False,
        url=url,
        data=None,
        error=DownloadError(code=code, message=message, http_status_code=http_status_code),
        response_time_ms=_elapsed_ms(start_time),
    )


class HTTPDownloader:
    """
    Async HTTP downloader with TLS enforcement.

    Fetches metadata documents with httpx. Only HTTPS URLs are accepted
    unless ``require_tls`` is switched off.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        require_tls: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the downloader.

        Args:
            timeout: Request timeout in seconds
            require_tls: Reject URLs that do not use HTTPS
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self._timeout = timeout
        self._require_tls = require_tls
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HTTPDownloader":
        """Async context manager entry."""
        self._client = self._create_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def is_open(self) -> bool:
        """Whether an HTTP client is currently held."""
        return self._client is not None

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=True,  # TLS certificate verification enforced
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    def validate_url(self, url: str) -> None:
        """
        Validate that the URL uses HTTPS when TLS is required.

        Raises:
            NetworkError: If the URL does not use HTTPS
        """
        parsed = urlparse(url)
        if self._require_tls and parsed.scheme.lower() != "https":
            raise NetworkError(
                code=DownloadErrorCode.TLS_ERROR.value,
                message=f"Metadata URL must use HTTPS: {url}",
                details={"url": url, "scheme": parsed.scheme},
            )

    async def download(self, url: str) -> DownloadResult:
        """
        Download one document.

        Args:
            url: URL to fetch

        Returns:
            DownloadResult with the response body on HTTP 200
        """
        start_time = time.perf_counter()

        try:
            self.validate_url(url)
        except NetworkError as e:
            return _failure(url, DownloadErrorCode.TLS_ERROR, e.message, start_time)

        # Ensure client is initialized
        if self._client is None:
            self._client = self._create_client()

        try:
            response = await self._client.get(url, headers={"Accept": "application/json"})
        except httpx.TimeoutException:
            return _failure(
                url,
                DownloadErrorCode.TIMEOUT,
                f"Request timed out after {self._timeout}s",
                start_time,
            )
        except httpx.ConnectError as e:
            error_msg = str(e)
            if "ssl" in error_msg.lower() or "certificate" in error_msg.lower():
                return _failure(
                    url, DownloadErrorCode.TLS_ERROR, f"TLS connection error: {error_msg}", start_time
                )
            return _failure(
                url, DownloadErrorCode.NETWORK_ERROR, f"Connection error: {error_msg}", start_time
            )
        except httpx.HTTPError as e:
            return _failure(url, DownloadErrorCode.NETWORK_ERROR, f"HTTP error: {e}", start_time)

        status_code = response.status_code

        if status_code == 200:
            return DownloadResult(
                success=True,
                url=url,
                data=response.text,
                error=None,
                response_time_ms=_elapsed_ms(start_time),
            )

        if status_code == 404:
            return _failure(url, DownloadErrorCode.NOT_FOUND, "Not found", start_time, 404)

        if status_code >= 500:
            return _failure(
                url,
                DownloadErrorCode.SERVER_ERROR,
                f"Server error: {status_code}",
                start_time,
                status_code,
            )

        return _failure(
            url,
            DownloadErrorCode.UNEXPECTED_STATUS,
            f"Unexpected HTTP status: {status_code}",
            start_time,
            status_code,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


class InMemoryDownloader:
    """
    Downloader serving a fixed mapping of URL to payload.

    Unknown URLs fail. Every requested URL is recorded, which makes the
    downloader convenient for offline use and for tests.
    """

    def __init__(self, documents: Optional[dict[str, str]] = None) -> None:
        self._documents: dict[str, str] = dict(documents or {})
        self._requested_urls: list[str] = []

    @property
    def requested_urls(self) -> list[str]:
        return self._requested_urls.copy()

    def add_document(self, url: str, data: str) -> None:
        self._documents[url] = data

    async def download(self, url: str) -> DownloadResult:
        self._requested_urls.append(url)
        data = self._documents.get(url)
        if data is None:
            return DownloadResult(
                success=False,
                url=url,
                data=None,
                error=DownloadError(
                    code=DownloadErrorCode.UNKNOWN_URL,
                    message=f"No document for URL: {url}",
                ),
            )
        return DownloadResult(success=True, url=url, data=data)

    async def close(self) -> None:
        pass
