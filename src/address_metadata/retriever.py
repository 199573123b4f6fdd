"""
Retriever: storage first, then download.

For one key the retriever consults the validating storage. Fresh data is
returned immediately. Otherwise the key is downloaded once and a successful
download is written back. If the download fails but storage held a stale
copy, that copy is returned as a success. Storage errors are logged and
treated as a miss or a skipped write-back. There is no retry at this level.
"""

import time
from typing import Callable, Optional

from .downloader import Downloader
from .event_logger import EventLogger
from .exceptions import PersistenceError
from .lookup_key import LookupKeyUtil
from .models import RetrieveResult, StorageResult
from .storage import Storage
from .validating_storage import ONE_MONTH_SECONDS, ValidatingStorage


COMPONENT = "retriever"


class Retriever:
    """Retrieves metadata documents by key through storage and download."""

    def __init__(
        self,
        base_url: str,
        downloader: Downloader,
        storage: Storage,
        staleness_threshold_seconds: float = ONE_MONTH_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: Optional[EventLogger] = None,
    ) -> None:
        """
        Initialize the retriever.

        Args:
            base_url: URL that keys are appended to; must end with '/'
            downloader: Downloader used on storage misses
            storage: Durable storage; wrapped with timestamp and checksum validation
            staleness_threshold_seconds: Age at which stored entries are refreshed
            clock: Source of the current time in seconds
            logger: Optional event logger

        Raises:
            ContractViolationError: If base_url does not end with '/'
        """
        self._lookup_key_util = LookupKeyUtil(base_url)
        self._downloader = downloader
        self._storage = ValidatingStorage(
            storage,
            staleness_threshold_seconds=staleness_threshold_seconds,
            clock=clock,
            logger=logger,
        )
        self._logger = logger

    async def close(self) -> None:
        """Close the downloader."""
        await self._downloader.close()

    async def retrieve(self, key: str) -> RetrieveResult:
        """
        Retrieve the document stored under a key.

        Args:
            key: Key string such as 'data/US' or 'data/CH'

        Returns:
            RetrieveResult; data is '' when nothing could be obtained
        """
        try:
            stored = await self._storage.get(key)
        except PersistenceError as e:
            # An unreadable store counts as a miss without stale data
            if self._logger:
                self._logger.log_error(
                    COMPONENT, "Reading stored data failed", error=e, additional_data={"key": key}
                )
            stored = StorageResult(success=False, key=key)

        if stored.success:
            if self._logger:
                self._logger.debug(COMPONENT, "Using stored data", {"key": key})
            return RetrieveResult(success=True, key=key, data=stored.data or "")

        url = self._lookup_key_util.get_url_for_key(key)
        if self._logger:
            self._logger.debug(COMPONENT, "Downloading", {"key": key, "url": url})

        downloaded = await self._downloader.download(url)

        if downloaded.success and downloaded.data is not None:
            try:
                await self._storage.put(key, downloaded.data)
            except PersistenceError as e:
                if self._logger:
                    self._logger.log_error(
                        COMPONENT, "Writing back downloaded data failed", error=e, additional_data={"key": key}
                    )
            return RetrieveResult(success=True, key=key, data=downloaded.data)

        if stored.data:
            if self._logger:
                self._logger.warn(
                    COMPONENT,
                    "Download failed, using stale stored data",
                    {"key": key, "url": url},
                )
            return RetrieveResult(success=True, key=key, data=stored.data)

        if self._logger:
            error = downloaded.error
            self._logger.log_error(
                COMPONENT,
                "Download failed and no stored data is available",
                request_url=url,
                response_status_code=error.http_status_code if error else None,
                additional_data={
                    "key": key,
                    "error_code": error.code.value if error else None,
                },
            )
        return RetrieveResult(success=False, key=key, data="")
