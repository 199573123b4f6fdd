"""
Validating wrapper over durable storage.

Every stored payload is prefixed with the time it was stored and an MD5
checksum of the payload::

    timestamp=1400000000
    checksum=dd63dafcbd4d5b28badfcaf86fb6fcdb
    {"id": "data/US", ...}

On lookup, corrupted entries are reported as missing. Stale entries are
reported as missing too, but their payload is still handed back so that a
caller may fall back to it when a fresh download fails.
"""

import hashlib
import re
import time
from typing import Callable, Optional

from .event_logger import EventLogger
from .models import StorageResult
from .storage import Storage


TIMESTAMP_PREFIX = "timestamp="
CHECKSUM_PREFIX = "checksum="
HEADER_SEPARATOR = "\n"

# 30 days * 24 hours * 60 minutes * 60 seconds
ONE_MONTH_SECONDS = 30 * 24 * 60 * 60

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")

COMPONENT = "validating_storage"


def compute_checksum(data: str) -> str:
    """Hex MD5 digest of the UTF-8 encoded data."""
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def wrap(data: str, timestamp: int) -> str:
    """Prefix data with a timestamp and a checksum header."""
    return (
        f"{TIMESTAMP_PREFIX}{timestamp}{HEADER_SEPARATOR}"
        f"{CHECKSUM_PREFIX}{compute_checksum(data)}{HEADER_SEPARATOR}"
        f"{data}"
    )


def _unwrap_header(prefix: str, data: str) -> tuple[Optional[str], str]:
    """
    Split off one ``<prefix><value>\\n`` header.

    Returns:
        (value, rest) if the header is present, else (None, data) unchanged
    """
    if not data.startswith(prefix):
        return None, data
    separator = data.find(HEADER_SEPARATOR, len(prefix))
    if separator == -1:
        return None, data
    return data[len(prefix):separator], data[separator + 1:]


def _parse_timestamp(value: str) -> int:
    # Values without a leading number read as 0, i.e. the epoch
    match = _LEADING_INTEGER.match(value)
    return int(match.group(1)) if match else 0


def unwrap_timestamp(
    data: str,
    now: float,
    staleness_threshold_seconds: float = ONE_MONTH_SECONDS,
) -> tuple[bool, str]:
    """
    Strip the timestamp header and check that the data is recent.

    Args:
        data: Wrapped data
        now: Current time in seconds since the epoch
        staleness_threshold_seconds: Maximum accepted age

    Returns:
        (is_fresh, rest). The header is removed from rest whenever it is
        present, even if the timestamp fails the check.
    """
    if now < 0:
        return False, data

    value, rest = _unwrap_header(TIMESTAMP_PREFIX, data)
    if value is None:
        return False, rest

    timestamp = _parse_timestamp(value)
    if timestamp < 0:
        return False, rest

    age_seconds = now - timestamp
    return 0 <= age_seconds < staleness_threshold_seconds, rest


def unwrap_checksum(data: str) -> tuple[bool, str]:
    """
    Strip the checksum header and verify it against the remaining data.

    Returns:
        (is_valid, rest)
    """
    value, rest = _unwrap_header(CHECKSUM_PREFIX, data)
    if value is None:
        return False, rest
    return value == compute_checksum(rest), rest


class ValidatingStorage:
    """Storage decorator adding timestamp and checksum validation."""

    def __init__(
        self,
        storage: Storage,
        staleness_threshold_seconds: float = ONE_MONTH_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: Optional[EventLogger] = None,
    ) -> None:
        """
        Initialize the wrapper.

        Args:
            storage: Wrapped storage holding the enveloped payloads
            staleness_threshold_seconds: Age at which entries become stale
            clock: Source of the current time in seconds
            logger: Optional event logger
        """
        self._storage = storage
        self._staleness_threshold_seconds = staleness_threshold_seconds
        self._clock = clock
        self._logger = logger

    @property
    def staleness_threshold_seconds(self) -> float:
        return self._staleness_threshold_seconds

    async def put(self, key: str, data: str) -> None:
        await self._storage.put(key, wrap(data, int(self._clock())))

    async def get(self, key: str) -> StorageResult:
        """
        Look up and unwrap an entry.

        Returns:
            success with the payload for fresh intact entries; failure with
            the payload for stale intact entries; failure without data for
            missing or corrupted entries
        """
        result = await self._storage.get(key)
        if not result.success or result.data is None:
            return StorageResult(success=False, key=key, data=None)

        is_fresh, data = unwrap_timestamp(
            result.data, self._clock(), self._staleness_threshold_seconds
        )
        is_intact, data = unwrap_checksum(data)

        if not is_intact:
            if self._logger:
                self._logger.debug(COMPONENT, "Discarding corrupted entry", {"key": key})
            return StorageResult(success=False, key=key, data=None)

        if not is_fresh:
            if self._logger:
                self._logger.debug(COMPONENT, "Entry is stale", {"key": key})
            return StorageResult(success=False, key=key, data=data)

        return StorageResult(success=True, key=key, data=data)
