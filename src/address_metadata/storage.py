"""
Key/value storage backends for downloaded metadata.

Storage is an opaque string-to-string store. Lookups never raise for a
missing key; they return a failed StorageResult instead.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional, Protocol

from .exceptions import PersistenceError
from .models import StorageResult


class Storage(Protocol):
    """Capability interface for durable key/value storage."""

    async def put(self, key: str, data: str) -> None:
        ...

    async def get(self, key: str) -> StorageResult:
        ...


class NullStorage:
    """Storage that forgets everything it is given."""

    async def put(self, key: str, data: str) -> None:
        return None

    async def get(self, key: str) -> StorageResult:
        return StorageResult(success=False, key=key, data=None)


class InMemoryStorage:
    """Storage backed by a dictionary, lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def put(self, key: str, data: str) -> None:
        self._data[key] = data

    async def get(self, key: str) -> StorageResult:
        data = self._data.get(key)
        return StorageResult(success=data is not None, key=key, data=data)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage:
    """
    Storage persisted as one JSON object in a file.

    The file is read lazily on first access and rewritten on every put.
    """

    VERSION = 1

    def __init__(self, file_path: Path) -> None:
        """
        Initialize the file storage.

        Args:
            file_path: Path to the storage file (JSON format)
        """
        self._file_path = Path(file_path)
        self._data: Optional[dict[str, str]] = None
        self._lock = asyncio.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> dict[str, str]:
        """
        Load all entries from the file.

        Returns:
            Stored entries; empty if the file does not exist yet

        Raises:
            PersistenceError: If the file cannot be read or parsed
        """
        if not self._file_path.exists():
            self._data = {}
            return {}

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                raw_data = json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError(
                code="parse_error",
                message=f"Failed to parse storage file: {e}",
                details={"file_path": str(self._file_path)},
            )
        except OSError as e:
            raise PersistenceError(
                code="io_error",
                message=f"Failed to read storage file: {e}",
                details={"file_path": str(self._file_path)},
            )

        entries = raw_data.get("entries") if isinstance(raw_data, dict) else None
        if not isinstance(entries, dict):
            raise PersistenceError(
                code="parse_error",
                message="Storage file has no entries object",
                details={"file_path": str(self._file_path)},
            )

        self._data = {k: v for k, v in entries.items() if isinstance(v, str)}
        return dict(self._data)

    def save(self) -> None:
        """
        Write all entries to the file.

        Raises:
            PersistenceError: If the file cannot be written
        """
        output_data = {
            "version": self.VERSION,
            "entries": self._data or {},
        }

        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self._file_path, "w", encoding="utf-8") as f:
                json.dump(output_data, f, indent=2, sort_keys=True, ensure_ascii=False)
        except OSError as e:
            raise PersistenceError(
                code="io_error",
                message=f"Failed to write storage file: {e}",
                details={"file_path": str(self._file_path)},
            )

    async def put(self, key: str, data: str) -> None:
        async with self._lock:
            if self._data is None:
                self.load()
            self._data[key] = data
            self.save()

    async def get(self, key: str) -> StorageResult:
        async with self._lock:
            if self._data is None:
                self.load()
            data = self._data.get(key)
        return StorageResult(success=data is not None, key=key, data=data)
