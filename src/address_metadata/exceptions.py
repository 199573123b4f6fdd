"""
Exception classes for the address metadata system.

All exceptions inherit from AddressMetadataError and provide structured
error information with codes, messages, and optional details.

Missing or malformed metadata is never raised: it is reported through
result objects. Exceptions are reserved for caller bugs and for local
resources (files, configuration) that cannot be used.
"""

from typing import Optional


class AddressMetadataError(Exception):
    """Base exception for all address metadata errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ContractViolationError(AddressMetadataError):
    """Raised when a caller breaks a precondition (bad depth, unloaded key, duplicate rule id)."""

    pass


class NetworkError(AddressMetadataError):
    """Raised when a downloader is configured with an unusable endpoint."""

    pass


class PersistenceError(AddressMetadataError):
    """Raised when persistence operations fail (file I/O, unreadable cache file)."""

    pass


class ConfigurationError(AddressMetadataError):
    """Raised when configuration cannot be read or is invalid."""

    pass
