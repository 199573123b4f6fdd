"""
Data models for the address metadata system.

This module defines the address record, the field/problem map used both as
validation filter and as validation output, and the result objects handed
back by storage, downloaders, retrievers and loaders.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from .enums import AddressField, AddressProblem, DownloadErrorCode
from .exceptions import ContractViolationError


# Attribute names of the single-valued address fields
_FIELD_ATTRIBUTES: dict[AddressField, str] = {
    AddressField.COUNTRY: "region_code",
    AddressField.ADMIN_AREA: "administrative_area",
    AddressField.LOCALITY: "locality",
    AddressField.DEPENDENT_LOCALITY: "dependent_locality",
    AddressField.SORTING_CODE: "sorting_code",
    AddressField.POSTAL_CODE: "postal_code",
    AddressField.ORGANIZATION: "organization",
    AddressField.RECIPIENT: "recipient",
}


@dataclass
class AddressData:
    """A postal address as entered by a user."""

    region_code: str = ""  # CLDR region code, e.g. 'US'
    address_line: list[str] = field(default_factory=list)
    administrative_area: str = ""
    locality: str = ""
    dependent_locality: str = ""
    postal_code: str = ""
    sorting_code: str = ""
    language_code: str = ""  # BCP 47 tag, e.g. 'zh-Latn'
    organization: str = ""
    recipient: str = ""

    @staticmethod
    def is_repeated_field(address_field: AddressField) -> bool:
        """Check whether a field holds a list of lines instead of one value."""
        return address_field == AddressField.STREET_ADDRESS

    def get_field_value(self, address_field: AddressField) -> str:
        """
        Get the value of a single-valued field.

        Raises:
            ContractViolationError: If called for the street address field
        """
        if self.is_repeated_field(address_field):
            raise ContractViolationError(
                code="repeated_field",
                message="Street address is repeated, use get_repeated_field_value",
                details={"field": address_field.value},
            )
        return getattr(self, _FIELD_ATTRIBUTES[address_field])

    def get_repeated_field_value(self, address_field: AddressField) -> list[str]:
        """
        Get the lines of a repeated field.

        Raises:
            ContractViolationError: If called for a single-valued field
        """
        if not self.is_repeated_field(address_field):
            raise ContractViolationError(
                code="single_valued_field",
                message=f"{address_field.value} is not a repeated field",
                details={"field": address_field.value},
            )
        return self.address_line

    def set_field_value(self, address_field: AddressField, value) -> None:
        """Set a field; street address takes a list of lines."""
        if self.is_repeated_field(address_field):
            self.address_line = list(value)
        else:
            setattr(self, _FIELD_ATTRIBUTES[address_field], value)

    def is_field_empty(self, address_field: AddressField) -> bool:
        """
        Check whether a field is empty.

        Whitespace-only values count as empty. The street address is empty
        when every one of its lines is.
        """
        if self.is_repeated_field(address_field):
            return all(not line.strip() for line in self.address_line)
        return not self.get_field_value(address_field).strip()


class FieldProblemMap:
    """
    Set of (field, problem) pairs.

    Used as a filter of the problems a caller is interested in and as the
    collection of problems found by the validator. Adding a pair twice
    keeps a single copy; iteration follows insertion order.
    """

    def __init__(
        self,
        pairs: Optional[Iterable[tuple[AddressField, AddressProblem]]] = None,
    ) -> None:
        self._pairs: dict[tuple[AddressField, AddressProblem], None] = {}
        for address_field, problem in pairs or ():
            self.add(address_field, problem)

    def add(self, address_field: AddressField, problem: AddressProblem) -> None:
        self._pairs[(address_field, problem)] = None

    def clear(self) -> None:
        self._pairs.clear()

    def contains(self, address_field: AddressField, problem: AddressProblem) -> bool:
        return (address_field, problem) in self._pairs

    def has_problem(self, problem: AddressProblem) -> bool:
        """Check whether any field carries the given problem."""
        return any(p == problem for _, p in self._pairs)

    def problems_for(self, address_field: AddressField) -> list[AddressProblem]:
        return [p for f, p in self._pairs if f == address_field]

    def is_empty(self) -> bool:
        return not self._pairs

    def __contains__(self, pair: tuple[AddressField, AddressProblem]) -> bool:
        return pair in self._pairs

    def __iter__(self) -> Iterator[tuple[AddressField, AddressProblem]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldProblemMap):
            return NotImplemented
        return set(self._pairs) == set(other._pairs)

    def __repr__(self) -> str:
        items = ", ".join(f"{f.name}: {p.name}" for f, p in self._pairs)
        return f"FieldProblemMap({{{items}}})"


@dataclass
class StorageResult:
    """
    Result of a storage lookup.

    A failed lookup may still carry data: the validating wrapper hands back
    the payload of a stale entry so the retriever can fall back to it.
    """

    success: bool
    key: str
    data: Optional[str] = None


@dataclass
class DownloadError:
    """Error information from a failed download."""

    code: DownloadErrorCode
    message: str
    http_status_code: Optional[int] = None


@dataclass
class DownloadResult:
    """Result of a single download."""

    success: bool
    url: str
    data: Optional[str] = None
    error: Optional[DownloadError] = None
    response_time_ms: float = 0.0


@dataclass
class RetrieveResult:
    """Result of retrieving one key through storage and download."""

    success: bool
    key: str
    data: str = ""


@dataclass
class LoadResult:
    """Result of preloading every rule of a region."""

    success: bool
    region_code: str
    rule_count: int = 0


@dataclass
class ValidationResult:
    """Outcome of validating one address."""

    success: bool  # False when the rule data could not be obtained
    address: AddressData
    problems: FieldProblemMap
