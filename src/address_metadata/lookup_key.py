"""
Lookup keys for hierarchical address metadata.

A lookup key is the path of an address through the region hierarchy
(country, admin area, locality, dependent locality). Its prefixes render as
``data/US``, ``data/US/CA`` and so on, which are both rule cache keys and
the tails of download URLs.
"""

from typing import Optional

from .enums import AddressField
from .exceptions import ContractViolationError
from .models import AddressData


HIERARCHY: tuple[AddressField, ...] = (
    AddressField.COUNTRY,
    AddressField.ADMIN_AREA,
    AddressField.LOCALITY,
    AddressField.DEPENDENT_LOCALITY,
)

KEY_PREFIX = "data"
KEY_DELIMITER = "/"
UNKNOWN_REGION = "ZZ"


class LookupKey:
    """
    Hierarchical key built from an address.

    Values are contiguous from the country level: the first empty field
    ends the key, and so does a value containing the path delimiter.
    """

    def __init__(self) -> None:
        self._nodes: dict[AddressField, str] = {}

    def from_address(self, address: AddressData) -> "LookupKey":
        """
        Replace the key's values with those of an address.

        Args:
            address: Address to read the hierarchy fields from

        Returns:
            The key itself, for chaining
        """
        self._nodes = {}

        if not address.region_code:
            self._nodes[AddressField.COUNTRY] = UNKNOWN_REGION
            return self

        for address_field in HIERARCHY:
            value = address.get_field_value(address_field)
            if not value or KEY_DELIMITER in value:
                break
            self._nodes[address_field] = value

        return self

    def from_lookup_key(self, parent: "LookupKey", child_node: str) -> "LookupKey":
        """
        Replace the key's values with ``parent`` extended by one level.

        Raises:
            ContractViolationError: If parent is at the deepest level or
                child_node is not a single path segment
        """
        child_depth = parent.get_depth() + 1
        if child_depth >= len(HIERARCHY):
            raise ContractViolationError(
                code="depth_out_of_range",
                message="Parent key is already at the deepest hierarchy level",
                details={"parent": parent.to_key_string(parent.get_depth())},
            )
        if not child_node or KEY_DELIMITER in child_node:
            raise ContractViolationError(
                code="invalid_key_node",
                message=f"Invalid lookup key node: {child_node!r}",
                details={"node": child_node},
            )

        self._nodes = dict(parent._nodes)
        self._nodes[HIERARCHY[child_depth]] = child_node
        return self

    def to_key_string(self, max_depth: int) -> str:
        """
        Render the key down to ``max_depth`` as a slash-delimited path.

        Raises:
            ContractViolationError: If max_depth is outside the hierarchy
        """
        if not 0 <= max_depth < len(HIERARCHY):
            raise ContractViolationError(
                code="depth_out_of_range",
                message=f"Key depth {max_depth} is outside the hierarchy",
                details={"max_depth": max_depth},
            )

        key_string = KEY_PREFIX
        for address_field in HIERARCHY[:max_depth + 1]:
            value = self._nodes.get(address_field)
            if value is None:
                break
            key_string += KEY_DELIMITER + value
        return key_string

    def get_region_code(self) -> str:
        """
        Get the country-level value.

        Raises:
            ContractViolationError: If the key was never loaded
        """
        region_code = self._nodes.get(AddressField.COUNTRY)
        if region_code is None:
            raise ContractViolationError(
                code="empty_lookup_key",
                message="Lookup key has not been loaded from an address",
            )
        return region_code

    def get_depth(self) -> int:
        """
        Get the depth of the deepest value (0 for country only).

        Raises:
            ContractViolationError: If the key was never loaded
        """
        if not self._nodes:
            raise ContractViolationError(
                code="empty_lookup_key",
                message="Lookup key has not been loaded from an address",
            )
        return len(self._nodes) - 1

    def get_value(self, address_field: AddressField) -> Optional[str]:
        return self._nodes.get(address_field)

    def __repr__(self) -> str:
        if not self._nodes:
            return "LookupKey()"
        return f"LookupKey({self.to_key_string(len(self._nodes) - 1)!r})"

    @classmethod
    def for_address(cls, address: AddressData) -> "LookupKey":
        return cls().from_address(address)


def get_depth_of_key_string(key: str) -> int:
    """Depth of a rendered key string: ``data/US`` is 0, ``data/US/CA`` is 1."""
    return key.count(KEY_DELIMITER) - 1


class LookupKeyUtil:
    """Maps key strings to download URLs under a fixed base URL."""

    def __init__(self, base_url: str) -> None:
        """
        Initialize the mapper.

        Args:
            base_url: Base URL, which must end with '/'

        Raises:
            ContractViolationError: If base_url is empty or lacks the trailing '/'
        """
        if not base_url or not base_url.endswith("/"):
            raise ContractViolationError(
                code="invalid_base_url",
                message=f"Base URL must end with '/': {base_url!r}",
                details={"base_url": base_url},
            )
        self._base_url = base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_url_for_key(self, key: str) -> str:
        return self._base_url + key

    def get_key_for_url(self, url: str) -> str:
        """Strip the base URL, returning '' for URLs outside it."""
        if not self.is_data_url(url):
            return ""
        return url[len(self._base_url):]

    def is_data_url(self, url: str) -> bool:
        return url.startswith(self._base_url)
