"""
Region trees for presenting the sub-regions of a country.
"""

from typing import Optional


class RegionData:
    """A region with its display name and its ordered sub-regions."""

    def __init__(self, key: str, name: Optional[str] = None, parent: Optional["RegionData"] = None) -> None:
        self._key = key
        self._name = key if name is None else name
        self._parent = parent
        self._sub_regions: list[RegionData] = []

    @property
    def key(self) -> str:
        """Key of the region within its parent, e.g. 'CA' under 'US'."""
        return self._key

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional["RegionData"]:
        return self._parent

    @property
    def sub_regions(self) -> list["RegionData"]:
        return list(self._sub_regions)

    def has_parent(self) -> bool:
        return self._parent is not None

    def add_sub_region(self, key: str, name: str) -> "RegionData":
        sub_region = RegionData(key, name, parent=self)
        self._sub_regions.append(sub_region)
        return sub_region

    def __repr__(self) -> str:
        return f"RegionData(key={self._key!r}, name={self._name!r}, sub_regions={len(self._sub_regions)})"
