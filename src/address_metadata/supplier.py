"""
Rule hierarchies and the supplier interface.

A supplier turns a LookupKey into a RuleHierarchy: one slot per hierarchy
level, each holding the cached Rule for that level or None. The rules in
a hierarchy are shared with the supplier's rule cache and must be treated
as read-only.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol

from .lookup_key import HIERARCHY, LookupKey
from .rule import Rule


class RuleHierarchy:
    """Fixed-size chain of rules, indexed by hierarchy depth."""

    SIZE = len(HIERARCHY)

    def __init__(self) -> None:
        self._rules: list[Optional[Rule]] = [None] * self.SIZE

    def __getitem__(self, depth: int) -> Optional[Rule]:
        return self._rules[depth]

    def __setitem__(self, depth: int, rule: Optional[Rule]) -> None:
        self._rules[depth] = rule

    def __iter__(self) -> Iterator[Optional[Rule]]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return self.SIZE

    @property
    def country_rule(self) -> Optional[Rule]:
        return self._rules[0]

    def has_data(self) -> bool:
        """A hierarchy without a country rule carries no usable data."""
        return self._rules[0] is not None

    def __repr__(self) -> str:
        ids = [rule.id if rule is not None else None for rule in self._rules]
        return f"RuleHierarchy({ids!r})"


@dataclass
class SupplyResult:
    """Outcome of resolving a lookup key."""

    success: bool
    lookup_key: LookupKey
    hierarchy: RuleHierarchy = field(default_factory=RuleHierarchy)


class Supplier(Protocol):
    """Capability interface for resolving rule hierarchies."""

    async def supply(self, lookup_key: LookupKey) -> SupplyResult:
        ...

    async def close(self) -> None:
        ...
