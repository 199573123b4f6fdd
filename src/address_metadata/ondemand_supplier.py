"""
On-demand supplier: fetches the rules of each lookup as it is needed.

Each supply call works out which levels of the key are missing from the
rule cache, retrieves them concurrently and assembles the hierarchy once
every retrieval has completed. Rules are cached under the id found in the
retrieved data, which the server may have normalized, so two spellings of
the same region share one Rule.
"""

import asyncio
from types import MappingProxyType
from typing import Mapping, Optional

from . import region_data_constants
from .event_logger import EventLogger
from .lookup_key import LookupKey, get_depth_of_key_string
from .retriever import Retriever
from .rule import DEFAULT_RULE, Rule
from .supplier import RuleHierarchy, SupplyResult


COMPONENT = "ondemand_supplier"

# Returned by the server for a key it has no data for
EMPTY_DATA = "{}"


class OndemandSupplier:
    """Supplier that retrieves rules per lookup and caches them forever."""

    def __init__(
        self,
        retriever: Retriever,
        default_rule: Rule = DEFAULT_RULE,
        logger: Optional[EventLogger] = None,
    ) -> None:
        """
        Initialize the supplier.

        Args:
            retriever: Source of the per-key rule documents
            default_rule: Rule that country rules are layered on
            logger: Optional event logger
        """
        self._retriever = retriever
        self._default_rule = default_rule
        self._logger = logger
        self._rule_cache: dict[str, Rule] = {}

    @property
    def rule_cache(self) -> Mapping[str, Rule]:
        """Read-only view of the cached rules, keyed by rule id."""
        return MappingProxyType(self._rule_cache)

    async def close(self) -> None:
        """Close the retriever and its downloader."""
        await self._retriever.close()

    async def supply(self, lookup_key: LookupKey) -> SupplyResult:
        """
        Resolve the rule hierarchy of a lookup key.

        Args:
            lookup_key: Key built from the address being processed

        Returns:
            SupplyResult; success is False if any needed level could not be
            retrieved or parsed. Levels the server has no data for stay None.
        """
        hierarchy = RuleHierarchy()
        pending: set[str] = set()
        region_code = lookup_key.get_region_code()

        if region_data_constants.is_supported(region_code):
            max_depth = min(
                lookup_key.get_depth(),
                region_data_constants.get_max_lookup_key_depth(region_code),
            )
            for depth in range(max_depth + 1):
                key = lookup_key.to_key_string(depth)
                cached = self._rule_cache.get(key)
                if cached is not None:
                    hierarchy[depth] = cached
                else:
                    pending.add(key)

        if not pending:
            return SupplyResult(success=True, lookup_key=lookup_key, hierarchy=hierarchy)

        success = True
        tasks = [asyncio.ensure_future(self._retriever.retrieve(key)) for key in sorted(pending)]
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                pending.discard(result.key)
                if not self._load(result.success, result.key, result.data, hierarchy):
                    success = False
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        return SupplyResult(success=success, lookup_key=lookup_key, hierarchy=hierarchy)

    def _load(self, retrieved: bool, key: str, data: str, hierarchy: RuleHierarchy) -> bool:
        """Parse one retrieved document into the cache and the hierarchy."""
        if not retrieved:
            return False

        if data == EMPTY_DATA:
            return True

        depth = get_depth_of_key_string(key)

        rule = Rule()
        if depth == 0:
            # Country rules inherit from the default rule
            rule.copy_from(self._default_rule)

        if not rule.parse_serialized_rule(data):
            if self._logger:
                self._logger.log_error(
                    COMPONENT, "Failed to parse rule", additional_data={"key": key}
                )
            return False

        # The id may differ from the requested key when the server resolved an alias
        cached = self._rule_cache.setdefault(rule.id, rule)
        if cached is not rule and self._logger:
            self._logger.debug(
                COMPONENT,
                "Rule already cached under its id",
                {"key": key, "id": rule.id},
            )
        hierarchy[depth] = cached
        return True
