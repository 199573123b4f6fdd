"""
Preload supplier: loads every rule of a country up front.

``load_rules`` downloads one aggregate document per country, a JSON object
mapping rule id to rule record for the country and all of its
subdivisions. Once loaded, ``supply`` only walks the in-memory cache, so
lookups for that country work offline. A rule id that is loaded twice
indicates inconsistent data and is treated as a caller error.
"""

import asyncio
import json
from typing import Optional

from . import region_data_constants
from .event_logger import EventLogger
from .exceptions import ContractViolationError
from .language import UNDEFINED_LANGUAGE_TAG, Language, choose_best_address_language
from .lookup_key import HIERARCHY, LookupKey, get_depth_of_key_string
from .models import AddressData, LoadResult
from .region_data import RegionData
from .retriever import Retriever
from .rule import DEFAULT_RULE, Rule
from .supplier import RuleHierarchy, SupplyResult


COMPONENT = "preload_supplier"


def key_from_region_code(region_code: str) -> str:
    """Country-level key string of a region, e.g. 'data/CH'."""
    return LookupKey().from_address(AddressData(region_code=region_code)).to_key_string(0)


class PreloadSupplier:
    """Supplier serving rules of explicitly preloaded countries."""

    def __init__(
        self,
        retriever: Retriever,
        default_rule: Rule = DEFAULT_RULE,
        logger: Optional[EventLogger] = None,
    ) -> None:
        """
        Initialize the supplier.

        Args:
            retriever: Retriever whose base URL serves aggregate documents
            default_rule: Rule that country rules are layered on
            logger: Optional event logger
        """
        self._retriever = retriever
        self._default_rule = default_rule
        self._logger = logger
        self._rule_cache: dict[str, Rule] = {}
        self._pending: dict[str, asyncio.Future] = {}
        self._region_tree_cache: dict[str, dict[str, RegionData]] = {}

    async def close(self) -> None:
        """Close the retriever and its downloader."""
        await self._retriever.close()

    async def load_rules(self, region_code: str) -> LoadResult:
        """
        Load all rules of a country.

        Loading an already loaded country succeeds immediately with a rule
        count of 0. Concurrent calls for the same country share one
        retrieval and receive the same result.

        Returns:
            LoadResult with the number of rules added to the cache
        """
        key = key_from_region_code(region_code)

        if self._is_loaded_key(key):
            return LoadResult(success=True, region_code=region_code, rule_count=0)

        pending = self._pending.get(key)
        if pending is not None:
            return await pending

        task = asyncio.ensure_future(self._load(region_code, key))
        self._pending[key] = task
        try:
            return await task
        finally:
            self._pending.pop(key, None)

    async def _load(self, region_code: str, key: str) -> LoadResult:
        result = await self._retriever.retrieve(key)
        if not result.success:
            return LoadResult(success=False, region_code=region_code, rule_count=0)

        try:
            json_data = json.loads(result.data)
        except ValueError:
            json_data = None
        if not isinstance(json_data, dict):
            if self._logger:
                self._logger.log_error(
                    COMPONENT, "Aggregate data is not a JSON object", additional_data={"key": key}
                )
            return LoadResult(success=False, region_code=region_code, rule_count=0)

        rule_count = 0
        for rule_key, value in json_data.items():
            if not isinstance(value, dict) or not isinstance(value.get("id"), str):
                if self._logger:
                    self._logger.log_error(
                        COMPONENT,
                        "Aggregate entry is not a rule object",
                        additional_data={"key": key, "entry": rule_key},
                    )
                return LoadResult(success=False, region_code=region_code, rule_count=rule_count)

            rule_id = value["id"]
            if rule_id != rule_key:
                raise ContractViolationError(
                    code="rule_id_mismatch",
                    message=f"Aggregate entry {rule_key!r} carries id {rule_id!r}",
                    details={"key": rule_key, "id": rule_id},
                )

            depth = get_depth_of_key_string(rule_id)
            if not 0 <= depth < len(HIERARCHY):
                raise ContractViolationError(
                    code="depth_out_of_range",
                    message=f"Rule id {rule_id!r} is outside the hierarchy",
                    details={"id": rule_id},
                )

            rule = Rule()
            if depth == 0:
                # Country rules inherit from the default rule
                rule.copy_from(self._default_rule)
            rule.parse_json_rule(value)

            if rule.id in self._rule_cache:
                raise ContractViolationError(
                    code="duplicate_rule_id",
                    message=f"Rule {rule.id!r} is already loaded",
                    details={"id": rule.id, "region_code": region_code},
                )
            self._rule_cache[rule.id] = rule
            rule_count += 1

        if self._logger:
            self._logger.info(
                COMPONENT, "Loaded rules", {"region_code": region_code, "rule_count": rule_count}
            )
        return LoadResult(success=True, region_code=region_code, rule_count=rule_count)

    def is_loaded(self, region_code: str) -> bool:
        return self._is_loaded_key(key_from_region_code(region_code))

    def is_pending(self, region_code: str) -> bool:
        return key_from_region_code(region_code) in self._pending

    def _is_loaded_key(self, key: str) -> bool:
        return key in self._rule_cache

    def get_rule_hierarchy(self, lookup_key: LookupKey) -> tuple[bool, RuleHierarchy]:
        """
        Walk the cache for the levels of a lookup key.

        Returns:
            (success, hierarchy). A missing country rule is a failure; a
            missing deeper rule ends the walk without failing.
        """
        hierarchy = RuleHierarchy()
        region_code = lookup_key.get_region_code()

        if region_data_constants.is_supported(region_code):
            max_depth = min(
                lookup_key.get_depth(),
                region_data_constants.get_max_lookup_key_depth(region_code),
            )
            for depth in range(max_depth + 1):
                rule = self._rule_cache.get(lookup_key.to_key_string(depth))
                if rule is None:
                    return depth > 0, hierarchy
                hierarchy[depth] = rule

        return True, hierarchy

    async def supply(self, lookup_key: LookupKey) -> SupplyResult:
        success, hierarchy = self.get_rule_hierarchy(lookup_key)
        return SupplyResult(success=success, lookup_key=lookup_key, hierarchy=hierarchy)

    def get_rule(self, lookup_key: LookupKey) -> Optional[Rule]:
        """
        Get the rule at the deepest level of a lookup key.

        Raises:
            ContractViolationError: If the key's country is not loaded
        """
        region_code = lookup_key.get_region_code()
        if not self.is_loaded(region_code):
            raise ContractViolationError(
                code="region_not_loaded",
                message=f"Rules for {region_code!r} have not been loaded",
                details={"region_code": region_code},
            )
        success, hierarchy = self.get_rule_hierarchy(lookup_key)
        if not success:
            return None
        return hierarchy[lookup_key.get_depth()]

    def get_rules_for_region(self, region_code: str) -> dict[str, Rule]:
        """Get every loaded rule of a country, keyed by id."""
        key = key_from_region_code(region_code)
        prefix = key + "/"
        return {
            rule_id: rule
            for rule_id, rule in self._rule_cache.items()
            if rule_id == key or rule_id.startswith(prefix)
        }

    def build_region_tree(self, region_code: str, ui_language_tag: str) -> tuple[RegionData, str]:
        """
        Build the tree of sub-regions of a loaded country.

        Args:
            region_code: Country to build the tree for
            ui_language_tag: Language of the user interface

        Returns:
            (tree, language tag the tree's names are in)

        Raises:
            ContractViolationError: If the country is not loaded
        """
        if not self.is_loaded(region_code):
            raise ContractViolationError(
                code="region_not_loaded",
                message=f"Rules for {region_code!r} have not been loaded",
                details={"region_code": region_code},
            )

        # Only languages and the Latin format are used, which the default rule lacks
        rule = Rule()
        rule.parse_serialized_rule(region_data_constants.get_region_data(region_code))
        if rule.languages:
            best_language = choose_best_address_language(rule, Language(ui_language_tag))
        else:
            best_language = Language(UNDEFINED_LANGUAGE_TAG)

        trees = self._region_tree_cache.setdefault(region_code, {})
        tree = trees.get(best_language.tag)
        if tree is None:
            tree = self._build_region(region_code, best_language)
            trees[best_language.tag] = tree

        return tree, best_language.tag

    def _build_region(self, region_code: str, language: Language) -> RegionData:
        lookup_key = LookupKey().from_address(AddressData(region_code=region_code))
        country_rule = self.get_rule(lookup_key)
        region = RegionData(region_code)
        if country_rule is not None:
            self._add_sub_regions(lookup_key, region, country_rule.sub_keys, language.has_latin_script)
        return region

    def _add_sub_regions(
        self,
        parent_key: LookupKey,
        parent_region: RegionData,
        sub_keys: list[str],
        prefer_latin_name: bool,
    ) -> None:
        for sub_key in sub_keys:
            lookup_key = LookupKey().from_lookup_key(parent_key, sub_key)
            rule = self.get_rule(lookup_key)
            if rule is None:
                return
            name = rule.name or sub_key
            if prefer_latin_name and rule.latin_name:
                name = rule.latin_name
            region = parent_region.add_sub_region(sub_key, name)
            if rule.sub_keys:
                self._add_sub_regions(lookup_key, region, rule.sub_keys, prefer_latin_name)
