"""
Property-based tests for On-demand Supplier module.

Uses Hypothesis for property-based testing to verify rule hierarchy
resolution, caching by canonical rule id and failure propagation.
"""

import asyncio
import json
from io import StringIO

from hypothesis import given, settings
from hypothesis import strategies as st

from address_metadata.downloader import InMemoryDownloader
from address_metadata.enums import LogLevel, MessageId
from address_metadata.event_logger import EventLogger
from address_metadata.lookup_key import LookupKey
from address_metadata.models import AddressData
from address_metadata.ondemand_supplier import OndemandSupplier
from address_metadata.retriever import Retriever
from address_metadata.rule import DEFAULT_RULE
from address_metadata.storage import InMemoryStorage


BASE_URL = "https://example.com/address/"

US_RULE = json.dumps({
    "id": "data/US",
    "fmt": "%N%n%O%n%A%n%C, %S %Z",
    "require": "ACS",
    "zip": r"\d{5}(?:[ \-]\d{4})?",
    "zip_name_type": "zip",
    "state_name_type": "state",
    "sub_keys": "CA~NY",
    "languages": "en",
})

US_CA_RULE = json.dumps({"id": "data/US/CA", "name": "California", "zip": "9[0-6]"})


def make_supplier(documents: dict[str, str], logger=None) -> tuple[OndemandSupplier, InMemoryDownloader]:
    downloader = InMemoryDownloader({BASE_URL + key: data for key, data in documents.items()})
    retriever = Retriever(BASE_URL, downloader, InMemoryStorage(), logger=logger)
    return OndemandSupplier(retriever, logger=logger), downloader


def supply(supplier: OndemandSupplier, address: AddressData):
    return asyncio.run(supplier.supply(LookupKey().from_address(address)))


# Strategies for generating valid test data

@st.composite
def locality_strategy(draw) -> str:
    """Generate locality names."""
    return draw(st.text(
        alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz "),
        min_size=1,
        max_size=20,
    ))


class TestUnsupportedRegionProperty:
    """
    Property: Regions without bundled data resolve to an empty hierarchy.

    *For any* lookup key whose region is not supported, supply SHALL
    succeed without downloading anything and with no rules.
    """

    @given(region_code=st.sampled_from(["", "XA", "ZZ", "QQ", "us"]))
    @settings(max_examples=100)
    def test_unsupported_region(self, region_code: str) -> None:
        supplier, downloader = make_supplier({})

        result = supply(supplier, AddressData(region_code=region_code, administrative_area="CA"))

        assert result.success
        assert not result.hierarchy.has_data()
        assert list(result.hierarchy) == [None, None, None, None]
        assert downloader.requested_urls == []


class TestHierarchyResolutionProperty:
    """
    Property: Every level of the key down to the country's maximum depth is
    requested, and the hierarchy holds one rule per level that has data.
    """

    def test_country_rule_inherits_default(self) -> None:
        supplier, downloader = make_supplier({"data/US": US_RULE})

        result = supply(supplier, AddressData(region_code="US"))

        assert result.success
        country_rule = result.hierarchy.country_rule
        assert country_rule.id == "data/US"
        assert country_rule.sub_keys == ["CA", "NY"]
        assert country_rule.admin_area_name_message_id == MessageId.STATE
        assert country_rule.locality_name_message_id == DEFAULT_RULE.locality_name_message_id, (
            "Fields missing from the country record should come from the default rule"
        )
        assert downloader.requested_urls == [BASE_URL + "data/US"]

    @given(locality=locality_strategy())
    @settings(max_examples=100)
    def test_full_hierarchy(self, locality: str) -> None:
        supplier, downloader = make_supplier({
            "data/US": US_RULE,
            "data/US/CA": US_CA_RULE,
            f"data/US/CA/{locality}": "{}",
        })

        result = supply(supplier, AddressData(
            region_code="US",
            administrative_area="CA",
            locality=locality,
            dependent_locality="ignored",
        ))

        assert result.success
        assert result.hierarchy[0].id == "data/US"
        assert result.hierarchy[1].id == "data/US/CA"
        assert result.hierarchy[1].locality_name_message_id == MessageId.INVALID, (
            "Sub-region rules should not inherit from the default rule"
        )
        assert result.hierarchy[2] is None, "'{}' means there is no data for the key"
        assert result.hierarchy[3] is None
        assert sorted(downloader.requested_urls) == sorted([
            BASE_URL + "data/US",
            BASE_URL + "data/US/CA",
            BASE_URL + f"data/US/CA/{locality}",
        ]), "Levels beyond the country's maximum depth should not be requested"

    def test_depth_is_capped_by_country_format(self) -> None:
        supplier, downloader = make_supplier({"data/CH": '{"id": "data/CH"}'})

        result = supply(supplier, AddressData(region_code="CH", administrative_area="ZH", locality="Zürich"))

        assert result.success
        assert downloader.requested_urls == [BASE_URL + "data/CH"]

    def test_unknown_sub_region_is_empty(self) -> None:
        supplier, _ = make_supplier({"data/US": US_RULE, "data/US/XY": "{}"})

        result = supply(supplier, AddressData(region_code="US", administrative_area="XY"))

        assert result.success
        assert result.hierarchy[0] is not None
        assert result.hierarchy[1] is None


class TestRuleCacheProperty:
    """
    Property: Rules are cached forever under their canonical id.
    """

    @given(repeat=st.integers(min_value=2, max_value=5))
    @settings(max_examples=100)
    def test_cached_rules_are_not_downloaded_again(self, repeat: int) -> None:
        supplier, downloader = make_supplier({"data/US": US_RULE, "data/US/CA": US_CA_RULE})
        address = AddressData(region_code="US", administrative_area="CA")

        results = [supply(supplier, address) for _ in range(repeat)]

        assert len(downloader.requested_urls) == 2, "Each key should be downloaded once"
        assert all(r.hierarchy[1] is results[0].hierarchy[1] for r in results), (
            "Every hierarchy should share the cached rule"
        )
        assert set(supplier.rule_cache) == {"data/US", "data/US/CA"}

    def test_alias_resolves_to_cached_rule(self) -> None:
        logger = EventLogger(output_format="json", output_stream=StringIO())
        supplier, _ = make_supplier(
            {
                "data/US": US_RULE,
                "data/US/CA": US_CA_RULE,
                "data/US/California": US_CA_RULE,
            },
            logger=logger,
        )

        first = supply(supplier, AddressData(region_code="US", administrative_area="CA"))
        second = supply(supplier, AddressData(region_code="US", administrative_area="California"))

        assert second.success
        assert second.hierarchy[1] is first.hierarchy[1], (
            "Both spellings should observe the same cached rule"
        )
        assert len(supplier.rule_cache) == 2
        assert "data/US/California" not in supplier.rule_cache


class TestSupplyFailureProperty:
    """
    Property: A level that cannot be retrieved or parsed fails the supply.
    """

    def test_missing_country_document(self) -> None:
        supplier, _ = make_supplier({})

        result = supply(supplier, AddressData(region_code="US"))

        assert not result.success
        assert not result.hierarchy.has_data()

    @given(payload=st.sampled_from(["", "not json", "[1, 2]", "\"data/US\"", "{"]))
    @settings(max_examples=100)
    def test_unparsable_document(self, payload: str) -> None:
        logger = EventLogger(output_format="json", output_stream=StringIO())
        supplier, _ = make_supplier({"data/US": payload}, logger=logger)

        result = supply(supplier, AddressData(region_code="US"))

        assert not result.success
        assert result.hierarchy.country_rule is None
        assert "data/US" not in supplier.rule_cache
        assert any(
            e.level == LogLevel.ERROR and e.component == "ondemand_supplier"
            for e in logger.entries
        ), "A document that is not a JSON object should be logged as an error"

    def test_sub_region_failure_keeps_other_levels(self) -> None:
        supplier, _ = make_supplier({"data/US": US_RULE})

        result = supply(supplier, AddressData(region_code="US", administrative_area="CA"))

        assert not result.success
        assert result.hierarchy[0] is not None, "Levels that did load should still be filled in"
        assert "data/US" in supplier.rule_cache
