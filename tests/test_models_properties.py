"""
Property-based tests for the address models and bundled region data.

Uses Hypothesis for property-based testing to verify field access on
addresses, the set semantics of the problem map and the hierarchy depth
derived from the bundled country formats.
"""

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from address_metadata.enums import AddressField, AddressProblem
from address_metadata.exceptions import ContractViolationError
from address_metadata.models import AddressData, FieldProblemMap
from address_metadata.region_data_constants import (
    get_default_region_data,
    get_max_lookup_key_depth,
    get_region_codes,
    get_region_data,
    is_supported,
)


SINGLE_VALUED_FIELDS = [f for f in AddressField if f != AddressField.STREET_ADDRESS]


# Strategies for generating valid test data

@st.composite
def problem_pair_strategy(draw) -> tuple[AddressField, AddressProblem]:
    """Generate (field, problem) pairs."""
    return (
        draw(st.sampled_from(list(AddressField))),
        draw(st.sampled_from(list(AddressProblem))),
    )


class TestAddressFieldAccessProperty:
    """
    Property: Every field can be set and read back through its enum member.
    """

    @given(
        address_field=st.sampled_from(SINGLE_VALUED_FIELDS),
        value=st.text(min_size=1, max_size=20).filter(lambda s: s.strip()),
    )
    @settings(max_examples=100)
    def test_single_valued_round_trip(self, address_field: AddressField, value: str) -> None:
        address = AddressData()

        address.set_field_value(address_field, value)

        assert address.get_field_value(address_field) == value
        assert not address.is_field_empty(address_field)

    @given(lines=st.lists(st.text(alphabet=" \t", max_size=3), max_size=4))
    @settings(max_examples=100)
    def test_blank_street_lines_are_empty(self, lines: list[str]) -> None:
        address = AddressData(address_line=lines)

        assert address.is_field_empty(AddressField.STREET_ADDRESS)

    def test_street_address_is_repeated(self) -> None:
        address = AddressData(address_line=["1 Main St", "Apt 2"])

        assert address.get_repeated_field_value(AddressField.STREET_ADDRESS) == ["1 Main St", "Apt 2"]
        with pytest.raises(ContractViolationError) as exc_info:
            address.get_field_value(AddressField.STREET_ADDRESS)
        assert exc_info.value.code == "repeated_field"

        with pytest.raises(ContractViolationError):
            address.get_repeated_field_value(AddressField.LOCALITY)


class TestFieldProblemMapProperty:
    """
    Property: The problem map behaves as an insertion-ordered set.
    """

    @given(pairs=st.lists(problem_pair_strategy(), max_size=20))
    @settings(max_examples=100)
    def test_duplicates_are_kept_once(self, pairs) -> None:
        problems = FieldProblemMap(pairs)

        assert len(problems) == len(set(pairs))
        assert list(problems) == list(dict.fromkeys(pairs))
        for address_field, problem in pairs:
            assert problems.contains(address_field, problem)
            assert (address_field, problem) in problems
            assert problems.has_problem(problem)
            assert problem in problems.problems_for(address_field)

    @given(pairs=st.lists(problem_pair_strategy(), max_size=20))
    @settings(max_examples=100)
    def test_equality_ignores_order(self, pairs) -> None:
        assert FieldProblemMap(pairs) == FieldProblemMap(reversed(pairs))

    def test_clear(self) -> None:
        problems = FieldProblemMap([(AddressField.LOCALITY, AddressProblem.MISSING_REQUIRED_FIELD)])

        problems.clear()

        assert problems.is_empty()
        assert not problems.has_problem(AddressProblem.MISSING_REQUIRED_FIELD)


class TestRegionDataProperty:
    """
    Property: Bundled records are JSON objects and the hierarchy depth
    follows the fields of each country format.
    """

    @given(region_code=st.sampled_from(get_region_codes()))
    @settings(max_examples=100)
    def test_supported_regions_have_records(self, region_code: str) -> None:
        assert is_supported(region_code)
        assert isinstance(json.loads(get_region_data(region_code)), dict)
        assert 0 <= get_max_lookup_key_depth(region_code) <= 3

    @pytest.mark.parametrize("region_code", ["XA", "ZZ", "", "us"])
    def test_unsupported_regions(self, region_code: str) -> None:
        assert not is_supported(region_code)
        assert get_region_data(region_code) == ""
        assert get_max_lookup_key_depth(region_code) == 0

    @pytest.mark.parametrize("region_code,depth", [("US", 2), ("CH", 0), ("CN", 3), ("DE", 0)])
    def test_known_depths(self, region_code: str, depth: int) -> None:
        assert get_max_lookup_key_depth(region_code) == depth

    def test_default_record(self) -> None:
        record = json.loads(get_default_region_data())

        assert "fmt" in record
        assert "require" in record
