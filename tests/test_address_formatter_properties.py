"""
Property-based tests for Address Formatter module.

Uses Hypothesis for property-based testing to verify line layout from
country formats and the language-dependent joining of lines.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from address_metadata.address_formatter import (
    ARABIC_COMMA_SEPARATOR,
    COMMA_SEPARATOR,
    NO_SEPARATOR,
    SPACE_SEPARATOR,
    get_formatted_national_address,
    get_formatted_national_address_line,
    get_line_separator_for_language,
    get_street_address_lines_as_single_line,
)
from address_metadata.models import AddressData
from address_metadata.rule import build_country_rule


# Strategies for generating valid test data

@st.composite
def line_strategy(draw) -> str:
    """Generate non-empty street address lines."""
    return draw(st.text(
        alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789 "),
        min_size=1,
        max_size=30,
    ))


class TestNationalAddressProperty:
    """
    Property: Formatting follows the country format line by line.

    *For any* street address, every line SHALL appear verbatim and in
    order, and empty lines SHALL be dropped.
    """

    def test_new_zealand_address(self) -> None:
        address = AddressData(
            region_code="NZ",
            address_line=["Rotopapa", "Irwell 3RD"],
            locality="Leeston",
            postal_code="8704",
        )

        assert get_formatted_national_address(address) == ["Rotopapa", "Irwell 3RD", "Leeston 8704"]

    @given(lines=st.lists(line_strategy(), min_size=1, max_size=4))
    @settings(max_examples=100)
    def test_street_lines_are_kept_in_order(self, lines: list[str]) -> None:
        address = AddressData(
            region_code="US",
            recipient="Jane Doe",
            address_line=lines,
            locality="Mountain View",
            administrative_area="CA",
            postal_code="94043",
        )

        formatted = get_formatted_national_address(address)

        assert formatted == ["Jane Doe"] + lines + ["Mountain View, CA 94043"]

    def test_blank_street_lines_are_kept(self) -> None:
        address = AddressData(
            region_code="NZ",
            address_line=["Rotopapa", "", "Irwell 3RD"],
            locality="Leeston",
            postal_code="8704",
        )

        assert get_formatted_national_address(address) == [
            "Rotopapa", "", "Irwell 3RD", "Leeston 8704",
        ], "Street address lines should be inserted verbatim"

    def test_literals_stay_with_their_line(self) -> None:
        address = AddressData(
            region_code="CH",
            organization="Google Switzerland GmbH",
            address_line=["Brandschenkestrasse 110"],
            locality="Zürich",
            postal_code="8002",
        )

        assert get_formatted_national_address(address) == [
            "Google Switzerland GmbH",
            "Brandschenkestrasse 110",
            "CH-8002 Zürich",
        ]

    def test_latin_format_needs_explicit_latin_script(self) -> None:
        address = AddressData(
            region_code="JP",
            administrative_area="東京都",
            address_line=["六本木 6-10-1"],
            postal_code="106-6126",
        )

        assert get_formatted_national_address(address) == ["〒106-6126", "東京都", "六本木 6-10-1"]

        address.language_code = "ja-Latn"
        address.administrative_area = "Tokyo"
        address.address_line = ["6-10-1 Roppongi"]
        assert get_formatted_national_address(address) == ["6-10-1 Roppongi", ", Tokyo", "106-6126"]

    def test_explicit_rule(self) -> None:
        rule = build_country_rule('{"fmt": "%Z%n%C"}')
        address = AddressData(region_code="XA", locality="Somewhere", postal_code="123")

        assert get_formatted_national_address(address, rule) == ["123", "Somewhere"]

    def test_unsupported_region_uses_default_format(self) -> None:
        address = AddressData(region_code="XA", recipient="Jane Doe", address_line=["1 Main St"], locality="Town")

        assert get_formatted_national_address(address) == ["Jane Doe", "1 Main St", "Town"]


class TestLineSeparatorProperty:
    """
    Property: The separator depends on the base language, and an explicit
    Latin script always joins with a comma.
    """

    @given(
        base=st.sampled_from(["ja", "zh", "th", "ko", "ar", "fa", "ur", "de", "en", ""]),
        region=st.sampled_from(["", "-CN", "-TW"]),
    )
    @settings(max_examples=100)
    def test_latin_script_forces_comma(self, base: str, region: str) -> None:
        assert get_line_separator_for_language(f"{base}-Latn{region}") == COMMA_SEPARATOR

    def test_separators_by_language(self) -> None:
        assert get_line_separator_for_language("ja") == NO_SEPARATOR
        assert get_line_separator_for_language("zh-Hant") == NO_SEPARATOR
        assert get_line_separator_for_language("ko") == SPACE_SEPARATOR
        assert get_line_separator_for_language("th-TH") == SPACE_SEPARATOR
        assert get_line_separator_for_language("ar") == ARABIC_COMMA_SEPARATOR
        assert get_line_separator_for_language("fa-IR") == ARABIC_COMMA_SEPARATOR
        assert get_line_separator_for_language("de") == COMMA_SEPARATOR
        assert get_line_separator_for_language("") == COMMA_SEPARATOR

    def test_single_line_address(self) -> None:
        address = AddressData(
            region_code="NZ",
            address_line=["Rotopapa", "Irwell 3RD"],
            locality="Leeston",
            postal_code="8704",
            language_code="en",
        )

        assert get_formatted_national_address_line(address) == "Rotopapa, Irwell 3RD, Leeston 8704"

    @given(lines=st.lists(line_strategy(), max_size=4))
    @settings(max_examples=100)
    def test_street_address_single_line(self, lines: list[str]) -> None:
        address = AddressData(region_code="JP", address_line=lines, language_code="ja")

        assert get_street_address_lines_as_single_line(address) == "".join(lines)
