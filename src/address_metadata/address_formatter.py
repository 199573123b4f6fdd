"""
Address formatting according to a country's format rule.

Lines are produced by walking the country format: literals and field values
accumulate into the current line, ``%n`` ends the line, and the street
address contributes each of its lines verbatim as a line of its own.
Accumulated lines that end up empty are dropped; street address lines
are kept even when blank.
"""

from typing import Optional

from . import region_data_constants
from .enums import AddressField
from .language import Language
from .models import AddressData
from .rule import DEFAULT_RULE, Rule, build_country_rule


COMMA_SEPARATOR = ", "
SPACE_SEPARATOR = " "
ARABIC_COMMA_SEPARATOR = "، "
NO_SEPARATOR = ""

LANGUAGES_THAT_USE_SPACE = frozenset({"th", "ko"})

# "zh" covers all Chinese variants
LANGUAGES_THAT_HAVE_NO_SEPARATOR = frozenset({"ja", "zh"})

LANGUAGES_THAT_USE_AN_ARABIC_COMMA = frozenset({
    "ar", "az", "fa", "kk", "ku", "ky", "ps", "tg", "tk", "ur", "uz",
})


def get_line_separator_for_language(language_tag: str) -> str:
    """
    Get the separator used to join address lines into one line.

    An explicit Latin script always gives ", ". Without a language the
    comma is used as well, being the most common separator.
    """
    language = Language(language_tag)

    if language.has_latin_script:
        return COMMA_SEPARATOR

    if language.base in LANGUAGES_THAT_USE_SPACE:
        return SPACE_SEPARATOR
    if language.base in LANGUAGES_THAT_HAVE_NO_SEPARATOR:
        return NO_SEPARATOR
    if language.base in LANGUAGES_THAT_USE_AN_ARABIC_COMMA:
        return ARABIC_COMMA_SEPARATOR
    return COMMA_SEPARATOR


def combine_lines_for_language(lines: list[str], language_tag: str) -> str:
    return get_line_separator_for_language(language_tag).join(lines)


def _country_rule_for(address: AddressData) -> Rule:
    rule = build_country_rule(region_data_constants.get_region_data(address.region_code))
    if rule is None:
        # Unsupported region: fall back to the default layout
        rule = Rule()
        rule.copy_from(DEFAULT_RULE)
    return rule


def get_formatted_national_address(
    address: AddressData,
    rule: Optional[Rule] = None,
) -> list[str]:
    """
    Format an address as lines for domestic mail.

    Args:
        address: Address to format
        rule: Country rule to format with; built from the bundled region
            data when omitted

    Returns:
        Non-empty address lines in display order
    """
    if rule is None:
        rule = _country_rule_for(address)

    language = Language(address.language_code)

    # The Latin format applies only to addresses explicitly tagged as Latin
    if language.has_latin_script and rule.latin_format:
        elements = rule.latin_format
    else:
        elements = rule.format

    lines: list[str] = []
    line = ""
    for element in elements:
        if element.is_newline():
            if line:
                lines.append(line)
                line = ""
        elif element.is_field():
            if element.field == AddressField.STREET_ADDRESS:
                if line:
                    lines.append(line)
                    line = ""
                lines.extend(address.address_line)
            else:
                line += address.get_field_value(element.field)
        else:
            line += element.literal

    if line:
        lines.append(line)

    return lines


def get_formatted_national_address_line(
    address: AddressData,
    rule: Optional[Rule] = None,
) -> str:
    """Format an address on a single line, joined for its language."""
    return combine_lines_for_language(
        get_formatted_national_address(address, rule), address.language_code
    )


def get_street_address_lines_as_single_line(address: AddressData) -> str:
    """Join the street address lines for the address's language."""
    return combine_lines_for_language(address.address_line, address.language_code)
