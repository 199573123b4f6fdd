"""
Parsing of the compact format and required-field strings found in rules.

A format string such as ``%N%n%O%n%A%n%C, %S %Z`` is a sequence of literal
text, ``%<letter>`` field tokens and ``%n`` line breaks. Unknown tokens,
including ``%%``, are dropped, as is a trailing lone ``%``.
"""

from dataclasses import dataclass
from typing import Optional

from .enums import AddressField


# Field token letters used by ``fmt``, ``lfmt`` and ``require``
FIELD_TOKENS: dict[str, AddressField] = {
    "R": AddressField.COUNTRY,
    "S": AddressField.ADMIN_AREA,
    "C": AddressField.LOCALITY,
    "D": AddressField.DEPENDENT_LOCALITY,
    "X": AddressField.SORTING_CODE,
    "Z": AddressField.POSTAL_CODE,
    "A": AddressField.STREET_ADDRESS,
    "O": AddressField.ORGANIZATION,
    "N": AddressField.RECIPIENT,
}

NEWLINE = "\n"


@dataclass(frozen=True)
class FormatElement:
    """One element of a parsed format: a field, a literal or a line break."""

    field: Optional[AddressField] = None
    literal: str = NEWLINE

    @classmethod
    def for_field(cls, address_field: AddressField) -> "FormatElement":
        return cls(field=address_field, literal="")

    @classmethod
    def for_literal(cls, literal: str) -> "FormatElement":
        return cls(field=None, literal=literal)

    @classmethod
    def newline(cls) -> "FormatElement":
        return cls()

    def is_field(self) -> bool:
        return self.field is not None

    def is_newline(self) -> bool:
        return self.field is None and self.literal == NEWLINE


def parse_field_token(token: str) -> Optional[AddressField]:
    """Map a single token letter to its field, or None if it is not a field."""
    return FIELD_TOKENS.get(token)


def parse_format_rule(format_string: str) -> list[FormatElement]:
    """
    Parse a format string into its elements.

    Args:
        format_string: Compact format, e.g. ``%N%n%O%n%A%n%C``

    Returns:
        Ordered list of format elements
    """
    elements: list[FormatElement] = []
    length = len(format_string)
    prev = 0

    while True:
        percent = format_string.find("%", prev)
        if percent == -1:
            break

        if prev < percent:
            elements.append(FormatElement.for_literal(format_string[prev:percent]))

        token_index = percent + 1
        if token_index == length:
            # Trailing '%' with nothing after it
            prev = length
            break

        token = format_string[token_index]
        if token == "n":
            elements.append(FormatElement.newline())
        else:
            address_field = parse_field_token(token)
            if address_field is not None:
                elements.append(FormatElement.for_field(address_field))

        prev = token_index + 1

    if prev < length:
        elements.append(FormatElement.for_literal(format_string[prev:]))

    return elements


def parse_address_fields_required(required: str) -> list[AddressField]:
    """Map every field letter of a ``require`` string to its field."""
    fields = []
    for token in required:
        address_field = parse_field_token(token)
        if address_field is not None:
            fields.append(address_field)
    return fields


def format_contains_field(
    elements: list[FormatElement],
    address_field: AddressField,
) -> bool:
    """Check whether a parsed format mentions the given field."""
    return any(element.field == address_field for element in elements)
