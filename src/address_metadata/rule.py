"""
Address metadata rules.

A rule is the metadata of one hierarchy level (a country, or one of its
administrative areas, localities or dependent localities), parsed from a
JSON record such as::

    {"id": "data/US", "fmt": "%N%n%O%n%A%n%C, %S %Z", "require": "ACSZ",
     "zip": "\\d{5}", "sub_keys": "AL~AK~...", "languages": "en"}

Country rules are layered on top of DEFAULT_RULE: the caller copies the
default first and then parses the country record over it, so that fields
the record leaves out keep the default values.
"""

import json
import re
from typing import Any, Optional

from .enums import AddressField, MessageId
from .format_rules import FormatElement, parse_address_fields_required, parse_format_rule
from .region_data_constants import get_default_region_data


LIST_SEPARATOR = "~"

# Characters that make a "zip" value a pattern rather than a single code
REGEX_SPECIAL_CHARACTERS = frozenset("([\\{?")

ADMIN_AREA_MESSAGE_IDS: dict[str, MessageId] = {
    "area": MessageId.AREA,
    "county": MessageId.COUNTY,
    "department": MessageId.DEPARTMENT,
    "district": MessageId.DISTRICT,
    "do_si": MessageId.DO_SI,
    "emirate": MessageId.EMIRATE,
    "island": MessageId.ISLAND,
    "oblast": MessageId.OBLAST,
    "parish": MessageId.PARISH,
    "prefecture": MessageId.PREFECTURE,
    "province": MessageId.PROVINCE,
    "state": MessageId.STATE,
}

POSTAL_CODE_MESSAGE_IDS: dict[str, MessageId] = {
    "pin": MessageId.PIN_CODE,
    "postal": MessageId.POSTAL_CODE,
    "zip": MessageId.ZIP_CODE,
}

LOCALITY_MESSAGE_IDS: dict[str, MessageId] = {
    "city": MessageId.CITY,
    "post_town": MessageId.POST_TOWN,
    "district": MessageId.DISTRICT,
}

SUBLOCALITY_MESSAGE_IDS: dict[str, MessageId] = {
    "suburb": MessageId.SUBURB,
    "district": MessageId.DISTRICT,
    "neighborhood": MessageId.NEIGHBORHOOD,
    "village_township": MessageId.VILLAGE_TOWNSHIP,
}


def compile_postal_code_matcher(pattern: str) -> Optional[re.Pattern]:
    """
    Compile a "zip" value anchored at the start of the string.

    The same matcher serves full matching at country level and prefix
    matching below it.

    Returns:
        Compiled pattern, or None if the value is not a valid pattern
    """
    try:
        return re.compile("^(" + pattern + ")")
    except re.error:
        return None


def _contains_regex_special_characters(value: str) -> bool:
    return any(c in REGEX_SPECIAL_CHARACTERS for c in value)


class Rule:
    """Metadata of one level of the address hierarchy."""

    def __init__(self) -> None:
        self._id = ""
        self._format: list[FormatElement] = []
        self._latin_format: list[FormatElement] = []
        self._required: list[AddressField] = []
        self._sub_keys: list[str] = []
        self._languages: list[str] = []
        self._postal_code_pattern: Optional[str] = None
        self._postal_code_matcher: Optional[re.Pattern] = None
        self._sole_postal_code = ""
        self._admin_area_name_message_id = MessageId.INVALID
        self._postal_code_name_message_id = MessageId.INVALID
        self._locality_name_message_id = MessageId.INVALID
        self._sublocality_name_message_id = MessageId.INVALID
        self._name = ""
        self._latin_name = ""
        self._postal_code_example = ""
        self._post_service_url = ""

    @staticmethod
    def get_default() -> "Rule":
        """Get the rule every country rule is layered on."""
        return DEFAULT_RULE

    def copy_from(self, other: "Rule") -> None:
        """Copy every field of another rule into this one."""
        if other is self:
            return
        self._id = other._id
        self._format = list(other._format)
        self._latin_format = list(other._latin_format)
        self._required = list(other._required)
        self._sub_keys = list(other._sub_keys)
        self._languages = list(other._languages)
        self._postal_code_pattern = other._postal_code_pattern
        self._postal_code_matcher = (
            None if other._postal_code_matcher is None
            else re.compile(other._postal_code_matcher.pattern, other._postal_code_matcher.flags)
        )
        self._sole_postal_code = other._sole_postal_code
        self._admin_area_name_message_id = other._admin_area_name_message_id
        self._postal_code_name_message_id = other._postal_code_name_message_id
        self._locality_name_message_id = other._locality_name_message_id
        self._sublocality_name_message_id = other._sublocality_name_message_id
        self._name = other._name
        self._latin_name = other._latin_name
        self._postal_code_example = other._postal_code_example
        self._post_service_url = other._post_service_url

    def parse_serialized_rule(self, serialized_rule: str) -> bool:
        """
        Parse a JSON object string into this rule.

        Returns:
            False if the string is not a JSON object, True otherwise
        """
        try:
            json_data = json.loads(serialized_rule)
        except (TypeError, ValueError):
            return False
        if not isinstance(json_data, dict):
            return False
        self.parse_json_rule(json_data)
        return True

    def parse_json_rule(self, json_data: dict[str, Any]) -> None:
        """
        Overwrite the fields present in a decoded JSON record.

        Only string values are used; unknown keys are ignored.
        """
        def get(key: str) -> Optional[str]:
            value = json_data.get(key)
            return value if isinstance(value, str) else None

        value = get("id")
        if value is not None:
            self._id = value

        value = get("fmt")
        if value is not None:
            self._format = parse_format_rule(value)

        value = get("lfmt")
        if value is not None:
            self._latin_format = parse_format_rule(value)

        value = get("require")
        if value is not None:
            self._required = parse_address_fields_required(value)

        value = get("sub_keys")
        if value is not None:
            self._sub_keys = value.split(LIST_SEPARATOR)

        value = get("languages")
        if value is not None:
            self._languages = value.split(LIST_SEPARATOR)

        self._sole_postal_code = ""
        value = get("zip")
        if value is not None:
            self._postal_code_pattern = value
            self._postal_code_matcher = compile_postal_code_matcher(value)
            if not _contains_regex_special_characters(value):
                self._sole_postal_code = value

        value = get("state_name_type")
        if value is not None:
            self._admin_area_name_message_id = ADMIN_AREA_MESSAGE_IDS.get(value, MessageId.INVALID)

        value = get("zip_name_type")
        if value is not None:
            self._postal_code_name_message_id = POSTAL_CODE_MESSAGE_IDS.get(value, MessageId.INVALID)

        value = get("locality_name_type")
        if value is not None:
            self._locality_name_message_id = LOCALITY_MESSAGE_IDS.get(value, MessageId.INVALID)

        value = get("sublocality_name_type")
        if value is not None:
            self._sublocality_name_message_id = SUBLOCALITY_MESSAGE_IDS.get(value, MessageId.INVALID)

        value = get("name")
        if value is not None:
            self._name = value

        value = get("lname")
        if value is not None:
            self._latin_name = value

        value = get("zipex")
        if value is not None:
            self._postal_code_example = value

        value = get("posturl")
        if value is not None:
            self._post_service_url = value

    @property
    def id(self) -> str:
        """Canonical key of the rule, e.g. 'data/US/CA'."""
        return self._id

    @property
    def format(self) -> list[FormatElement]:
        return self._format

    @property
    def latin_format(self) -> list[FormatElement]:
        return self._latin_format

    @property
    def required(self) -> list[AddressField]:
        return self._required

    @property
    def sub_keys(self) -> list[str]:
        return self._sub_keys

    @property
    def languages(self) -> list[str]:
        return self._languages

    @property
    def postal_code_matcher(self) -> Optional[re.Pattern]:
        return self._postal_code_matcher

    @property
    def sole_postal_code(self) -> str:
        return self._sole_postal_code

    @property
    def admin_area_name_message_id(self) -> MessageId:
        return self._admin_area_name_message_id

    @property
    def postal_code_name_message_id(self) -> MessageId:
        return self._postal_code_name_message_id

    @property
    def locality_name_message_id(self) -> MessageId:
        return self._locality_name_message_id

    @property
    def sublocality_name_message_id(self) -> MessageId:
        return self._sublocality_name_message_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def latin_name(self) -> str:
        return self._latin_name

    @property
    def postal_code_example(self) -> str:
        return self._postal_code_example

    @property
    def post_service_url(self) -> str:
        return self._post_service_url

    def __repr__(self) -> str:
        return f"Rule(id={self._id!r})"


def _build_default_rule() -> Rule:
    rule = Rule()
    rule.parse_serialized_rule(get_default_region_data())
    return rule


DEFAULT_RULE = _build_default_rule()


def build_country_rule(serialized_rule: str, default_rule: Optional[Rule] = None) -> Optional[Rule]:
    """
    Build a country rule layered on the default rule.

    Returns:
        The rule, or None if serialized_rule is not a JSON object
    """
    rule = Rule()
    rule.copy_from(default_rule or DEFAULT_RULE)
    if not rule.parse_serialized_rule(serialized_rule):
        return None
    return rule
