"""
Internationalization (i18n) module for the address metadata system.

Provides English (en) and German (de) strings for the field labels that
rules refer to by MessageId and for the validation problems.
"""

from typing import Optional

from .enums import AddressField, AddressProblem, MessageId


# Supported languages
SUPPORTED_LANGUAGES = frozenset({"de", "en"})
DEFAULT_LANGUAGE = "en"


# Translation dictionary with all messages
# Structure: {message_key: {language_code: translated_message}}
TRANSLATIONS: dict[str, dict[str, str]] = {
    # Admin area labels
    "label.area": {"en": "Area", "de": "Gebiet"},
    "label.county": {"en": "County", "de": "County"},
    "label.department": {"en": "Department", "de": "Departement"},
    "label.district": {"en": "District", "de": "Bezirk"},
    "label.do_si": {"en": "Do/Si", "de": "Do/Si"},
    "label.emirate": {"en": "Emirate", "de": "Emirat"},
    "label.island": {"en": "Island", "de": "Insel"},
    "label.oblast": {"en": "Oblast", "de": "Oblast"},
    "label.parish": {"en": "Parish", "de": "Gemeinde"},
    "label.prefecture": {"en": "Prefecture", "de": "Präfektur"},
    "label.province": {"en": "Province", "de": "Provinz"},
    "label.state": {"en": "State", "de": "Bundesland"},

    # Postal code labels
    "label.pin_code": {"en": "PIN code", "de": "PIN-Code"},
    "label.postal_code": {"en": "Postal code", "de": "Postleitzahl"},
    "label.zip_code": {"en": "ZIP code", "de": "Postleitzahl"},

    # Locality labels
    "label.city": {"en": "City", "de": "Stadt"},
    "label.post_town": {"en": "Post town", "de": "Poststadt"},

    # Dependent locality labels
    "label.suburb": {"en": "Suburb", "de": "Vorort"},
    "label.neighborhood": {"en": "Neighborhood", "de": "Stadtviertel"},
    "label.village_township": {"en": "Village/Township", "de": "Dorf/Gemeinde"},

    # Fields without a rule-specific label
    "field.country": {"en": "Country", "de": "Land"},
    "field.sorting_code": {"en": "Sorting code", "de": "Sortiercode"},
    "field.street_address": {"en": "Street address", "de": "Straße und Hausnummer"},
    "field.organization": {"en": "Organization", "de": "Organisation"},
    "field.recipient": {"en": "Recipient", "de": "Empfänger"},

    # Validation problems
    "problem.unexpected_field": {
        "en": "{field} is not used in addresses of this country",
        "de": "{field} wird in Adressen dieses Landes nicht verwendet",
    },
    "problem.missing_required_field": {
        "en": "{field} is required",
        "de": "{field} ist erforderlich",
    },
    "problem.unknown_value": {
        "en": "{field} is not recognized",
        "de": "{field} ist unbekannt",
    },
    "problem.invalid_format": {
        "en": "{field} has an invalid format",
        "de": "{field} hat ein ungültiges Format",
    },
    "problem.mismatching_value": {
        "en": "{field} does not match the rest of the address",
        "de": "{field} passt nicht zum Rest der Adresse",
    },
    "problem.uses_p_o_box": {
        "en": "P.O. boxes are not allowed here",
        "de": "Postfächer sind hier nicht erlaubt",
    },
}


def get_message(
    key: str,
    language: Optional[str] = None,
    **kwargs,
) -> str:
    """
    Get a translated message by key.

    Args:
        key: The message key (e.g., 'label.state')
        language: Language code ('de' or 'en'). Defaults to DEFAULT_LANGUAGE.
        **kwargs: Format arguments for the message template

    Returns:
        The translated and formatted message string.
        If the key is not found, returns the key itself.
        If the language is not found, falls back to DEFAULT_LANGUAGE.

    Examples:
        >>> get_message('label.state', 'en')
        'State'
        >>> get_message('problem.missing_required_field', 'de', field='Stadt')
        'Stadt ist erforderlich'
    """
    if language is None or language not in SUPPORTED_LANGUAGES:
        language = DEFAULT_LANGUAGE

    translations = TRANSLATIONS.get(key)
    if translations is None:
        return key

    message = translations.get(language)
    if message is None:
        message = translations.get(DEFAULT_LANGUAGE)
    if message is None:
        return key

    if kwargs:
        try:
            message = message.format(**kwargs)
        except KeyError:
            # If formatting fails, return the unformatted message
            pass

    return message


def get_label(message_id: MessageId, language: Optional[str] = None) -> str:
    """Get the label a rule refers to; '' for MessageId.INVALID."""
    if message_id == MessageId.INVALID:
        return ""
    return get_message(f"label.{message_id.value}", language)


def get_field_label(
    address_field: AddressField,
    rule=None,
    language: Optional[str] = None,
) -> str:
    """
    Get the display label of a field.

    Admin area, locality, dependent locality and postal code take their
    label from the rule's name types when a rule is given.
    """
    message_id = MessageId.INVALID
    if rule is not None:
        message_id = {
            AddressField.ADMIN_AREA: rule.admin_area_name_message_id,
            AddressField.LOCALITY: rule.locality_name_message_id,
            AddressField.DEPENDENT_LOCALITY: rule.sublocality_name_message_id,
            AddressField.POSTAL_CODE: rule.postal_code_name_message_id,
        }.get(address_field, MessageId.INVALID)

    if message_id != MessageId.INVALID:
        return get_label(message_id, language)

    fallback = {
        AddressField.ADMIN_AREA: "label.province",
        AddressField.LOCALITY: "label.city",
        AddressField.DEPENDENT_LOCALITY: "label.suburb",
        AddressField.POSTAL_CODE: "label.postal_code",
    }.get(address_field, f"field.{address_field.value}")
    return get_message(fallback, language)


def get_problem_message(
    address_field: AddressField,
    problem: AddressProblem,
    rule=None,
    language: Optional[str] = None,
) -> str:
    """Describe a validation problem for display."""
    return get_message(
        f"problem.{problem.value}",
        language,
        field=get_field_label(address_field, rule, language),
    )


def get_all_message_keys() -> set[str]:
    """Get all available message keys."""
    return set(TRANSLATIONS.keys())


def has_translation(key: str, language: str) -> bool:
    """Check if a translation exists for a key and language."""
    translations = TRANSLATIONS.get(key)
    if translations is None:
        return False
    return language in translations


def get_missing_translations(language: str) -> set[str]:
    """Get all message keys that are missing translations for a language."""
    missing = set()
    for key, translations in TRANSLATIONS.items():
        if language not in translations:
            missing.add(key)
    return missing


def validate_translations() -> dict[str, set[str]]:
    """
    Validate that all languages have all translations.

    Returns:
        Dictionary mapping language codes to sets of missing message keys.
        Empty sets indicate complete translations.
    """
    result = {}
    for language in SUPPORTED_LANGUAGES:
        result[language] = get_missing_translations(language)
    return result
