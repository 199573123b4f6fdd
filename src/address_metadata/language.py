"""
Language tag handling.

Only the parts of BCP 47 the address metadata needs: the base language
and whether the tag explicitly asks for the Latin script.
"""

LATIN_SCRIPT_SUBTAG = "latn"
UNDEFINED_LANGUAGE_TAG = "und"


class Language:
    """A parsed language tag."""

    def __init__(self, language_tag: str) -> None:
        # Some legacy code separates subtags with '_' instead of '-'
        self.tag = language_tag.replace("_", "-")

        lowercase = self.tag.lower()
        subtags = lowercase.split("-")

        self.base = subtags[0]

        # The script may only appear in the second or third position
        self.has_latin_script = (
            (len(subtags) > 1 and subtags[1] == LATIN_SCRIPT_SUBTAG)
            or (len(subtags) > 2 and subtags[2] == LATIN_SCRIPT_SUBTAG)
        )

    def __repr__(self) -> str:
        return f"Language(tag={self.tag!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Language):
            return NotImplemented
        return self.tag == other.tag


def choose_best_address_language(rule, ui_language: Language) -> Language:
    """
    Pick the language to present a country's addresses in.

    Args:
        rule: Country-level rule, providing ``languages`` and ``latin_format``
        ui_language: Language of the user interface

    Returns:
        One of the rule's languages, its Latin-script variant, or the UI
        language when the rule declares no languages
    """
    languages: list[str] = rule.languages
    if not languages:
        return ui_language

    if not ui_language.tag:
        return Language(languages[0])

    has_latin_format = bool(rule.latin_format)

    # The Latin-script variant of the country's default language
    latin_language = Language(Language(languages[0]).base + "-Latn")

    if has_latin_format and ui_language.has_latin_script:
        return latin_language

    for language_tag in languages:
        # Match only on the base language, ignoring script and region
        if ui_language.base == Language(language_tag).base:
            return Language(language_tag)

    return latin_language if has_latin_format else Language(languages[0])
