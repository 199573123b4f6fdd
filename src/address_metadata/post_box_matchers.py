"""
Post office box detection.

Per-language patterns that recognize a P.O. box written in a street
address line. The "und" pattern applies to every country.
"""

import re
from typing import Optional

from .language import Language


POST_BOX_PATTERNS: dict[str, str] = {
    "ar": r"صندوق بريد|ص[-. ]ب",
    "cs": r"(?i)p\.? ?p\.? \d",
    "da": r"(?i)Postboks",
    "de": r"(?i)Postfach",
    "el": r"(?i)T\.? ?Θ\.? \d{2}",
    "en": r"Private Bag|Post(?:al)? Box",
    "es": r"(?i)(?:Apartado|Casillas) de correos?",
    "fi": r"(?i)Postilokero|P\.?L\.? \d",
    "fr": r"(?i)Bo(?:[iî]|i\u0302)te Postale|BP \d|CEDEX \d",
    "hr": r"(?i)p\.? ?p\.? \d",
    "hu": r"(?i)Postafi(?:[oó]|o\u0301)k|Pf\.? \d",
    "ja": r"私書箱\d{1,5}号",
    "nl": r"(?i)Postbus",
    "no": r"(?i)Postboks",
    "pl": r"(?i)Skr(?:\.?|ytka) poczt(?:\.?|owa)",
    "pt": r"(?i)Apartado",
    "ru": r'(?i)абонентский ящик|[аa]"я (?:(?:№|#|N) ?)?\d',
    "sv": r"(?i)Box \d",
    "und": r"P\.? ?O\.? Box",
    "zh": r"郵政信箱.{1,5}號|郵局第.{1,10}號信箱",
}

_MATCHERS: dict[str, re.Pattern] = {
    language: re.compile(pattern) for language, pattern in POST_BOX_PATTERNS.items()
}


def get_matcher(language_base: str) -> Optional[re.Pattern]:
    """Get the pattern for a base language, or None if there is none."""
    return _MATCHERS.get(language_base)


def get_matchers(country_rule) -> list[re.Pattern]:
    """
    Get the P.O. box patterns relevant for a country.

    Args:
        country_rule: Country-level rule, providing ``languages``

    Returns:
        The language-independent pattern followed by one pattern per
        declared language that has one
    """
    matchers = [_MATCHERS["und"]]
    for language_tag in country_rule.languages:
        matcher = get_matcher(Language(language_tag).base)
        if matcher is not None:
            matchers.append(matcher)
    return matchers
