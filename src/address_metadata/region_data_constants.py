"""
Bundled per-region address metadata.

The table maps every supported CLDR region code to its country-level rule
record (format, required fields, languages, postal code examples). It is
shipped with the package as ``data/region_data.json``.
"""

import json
from pathlib import Path

from .format_rules import format_contains_field, parse_format_rule
from .lookup_key import HIERARCHY


REGION_DATA_FILE = Path(__file__).parent / "data" / "region_data.json"

DEFAULT_REGION_DATA: dict[str, str] = {
    "fmt": "%N%n%O%n%A%n%C",
    "require": "AC",
    "zip_name_type": "postal",
    "state_name_type": "province",
    "locality_name_type": "city",
    "sublocality_name_type": "suburb",
}


def _load_region_data() -> dict[str, dict[str, str]]:
    with open(REGION_DATA_FILE, "r", encoding="utf-8") as f:
        return json.load(f)


def _compute_max_depth(record: dict[str, str]) -> int:
    elements = parse_format_rule(record.get("fmt", ""))
    depth = 1
    while depth < len(HIERARCHY):
        # The hierarchy stops at the first level the country does not use
        if not format_contains_field(elements, HIERARCHY[depth]):
            break
        depth += 1
    return depth - 1


_REGION_DATA = _load_region_data()
_REGION_CODES = sorted(_REGION_DATA)
_MAX_DEPTH = {code: _compute_max_depth(record) for code, record in _REGION_DATA.items()}


def is_supported(region_code: str) -> bool:
    """Check whether the region has bundled metadata."""
    return region_code in _REGION_DATA


def get_region_codes() -> list[str]:
    """Get all supported region codes, sorted."""
    return list(_REGION_CODES)


def get_region_data(region_code: str) -> str:
    """
    Get the serialized country rule for a region.

    Returns:
        JSON object string, or '' if the region is not supported
    """
    record = _REGION_DATA.get(region_code)
    if record is None:
        return ""
    return json.dumps(record, ensure_ascii=False)


def get_default_region_data() -> str:
    """Get the serialized rule every country rule is layered on."""
    return json.dumps(DEFAULT_REGION_DATA)


def get_max_lookup_key_depth(region_code: str) -> int:
    """
    Get the deepest hierarchy level used by addresses of a region.

    Returns:
        0 (country only) to 3 (dependent locality); 0 for unknown regions
    """
    return _MAX_DEPTH.get(region_code, 0)
