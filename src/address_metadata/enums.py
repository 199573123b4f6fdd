"""
Enumeration types for the address metadata system.

These enums provide type-safe constants for address fields, validation
problems, label identifiers, error codes and logging levels.
"""

from enum import Enum


class AddressField(Enum):
    """Address fields, in hierarchy order for the first four members."""

    COUNTRY = "country"
    ADMIN_AREA = "admin_area"
    LOCALITY = "locality"
    DEPENDENT_LOCALITY = "dependent_locality"
    SORTING_CODE = "sorting_code"
    POSTAL_CODE = "postal_code"
    STREET_ADDRESS = "street_address"
    ORGANIZATION = "organization"
    RECIPIENT = "recipient"


class AddressProblem(Enum):
    """Kinds of problems the validator can report for a field."""

    UNEXPECTED_FIELD = "unexpected_field"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    UNKNOWN_VALUE = "unknown_value"
    INVALID_FORMAT = "invalid_format"
    MISMATCHING_VALUE = "mismatching_value"
    USES_P_O_BOX = "uses_p_o_box"


class MessageId(Enum):
    """Identifiers of localized field labels referenced by rules."""

    INVALID = "invalid"

    # Admin area labels
    AREA = "area"
    COUNTY = "county"
    DEPARTMENT = "department"
    DISTRICT = "district"
    DO_SI = "do_si"
    EMIRATE = "emirate"
    ISLAND = "island"
    OBLAST = "oblast"
    PARISH = "parish"
    PREFECTURE = "prefecture"
    PROVINCE = "province"
    STATE = "state"

    # Postal code labels
    PIN_CODE = "pin_code"
    POSTAL_CODE = "postal_code"
    ZIP_CODE = "zip_code"

    # Locality labels
    CITY = "city"
    POST_TOWN = "post_town"

    # Dependent locality labels
    SUBURB = "suburb"
    NEIGHBORHOOD = "neighborhood"
    VILLAGE_TOWNSHIP = "village_township"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class DownloadErrorCode(Enum):
    """Error codes for downloader operations."""

    NETWORK_ERROR = "network_error"
    TLS_ERROR = "tls_error"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNEXPECTED_STATUS = "unexpected_status"
    UNKNOWN_URL = "unknown_url"
