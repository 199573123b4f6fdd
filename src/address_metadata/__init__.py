"""
Address Metadata - hierarchical postal address metadata for validation and formatting.

This package resolves per-country and per-subdivision address rules from a
remote metadata source (with a validated durable cache), and applies them
to validate and format postal addresses.
"""

__version__ = "0.1.0"
__author__ = "Address Metadata Team"

from address_metadata.exceptions import (
    AddressMetadataError,
    ContractViolationError,
    NetworkError,
    PersistenceError,
    ConfigurationError,
)
from address_metadata.enums import (
    AddressField,
    AddressProblem,
    MessageId,
    LogLevel,
    DownloadErrorCode,
)
from address_metadata.models import (
    AddressData,
    FieldProblemMap,
    StorageResult,
    DownloadError,
    DownloadResult,
    RetrieveResult,
    LoadResult,
    ValidationResult,
)
from address_metadata.config import (
    DataSourceConfig,
    CacheConfig,
    LoggingConfig,
    SystemConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from address_metadata.format_rules import (
    FormatElement,
    parse_format_rule,
    parse_address_fields_required,
)
from address_metadata.language import (
    Language,
    choose_best_address_language,
)
from address_metadata.lookup_key import (
    LookupKey,
    LookupKeyUtil,
)
from address_metadata.rule import (
    Rule,
    DEFAULT_RULE,
)
from address_metadata.event_logger import (
    EventLogger,
    LogEntry,
)
from address_metadata.storage import (
    Storage,
    NullStorage,
    InMemoryStorage,
    FileStorage,
)
from address_metadata.validating_storage import (
    ValidatingStorage,
)
from address_metadata.downloader import (
    Downloader,
    HTTPDownloader,
    InMemoryDownloader,
)
from address_metadata.retriever import (
    Retriever,
)
from address_metadata.supplier import (
    RuleHierarchy,
    SupplyResult,
    Supplier,
)
from address_metadata.ondemand_supplier import (
    OndemandSupplier,
)
from address_metadata.preload_supplier import (
    PreloadSupplier,
)
from address_metadata.region_data import (
    RegionData,
)
from address_metadata.address_validator import (
    AddressValidator,
)
from address_metadata.address_formatter import (
    get_formatted_national_address,
    get_formatted_national_address_line,
    get_street_address_lines_as_single_line,
)
from address_metadata.i18n import (
    get_message,
    get_label,
    get_field_label,
    get_problem_message,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from address_metadata.builder import (
    build_logger,
    build_ondemand_supplier,
    build_preload_supplier,
    build_validator,
)

__all__ = [
    # Exceptions
    "AddressMetadataError",
    "ContractViolationError",
    "NetworkError",
    "PersistenceError",
    "ConfigurationError",
    # Enums
    "AddressField",
    "AddressProblem",
    "MessageId",
    "LogLevel",
    "DownloadErrorCode",
    # Models
    "AddressData",
    "FieldProblemMap",
    "StorageResult",
    "DownloadError",
    "DownloadResult",
    "RetrieveResult",
    "LoadResult",
    "ValidationResult",
    # Config
    "DataSourceConfig",
    "CacheConfig",
    "LoggingConfig",
    "SystemConfig",
    "create_default_config",
    "load_config_from_env",
    "load_config_from_file",
    "save_config_to_file",
    # Rules
    "FormatElement",
    "parse_format_rule",
    "parse_address_fields_required",
    "Language",
    "choose_best_address_language",
    "LookupKey",
    "LookupKeyUtil",
    "Rule",
    "DEFAULT_RULE",
    # Logging
    "EventLogger",
    "LogEntry",
    # Storage and download
    "Storage",
    "NullStorage",
    "InMemoryStorage",
    "FileStorage",
    "ValidatingStorage",
    "Downloader",
    "HTTPDownloader",
    "InMemoryDownloader",
    "Retriever",
    # Suppliers
    "RuleHierarchy",
    "SupplyResult",
    "Supplier",
    "OndemandSupplier",
    "PreloadSupplier",
    "RegionData",
    # Validation and formatting
    "AddressValidator",
    "get_formatted_national_address",
    "get_formatted_national_address_line",
    "get_street_address_lines_as_single_line",
    # i18n
    "get_message",
    "get_label",
    "get_field_label",
    "get_problem_message",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # Builder
    "build_logger",
    "build_ondemand_supplier",
    "build_preload_supplier",
    "build_validator",
]
