"""
Configuration for the address metadata system.

This module defines the configuration structures (data source, cache,
logging) and loads them from the environment (including a ``.env`` file)
or from a JSON file.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .enums import LogLevel
from .exceptions import ConfigurationError
from .validating_storage import ONE_MONTH_SECONDS


DEFAULT_VALIDATION_DATA_URL = "https://chromium-i18n.appspot.com/ssl-address/"
DEFAULT_AGGREGATE_DATA_URL = "https://chromium-i18n.appspot.com/ssl-aggregate-address/"

ENV_PREFIX = "ADDRESS_METADATA_"

OUTPUT_FORMATS = ("json", "text", "both")


@dataclass
class DataSourceConfig:
    """Where metadata is downloaded from."""

    validation_data_url: str = DEFAULT_VALIDATION_DATA_URL
    aggregate_data_url: str = DEFAULT_AGGREGATE_DATA_URL
    timeout_seconds: float = 10.0
    require_tls: bool = True


@dataclass
class CacheConfig:
    """Durable cache configuration."""

    storage_path: Optional[Path] = None  # None keeps downloads in memory only
    staleness_threshold_seconds: int = ONE_MONTH_SECONDS


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "both"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    data_source: DataSourceConfig = field(default_factory=DataSourceConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    language: str = "en"  # 'de' or 'en'


def create_default_config() -> SystemConfig:
    """Create a configuration with all defaults."""
    return SystemConfig()


def validate_config(config: SystemConfig) -> SystemConfig:
    """
    Check a configuration for values the system cannot work with.

    Returns:
        The same configuration

    Raises:
        ConfigurationError: If a value is invalid
    """
    for name in ("validation_data_url", "aggregate_data_url"):
        url = getattr(config.data_source, name)
        if not url.endswith("/"):
            raise ConfigurationError(
                code="invalid_url",
                message=f"{name} must end with '/': {url}",
                details={name: url},
            )

    if config.data_source.timeout_seconds <= 0:
        raise ConfigurationError(
            code="invalid_timeout",
            message="timeout_seconds must be positive",
            details={"timeout_seconds": config.data_source.timeout_seconds},
        )

    if config.cache.staleness_threshold_seconds <= 0:
        raise ConfigurationError(
            code="invalid_staleness_threshold",
            message="staleness_threshold_seconds must be positive",
            details={"staleness_threshold_seconds": config.cache.staleness_threshold_seconds},
        )

    if config.logging.level not in {level.value for level in LogLevel}:
        raise ConfigurationError(
            code="invalid_log_level",
            message=f"Unknown log level: {config.logging.level}",
            details={"level": config.logging.level},
        )

    if config.logging.output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            code="invalid_output_format",
            message=f"Unknown log output format: {config.logging.output_format}",
            details={"output_format": config.logging.output_format},
        )

    return config


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(ENV_PREFIX + name, str(default)))
    except ValueError:
        return default


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(environ.get(ENV_PREFIX + name, str(default)))
    except ValueError:
        return default


def _bool_env(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config_from_env(
    env_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SystemConfig:
    """
    Load configuration from ``ADDRESS_METADATA_*`` environment variables.

    Variables already set in the environment take precedence over the
    ``.env`` file. Unparsable numbers fall back to their defaults.

    Args:
        env_file: Optional path of the .env file (defaults to dotenv's search)
        environ: Variables to read instead of os.environ; no .env file is
            loaded when given

    Returns:
        Validated SystemConfig

    Raises:
        ConfigurationError: If a value is invalid
    """
    if environ is None:
        load_dotenv(dotenv_path=env_file)
        environ = os.environ

    defaults = create_default_config()

    storage_path = environ.get(ENV_PREFIX + "STORAGE_PATH", "").strip()

    config = SystemConfig(
        data_source=DataSourceConfig(
            validation_data_url=environ.get(
                ENV_PREFIX + "VALIDATION_DATA_URL", defaults.data_source.validation_data_url
            ).strip(),
            aggregate_data_url=environ.get(
                ENV_PREFIX + "AGGREGATE_DATA_URL", defaults.data_source.aggregate_data_url
            ).strip(),
            timeout_seconds=_float_env(environ, "TIMEOUT", defaults.data_source.timeout_seconds),
            require_tls=_bool_env(environ, "REQUIRE_TLS", defaults.data_source.require_tls),
        ),
        cache=CacheConfig(
            storage_path=Path(storage_path) if storage_path else None,
            staleness_threshold_seconds=_int_env(
                environ, "STALENESS_SECONDS", defaults.cache.staleness_threshold_seconds
            ),
        ),
        logging=LoggingConfig(
            level=(environ.get(ENV_PREFIX + "LOG_LEVEL", defaults.logging.level) or "info").lower(),
            output_format=(environ.get(ENV_PREFIX + "LOG_FORMAT", defaults.logging.output_format) or "both").lower(),
        ),
        language=(environ.get(ENV_PREFIX + "LANGUAGE", defaults.language) or "en").lower(),
    )

    return validate_config(config)


def load_config_from_file(config_path: Path) -> SystemConfig:
    """
    Load configuration from a JSON file.

    Missing sections and keys take their default values.

    Args:
        config_path: Path to the configuration file

    Returns:
        Validated SystemConfig

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            code="unreadable_config",
            message=f"Failed to load configuration: {e}",
            details={"config_path": str(config_path)},
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            code="invalid_config",
            message="Configuration file must contain a JSON object",
            details={"config_path": str(config_path)},
        )

    defaults = create_default_config()
    data_source = data.get("data_source", {})
    cache = data.get("cache", {})
    logging_data = data.get("logging", {})

    storage_path = cache.get("storage_path")

    try:
        config = SystemConfig(
            data_source=DataSourceConfig(
                validation_data_url=data_source.get(
                    "validation_data_url", defaults.data_source.validation_data_url
                ),
                aggregate_data_url=data_source.get(
                    "aggregate_data_url", defaults.data_source.aggregate_data_url
                ),
                timeout_seconds=float(data_source.get("timeout_seconds", defaults.data_source.timeout_seconds)),
                require_tls=bool(data_source.get("require_tls", defaults.data_source.require_tls)),
            ),
            cache=CacheConfig(
                storage_path=Path(storage_path) if storage_path else None,
                staleness_threshold_seconds=int(
                    cache.get("staleness_threshold_seconds", defaults.cache.staleness_threshold_seconds)
                ),
            ),
            logging=LoggingConfig(
                level=logging_data.get("level", defaults.logging.level),
                output_format=logging_data.get("output_format", defaults.logging.output_format),
            ),
            language=data.get("language", defaults.language),
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Invalid configuration value: {e}",
            details={"config_path": str(config_path)},
        )

    return validate_config(config)


def save_config_to_file(config: SystemConfig, config_path: Path) -> None:
    """
    Save configuration to a JSON file.

    Raises:
        ConfigurationError: If the file cannot be written
    """
    data = {
        "data_source": {
            "validation_data_url": config.data_source.validation_data_url,
            "aggregate_data_url": config.data_source.aggregate_data_url,
            "timeout_seconds": config.data_source.timeout_seconds,
            "require_tls": config.data_source.require_tls,
        },
        "cache": {
            "storage_path": str(config.cache.storage_path) if config.cache.storage_path else None,
            "staleness_threshold_seconds": config.cache.staleness_threshold_seconds,
        },
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
        "language": config.language,
    }

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        raise ConfigurationError(
            code="unwritable_config",
            message=f"Failed to save configuration: {e}",
            details={"config_path": str(config_path)},
        )
