"""
Wiring of the components from a SystemConfig.
"""

from typing import Optional

from .address_validator import AddressValidator
from .config import SystemConfig
from .downloader import Downloader, HTTPDownloader
from .enums import LogLevel
from .event_logger import EventLogger
from .ondemand_supplier import OndemandSupplier
from .preload_supplier import PreloadSupplier
from .retriever import Retriever
from .storage import FileStorage, InMemoryStorage, Storage


def build_logger(config: SystemConfig, output_stream=None) -> EventLogger:
    return EventLogger(
        output_format=config.logging.output_format,
        output_stream=output_stream,
        min_level=LogLevel(config.logging.level),
    )


def build_storage(config: SystemConfig) -> Storage:
    """File storage when a storage path is configured, memory otherwise."""
    if config.cache.storage_path is not None:
        return FileStorage(config.cache.storage_path)
    return InMemoryStorage()


def build_downloader(config: SystemConfig) -> HTTPDownloader:
    return HTTPDownloader(
        timeout=config.data_source.timeout_seconds,
        require_tls=config.data_source.require_tls,
    )


def _build_retriever(
    config: SystemConfig,
    base_url: str,
    downloader: Optional[Downloader],
    storage: Optional[Storage],
    logger: Optional[EventLogger],
) -> Retriever:
    return Retriever(
        base_url,
        downloader if downloader is not None else build_downloader(config),
        storage if storage is not None else build_storage(config),
        staleness_threshold_seconds=config.cache.staleness_threshold_seconds,
        logger=logger,
    )


def build_ondemand_supplier(
    config: SystemConfig,
    downloader: Optional[Downloader] = None,
    storage: Optional[Storage] = None,
    logger: Optional[EventLogger] = None,
) -> OndemandSupplier:
    """Build a supplier fetching per-key documents from the validation data URL."""
    retriever = _build_retriever(
        config, config.data_source.validation_data_url, downloader, storage, logger
    )
    return OndemandSupplier(retriever, logger=logger)


def build_preload_supplier(
    config: SystemConfig,
    downloader: Optional[Downloader] = None,
    storage: Optional[Storage] = None,
    logger: Optional[EventLogger] = None,
) -> PreloadSupplier:
    """Build a supplier loading whole countries from the aggregate data URL."""
    retriever = _build_retriever(
        config, config.data_source.aggregate_data_url, downloader, storage, logger
    )
    return PreloadSupplier(retriever, logger=logger)


def build_validator(
    config: SystemConfig,
    preload: bool = False,
    downloader: Optional[Downloader] = None,
    storage: Optional[Storage] = None,
    logger: Optional[EventLogger] = None,
) -> AddressValidator:
    """
    Build an address validator.

    The validator owns the downloader it was built with; release it with
    ``await validator.close()`` or by using the validator in ``async with``.

    Args:
        config: System configuration
        preload: Use a PreloadSupplier instead of an OndemandSupplier
        downloader: Optional downloader replacing the HTTP downloader
        storage: Optional storage replacing the configured one
        logger: Optional event logger
    """
    if preload:
        supplier = build_preload_supplier(config, downloader, storage, logger)
    else:
        supplier = build_ondemand_supplier(config, downloader, storage, logger)
    return AddressValidator(supplier, logger=logger)
