from __future__ import annotations

from functools import lru_cache

from channel_metadata.config import AppSettings, load_settings
from channel_metadata.services.catalog_client import CatalogClient
from channel_metadata.services.metadata_service import ChannelMetadataService
from channel_metadata.telemetry import TelemetryClient, build_telemetry_client


def build_metadata_service(
    settings: AppSettings,
    telemetry: TelemetryClient | None = None,
) -> ChannelMetadataService:
    return ChannelMetadataService(
        CatalogClient(
            settings.api_base_url,
            timeout_seconds=settings.http_timeout_seconds,
        ),
        page_size=settings.page_size,
        shorts_max_seconds=settings.shorts_max_seconds,
        telemetry=telemetry,
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()


@lru_cache(maxsize=1)
def get_metadata_service() -> ChannelMetadataService:
    return build_metadata_service(get_settings(), get_telemetry())


@lru_cache(maxsize=1)
def get_telemetry() -> TelemetryClient:
    settings = get_settings()
    return build_telemetry_client(
        enabled=settings.telemetry_enabled,
        sink=settings.telemetry_sink,
    )


def reset_cached_dependencies() -> None:
    get_metadata_service.cache_clear()
    get_telemetry.cache_clear()
    get_settings.cache_clear()
