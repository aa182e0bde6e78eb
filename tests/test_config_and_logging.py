from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from channel_metadata.config import AppSettings, load_settings
from channel_metadata.dependencies import build_metadata_service
from channel_metadata.logging_config import (
    LOG_FILE_NAME,
    configure_application_logging,
    redact_secret_fields,
)


def test_load_settings_applies_data_dir_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    data_dir = tmp_path / "data"
    monkeypatch.setenv("CHANNEL_METADATA_DATA_DIR", str(data_dir))
    monkeypatch.setenv("CHANNEL_METADATA_API_BASE_URL", " https://catalog.test/v3/ ")
    monkeypatch.setenv("CHANNEL_METADATA_PAGE_SIZE", "200")
    monkeypatch.setenv("CHANNEL_METADATA_TELEMETRY_ENABLED", "off")
    monkeypatch.setenv("CHANNEL_METADATA_API_KEY", "   ")
    monkeypatch.setenv("CHANNEL_METADATA_ACCESS_TOKEN", " tok ")

    settings = load_settings()

    assert settings.data_dir == data_dir.resolve()
    assert settings.log_dir == (data_dir / "logs").resolve()
    assert settings.export_dir == (data_dir / "exports").resolve()
    assert settings.api_base_url == "https://catalog.test/v3"
    assert settings.page_size == 50
    assert settings.telemetry_enabled is False
    assert settings.api_key is None
    assert settings.access_token == "tok"
    assert settings.http_timeout_seconds is None


def test_load_settings_keeps_explicit_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CHANNEL_METADATA_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CHANNEL_METADATA_EXPORT_DIR", str(tmp_path / "elsewhere"))

    settings = load_settings()

    assert settings.export_dir == (tmp_path / "elsewhere").resolve()


def test_invalid_telemetry_sink_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHANNEL_METADATA_TELEMETRY_SINK", "kafka")

    with pytest.raises(ValidationError):
        AppSettings()


def test_build_metadata_service_uses_settings(tmp_path: Path) -> None:
    settings = AppSettings(
        data_dir=tmp_path,
        api_base_url="https://catalog.test/v3",
        page_size=10,
        shorts_max_seconds=90,
    )

    service = build_metadata_service(settings)

    assert service._page_size == 10  # pyright: ignore[reportPrivateUsage]
    assert service._shorts_max_seconds == 90  # pyright: ignore[reportPrivateUsage]


def test_configure_application_logging_creates_file(tmp_path: Path) -> None:
    settings = AppSettings(data_dir=tmp_path, log_dir=tmp_path / "logs", log_level="DEBUG")

    log_file = configure_application_logging(settings)
    logging.getLogger("channel_metadata.test").info("hello from tests count=%s", 3)
    for handler in logging.getLogger("channel_metadata").handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    lines = [
        json.loads(line)
        for line in log_file.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]
    assert any(line.get("event") == "hello from tests count=3" for line in lines)


def test_redact_secret_fields() -> None:
    event = redact_secret_fields(
        None,
        "info",
        {"event": "x", "api_key": "abc", "access_token": "tok", "channel_id": "UC1"},
    )

    assert event["api_key"] == "[redacted]"
    assert event["access_token"] == "[redacted]"
    assert event["channel_id"] == "UC1"
