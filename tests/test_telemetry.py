from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from channel_metadata.telemetry import TelemetryClient, build_telemetry_client


class _CaptureSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, *, event_name: str, attributes: Mapping[str, Any]) -> None:
        self.events.append((event_name, dict(attributes)))


def test_telemetry_client_redacts_sensitive_fields() -> None:
    sink = _CaptureSink()
    client = TelemetryClient(enabled=True, sink=sink)

    client.emit(
        "catalog.fetch.start",
        resource="playlists",
        api_key="secret",
        access_token="tok",
        description="long text",
        items=3,
    )

    assert len(sink.events) == 1
    event_name, attributes = sink.events[0]
    assert event_name == "catalog.fetch.start"
    assert attributes["resource"] == "playlists"
    assert attributes["items"] == 3
    assert attributes["api_key"] == "[redacted]"
    assert attributes["access_token"] == "[redacted]"
    assert attributes["description"] == "[redacted]"


def test_disabled_telemetry_client_does_not_emit() -> None:
    sink = _CaptureSink()
    client = TelemetryClient(enabled=False, sink=sink)

    client.emit("catalog.fetch.start", resource="videos")
    assert sink.events == []


def test_build_telemetry_client_none_sink_is_disabled() -> None:
    client = build_telemetry_client(enabled=True, sink="none")
    assert client.enabled is False


def test_span_emits_finish_with_attributes() -> None:
    sink = _CaptureSink()
    client = TelemetryClient(enabled=True, sink=sink)

    with client.span("catalog.fetch", resource="videos") as finish:
        finish["records"] = 7

    assert [name for name, _ in sink.events] == ["catalog.fetch.start", "catalog.fetch.finish"]
    finish_attributes = sink.events[1][1]
    assert finish_attributes["records"] == 7
    assert finish_attributes["resource"] == "videos"
    assert isinstance(finish_attributes["duration_ms"], int)


def test_span_emits_error_and_reraises() -> None:
    sink = _CaptureSink()
    client = TelemetryClient(enabled=True, sink=sink)

    with pytest.raises(RuntimeError):
        with client.span("catalog.fetch", resource="playlists"):
            raise RuntimeError("boom")

    assert [name for name, _ in sink.events] == ["catalog.fetch.start", "catalog.fetch.error"]
    assert sink.events[1][1]["error_type"] == "RuntimeError"
