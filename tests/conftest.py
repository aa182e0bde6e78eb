from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl, urlsplit

import pytest
from fastapi.testclient import TestClient

from channel_metadata.dependencies import reset_cached_dependencies
from channel_metadata.main import create_app
from channel_metadata.services.catalog_client import CatalogClient, CatalogResponse
from channel_metadata.services.metadata_service import ChannelMetadataService

TEST_BASE_URL = "https://catalog.test/youtube/v3"


@dataclass(frozen=True)
class RecordedCall:
    resource: str
    params: dict[str, str]
    headers: dict[str, str]


class FakeCatalog:
    """Stands in for the catalog API; answers queued responses per resource in order."""

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._queues: dict[str, list[CatalogResponse]] = {}

    def queue(
        self,
        resource: str,
        payload: dict[str, Any] | None,
        *,
        status: int = 200,
        reason: str = "OK",
    ) -> None:
        self._queues.setdefault(resource, []).append(
            CatalogResponse(status_code=status, payload=payload, reason=reason)
        )

    def calls_for(self, resource: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.resource == resource]

    def __call__(
        self,
        *,
        url: str,
        headers: dict[str, str],
        timeout_seconds: float | None,
    ) -> CatalogResponse:
        _ = timeout_seconds
        parsed = urlsplit(url)
        resource = parsed.path.rsplit("/", 1)[-1]
        params = dict(parse_qsl(parsed.query))
        self.calls.append(RecordedCall(resource=resource, params=params, headers=dict(headers)))
        queue = self._queues.get(resource)
        if not queue:
            raise AssertionError(f"Unexpected catalog request: {resource} {params}")
        return queue.pop(0)


def playlist_item(
    playlist_id: str,
    title: str,
    *,
    item_count: int = 3,
    description: str = "",
) -> dict[str, Any]:
    return {
        "id": playlist_id,
        "snippet": {"title": title, "description": description},
        "contentDetails": {"itemCount": item_count},
    }


def upload_item(
    video_id: str,
    title: str,
    *,
    published_at: str = "2025-01-15T10:30:00Z",
    description: str = "",
) -> dict[str, Any]:
    return {
        "id": f"item-{video_id}",
        "snippet": {
            "title": title,
            "description": description,
            "publishedAt": published_at,
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
        },
        "contentDetails": {"videoId": video_id, "videoPublishedAt": published_at},
    }


def channel_payload(uploads_playlist_id: str = "UU_uploads") -> dict[str, Any]:
    return {
        "items": [
            {
                "id": "UC_channel",
                "contentDetails": {"relatedPlaylists": {"uploads": uploads_playlist_id}},
            }
        ]
    }


def durations_payload(durations: dict[str, str]) -> dict[str, Any]:
    return {
        "items": [
            {"id": video_id, "contentDetails": {"duration": duration}}
            for video_id, duration in durations.items()
        ]
    }


@pytest.fixture
def fake_catalog(monkeypatch: pytest.MonkeyPatch) -> FakeCatalog:
    catalog = FakeCatalog()
    monkeypatch.setattr(
        "channel_metadata.services.catalog_client._fetch_catalog_json",
        catalog,
    )
    return catalog


@pytest.fixture
def service(fake_catalog: FakeCatalog) -> ChannelMetadataService:
    _ = fake_catalog
    return ChannelMetadataService(CatalogClient(TEST_BASE_URL))


@pytest.fixture
def client(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    fake_catalog: FakeCatalog,
) -> Iterator[TestClient]:
    _ = fake_catalog
    data_dir = tmp_path / "runtime-data"
    data_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("CHANNEL_METADATA_DATA_DIR", str(data_dir))
    monkeypatch.setenv("CHANNEL_METADATA_API_BASE_URL", TEST_BASE_URL)
    monkeypatch.setenv("CHANNEL_METADATA_TELEMETRY_SINK", "none")
    reset_cached_dependencies()

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client

    reset_cached_dependencies()
