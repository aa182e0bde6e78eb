from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, cast

from channel_metadata.config import MAX_PAGE_SIZE
from channel_metadata.models.metadata_contracts import (
    FetchOptions,
    PlaylistRecord,
    ResultSet,
    VideoRecord,
)
from channel_metadata.services.catalog_client import (
    AuthenticationError,
    CatalogClient,
    InvalidFetchOptionsError,
    NotFoundError,
    RemoteApiError,
)
from channel_metadata.services.credentials import Credential
from channel_metadata.services.duration_filter import SHORTS_MAX_SECONDS, is_short, parse_duration
from channel_metadata.telemetry import TelemetryClient

LOGGER = logging.getLogger("channel_metadata.retriever")

_LIST_PARTS = "snippet,contentDetails"


@dataclass(frozen=True)
class _VideoPage:
    records: list[VideoRecord]
    next_page_token: str | None
    skipped_shorts: int


class ChannelMetadataService:
    """Paginated playlist and upload listing for one channel.

    Every page and every duration lookup is requested sequentially. Results
    are buffered in full; any fatal error discards what was aggregated.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        page_size: int = MAX_PAGE_SIZE,
        shorts_max_seconds: int = SHORTS_MAX_SECONDS,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self._client = client
        self._page_size = max(1, min(MAX_PAGE_SIZE, page_size))
        self._shorts_max_seconds = max(0, shorts_max_seconds)
        self._telemetry = telemetry or TelemetryClient.disabled()

    def fetch_playlists(
        self,
        credential: Credential | None,
        include_description: bool = False,
    ) -> list[PlaylistRecord]:
        resolved = _require_credential(credential)
        auth = resolved.auth_params()

        with self._telemetry.span(
            "catalog.fetch", resource="playlists", auth_mode=resolved.mode
        ) as finish:
            playlists: list[PlaylistRecord] = []
            page_token: str | None = None
            pages = 0
            while True:
                params = {
                    "part": _LIST_PARTS,
                    "maxResults": str(self._page_size),
                    **resolved.playlist_owner_params(),
                }
                if page_token is not None:
                    params["pageToken"] = page_token

                response = self._client.get("playlists", params, auth)
                pages += 1
                items = _as_list(response.get("items"))
                for item in items:
                    record = _playlist_record(_as_dict(item), include_description)
                    if record is not None:
                        playlists.append(record)
                self._telemetry.emit(
                    "catalog.page.fetched",
                    resource="playlists",
                    page_number=pages,
                    items=len(items),
                )

                page_token = _next_page_token(response)
                if page_token is None:
                    break

            finish["pages"] = pages
            finish["records"] = len(playlists)

        LOGGER.info("playlists fetched count=%s pages=%s", len(playlists), pages)
        return playlists

    def fetch_videos(
        self,
        credential: Credential | None,
        include_description: bool = False,
        include_shorts: bool = True,
    ) -> list[VideoRecord]:
        resolved = _require_credential(credential)

        with self._telemetry.span(
            "catalog.fetch", resource="videos", auth_mode=resolved.mode
        ) as finish:
            uploads_playlist_id = self._resolve_uploads_playlist_id(resolved)

            videos: list[VideoRecord] = []
            page_token: str | None = None
            pages = 0
            skipped_shorts = 0
            while True:
                page = self._fetch_upload_page(
                    resolved,
                    uploads_playlist_id=uploads_playlist_id,
                    page_token=page_token,
                    include_description=include_description,
                    include_shorts=include_shorts,
                )
                pages += 1
                videos.extend(page.records)
                skipped_shorts += page.skipped_shorts

                if page.next_page_token is None:
                    break
                page_token = page.next_page_token

            finish["pages"] = pages
            finish["records"] = len(videos)
            finish["skipped_shorts"] = skipped_shorts

        LOGGER.info(
            "videos fetched count=%s pages=%s skipped_shorts=%s",
            len(videos),
            pages,
            skipped_shorts,
        )
        return videos

    def fetch_result_set(self, credential: Credential | None, options: FetchOptions) -> ResultSet:
        if not options.fetch_playlists and not options.fetch_videos:
            raise InvalidFetchOptionsError(
                "Select at least one of playlists or videos to fetch."
            )

        playlists: list[PlaylistRecord] = []
        videos: list[VideoRecord] = []
        if options.fetch_playlists:
            playlists = self.fetch_playlists(
                credential,
                include_description=options.include_playlist_descriptions,
            )
        if options.fetch_videos:
            videos = self.fetch_videos(
                credential,
                include_description=options.include_video_descriptions,
                include_shorts=options.include_shorts,
            )
        return ResultSet(playlists=playlists, videos=videos)

    def _resolve_uploads_playlist_id(self, credential: Credential) -> str:
        response = self._client.get(
            "channels",
            {"part": "contentDetails", **credential.channel_lookup_params()},
            credential.auth_params(),
        )

        items = _as_list(response.get("items"))
        if not items:
            raise NotFoundError("No channel found with the provided Channel ID")

        content_details = _as_dict(_as_dict(items[0]).get("contentDetails"))
        related = _as_dict(content_details.get("relatedPlaylists"))
        uploads = related.get("uploads")
        if not isinstance(uploads, str) or not uploads.strip():
            raise NotFoundError("Channel has no uploads playlist")
        return uploads

    def _fetch_upload_page(
        self,
        credential: Credential,
        *,
        uploads_playlist_id: str,
        page_token: str | None,
        include_description: bool,
        include_shorts: bool,
    ) -> _VideoPage:
        params = {
            "part": _LIST_PARTS,
            "playlistId": uploads_playlist_id,
            "maxResults": str(self._page_size),
        }
        if page_token is not None:
            params["pageToken"] = page_token

        response = self._client.get("playlistItems", params, credential.auth_params())
        items = [_as_dict(item) for item in _as_list(response.get("items"))]

        durations: dict[str, int] = {}
        if not include_shorts:
            video_ids = [
                video_id for video_id in (_playlist_item_video_id(item) for item in items) if video_id
            ]
            durations = self._lookup_durations(credential, video_ids)

        records: list[VideoRecord] = []
        skipped_shorts = 0
        for item in items:
            video_id = _playlist_item_video_id(item)
            if video_id is None:
                continue
            if not include_shorts and is_short(
                durations.get(video_id), max_seconds=self._shorts_max_seconds
            ):
                skipped_shorts += 1
                continue
            records.append(_video_record(item, video_id, include_description))

        self._telemetry.emit(
            "catalog.page.fetched",
            resource="playlistItems",
            items=len(items),
            skipped_shorts=skipped_shorts,
        )
        return _VideoPage(
            records=records,
            next_page_token=_next_page_token(response),
            skipped_shorts=skipped_shorts,
        )

    def _lookup_durations(self, credential: Credential, video_ids: list[str]) -> dict[str, int]:
        if not video_ids:
            return {}

        try:
            response = self._client.get(
                "videos",
                {
                    "part": "contentDetails",
                    "id": ",".join(video_ids),
                    "maxResults": str(len(video_ids)),
                },
                credential.auth_params(),
            )
        except RemoteApiError as exc:
            # Durations are advisory: unknown durations keep the video.
            LOGGER.warning(
                "duration lookup failed; keeping page unfiltered status=%s ids=%s",
                exc.status,
                len(video_ids),
            )
            self._telemetry.emit(
                "catalog.duration_lookup.failed",
                status=exc.status,
                ids=len(video_ids),
            )
            return {}

        durations: dict[str, int] = {}
        for item in _as_list(response.get("items")):
            item_dict = _as_dict(item)
            raw_video_id = item_dict.get("id")
            raw_duration = _as_dict(item_dict.get("contentDetails")).get("duration")
            if isinstance(raw_video_id, str) and isinstance(raw_duration, str):
                durations[raw_video_id] = parse_duration(raw_duration)
        return durations


def _require_credential(credential: Credential | None) -> Credential:
    if credential is None:
        raise AuthenticationError("Not authenticated: an API key or an access token is required.")
    return credential


def _playlist_record(item: dict[str, Any], include_description: bool) -> PlaylistRecord | None:
    playlist_id = item.get("id")
    if not isinstance(playlist_id, str):
        LOGGER.debug("skipping playlist item without id")
        return None

    snippet = _as_dict(item.get("snippet"))
    content_details = _as_dict(item.get("contentDetails"))
    fields: dict[str, Any] = {
        "id": playlist_id,
        "title": _as_text(snippet.get("title")),
        "item_count": max(0, _coerce_int(content_details.get("itemCount")) or 0),
    }
    if include_description:
        fields["description"] = _as_text(snippet.get("description"))
    return PlaylistRecord(**fields)


def _playlist_item_video_id(item: dict[str, Any]) -> str | None:
    video_id = _as_dict(item.get("contentDetails")).get("videoId")
    if isinstance(video_id, str) and video_id.strip():
        return video_id
    resource = _as_dict(_as_dict(item.get("snippet")).get("resourceId"))
    fallback = resource.get("videoId")
    if isinstance(fallback, str) and fallback.strip():
        return fallback
    return None


def _video_record(item: dict[str, Any], video_id: str, include_description: bool) -> VideoRecord:
    snippet = _as_dict(item.get("snippet"))
    published_at = snippet.get("publishedAt")
    if not isinstance(published_at, str):
        published_at = _as_dict(item.get("contentDetails")).get("videoPublishedAt")

    fields: dict[str, Any] = {
        "id": video_id,
        "title": _as_text(snippet.get("title")),
        "published_at": _as_text(published_at),
    }
    if include_description:
        fields["description"] = _as_text(snippet.get("description"))
    return VideoRecord(**fields)


def _next_page_token(response: dict[str, Any]) -> str | None:
    raw_next = response.get("nextPageToken")
    if isinstance(raw_next, str) and raw_next.strip():
        return raw_next
    return None


def _as_text(value: object) -> str:
    if isinstance(value, str):
        return value
    return ""


def _coerce_int(raw_value: object) -> int | None:
    if isinstance(raw_value, bool):
        return int(raw_value)
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, str):
        try:
            return int(raw_value)
        except ValueError:
            return None
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        raw_dict = cast(dict[object, object], value)
        converted: dict[str, Any] = {}
        for key, item in raw_dict.items():
            if isinstance(key, str):
                converted[key] = item
        return converted
    return {}


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return list(cast(list[Any], value))
    return []
