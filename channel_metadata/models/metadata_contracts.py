from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlaylistRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str
    title: str
    item_count: int = Field(ge=0, alias="itemCount")
    description: str | None = None

    @property
    def has_description(self) -> bool:
        return "description" in self.model_fields_set

    def to_export_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class VideoRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str
    title: str
    published_at: str = Field(alias="publishedAt")
    description: str | None = None

    @property
    def has_description(self) -> bool:
        return "description" in self.model_fields_set

    def to_export_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


def _default_playlists() -> list[PlaylistRecord]:
    return []


def _default_videos() -> list[VideoRecord]:
    return []


class ResultSet(BaseModel):
    """Playlists and videos fetched for one channel.

    The description key is all-or-nothing per list: either every record of a
    list carries it or none does.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    playlists: list[PlaylistRecord] = Field(default_factory=_default_playlists)
    videos: list[VideoRecord] = Field(default_factory=_default_videos)

    @model_validator(mode="after")
    def _check_uniform_descriptions(self) -> ResultSet:
        for label, records in (("playlists", self.playlists), ("videos", self.videos)):
            flags = {record.has_description for record in records}
            if len(flags) > 1:
                raise ValueError(f"{label} must either all carry a description or none")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.playlists and not self.videos

    def to_export_dict(self) -> dict[str, Any]:
        return {
            "playlists": [playlist.to_export_dict() for playlist in self.playlists],
            "videos": [video.to_export_dict() for video in self.videos],
        }


class FetchOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    fetch_playlists: bool = True
    fetch_videos: bool = True
    include_playlist_descriptions: bool = False
    include_video_descriptions: bool = False
    include_shorts: bool = True


def _default_fetch_options() -> FetchOptions:
    return FetchOptions()


class MetadataFetchRequest(BaseModel):
    """Credentials and options for one fetch.

    A bearer token is read from the `Authorization` header instead of the body.
    """

    model_config = ConfigDict(extra="forbid")

    api_key: str | None = None
    channel_id: str | None = None
    options: FetchOptions = Field(default_factory=_default_fetch_options)
