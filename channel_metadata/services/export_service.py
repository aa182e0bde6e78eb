from __future__ import annotations

import json
import logging
from datetime import UTC, date, datetime
from pathlib import Path

from channel_metadata.models.metadata_contracts import PlaylistRecord, ResultSet, VideoRecord

LOGGER = logging.getLogger("channel_metadata.export")

EXPORT_FILE_PREFIX = "youtube-metadata"


def render_export_json(result_set: ResultSet) -> str:
    return json.dumps(result_set.to_export_dict(), indent=2, ensure_ascii=False)


def export_filename(today: date | None = None) -> str:
    export_date = today or datetime.now(UTC).date()
    return f"{EXPORT_FILE_PREFIX}-{export_date.isoformat()}.json"


def write_export(result_set: ResultSet, directory: Path, *, today: date | None = None) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    export_path = directory / export_filename(today)
    export_path.write_text(render_export_json(result_set), encoding="utf-8")
    LOGGER.info(
        "export written path=%s playlists=%s videos=%s",
        export_path,
        len(result_set.playlists),
        len(result_set.videos),
    )
    return export_path


def example_result_set() -> ResultSet:
    """Sample data showing the export shape with descriptions included."""
    return ResultSet(
        playlists=[
            PlaylistRecord(
                id="PLxxxxxxxxxxxxxxxxxxx1",
                title="Lorem Ipsum Coding Tutorials",
                item_count=42,
                description=(
                    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod "
                    "tempor incididunt ut labore et dolore magna aliqua."
                ),
            ),
            PlaylistRecord(
                id="PLxxxxxxxxxxxxxxxxxxx2",
                title="Dolor Sit Amet Reviews",
                item_count=18,
                description=(
                    "Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris nisi "
                    "ut aliquip ex ea commodo consequat."
                ),
            ),
        ],
        videos=[
            VideoRecord(
                id="xxxxxxxxxxx1",
                title="Lorem Ipsum: Introduction to Web Development",
                published_at="2025-01-15T10:30:00Z",
                description=(
                    "Duis aute irure dolor in reprehenderit in voluptate velit esse cillum "
                    "dolore eu fugiat nulla pariatur. Excepteur sint occaecat cupidatat non "
                    "proident."
                ),
            ),
            VideoRecord(
                id="xxxxxxxxxxx2",
                title="Consectetur Adipiscing: Advanced JavaScript Patterns",
                published_at="2025-02-20T14:45:00Z",
                description=(
                    "Sed ut perspiciatis unde omnis iste natus error sit voluptatem "
                    "accusantium doloremque laudantium, totam rem aperiam, eaque ipsa quae "
                    "ab illo inventore veritatis."
                ),
            ),
        ],
    )
