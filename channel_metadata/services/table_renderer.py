from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.table import Table
from rich.text import Text

from channel_metadata.models.metadata_contracts import PlaylistRecord, ResultSet, VideoRecord

NO_RESULTS_MESSAGE = "No results found"


def build_result_tables(result_set: ResultSet) -> list[Table]:
    tables: list[Table] = []
    if result_set.playlists:
        tables.append(_playlists_table(result_set.playlists))
    if result_set.videos:
        tables.append(_videos_table(result_set.videos))
    return tables


def render_result_set(result_set: ResultSet, console: Console) -> None:
    tables = build_result_tables(result_set)
    if not tables:
        console.print(f"[magenta]{NO_RESULTS_MESSAGE}[/magenta]")
        return
    for table in tables:
        console.print(table)


def format_published_at(raw_value: str) -> str:
    try:
        parsed = datetime.fromisoformat(raw_value)
    except ValueError:
        return raw_value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def _playlists_table(playlists: list[PlaylistRecord]) -> Table:
    with_description = playlists[0].has_description
    table = Table(title="Playlists", show_lines=with_description)
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Item Count", justify="right")
    if with_description:
        table.add_column("Description", overflow="fold")

    for playlist in playlists:
        # Text cells keep titles like "[live]" from being parsed as markup.
        row = [Text(playlist.id), Text(playlist.title), Text(str(playlist.item_count))]
        if with_description:
            row.append(Text(playlist.description or ""))
        table.add_row(*row)
    return table


def _videos_table(videos: list[VideoRecord]) -> Table:
    with_description = videos[0].has_description
    table = Table(title="Videos", show_lines=with_description)
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Published At", no_wrap=True)
    if with_description:
        table.add_column("Description", overflow="fold")

    for video in videos:
        row = [Text(video.id), Text(video.title), Text(format_published_at(video.published_at))]
        if with_description:
            row.append(Text(video.description or ""))
        table.add_row(*row)
    return table
