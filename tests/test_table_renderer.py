from __future__ import annotations

from rich.console import Console

from channel_metadata.models.metadata_contracts import PlaylistRecord, ResultSet, VideoRecord
from channel_metadata.services.export_service import example_result_set
from channel_metadata.services.table_renderer import (
    build_result_tables,
    format_published_at,
    render_result_set,
)


def _headers(table: object) -> list[str]:
    return [str(column.header) for column in getattr(table, "columns")]


def test_tables_include_description_column_when_present() -> None:
    tables = build_result_tables(example_result_set())

    assert [table.title for table in tables] == ["Playlists", "Videos"]
    assert _headers(tables[0]) == ["ID", "Title", "Item Count", "Description"]
    assert _headers(tables[1]) == ["ID", "Title", "Published At", "Description"]


def test_tables_omit_description_column_and_empty_lists() -> None:
    result_set = ResultSet(
        playlists=[PlaylistRecord(id="PL1", title="One", item_count=4)],
        videos=[],
    )

    tables = build_result_tables(result_set)

    assert len(tables) == 1
    assert _headers(tables[0]) == ["ID", "Title", "Item Count"]


def test_render_without_results_prints_placeholder() -> None:
    console = Console(record=True, width=120)

    render_result_set(ResultSet(), console)

    assert "No results found" in console.export_text()


def test_render_keeps_markup_like_titles_verbatim() -> None:
    console = Console(record=True, width=160)
    result_set = ResultSet(
        videos=[VideoRecord(id="v1", title="[bold]Live[/bold]", published_at="not a date")]
    )

    render_result_set(result_set, console)

    output = console.export_text()
    assert "[bold]Live[/bold]" in output
    assert "not a date" in output


def test_format_published_at_parses_iso_timestamps() -> None:
    assert format_published_at("2025-01-15T10:30:00") == "2025-01-15 10:30:00"
    assert format_published_at("garbage") == "garbage"
    assert len(format_published_at("2025-01-15T10:30:00Z")) == len("2025-01-15 10:30:00")
