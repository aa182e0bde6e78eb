"""Command line entry point for Channel Metadata."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from channel_metadata.config import AppSettings, load_settings
from channel_metadata.dependencies import build_metadata_service
from channel_metadata.logging_config import configure_cli_logging
from channel_metadata.models.metadata_contracts import FetchOptions, ResultSet
from channel_metadata.services.catalog_client import CatalogServiceError, RemoteApiError
from channel_metadata.services.credentials import Credential, resolve_credential
from channel_metadata.services.export_service import (
    example_result_set,
    render_export_json,
    write_export,
)
from channel_metadata.services.metadata_session import MetadataSession
from channel_metadata.services.table_renderer import render_result_set

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Channel Metadata - export a channel's playlists and videos."""


def _resolve_cli_credential(
    settings: AppSettings,
    *,
    api_key: str | None,
    channel_id: str | None,
    token: str | None,
) -> Credential:
    # Flags replace the configured credentials entirely instead of mixing with them.
    if api_key or channel_id or token:
        return resolve_credential(api_key=api_key, channel_id=channel_id, access_token=token)
    return resolve_credential(
        api_key=settings.api_key,
        channel_id=settings.channel_id,
        access_token=settings.access_token,
    )


def _emit_result_set(result_set: ResultSet, *, as_json: bool, output: Path | None) -> None:
    if as_json:
        click.echo(render_export_json(result_set))
    else:
        render_result_set(result_set, console)

    if output is not None:
        export_path = write_export(result_set, output)
        err_console.print(f"Saved export to [cyan]{export_path}[/cyan]")


@main.command()
@click.option("--api-key", help="YouTube Data API key (needs --channel-id).")
@click.option("--channel-id", help="Channel id to read with the API key.")
@click.option("--token", help="OAuth access token; reads the signed-in user's channel.")
@click.option("--playlists/--no-playlists", default=True, show_default=True)
@click.option("--videos/--no-videos", default=True, show_default=True)
@click.option("--playlist-descriptions", is_flag=True, help="Include playlist descriptions.")
@click.option("--video-descriptions", is_flag=True, help="Include video descriptions.")
@click.option(
    "--include-shorts/--exclude-shorts",
    default=True,
    show_default=True,
    help="Keep or drop videos of 60 seconds or less.",
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write youtube-metadata-<date>.json into.",
)
@click.option(
    "--save",
    is_flag=True,
    help="Write the export into the configured export directory.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the JSON export instead of tables.")
@click.option("--verbose", is_flag=True, help="Log catalog requests to stderr.")
def fetch(
    api_key: str | None,
    channel_id: str | None,
    token: str | None,
    playlists: bool,
    videos: bool,
    playlist_descriptions: bool,
    video_descriptions: bool,
    include_shorts: bool,
    output: Path | None,
    save: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """Fetch playlists and videos for a channel."""
    settings = load_settings()
    configure_cli_logging(settings, verbose=verbose)

    options = FetchOptions(
        fetch_playlists=playlists,
        fetch_videos=videos,
        include_playlist_descriptions=playlist_descriptions,
        include_video_descriptions=video_descriptions,
        include_shorts=include_shorts,
    )
    try:
        credential = _resolve_cli_credential(
            settings,
            api_key=api_key,
            channel_id=channel_id,
            token=token,
        )
        session = MetadataSession(build_metadata_service(settings), credential)
        if not as_json:
            err_console.print("[magenta]Loading... Please wait[/magenta]")
        result_set = session.fetch(options)
    except CatalogServiceError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        if isinstance(exc, RemoteApiError) and exc.status == 401:
            err_console.print("[yellow]Authentication expired. Please sign in again.[/yellow]")
        raise click.exceptions.Exit(1) from exc

    if output is None and save:
        output = settings.export_dir
    _emit_result_set(result_set, as_json=as_json, output=output)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the JSON export instead of tables.")
def examples(as_json: bool) -> None:
    """Show sample output with descriptions included."""
    _emit_result_set(example_result_set(), as_json=as_json, output=None)


if __name__ == "__main__":
    main()
