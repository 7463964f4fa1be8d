#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.


from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from ...catalog.store import DEFAULT_PAGE_SIZE, PAGE_SIZE_CHOICES, SORT_ORDERS
from ...core.models import SongRecord
from ...core.statistics import DEFAULT_STATS_LIMIT
from ...sheets.workbook import read_songs, write_songs
from ..api import console, print_import_summary, print_song_page, print_statistics
from ..core.common import _ctx_value, _open_catalog, _quiet, _run_cli

_CATALOG_HELP = (
    "Manage the local song catalog.\n\n"
    "Examples:\n"
    "  songdeck catalog import songs.xlsx\n"
    '  songdeck catalog list --search "queen" --sort year_asc\n'
    "  songdeck catalog export backup.xlsx\n"
)

catalog_app = typer.Typer(help=_CATALOG_HELP, no_args_is_help=True)


def register(app: typer.Typer) -> None:
    app.add_typer(catalog_app, name="catalog")


def _debug(ctx: typer.Context) -> bool:
    return bool(_ctx_value(ctx, "debug"))


@catalog_app.command("list")
def list_songs(
    ctx: typer.Context,
    search: str | None = typer.Option(
        None, "--search", "-s", help="Match artist, title or link (case-insensitive)."
    ),
    year: int | None = typer.Option(None, "--year", "-y", help="Only songs from this year."),
    sort: str = typer.Option(
        "id_asc", "--sort", help=f"Sort order: {', '.join(SORT_ORDERS)}."
    ),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number (1-based)."),
    page_size: int = typer.Option(
        DEFAULT_PAGE_SIZE,
        "--page-size",
        min=1,
        help=f"Songs per page (usually one of {', '.join(map(str, PAGE_SIZE_CHOICES))}).",
    ),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        store = _open_catalog(ctx)
        result = store.list_songs(
            page=page - 1,
            page_size=page_size,
            search=search,
            year=year,
            sort=sort,
        )
        print_song_page(result)

    _run_cli(_run, debug=debug)


@catalog_app.command("add")
def add_song(
    ctx: typer.Context,
    artist: str = typer.Option(..., "--artist", help="Artist name."),
    title: str = typer.Option(..., "--title", help="Song title."),
    link: str = typer.Option(..., "--link", help="Video link encoded in the QR code."),
    year: int | None = typer.Option(None, "--year", help="Release year."),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        song = _open_catalog(ctx).create_song(
            SongRecord(artist=artist, title=title, year=year, link=link)
        )
        if not _quiet(ctx):
            console.print(f"Added song {song.id}: {song.artist} - {song.title}")

    _run_cli(_run, debug=debug)


@catalog_app.command("edit")
def edit_song(
    ctx: typer.Context,
    song_id: int = typer.Argument(..., help="Song id."),
    artist: str | None = typer.Option(None, "--artist", help="New artist name."),
    title: str | None = typer.Option(None, "--title", help="New song title."),
    link: str | None = typer.Option(None, "--link", help="New video link."),
    year: int | None = typer.Option(None, "--year", help="New release year."),
    clear_year: bool = typer.Option(False, "--clear-year", help="Remove the release year."),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        if clear_year and year is not None:
            raise ValueError("use either --year or --clear-year, not both")
        store = _open_catalog(ctx)
        record = store.get_song(song_id).record()
        changes: dict[str, object] = {}
        if artist is not None:
            changes["artist"] = artist
        if title is not None:
            changes["title"] = title
        if link is not None:
            changes["link"] = link
        if year is not None or clear_year:
            changes["year"] = year
        song = store.update_song(song_id, replace(record, **changes))
        if not _quiet(ctx):
            console.print(f"Updated song {song.id}: {song.artist} - {song.title}")

    _run_cli(_run, debug=debug)


@catalog_app.command("remove")
def remove_song(
    ctx: typer.Context,
    song_id: int = typer.Argument(..., help="Song id."),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        _open_catalog(ctx).delete_song(song_id)
        if not _quiet(ctx):
            console.print(f"Removed song {song_id}")

    _run_cli(_run, debug=debug)


@catalog_app.command("import")
def import_songs(
    ctx: typer.Context,
    sheet: Path = typer.Argument(..., help="Spreadsheet (.xlsx) to merge into the catalog."),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        result = read_songs(sheet.expanduser())
        imported = _open_catalog(ctx).bulk_upsert(result.records)
        print_import_summary(imported, result.skipped, source=str(sheet), quiet=_quiet(ctx))

    _run_cli(_run, debug=debug)


@catalog_app.command("export")
def export_songs(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Destination .xlsx file."),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        songs = _open_catalog(ctx).fetch_all()
        count = write_songs(output.expanduser(), [song.record() for song in songs])
        if not _quiet(ctx):
            console.print(f"Exported {count} songs to {output}")

    _run_cli(_run, debug=debug)


@catalog_app.command("stats")
def show_stats(
    ctx: typer.Context,
    limit: int = typer.Option(
        DEFAULT_STATS_LIMIT, "--limit", "-n", min=1, help="Entries per ranking."
    ),
) -> None:
    debug = _debug(ctx)

    def _run() -> None:
        print_statistics(_open_catalog(ctx).statistics(limit=limit))

    _run_cli(_run, debug=debug)
