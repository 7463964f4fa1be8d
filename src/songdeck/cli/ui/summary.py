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

from collections.abc import Sequence

from rich import box
from rich.table import Table

from ...core.models import SongPage, SongStatistics, StatEntry
from ...render.pdf_render import DeckSummary
from . import build_kv_table, console, console_err, panel


def print_deck_summary(summary: DeckSummary, *, quiet: bool) -> None:
    if summary.failed_codes:
        noun = "code" if summary.failed_codes == 1 else "codes"
        console_err.print(
            f"[warning]Warning:[/warning] {summary.failed_codes} QR {noun} could not be "
            "generated; those cards are marked as unavailable."
        )
    if quiet:
        return
    rows = [
        ("Cards", str(summary.records)),
        ("Pages", f"{summary.pages} ({summary.pages // 2} per side)"),
        ("Without link", str(summary.missing_codes)),
        ("QR failures", str(summary.failed_codes)),
        ("Output", str(summary.output_path)),
    ]
    console.print(panel("Deck", build_kv_table(rows)))


def print_import_summary(imported: int, skipped: int, *, source: str, quiet: bool) -> None:
    if quiet:
        return
    rows = [("Source", source), ("Imported", str(imported)), ("Skipped", str(skipped))]
    console.print(panel("Import", build_kv_table(rows)))


def build_song_table(page: SongPage) -> Table:
    last = page.page_count or 1
    table = Table(
        title=f"Songs (page {page.page + 1} of {last}, {page.total} total)",
        box=box.SIMPLE_HEAD,
    )
    table.add_column("ID", justify="right", style="song.id", no_wrap=True)
    table.add_column("Artist", style="song.artist")
    table.add_column("Title")
    table.add_column("Year", justify="right", style="song.year")
    table.add_column("Link", overflow="fold")
    for song in page.songs:
        year = "" if song.year is None else str(song.year)
        table.add_row(str(song.id), song.artist, song.title, year, song.link)
    return table


def print_song_page(page: SongPage) -> None:
    if not page.songs:
        console.print("[muted]No songs found.[/muted]")
        return
    console.print(build_song_table(page))


def _entries_table(title: str, entries: Sequence[StatEntry]) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAD, title_justify="left")
    table.add_column("Value")
    table.add_column("Songs", justify="right")
    for entry in entries:
        table.add_row(entry.label, str(entry.count))
    return table


def print_statistics(stats: SongStatistics) -> None:
    console.print(
        panel(
            "Catalog",
            build_kv_table(
                [
                    ("Songs", str(stats.total_songs)),
                    ("Missing year", str(stats.missing_year_count)),
                ]
            ),
        )
    )
    sections = (
        ("Most common years", stats.years_most_common),
        ("Least common years", stats.years_least_common),
        ("Least common decades", stats.decades_least_common),
        ("Most common artists", stats.artists_most_common),
    )
    for title, entries in sections:
        if entries:
            console.print(_entries_table(title, entries))
