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

import os
from pathlib import Path

import typer

from ...config import AppConfig
from ...core.models import SongRecord
from ...qr.codec import QrCodeGenerator
from ...render.codes import RENDER_JOBS_ENV
from ...render.pdf_render import render_deck_pdf
from ...sheets.workbook import read_songs
from ..api import print_completion_panel, print_deck_summary, status
from ..core.common import _ctx_value, _load_config, _open_catalog, _quiet, _run_cli
from ..core.log import _warn

DEFAULT_OUTPUT_NAME = "cards.pdf"

_GENERATE_HELP = (
    "Build a printable PDF card deck.\n\n"
    "Data faces are printed first, then the QR faces, mirrored for duplex printing.\n\n"
    "Examples:\n"
    "  songdeck generate songs.xlsx\n"
    "  songdeck generate songs.xlsx -o deck.pdf --no-ordinals\n"
    "  songdeck generate --from-catalog --paper A4\n"
    '  songdeck generate songs.xlsx --year-placeholder "?"\n'
)


def register(app: typer.Typer) -> None:
    app.command(help=_GENERATE_HELP)(generate)


def generate(
    ctx: typer.Context,
    sheet: Path | None = typer.Argument(
        None,
        help="Spreadsheet (.xlsx) with ARTISTA and CANCION columns; LANZAMIENTO, YOUTUBE optional.",
    ),
    from_catalog: bool = typer.Option(
        False,
        "--from-catalog",
        help="Use every song in the catalog instead of a spreadsheet.",
        rich_help_panel="Inputs",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output PDF path (defaults to <sheet>.pdf or cards.pdf).",
        rich_help_panel="Outputs",
    ),
    ordinals: bool | None = typer.Option(
        None,
        "--ordinals/--no-ordinals",
        help="Print the card number in the corner of both faces.",
        rich_help_panel="Layout",
        show_default=False,
    ),
    mirror: bool | None = typer.Option(
        None,
        "--mirror/--no-mirror",
        help="Mirror the QR pages for long-edge duplex printing.",
        rich_help_panel="Layout",
        show_default=False,
    ),
    year_placeholder: str | None = typer.Option(
        None,
        "--year-placeholder",
        help="Text printed when a song has no release year.",
        rich_help_panel="Layout",
    ),
    jobs: str | None = typer.Option(
        None,
        "--jobs",
        "-j",
        help="QR worker threads ('auto' or a positive integer).",
        rich_help_panel="Performance",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        if from_catalog == (sheet is not None):
            raise ValueError("provide a spreadsheet or --from-catalog (exactly one)")
        config = _load_config(ctx)
        quiet_value = _quiet(ctx)
        if sheet is not None:
            records = _sheet_records(sheet, quiet=quiet_value)
            output_path = output or Path(f"{sheet.stem}.pdf")
        else:
            records = tuple(song.record() for song in _open_catalog(ctx, config).fetch_all())
            output_path = output or Path(DEFAULT_OUTPUT_NAME)

        spec = config.card_spec().with_options(
            show_ordinals=ordinals,
            mirror_code_face=mirror,
            year_placeholder=year_placeholder,
        )
        with status(f"Rendering {len(records)} cards...", quiet=quiet_value):
            summary = render_deck_pdf(
                records,
                output_path,
                geometry=config.geometry,
                spec=spec,
                generator=QrCodeGenerator(config.qr_config),
                workers=_resolve_jobs(jobs, config),
            )
        print_deck_summary(summary, quiet=quiet_value)
        steps = _print_steps(summary.pages, mirrored=spec.mirror_code_face)
        print_completion_panel("Printing", steps, quiet=quiet_value)

    _run_cli(_run, debug=debug_value)


def _sheet_records(sheet: Path, *, quiet: bool) -> tuple[SongRecord, ...]:
    # Songs without a link still get a card, with the no-code face.
    result = read_songs(sheet.expanduser(), require_link=False)
    if result.skipped:
        noun = "row" if result.skipped == 1 else "rows"
        _warn(f"skipped {result.skipped} incomplete {noun} in {sheet}", quiet=quiet)
    return result.records


def _resolve_jobs(jobs: str | None, config: AppConfig) -> int | str | None:
    if jobs is not None:
        return jobs
    if os.environ.get(RENDER_JOBS_ENV):
        return None
    return config.runtime.render_jobs


def _print_steps(pages: int, *, mirrored: bool) -> list[str]:
    half = pages // 2
    steps = [
        f"Print pages 1-{half} (song faces) on the front.",
        f"Print pages {half + 1}-{pages} (QR faces) on the back.",
    ]
    if mirrored:
        steps.append("Flip on the long edge so each QR code lands behind its card.")
    else:
        steps.append("QR pages are not mirrored; check the alignment before cutting.")
    return steps
