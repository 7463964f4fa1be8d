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
import shlex
import subprocess
from pathlib import Path

import typer

from ...config import AppConfig, resolve_config_path
from ..api import build_kv_table, console, panel
from ..core.common import _catalog_path, _ctx_value, _load_config, _quiet, _run_cli

SYSTEM_EDITOR_NAMES = {"default", "system"}

_CONFIG_HELP = (
    "Show or edit the active TOML config.\n\n"
    "Without options the file opens in $VISUAL / $EDITOR, or the system default\n"
    "application when neither is set.\n\n"
    "Examples:\n"
    "  songdeck config --show\n"
    "  songdeck --paper A4 config --print-path\n"
    "  songdeck config --editor nano\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_CONFIG_HELP)(config)


def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False,
        "--show",
        help="Print the paper, grid, catalog and QR settings in effect and exit.",
        rich_help_panel="Behavior",
    ),
    print_path: bool = typer.Option(
        False,
        "--print-path",
        help="Print the resolved config path and exit.",
        rich_help_panel="Behavior",
    ),
    editor: str | None = typer.Option(
        None,
        "--editor",
        "-e",
        help="Editor command (defaults to $VISUAL/$EDITOR; 'default' uses the system opener).",
        rich_help_panel="Behavior",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        if show:
            settings = _load_config(ctx)
            console.print(panel("Config", build_kv_table(settings_rows(ctx, settings))))
            return
        path = resolve_config_path(_ctx_value(ctx, "config"), paper_size=_ctx_value(ctx, "paper"))
        if print_path:
            console.print(str(path), soft_wrap=True)
            return
        _open_in_editor(path, editor=editor, quiet=_quiet(ctx))

    _run_cli(_run, debug=debug_value)


def settings_rows(ctx: typer.Context, settings: AppConfig) -> list[tuple[str, str]]:
    geometry = settings.geometry
    qr = settings.qr_config
    jobs = settings.runtime.render_jobs
    return [
        ("File", str(settings.source_path)),
        (
            "Paper",
            f"{settings.paper_size} ({geometry.page_width:g} x {geometry.page_height:g} mm)",
        ),
        (
            "Grid",
            f"{geometry.grid_cols} x {geometry.grid_rows} cards of {geometry.card_size:g} mm, "
            f"gap {geometry.gap:g} mm",
        ),
        ("Catalog", str(_catalog_path(ctx, settings))),
        ("QR", f"error level {qr.error}, {qr.module_shape} modules"),
        ("Render jobs", "auto" if jobs is None else str(jobs)),
    ]


def _open_in_editor(path: Path, *, editor: str | None, quiet: bool) -> None:
    resolved = path.expanduser()
    if not resolved.exists():
        raise FileNotFoundError(f"config file not found: {resolved}")
    command = _editor_command(editor)
    if not quiet:
        via = " ".join(command) if command else "the system default application"
        console.print(f"[muted]Opening {resolved} with {via}...[/muted]")
    if command:
        subprocess.run([*command, str(resolved)], check=False)
    else:
        typer.launch(str(resolved))


def _editor_command(editor: str | None) -> list[str] | None:
    value = editor if editor is not None else os.environ.get("VISUAL") or os.environ.get("EDITOR")
    value = (value or "").strip()
    if not value or value.lower() in SYSTEM_EDITOR_NAMES:
        return None
    return shlex.split(value, posix=os.name != "nt")
