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

import importlib.metadata
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any

import typer
from rich.traceback import install as install_rich_traceback

from ...catalog.store import CatalogStore
from ...config import PAPER_CONFIGS, AppConfig, UiDefaults, load_app_config
from ..api import configure_ui, console_err
from .log import configure_logging

# Failures reported as "Error: ..." with exit code 2 instead of a traceback.
EXPECTED_ERRORS = (OSError, RuntimeError, ValueError, TypeError, LookupError, sqlite3.Error)


def _run_cli(func: Callable[[], Any], *, debug: bool) -> None:
    if debug:
        install_rich_traceback(show_locals=True)
    try:
        result = func()
    except EXPECTED_ERRORS as exc:
        if debug:
            raise
        console_err.print(f"[error]Error:[/error] {exc}")
        raise typer.Exit(code=2)
    if isinstance(result, int) and result != 0:
        raise typer.Exit(code=result)


def _ctx_value(ctx: typer.Context, key: str) -> Any:
    if ctx.obj is None:
        return None
    return ctx.obj.get(key)


def _quiet(ctx: typer.Context) -> bool:
    return bool(_ctx_value(ctx, "quiet"))


def _paper_callback(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().upper()
    if normalized not in PAPER_CONFIGS:
        raise typer.BadParameter(f"paper must be one of: {', '.join(sorted(PAPER_CONFIGS))}")
    return normalized


def _load_config(ctx: typer.Context) -> AppConfig:
    """Load the active config and fold its [ui] defaults into the context."""
    config = load_app_config(_ctx_value(ctx, "config"), paper_size=_ctx_value(ctx, "paper"))
    _apply_ui_defaults(ctx, config.ui)
    return config


def _apply_ui_defaults(ctx: typer.Context, ui: UiDefaults) -> None:
    # Flags can only switch these on; the config never overrides an explicit flag.
    if ctx.obj is None:
        return
    if ui.no_color and not ctx.obj.get("no_color"):
        ctx.obj["no_color"] = True
        configure_ui(no_color=True)
    if ui.quiet and not ctx.obj.get("quiet"):
        ctx.obj["quiet"] = True
        configure_logging(debug=bool(ctx.obj.get("debug")), quiet=True)


def _catalog_path(ctx: typer.Context, config: AppConfig) -> Path:
    override = _ctx_value(ctx, "catalog")
    if override:
        return Path(override).expanduser()
    return config.catalog_path


def _open_catalog(ctx: typer.Context, config: AppConfig | None = None) -> CatalogStore:
    config = config or _load_config(ctx)
    return CatalogStore(_catalog_path(ctx, config))


def _get_version() -> str:
    try:
        return importlib.metadata.version("songdeck")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"
