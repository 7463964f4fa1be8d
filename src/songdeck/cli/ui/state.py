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

import sys
from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "status": "dim",
        "success": "green",
        "warning": "yellow",
        "error": "bold red",
        "panel": "cyan",
        "muted": "dim",
        "song.id": "dim",
        "song.artist": "cyan",
        "song.year": "bold magenta",
    }
)


def isatty(stream, fallback) -> bool:
    if stream is not None:
        try:
            return bool(stream.isatty())
        except (OSError, ValueError, AttributeError):
            return False
    return bool(getattr(fallback, "isatty", lambda: False)())


@dataclass
class UIContext:
    """The stdout and stderr consoles every command prints through."""

    theme: Theme
    console: Console
    console_err: Console

    def set_no_color(self, no_color: bool) -> None:
        for output in (self.console, self.console_err):
            output.no_color = no_color


def _console_for(stream_name: str) -> Console:
    stderr = stream_name == "stderr"
    terminal = isatty(getattr(sys, f"__{stream_name}__"), getattr(sys, stream_name))
    return Console(stderr=stderr, theme=THEME, force_terminal=terminal)


def create_default_context() -> UIContext:
    return UIContext(
        theme=THEME,
        console=_console_for("stdout"),
        console_err=_console_for("stderr"),
    )


DEFAULT_CONTEXT = create_default_context()


def get_context() -> UIContext:
    return DEFAULT_CONTEXT
