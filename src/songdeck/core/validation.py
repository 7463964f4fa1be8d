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

import math
import re

from .models import SongRecord

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def cell_text(value: object) -> str:
    """Render a spreadsheet/database cell as trimmed text."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value)).strip()
    return str(value).strip()


def parse_year(value: object) -> int | None:
    """Parse a release year; anything unparsable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return math.trunc(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value.strip())
        if match is None:
            return None
        return int(match.group(0))
    return None


def require_text(value: object, *, label: str) -> str:
    """Validate that value is non-empty text after trimming."""
    text = cell_text(value)
    if not text:
        raise ValueError(f"{label} is required")
    return text


def normalize_record(
    *,
    artist: object,
    title: object,
    year: object,
    link: object,
    require_link: bool = True,
) -> SongRecord:
    """Build a validated record: artist and title must be non-empty.

    The link is required too unless require_link is False, in which case a
    blank link is kept as an empty string.
    """
    return SongRecord(
        artist=require_text(artist, label="artist"),
        title=require_text(title, label="title"),
        year=parse_year(year),
        link=require_text(link, label="link") if require_link else cell_text(link),
    )


def is_blank_row(values: object) -> bool:
    if not isinstance(values, (list, tuple)):
        return True
    return all(not cell_text(value) for value in values)
