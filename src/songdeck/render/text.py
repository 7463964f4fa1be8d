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

import logging
from collections.abc import Callable
from typing import Sequence

from fpdf import FPDF

from .spec import TextStyleSpec

logger = logging.getLogger(__name__)

PT_TO_MM = 0.3527777778

# Common typography that core fonts cannot encode.
_CORE_FONT_FALLBACKS = str.maketrans(
    {
        "\u2014": "-",
        "\u2013": "-",
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u2026": "...",
    }
)

WidthFn = Callable[[str], float]


class FontMeasurer:
    """String widths in millimetres using the core PDF font metrics."""

    def __init__(self, pdf: FPDF | None = None) -> None:
        self._pdf = pdf or FPDF(unit="mm")

    def use(self, style: TextStyleSpec) -> WidthFn:
        self._pdf.set_font(style.font_family, style=style.font_style, size=style.font_size)
        return self._pdf.get_string_width

    def wrap(self, text: str, style: TextStyleSpec, max_width: float) -> list[str]:
        return wrap_lines_to_width(self.use(style), [text], max_width)


def wrap_lines_to_width(width: WidthFn, lines: Sequence[str], max_width: float) -> list[str]:
    wrapped: list[str] = []
    for line in lines:
        if not line:
            wrapped.append("")
            continue
        words = line.split()
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if width(candidate) <= max_width:
                current = candidate
                continue
            if current:
                wrapped.append(current)
                current = ""
            if width(word) <= max_width:
                current = word
                continue
            parts: list[str] = []
            chunk = ""
            for ch in word:
                next_chunk = f"{chunk}{ch}"
                if chunk and width(next_chunk) > max_width:
                    parts.append(chunk)
                    chunk = ch
                else:
                    chunk = next_chunk
            if chunk:
                parts.append(chunk)
            wrapped.extend(parts[:-1])
            current = parts[-1] if parts else ""
        if current:
            wrapped.append(current)
    return wrapped


def core_font_text(text: str) -> str:
    """Map text onto the latin-1 range covered by the core PDF fonts."""
    mapped = text.translate(_CORE_FONT_FALLBACKS)
    converted = mapped.encode("latin-1", "replace").decode("latin-1")
    if converted != mapped:
        logger.warning("Characters outside latin-1 printed as '?' in %r", text)
    return converted


def font_line_height(size_pt: float, multiplier: float = 1.2) -> float:
    return float(size_pt) * PT_TO_MM * multiplier


def style_line_height(style: TextStyleSpec) -> float:
    if style.line_height_mm is not None:
        return float(style.line_height_mm)
    return font_line_height(style.font_size)
