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

from dataclasses import dataclass
from typing import Final, Literal, Union

from .geometry import Slot

Face = Literal["data", "code"]
TextAlign = Literal["L", "C", "R"]
TextBaseline = Literal["top", "middle"]

FACE_DATA: Final = "data"
FACE_CODE: Final = "code"


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    line_width: float = 0.2


@dataclass(frozen=True)
class TextOp:
    """A block of pre-wrapped lines anchored at (x, y).

    x is the anchor for the alignment (centre for "C"); y is the top of the
    first line for baseline "top" or the vertical centre of the block for
    "middle".
    """

    lines: tuple[str, ...]
    x: float
    y: float
    font_family: str
    font_style: str
    font_size: float
    line_height: float
    align: TextAlign = "C"
    baseline: TextBaseline = "top"
    role: str = ""


@dataclass(frozen=True)
class ImageOp:
    x: float
    y: float
    width: float
    height: float
    data: bytes


DrawOp = Union[RectOp, TextOp, ImageOp]


@dataclass(frozen=True)
class DeckPage:
    face: Face
    index: int
    ops: tuple[DrawOp, ...]


@dataclass(frozen=True)
class Deck:
    pages: tuple[DeckPage, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def face_pages(self, face: Face) -> tuple[DeckPage, ...]:
        return tuple(page for page in self.pages if page.face == face)


@dataclass(frozen=True)
class CardPlacement:
    record_index: int
    data_slot: Slot
    code_slot: Slot

    @property
    def ordinal(self) -> int:
        return self.record_index + 1


@dataclass(frozen=True)
class CodeImage:
    data: bytes


@dataclass(frozen=True)
class NoCodeInput:
    pass


@dataclass(frozen=True)
class CodeGenerationFailed:
    reason: str


CodeOutcome = Union[CodeImage, NoCodeInput, CodeGenerationFailed]
