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
from dataclasses import dataclass

# Tolerance for millimetre comparisons (grid exactly filling the page)
COORDINATE_EPSILON = 0.01

LETTER_WIDTH_MM = 215.9
LETTER_HEIGHT_MM = 279.4
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0


class GeometryError(ValueError):
    """Raised when the card grid cannot be placed on the page."""


@dataclass(frozen=True)
class PageGeometry:
    page_width: float = LETTER_WIDTH_MM
    page_height: float = LETTER_HEIGHT_MM
    card_size: float = 48.0
    grid_cols: int = 4
    grid_rows: int = 4
    gap: float = 4.0

    @property
    def slots_per_page(self) -> int:
        return self.grid_cols * self.grid_rows

    @property
    def pitch(self) -> float:
        return self.card_size + self.gap

    @property
    def grid_width(self) -> float:
        return grid_extent(self.grid_cols, self.card_size, self.gap)

    @property
    def grid_height(self) -> float:
        return grid_extent(self.grid_rows, self.card_size, self.gap)

    @property
    def margin_x(self) -> float:
        return (self.page_width - self.grid_width) / 2

    @property
    def margin_y(self) -> float:
        return (self.page_height - self.grid_height) / 2


@dataclass(frozen=True)
class Slot:
    page_index: int
    row: int
    col: int

    def cell_index(self, grid_cols: int) -> int:
        return self.row * grid_cols + self.col


def grid_extent(cells: int, cell: float, gap: float) -> float:
    if cells <= 0:
        return 0.0
    return cells * cell + (cells - 1) * gap


def calc_cells(usable: float, cell: float, gap: float, max_cells: int | None) -> int:
    count = int((usable + gap) // (cell + gap))
    if max_cells is not None:
        return min(count, int(max_cells))
    return count


def validate_geometry(geometry: PageGeometry) -> PageGeometry:
    """Reject grids that cannot be centred on the page.

    Negative margins are a configuration error, never clamped.
    """
    if geometry.page_width <= 0 or geometry.page_height <= 0:
        raise GeometryError("page width and height must be positive")
    if geometry.card_size <= 0:
        raise GeometryError("card size must be positive")
    if geometry.gap < 0:
        raise GeometryError("gap must not be negative")
    if geometry.grid_cols < 1 or geometry.grid_rows < 1:
        raise GeometryError("grid must have at least one column and one row")

    checks = (
        ("width", "columns", geometry.grid_cols, geometry.grid_width, geometry.page_width),
        ("height", "rows", geometry.grid_rows, geometry.grid_height, geometry.page_height),
    )
    for axis, unit, cells, extent, page in checks:
        if extent - page > COORDINATE_EPSILON:
            fits = calc_cells(page, geometry.card_size, geometry.gap, None)
            raise GeometryError(
                f"grid exceeds page {axis}: {cells} {unit} need {extent:.1f} mm "
                f"but the page is {page:.1f} mm (at most {fits} fit)"
            )
    return geometry


def compute_data_slot(record_index: int, slots_per_page: int, grid_cols: int) -> Slot:
    if record_index < 0:
        raise ValueError("record index must not be negative")
    if slots_per_page <= 0 or grid_cols <= 0:
        raise ValueError("slots per page and grid columns must be positive")
    page_index, local_index = divmod(record_index, slots_per_page)
    row, col = divmod(local_index, grid_cols)
    return Slot(page_index=page_index, row=row, col=col)


def compute_code_slot(
    record_index: int,
    slots_per_page: int,
    grid_cols: int,
    *,
    mirror: bool = True,
) -> Slot:
    """Slot on the code pass: same page and row, column reflected across the row."""
    data_slot = compute_data_slot(record_index, slots_per_page, grid_cols)
    if not mirror:
        return data_slot
    return Slot(
        page_index=data_slot.page_index,
        row=data_slot.row,
        col=grid_cols - 1 - data_slot.col,
    )


def total_pages(record_count: int, slots_per_page: int) -> int:
    if record_count < 0:
        raise ValueError("record count must not be negative")
    if slots_per_page <= 0:
        raise ValueError("slots per page must be positive")
    return math.ceil(record_count / slots_per_page)


def slot_origin(geometry: PageGeometry, slot: Slot) -> tuple[float, float]:
    """Top-left corner of a slot in page millimetres."""
    x = geometry.margin_x + slot.col * geometry.pitch
    y = geometry.margin_y + slot.row * geometry.pitch
    return x, y
