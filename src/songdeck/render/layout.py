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

from typing import Sequence

from ..core.models import SongRecord
from .geometry import (
    PageGeometry,
    compute_code_slot,
    compute_data_slot,
    slot_origin,
    total_pages,
    validate_geometry,
)
from .spec import CardSpec, TextStyleSpec
from .text import FontMeasurer, core_font_text, style_line_height
from .types import (
    FACE_CODE,
    FACE_DATA,
    CardPlacement,
    CodeGenerationFailed,
    CodeImage,
    CodeOutcome,
    Deck,
    DeckPage,
    DrawOp,
    ImageOp,
    NoCodeInput,
    RectOp,
    TextOp,
)

__all__ = ["build_deck", "deck_page_count", "plan_placements"]


def plan_placements(
    record_count: int,
    geometry: PageGeometry,
    *,
    mirror: bool = True,
) -> list[CardPlacement]:
    """Assign every record a data slot and a code slot, in record order."""
    spp = geometry.slots_per_page
    cols = geometry.grid_cols
    return [
        CardPlacement(
            record_index=index,
            data_slot=compute_data_slot(index, spp, cols),
            code_slot=compute_code_slot(index, spp, cols, mirror=mirror),
        )
        for index in range(record_count)
    ]


def deck_page_count(record_count: int, geometry: PageGeometry) -> int:
    return 2 * total_pages(record_count, geometry.slots_per_page)


def build_deck(
    records: Sequence[SongRecord],
    geometry: PageGeometry,
    spec: CardSpec,
    outcomes: Sequence[CodeOutcome],
    *,
    measurer: FontMeasurer | None = None,
) -> Deck:
    """Lay out both passes of the deck.

    Data pages 0..P-1 come first, then code pages 0..P-1. Each pass restarts
    at slot 0 and the two passes never share a page.
    """
    validate_geometry(geometry)
    if len(outcomes) != len(records):
        raise ValueError("code outcomes length must match records")

    measurer = measurer or FontMeasurer()
    placements = plan_placements(len(records), geometry, mirror=spec.mirror_code_face)
    page_total = total_pages(len(records), geometry.slots_per_page)

    data_ops: list[list[DrawOp]] = [[] for _ in range(page_total)]
    code_ops: list[list[DrawOp]] = [[] for _ in range(page_total)]
    for placement in placements:
        record = records[placement.record_index]
        data_ops[placement.data_slot.page_index].extend(
            _data_face_ops(record, placement, geometry, spec, measurer)
        )
    for placement in placements:
        outcome = outcomes[placement.record_index]
        code_ops[placement.code_slot.page_index].extend(
            _code_face_ops(outcome, placement, geometry, spec)
        )

    pages = [
        DeckPage(face=FACE_DATA, index=index, ops=tuple(ops)) for index, ops in enumerate(data_ops)
    ]
    pages.extend(
        DeckPage(face=FACE_CODE, index=index, ops=tuple(ops)) for index, ops in enumerate(code_ops)
    )
    return Deck(pages=tuple(pages))


def _data_face_ops(
    record: SongRecord,
    placement: CardPlacement,
    geometry: PageGeometry,
    spec: CardSpec,
    measurer: FontMeasurer,
) -> list[DrawOp]:
    face = spec.data_face
    card = geometry.card_size
    x, y = slot_origin(geometry, placement.data_slot)
    center_x = x + card / 2
    text_width = max(1.0, card - face.text_margin_mm)

    ops: list[DrawOp] = [_outline(x, y, card, spec)]
    ops.extend(_ordinal_ops(placement, x, y, spec))

    title_lines = measurer.wrap(core_font_text(record.title), face.title, text_width)
    if title_lines:
        ops.append(
            _text(title_lines, center_x, y + face.title_offset_mm, face.title, role="title")
        )

    year_text = str(record.year) if record.year is not None else face.year_placeholder
    year_text = core_font_text(year_text)
    ops.append(
        _text([year_text], center_x, y + card / 2, face.year, baseline="middle", role="year")
    )

    artist_lines = measurer.wrap(core_font_text(record.artist), face.artist, text_width)
    if artist_lines:
        line_height = style_line_height(face.artist)
        start_y = y + card - face.artist_bottom_margin_mm - (len(artist_lines) - 1) * line_height
        ops.append(_text(artist_lines, center_x, start_y, face.artist, role="artist"))
    return ops


def _code_face_ops(
    outcome: CodeOutcome,
    placement: CardPlacement,
    geometry: PageGeometry,
    spec: CardSpec,
) -> list[DrawOp]:
    face = spec.code_face
    card = geometry.card_size
    x, y = slot_origin(geometry, placement.code_slot)

    ops: list[DrawOp] = [_outline(x, y, card, spec)]
    ops.extend(_ordinal_ops(placement, x, y, spec))

    if isinstance(outcome, CodeImage):
        inset = face.inset_mm
        size = card - 2 * inset
        if size <= 0:
            raise ValueError("code inset leaves no room for the image")
        ops.append(ImageOp(x=x + inset, y=y + inset, width=size, height=size, data=outcome.data))
    elif isinstance(outcome, NoCodeInput):
        ops.append(_centered_label(face.missing_label, x, y, card, face.label, role="no-code"))
    elif isinstance(outcome, CodeGenerationFailed):
        ops.append(
            _centered_label(face.unavailable_label, x, y, card, face.label, role="code-failed")
        )
    else:
        raise TypeError(f"unsupported code outcome: {type(outcome).__name__}")
    return ops


def _ordinal_ops(placement: CardPlacement, x: float, y: float, spec: CardSpec) -> list[DrawOp]:
    ordinal = spec.ordinal
    if not ordinal.enabled:
        return []
    return [
        _text(
            [str(placement.ordinal)],
            x + ordinal.offset_mm,
            y + ordinal.offset_mm,
            ordinal.style,
            align="L",
            role="ordinal",
        )
    ]


def _outline(x: float, y: float, card: float, spec: CardSpec) -> RectOp:
    return RectOp(x=x, y=y, width=card, height=card, line_width=spec.outline_width_mm)


def _centered_label(
    label: str,
    x: float,
    y: float,
    card: float,
    style: TextStyleSpec,
    *,
    role: str,
) -> TextOp:
    text = core_font_text(label)
    return _text([text], x + card / 2, y + card / 2, style, baseline="middle", role=role)


def _text(
    lines: Sequence[str],
    x: float,
    y: float,
    style: TextStyleSpec,
    *,
    align: str = "C",
    baseline: str = "top",
    role: str = "",
) -> TextOp:
    return TextOp(
        lines=tuple(lines),
        x=x,
        y=y,
        font_family=style.font_family,
        font_style=style.font_style,
        font_size=style.font_size,
        line_height=style_line_height(style),
        align=align,  # type: ignore[arg-type]
        baseline=baseline,  # type: ignore[arg-type]
        role=role,
    )
