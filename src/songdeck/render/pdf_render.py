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

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from fpdf import FPDF

from ..core.models import SongRecord
from ..qr.codec import QrCodeGenerator, QrConfig
from .codes import CodeGenerator, resolve_code_outcomes
from .geometry import PageGeometry, validate_geometry
from .layout import build_deck
from .spec import CardSpec
from .text import FontMeasurer
from .types import CodeGenerationFailed, Deck, DeckPage, ImageOp, NoCodeInput, RectOp, TextOp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeckSummary:
    records: int
    pages: int
    failed_codes: int
    missing_codes: int
    output_path: Path


def new_document(geometry: PageGeometry) -> FPDF:
    pdf = FPDF(unit="mm", format=(geometry.page_width, geometry.page_height))
    pdf.set_auto_page_break(False)
    pdf.set_margins(0, 0, 0)
    pdf.c_margin = 0
    pdf.set_creator("songdeck")
    return pdf


def draw_deck(pdf: FPDF, deck: Deck) -> None:
    for page in deck.pages:
        pdf.add_page()
        _draw_page(pdf, page)


def _draw_page(pdf: FPDF, page: DeckPage) -> None:
    for op in page.ops:
        if isinstance(op, RectOp):
            pdf.set_draw_color(0, 0, 0)
            pdf.set_line_width(op.line_width)
            pdf.rect(op.x, op.y, op.width, op.height)
        elif isinstance(op, TextOp):
            _draw_text(pdf, op)
        elif isinstance(op, ImageOp):
            pdf.image(io.BytesIO(op.data), x=op.x, y=op.y, w=op.width, h=op.height)
        else:
            raise TypeError(f"unsupported draw op: {type(op).__name__}")


def _draw_text(pdf: FPDF, op: TextOp) -> None:
    pdf.set_font(op.font_family, style=op.font_style, size=op.font_size)
    pdf.set_text_color(0, 0, 0)
    y = op.y
    if op.baseline == "middle":
        y -= len(op.lines) * op.line_height / 2
    for line in op.lines:
        if not line:
            y += op.line_height
            continue
        width = pdf.get_string_width(line)
        if op.align == "C":
            x = op.x - width / 2
        elif op.align == "R":
            x = op.x - width
        else:
            x = op.x
        pdf.set_xy(x, y)
        pdf.cell(width, op.line_height, line, align=op.align)
        y += op.line_height


def render_deck_pdf(
    records: Sequence[SongRecord],
    output_path: str | Path,
    *,
    geometry: PageGeometry | None = None,
    spec: CardSpec | None = None,
    qr_config: QrConfig | None = None,
    generator: CodeGenerator | None = None,
    workers: int | str | None = None,
) -> DeckSummary:
    """Generate codes, lay out the deck and write it as a PDF.

    The geometry is checked before any code is generated or anything is drawn.
    """
    geometry = validate_geometry(geometry or PageGeometry())
    if not records:
        raise ValueError("no songs to render")
    spec = spec or CardSpec()
    if generator is None:
        generator = QrCodeGenerator(qr_config)

    outcomes = resolve_code_outcomes(records, generator, workers=workers)
    pdf = new_document(geometry)
    deck = build_deck(records, geometry, spec, outcomes, measurer=FontMeasurer(pdf))
    draw_deck(pdf, deck)

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pdf.output(str(path))

    summary = DeckSummary(
        records=len(records),
        pages=deck.page_count,
        failed_codes=sum(isinstance(outcome, CodeGenerationFailed) for outcome in outcomes),
        missing_codes=sum(isinstance(outcome, NoCodeInput) for outcome in outcomes),
        output_path=path,
    )
    logger.info(
        "Wrote %d cards on %d pages to %s", summary.records, summary.pages, summary.output_path
    )
    return summary
