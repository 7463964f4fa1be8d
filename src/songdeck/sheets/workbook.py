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
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from ..core.models import SongRecord
from ..core.validation import cell_text, is_blank_row, normalize_record

logger = logging.getLogger(__name__)

SHEET_TITLE = "Canciones"
EXPORT_HEADER = ("ARTISTA", "CANCION", "LANZAMIENTO", "YOUTUBE")

# Canonical field -> accepted header spellings (upper-cased).
HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "artist": ("ARTISTA", "ARTIST"),
    "title": ("CANCION", "CANCIÓN", "TITLE", "SONG"),
    "year": ("LANZAMIENTO", "YEAR"),
    "link": ("YOUTUBE", "LINK", "URL"),
}
REQUIRED_FIELDS = ("artist", "title", "link")
CARD_FIELDS = ("artist", "title")


@dataclass(frozen=True)
class SheetImport:
    records: tuple[SongRecord, ...]
    skipped: int


def read_songs(path: str | Path, *, require_link: bool = True) -> SheetImport:
    """Read song rows from the first worksheet of an .xlsx file.

    Fully blank rows are ignored. Rows missing the artist, title or link are
    skipped and counted. With require_link=False the link column may be absent
    or blank; such songs keep an empty link and get the no-code face.
    """
    try:
        workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError) as exc:
        raise ValueError(f"{path}: not an .xlsx workbook (save it as .xlsx): {exc}") from exc
    try:
        worksheet = workbook.worksheets[0] if workbook.worksheets else None
        if worksheet is None:
            raise ValueError(f"{path}: workbook has no sheets")
        rows = worksheet.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None or is_blank_row(tuple(header)):
            raise ValueError(f"{path}: sheet is empty")
        required = REQUIRED_FIELDS if require_link else CARD_FIELDS
        columns = header_columns(header, required=required)
        return _collect(rows, columns, require_link=require_link)
    finally:
        workbook.close()


def header_columns(
    header: Sequence[object],
    *,
    required: Sequence[str] = REQUIRED_FIELDS,
) -> dict[str, int]:
    """Map canonical field names to column indexes."""
    names = [cell_text(value).upper() for value in header]
    columns: dict[str, int] = {}
    for field, aliases in HEADER_ALIASES.items():
        for index, name in enumerate(names):
            if name in aliases:
                columns[field] = index
                break
    missing = [HEADER_ALIASES[field][0] for field in required if field not in columns]
    if missing:
        raise ValueError(f"missing required columns: {', '.join(missing)}")
    return columns


def _collect(
    rows: Iterable[Sequence[object]],
    columns: dict[str, int],
    *,
    require_link: bool,
) -> SheetImport:
    records: list[SongRecord] = []
    skipped = 0
    for row_number, row in enumerate(rows, start=2):
        values = tuple(row)
        if is_blank_row(values):
            continue
        try:
            record = normalize_record(
                artist=_cell(values, columns.get("artist")),
                title=_cell(values, columns.get("title")),
                year=_cell(values, columns.get("year")),
                link=_cell(values, columns.get("link")),
                require_link=require_link,
            )
        except ValueError as exc:
            skipped += 1
            logger.debug("Skipping row %d: %s", row_number, exc)
            continue
        records.append(record)
    return SheetImport(records=tuple(records), skipped=skipped)


def _cell(values: Sequence[object], index: int | None) -> object:
    if index is None or index >= len(values):
        return None
    return values[index]


def write_songs(path: str | Path, songs: Iterable[SongRecord]) -> int:
    """Write songs under the canonical header; returns the row count."""
    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE
    worksheet.append(list(EXPORT_HEADER))
    count = 0
    for song in songs:
        worksheet.append([song.artist, song.title, song.year, song.link])
        count += 1
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(target)
    return count
