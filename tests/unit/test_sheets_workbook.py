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

import tempfile
import unittest
from pathlib import Path

import openpyxl

from songdeck.core.models import SongRecord
from songdeck.sheets.workbook import (
    EXPORT_HEADER,
    SHEET_TITLE,
    header_columns,
    read_songs,
    write_songs,
)
from tests.test_support import TEST_LINK, write_sheet


class TestReadSongs(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def test_reads_rows_in_order(self) -> None:
        path = write_sheet(
            self.root / "songs.xlsx",
            [
                ("Queen", "Bohemian Rhapsody", 1975, f"{TEST_LINK}1"),
                ("  ABBA ", " Dancing Queen ", "1976", f"{TEST_LINK}2"),
            ],
        )
        result = read_songs(path)
        self.assertEqual(result.skipped, 0)
        self.assertEqual(
            result.records,
            (
                SongRecord("Queen", "Bohemian Rhapsody", 1975, f"{TEST_LINK}1"),
                SongRecord("ABBA", "Dancing Queen", 1976, f"{TEST_LINK}2"),
            ),
        )

    def test_year_parsing(self) -> None:
        cases = (
            (1999.7, 1999),
            ("1984 (remaster)", 1984),
            ("unknown", None),
            (None, None),
        )
        rows = [("A", f"T{i}", year, f"{TEST_LINK}{i}") for i, (year, _) in enumerate(cases)]
        result = read_songs(write_sheet(self.root / "years.xlsx", rows))
        self.assertEqual([record.year for record in result.records], [year for _, year in cases])

    def test_incomplete_rows_skipped_and_blank_rows_ignored(self) -> None:
        rows = [
            ("Queen", "Bohemian Rhapsody", 1975, TEST_LINK),
            (None, None, None, None),
            ("", "No Artist", 1990, TEST_LINK),
            ("Artist", "No Link", 1990, "   "),
            ("Artist", "", None, TEST_LINK),
        ]
        result = read_songs(write_sheet(self.root / "mixed.xlsx", rows))
        self.assertEqual(len(result.records), 1)
        self.assertEqual(result.skipped, 3)

    def test_english_headers_and_missing_year_column(self) -> None:
        path = write_sheet(
            self.root / "english.xlsx",
            [("Song A", "Band", TEST_LINK)],
            header=("title", "artist", "link"),
        )
        result = read_songs(path)
        self.assertEqual(result.records, (SongRecord("Band", "Song A", None, TEST_LINK),))

    def test_missing_required_columns(self) -> None:
        path = write_sheet(self.root / "bad.xlsx", [("x", "y")], header=("ARTISTA", "CANCION"))
        with self.assertRaisesRegex(ValueError, "YOUTUBE"):
            read_songs(path)

    def test_rows_without_link_kept_for_cards(self) -> None:
        rows = [
            ("Queen", "Bohemian Rhapsody", 1975, TEST_LINK),
            ("a-ha", "Take On Me", 1985, None),
            ("", "No Artist", 1990, TEST_LINK),
        ]
        path = write_sheet(self.root / "cards.xlsx", rows)
        result = read_songs(path, require_link=False)
        self.assertEqual(result.skipped, 1)
        self.assertEqual(result.records[1], SongRecord("a-ha", "Take On Me", 1985, ""))
        self.assertFalse(result.records[1].has_link())

        strict = read_songs(path)
        self.assertEqual(len(strict.records), 1)
        self.assertEqual(strict.skipped, 2)

    def test_link_column_optional_for_cards(self) -> None:
        path = write_sheet(
            self.root / "nolinks.xlsx",
            [("ABBA", "SOS", 1975)],
            header=("ARTISTA", "CANCION", "YEAR"),
        )
        result = read_songs(path, require_link=False)
        self.assertEqual(result.records, (SongRecord("ABBA", "SOS", 1975, ""),))
        with self.assertRaisesRegex(ValueError, "YOUTUBE"):
            read_songs(path)

    def test_non_xlsx_files_rejected(self) -> None:
        old_format = self.root / "songs.xls"
        old_format.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504)
        corrupt = self.root / "broken.xlsx"
        corrupt.write_bytes(b"this is not a zip archive")
        for path in (old_format, corrupt):
            with self.subTest(path=path.name):
                with self.assertRaisesRegex(ValueError, "not an .xlsx workbook"):
                    read_songs(path)

    def test_empty_sheet_rejected(self) -> None:
        path = self.root / "empty.xlsx"
        openpyxl.Workbook().save(path)
        with self.assertRaisesRegex(ValueError, "empty"):
            read_songs(path)


class TestHeaderColumns(unittest.TestCase):
    def test_header_match_is_case_insensitive(self) -> None:
        columns = header_columns(["youtube", " Artista ", "Cancion", "lanzamiento"])
        self.assertEqual(columns, {"link": 0, "artist": 1, "title": 2, "year": 3})


class TestWriteSongs(unittest.TestCase):
    def test_written_sheet_uses_canonical_header(self) -> None:
        songs = [
            SongRecord("Queen", "Bohemian Rhapsody", 1975, f"{TEST_LINK}1"),
            SongRecord("Unknown", "Mystery", None, f"{TEST_LINK}2"),
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "export.xlsx"
            count = write_songs(path, songs)
            workbook = openpyxl.load_workbook(path)
            worksheet = workbook.active
            rows = list(worksheet.iter_rows(values_only=True))
            title = worksheet.title
            workbook.close()
            reread = read_songs(path)

        self.assertEqual(count, 2)
        self.assertEqual(title, SHEET_TITLE)
        self.assertEqual(rows[0], EXPORT_HEADER)
        self.assertEqual(rows[2][2], None)
        self.assertEqual(reread.records, tuple(songs))


if __name__ == "__main__":
    unittest.main()
