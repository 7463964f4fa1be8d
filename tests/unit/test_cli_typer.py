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

import os
import re
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from typer.testing import CliRunner

from songdeck.cli import app
from songdeck.config.installer import DEFAULT_CONFIG_PATH
from songdeck.render.codes import RENDER_JOBS_ENV
from tests.test_support import TEST_LINK, write_sheet

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")


def _strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


class TestCliTyper(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        patcher = mock.patch("songdeck.cli.app.run_startup", return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        env = mock.patch.dict(os.environ, {RENDER_JOBS_ENV: "1"})
        env.start()
        self.addCleanup(env.stop)

    def _invoke(self, args: list[str]):
        return self.runner.invoke(app, args)

    def test_root_info_commands(self) -> None:
        cases = (
            (["--help"], ("generate", "catalog", "config")),
            (["--version"], ("songdeck",)),
            (["catalog", "--help"], ("import", "export", "stats")),
        )
        for args, expected in cases:
            with self.subTest(args=args):
                result = self._invoke(args)
                self.assertEqual(result.exit_code, 0)
                output = _strip_ansi(result.output).lower()
                for item in expected:
                    self.assertIn(item, output)

    def test_invalid_paper_is_rejected(self) -> None:
        result = self._invoke(["--paper", "B5", "config", "--print-path"])
        self.assertEqual(result.exit_code, 2)

    def test_config_print_path(self) -> None:
        result = self._invoke(["--config", str(DEFAULT_CONFIG_PATH), "config", "--print-path"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(DEFAULT_CONFIG_PATH.name, result.output)

    def test_generate_requires_exactly_one_input(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sheet = write_sheet(Path(tmpdir) / "songs.xlsx", [("A", "B", 1999, TEST_LINK)])
            cases = (
                ["generate"],
                ["generate", str(sheet), "--from-catalog"],
            )
            for args in cases:
                with self.subTest(args=args):
                    result = self._invoke(["--config", str(DEFAULT_CONFIG_PATH), *args])
                    self.assertEqual(result.exit_code, 2)
                    self.assertIn("exactly one", _strip_ansi(result.output))

    def test_generate_from_sheet_writes_pdf(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sheet = write_sheet(
                Path(tmpdir) / "songs.xlsx",
                [
                    ("Queen", "Bohemian Rhapsody", 1975, TEST_LINK),
                    ("a-ha", "Take On Me", None, f"{TEST_LINK}&x"),
                    ("Toto", "", 1982, TEST_LINK),
                    ("", "", None, ""),
                ],
            )
            output = Path(tmpdir) / "out" / "deck.pdf"
            result = self._invoke(
                [
                    "--config",
                    str(DEFAULT_CONFIG_PATH),
                    "generate",
                    str(sheet),
                    "-o",
                    str(output),
                    "--no-ordinals",
                    "--year-placeholder",
                    "?",
                ]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(output.exists())
            self.assertTrue(output.read_bytes().startswith(b"%PDF"))
        text = _strip_ansi(result.output)
        self.assertIn("skipped 1 incomplete row", text)
        self.assertIn("Cards", text)

    def test_generate_keeps_songs_without_link(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sheet = write_sheet(
                Path(tmpdir) / "songs.xlsx",
                [
                    ("Queen", "Bohemian Rhapsody", 1975, TEST_LINK),
                    ("Toto", "Africa", 1982, None),
                ],
            )
            output = Path(tmpdir) / "deck.pdf"
            result = self._invoke(
                ["--config", str(DEFAULT_CONFIG_PATH), "generate", str(sheet), "-o", str(output)]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(output.exists())
        text = _strip_ansi(result.output)
        self.assertNotIn("skipped", text)
        self.assertRegex(text, r"Without link\s+1")

    def test_generate_without_link_column(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sheet = write_sheet(
                Path(tmpdir) / "songs.xlsx",
                [("Queen", "Bohemian Rhapsody"), ("Toto", "Africa")],
                header=("ARTISTA", "CANCION"),
            )
            output = Path(tmpdir) / "deck.pdf"
            result = self._invoke(
                ["--config", str(DEFAULT_CONFIG_PATH), "generate", str(sheet), "-o", str(output)]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(output.exists())
        self.assertRegex(_strip_ansi(result.output), r"Without link\s+2")

    def test_generate_with_dash_year_placeholder(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sheet = write_sheet(
                Path(tmpdir) / "songs.xlsx", [("a-ha", "Take On Me \u2014 Live", None, TEST_LINK)]
            )
            output = Path(tmpdir) / "deck.pdf"
            result = self._invoke(
                [
                    "--config",
                    str(DEFAULT_CONFIG_PATH),
                    "generate",
                    str(sheet),
                    "-o",
                    str(output),
                    "--year-placeholder",
                    "\u2014",
                ]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(output.read_bytes().startswith(b"%PDF"))

    def test_generate_rejects_legacy_xls(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sheet = Path(tmpdir) / "songs.xls"
            sheet.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504)
            result = self._invoke(["--config", str(DEFAULT_CONFIG_PATH), "generate", str(sheet)])
        self.assertEqual(result.exit_code, 2)
        text = _strip_ansi(result.output)
        self.assertIn("Error:", text)
        self.assertIn(".xlsx", text)

    @mock.patch("songdeck.cli.core.common.configure_logging")
    def test_ui_quiet_from_config_hides_summary(self, _configure_logging: mock.MagicMock) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "songdeck.toml"
            text = DEFAULT_CONFIG_PATH.read_text(encoding="utf-8")
            config_path.write_text(text.replace("quiet = false", "quiet = true"), encoding="utf-8")
            sheet = write_sheet(Path(tmpdir) / "songs.xlsx", [("Toto", "Africa", 1982, TEST_LINK)])
            output = Path(tmpdir) / "deck.pdf"
            result = self._invoke(
                ["--config", str(config_path), "generate", str(sheet), "-o", str(output)]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(output.exists())
        self.assertNotIn("Cards", _strip_ansi(result.output))

    def test_config_show(self) -> None:
        result = self._invoke(["--config", str(DEFAULT_CONFIG_PATH), "config", "--show"])
        self.assertEqual(result.exit_code, 0, result.output)
        text = _strip_ansi(result.output)
        self.assertIn("LETTER", text)
        self.assertIn("Catalog", text)

    def test_generate_missing_sheet_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            result = self._invoke(
                [
                    "--config",
                    str(DEFAULT_CONFIG_PATH),
                    "generate",
                    str(Path(tmpdir) / "missing.xlsx"),
                ]
            )
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Error:", _strip_ansi(result.output))

    def test_generate_from_empty_catalog_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            result = self._invoke(
                [
                    "--config",
                    str(DEFAULT_CONFIG_PATH),
                    "--catalog",
                    str(Path(tmpdir) / "songs.db"),
                    "generate",
                    "--from-catalog",
                    "-o",
                    str(Path(tmpdir) / "cards.pdf"),
                ]
            )
        self.assertEqual(result.exit_code, 2)
        self.assertIn("no songs to render", _strip_ansi(result.output))

    def test_catalog_flow(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            db = str(Path(tmpdir) / "songs.db")
            sheet = write_sheet(
                Path(tmpdir) / "songs.xlsx",
                [
                    ("Queen", "Bohemian Rhapsody", 1975, f"{TEST_LINK}&a"),
                    ("Toto", "Africa", 1982, f"{TEST_LINK}&b"),
                ],
            )
            base = ["--config", str(DEFAULT_CONFIG_PATH), "--catalog", db, "catalog"]

            result = self._invoke([*base, "import", str(sheet)])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Imported", _strip_ansi(result.output))

            result = self._invoke(
                [
                    *base,
                    "add",
                    "--artist",
                    "a-ha",
                    "--title",
                    "Take On Me",
                    "--link",
                    f"{TEST_LINK}&c",
                ]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Added song 3", result.output)

            result = self._invoke(
                [*base, "add", "--artist", "X", "--title", "Y", "--link", f"{TEST_LINK}&c"]
            )
            self.assertEqual(result.exit_code, 2)
            self.assertIn("already exists", _strip_ansi(result.output))

            result = self._invoke([*base, "edit", "3", "--year", "1985"])
            self.assertEqual(result.exit_code, 0, result.output)

            result = self._invoke([*base, "edit", "3", "--year", "1985", "--clear-year"])
            self.assertEqual(result.exit_code, 2)

            result = self._invoke([*base, "list", "--search", "toto"])
            self.assertEqual(result.exit_code, 0, result.output)
            text = _strip_ansi(result.output)
            self.assertIn("Africa", text)
            self.assertNotIn("Queen", text)

            result = self._invoke([*base, "list", "--search", "nobody"])
            self.assertIn("No songs found", result.output)

            result = self._invoke([*base, "stats"])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("1985", _strip_ansi(result.output))

            result = self._invoke([*base, "remove", "1"])
            self.assertEqual(result.exit_code, 0, result.output)
            result = self._invoke([*base, "remove", "1"])
            self.assertEqual(result.exit_code, 2)

            export = Path(tmpdir) / "export.xlsx"
            result = self._invoke([*base, "export", str(export)])
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Exported 2 songs", _strip_ansi(result.output))
            self.assertTrue(export.exists())

            output = Path(tmpdir) / "cards.pdf"
            result = self._invoke(
                [
                    "--config",
                    str(DEFAULT_CONFIG_PATH),
                    "--catalog",
                    db,
                    "generate",
                    "--from-catalog",
                    "-o",
                    str(output),
                ]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(output.exists())


if __name__ == "__main__":
    unittest.main()
