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

from songdeck.config import (
    PAPER_CONFIGS,
    build_geometry,
    build_qr_config,
    default_catalog_path,
    load_app_config,
)
from songdeck.render.geometry import PageGeometry, validate_geometry


class TestConfig(unittest.TestCase):
    def _write(self, tmpdir: str, content: str) -> Path:
        path = Path(tmpdir) / "config.toml"
        path.write_text(content, encoding="utf-8")
        return path

    def test_packaged_configs_are_valid(self) -> None:
        for paper, path in PAPER_CONFIGS.items():
            with self.subTest(paper=paper):
                config = load_app_config(path)
                self.assertEqual(config.paper_size, paper)
                validate_geometry(config.geometry)
                self.assertEqual(config.qr_config.error, "H")
                self.assertTrue(config.cards.mirror_code_face)

    def test_letter_config_matches_default_geometry(self) -> None:
        config = load_app_config(PAPER_CONFIGS["LETTER"])
        self.assertEqual(config.geometry, PageGeometry())

    def test_empty_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_app_config(self._write(tmpdir, ""))
        self.assertEqual(config.paper_size, "LETTER")
        self.assertEqual(config.geometry, PageGeometry())
        self.assertEqual(config.catalog_path, default_catalog_path())
        self.assertIsNone(config.runtime.render_jobs)
        self.assertFalse(config.ui.quiet)

    def test_paper_size_sets_default_dimensions(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_app_config(self._write(tmpdir, ""), paper_size="a4")
        self.assertEqual(config.paper_size, "A4")
        self.assertAlmostEqual(config.geometry.page_width, 210.0)
        self.assertAlmostEqual(config.geometry.page_height, 297.0)

    def test_sections_are_parsed(self) -> None:
        content = """
[grid]
card_size_mm = 40
cols = 5
rows = 6
gap_mm = 2.5

[cards]
show_ordinals = false
mirror_code_face = false
year_placeholder = "????"

[cards.labels]
code_unavailable = "QR Error"
no_code = "Sin QR"

[qr]
scale = 6
border = 1
module_shape = "rounded"
dark = [10, 20, 30]

[catalog]
path = "songs/catalog.db"

[runtime]
render_jobs = 3

[ui]
quiet = true
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_app_config(self._write(tmpdir, content))
            expected_catalog = Path(tmpdir) / "songs" / "catalog.db"
        self.assertEqual(config.geometry.card_size, 40.0)
        self.assertEqual((config.geometry.grid_cols, config.geometry.grid_rows), (5, 6))
        self.assertEqual(config.geometry.gap, 2.5)
        spec = config.card_spec()
        self.assertFalse(spec.ordinal.enabled)
        self.assertFalse(spec.mirror_code_face)
        self.assertEqual(spec.data_face.year_placeholder, "????")
        self.assertEqual(spec.code_face.unavailable_label, "QR Error")
        self.assertEqual(spec.code_face.missing_label, "Sin QR")
        self.assertEqual(config.qr_config.scale, 6)
        self.assertEqual(config.qr_config.module_shape, "rounded")
        self.assertEqual(config.qr_config.dark, (10, 20, 30))
        self.assertEqual(config.catalog_path, expected_catalog)
        self.assertEqual(config.runtime.render_jobs, 3)
        self.assertTrue(config.ui.quiet)

    def test_invalid_values_name_the_field(self) -> None:
        cases = (
            ("[grid]\ncols = 'four'\n", "grid.cols"),
            ("[grid]\ngap_mm = 'wide'\n", "grid.gap_mm"),
            ("[cards]\nshow_ordinals = 'maybe'\n", "cards.show_ordinals"),
            ("[runtime]\nrender_jobs = 0\n", "runtime.render_jobs"),
            ("[qr]\nmodule_shape = 'star'\n", "qr.module_shape"),
            ("[catalog]\npath = 3\n", "catalog.path"),
        )
        for content, field in cases:
            with self.subTest(field=field):
                with tempfile.TemporaryDirectory() as tmpdir:
                    with self.assertRaisesRegex(ValueError, field.replace(".", r"\.")):
                        load_app_config(self._write(tmpdir, content))

    def test_render_jobs_auto(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_app_config(self._write(tmpdir, "[runtime]\nrender_jobs = 'auto'\n"))
        self.assertEqual(config.runtime.render_jobs, "auto")

    def test_build_qr_config_defaults(self) -> None:
        config = build_qr_config()
        self.assertEqual((config.error, config.scale, config.border), ("H", 8, 2))
        self.assertIsNone(config.dark)

    def test_build_geometry_keeps_oversized_grid_for_render_time_check(self) -> None:
        geometry = build_geometry({}, {"cols": 9})
        self.assertEqual(geometry.grid_cols, 9)


if __name__ == "__main__":
    unittest.main()
