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

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from ..qr.codec import MODULE_SHAPES, QrConfig
from ..render.geometry import (
    A4_HEIGHT_MM,
    A4_WIDTH_MM,
    LETTER_HEIGHT_MM,
    LETTER_WIDTH_MM,
    PageGeometry,
)
from ..render.spec import CardSpec, card_spec
from .installer import DEFAULT_PAPER_SIZE, default_catalog_path, resolve_config_path

PAPER_DIMENSIONS = {
    "A4": (A4_WIDTH_MM, A4_HEIGHT_MM),
    "LETTER": (LETTER_WIDTH_MM, LETTER_HEIGHT_MM),
}


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class RuntimeDefaults:
    render_jobs: int | Literal["auto"] | None = None


@dataclass(frozen=True)
class CardDefaults:
    show_ordinals: bool = True
    mirror_code_face: bool = True
    year_placeholder: str = ""
    unavailable_label: str = "code unavailable"
    missing_label: str = "no code"


@dataclass(frozen=True)
class AppConfig:
    source_path: Path
    paper_size: str
    geometry: PageGeometry
    qr_config: QrConfig
    catalog_path: Path
    cards: CardDefaults = field(default_factory=CardDefaults)
    ui: UiDefaults = field(default_factory=UiDefaults)
    runtime: RuntimeDefaults = field(default_factory=RuntimeDefaults)

    def card_spec(self) -> CardSpec:
        return card_spec(
            show_ordinals=self.cards.show_ordinals,
            mirror_code_face=self.cards.mirror_code_face,
            year_placeholder=self.cards.year_placeholder,
            unavailable_label=self.cards.unavailable_label,
            missing_label=self.cards.missing_label,
        )


def load_app_config(path: str | Path | None = None, *, paper_size: str | None = None) -> AppConfig:
    config_path = resolve_config_path(path, paper_size=paper_size)
    data = _load_toml(config_path)

    page_cfg = _get_dict(data, "page")
    configured_paper = _parse_optional_str(page_cfg.get("size"), field="page.size")
    resolved_paper = (paper_size or configured_paper or DEFAULT_PAPER_SIZE).strip().upper()
    return AppConfig(
        source_path=config_path,
        paper_size=resolved_paper,
        geometry=build_geometry(page_cfg, _get_dict(data, "grid"), paper_size=resolved_paper),
        qr_config=build_qr_config(_get_dict(data, "qr")),
        catalog_path=_parse_catalog_path(_get_dict(data, "catalog"), base=config_path.parent),
        cards=_parse_card_defaults(_get_dict(data, "cards")),
        ui=_parse_ui_defaults(_get_dict(data, "ui")),
        runtime=_parse_runtime_defaults(_get_dict(data, "runtime")),
    )


def build_geometry(
    page_cfg: dict[str, object],
    grid_cfg: dict[str, object],
    *,
    paper_size: str = DEFAULT_PAPER_SIZE,
) -> PageGeometry:
    """Page and grid sections to geometry; the grid is checked when rendering."""
    default_width, default_height = PAPER_DIMENSIONS.get(
        paper_size.upper(), PAPER_DIMENSIONS[DEFAULT_PAPER_SIZE]
    )
    defaults = PageGeometry()
    return PageGeometry(
        page_width=_parse_float(
            page_cfg.get("width_mm"), field="page.width_mm", default=default_width
        ),
        page_height=_parse_float(
            page_cfg.get("height_mm"), field="page.height_mm", default=default_height
        ),
        card_size=_parse_float(
            grid_cfg.get("card_size_mm"), field="grid.card_size_mm", default=defaults.card_size
        ),
        grid_cols=_parse_int_strict(grid_cfg.get("cols", defaults.grid_cols), field="grid.cols"),
        grid_rows=_parse_int_strict(grid_cfg.get("rows", defaults.grid_rows), field="grid.rows"),
        gap=_parse_float(grid_cfg.get("gap_mm"), field="grid.gap_mm", default=defaults.gap),
    )


def build_qr_config(cfg: dict[str, object] | None = None) -> QrConfig:
    cfg = cfg or {}
    defaults = QrConfig()
    shape = str(cfg.get("module_shape", defaults.module_shape)).strip().lower()
    if shape not in MODULE_SHAPES:
        raise ValueError(f"qr.module_shape must be one of: {', '.join(MODULE_SHAPES)}")
    return QrConfig(
        error=str(cfg.get("error", defaults.error)),
        scale=_parse_int_strict(cfg.get("scale", defaults.scale), field="qr.scale"),
        border=_parse_int_strict(cfg.get("border", defaults.border), field="qr.border"),
        kind=str(cfg.get("kind", defaults.kind)),
        dark=_parse_color(cfg.get("dark")),
        light=_parse_color(cfg.get("light")),
        module_shape=shape,
        version=_parse_optional_int(cfg.get("version"), field="qr.version"),
        mask=_parse_optional_int(cfg.get("mask"), field="qr.mask"),
        micro=_parse_optional_bool(cfg.get("micro"), field="qr.micro"),
        boost_error=_parse_bool(cfg.get("boost_error"), field="qr.boost_error", default=True),
    )


def _parse_card_defaults(cfg: dict[str, object]) -> CardDefaults:
    labels = _get_dict(cfg, "labels")
    defaults = CardDefaults()
    return CardDefaults(
        show_ordinals=_parse_bool(
            cfg.get("show_ordinals"), field="cards.show_ordinals", default=True
        ),
        mirror_code_face=_parse_bool(
            cfg.get("mirror_code_face"), field="cards.mirror_code_face", default=True
        ),
        year_placeholder=_parse_optional_str(
            cfg.get("year_placeholder"), field="cards.year_placeholder", strip=False
        )
        or "",
        unavailable_label=_parse_optional_str(
            labels.get("code_unavailable"), field="cards.labels.code_unavailable"
        )
        or defaults.unavailable_label,
        missing_label=_parse_optional_str(labels.get("no_code"), field="cards.labels.no_code")
        or defaults.missing_label,
    )


def _parse_ui_defaults(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _parse_runtime_defaults(cfg: dict[str, object]) -> RuntimeDefaults:
    return RuntimeDefaults(
        render_jobs=_parse_optional_render_jobs(
            cfg.get("render_jobs"),
            field="runtime.render_jobs",
        ),
    )


def _parse_catalog_path(cfg: dict[str, object], *, base: Path) -> Path:
    raw = _parse_optional_str(cfg.get("path"), field="catalog.path")
    if not raw:
        return default_catalog_path()
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = base / path
    return path


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _parse_optional_str(value: object, *, field: str, strip: bool = True) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    return value.strip() if strip else value


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    parsed = _parse_optional_bool(value, field=field)
    return default if parsed is None else parsed


def _parse_optional_bool(value: object, *, field: str) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{field} must be a boolean")


def _parse_optional_render_jobs(
    value: object,
    *,
    field: str,
) -> int | Literal["auto"] | None:
    if value is None:
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized:
            return None
        if normalized == "auto":
            return "auto"
        value = normalized
    parsed = _parse_int_strict(value, field=field)
    if parsed <= 0:
        raise ValueError(f"{field} must be 'auto' or a positive integer")
    return parsed


def _parse_int_strict(value: object, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"{field} must be an integer") from exc
    raise ValueError(f"{field} must be an integer")


def _parse_optional_int(value: object, *, field: str) -> int | None:
    if value is None:
        return None
    return _parse_int_strict(value, field=field)


def _parse_float(value: object, *, field: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise ValueError(f"{field} must be a number") from exc
    raise ValueError(f"{field} must be a number")


def _parse_color(value: object) -> str | tuple[int, int, int] | tuple[int, int, int, int] | None:
    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() in ("", "none", "transparent"):
            return None
        return value
    if isinstance(value, (list, tuple)):
        if len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]))
        if len(value) == 4:
            return (int(value[0]), int(value[1]), int(value[2]), int(value[3]))
    raise ValueError("qr colours must be a string or an RGB(A) list")
