#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class TextStyleSpec:
    font_family: str = "Helvetica"
    font_style: str = ""
    font_size: float = 12.0
    line_height_mm: float | None = None


@dataclass(frozen=True)
class DataFaceSpec:
    title: TextStyleSpec = field(default_factory=lambda: TextStyleSpec(font_size=12.0))
    year: TextStyleSpec = field(
        default_factory=lambda: TextStyleSpec(font_style="B", font_size=22.0)
    )
    artist: TextStyleSpec = field(
        default_factory=lambda: TextStyleSpec(font_size=12.0, line_height_mm=5.5)
    )
    text_margin_mm: float = 8.0
    title_offset_mm: float = 7.0
    artist_bottom_margin_mm: float = 10.0
    year_placeholder: str = ""


@dataclass(frozen=True)
class CodeFaceSpec:
    inset_mm: float = 8.0
    label: TextStyleSpec = field(default_factory=lambda: TextStyleSpec(font_size=10.0))
    unavailable_label: str = "code unavailable"
    missing_label: str = "no code"


@dataclass(frozen=True)
class OrdinalSpec:
    enabled: bool = True
    style: TextStyleSpec = field(default_factory=lambda: TextStyleSpec(font_size=7.0))
    offset_mm: float = 1.5


@dataclass(frozen=True)
class CardSpec:
    data_face: DataFaceSpec = field(default_factory=DataFaceSpec)
    code_face: CodeFaceSpec = field(default_factory=CodeFaceSpec)
    ordinal: OrdinalSpec = field(default_factory=OrdinalSpec)
    mirror_code_face: bool = True
    outline_width_mm: float = 0.2

    def with_options(
        self,
        *,
        show_ordinals: bool | None = None,
        mirror_code_face: bool | None = None,
        year_placeholder: str | None = None,
    ) -> "CardSpec":
        spec = self
        if show_ordinals is not None:
            spec = replace(spec, ordinal=replace(spec.ordinal, enabled=show_ordinals))
        if mirror_code_face is not None:
            spec = replace(spec, mirror_code_face=mirror_code_face)
        if year_placeholder is not None:
            spec = replace(
                spec,
                data_face=replace(spec.data_face, year_placeholder=year_placeholder),
            )
        return spec


def card_spec(
    *,
    show_ordinals: bool = True,
    mirror_code_face: bool = True,
    year_placeholder: str = "",
    unavailable_label: str | None = None,
    missing_label: str | None = None,
) -> CardSpec:
    spec = CardSpec().with_options(
        show_ordinals=show_ordinals,
        mirror_code_face=mirror_code_face,
        year_placeholder=year_placeholder,
    )
    code_face = spec.code_face
    if unavailable_label is not None:
        code_face = replace(code_face, unavailable_label=unavailable_label)
    if missing_label is not None:
        code_face = replace(code_face, missing_label=missing_label)
    return replace(spec, code_face=code_face)
