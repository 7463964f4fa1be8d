#!/usr/bin/env python3
from __future__ import annotations

import io
from dataclasses import asdict, dataclass
from typing import Any

import segno
from PIL import Image, ImageColor, ImageDraw

Color = str | tuple[int, int, int] | tuple[int, int, int, int] | None

MODULE_SHAPES = ("square", "rounded")
_ROUNDED_RATIO = 0.2
_WHITE = (255, 255, 255, 255)
_BLACK = (0, 0, 0, 255)


@dataclass(frozen=True)
class QrConfig:
    error: str = "H"
    scale: int = 8
    border: int = 2
    kind: str = "png"
    dark: Color = None
    light: Color = None
    module_shape: str = "square"
    version: int | None = None
    mask: int | None = None
    micro: bool | None = None
    boost_error: bool = True


def make_qr(data: str, config: QrConfig) -> Any:
    return segno.make(
        data,
        error=config.error,
        version=config.version,
        mask=config.mask,
        micro=config.micro,
        boost_error=config.boost_error,
    )


def qr_bytes(data: str, **options: Any) -> bytes:
    """Encode data as a QR image; options are QrConfig fields."""
    return render_qr(data, QrConfig(**options))


def render_qr(data: str, config: QrConfig) -> bytes:
    shape = config.module_shape.strip().lower()
    if shape not in MODULE_SHAPES:
        raise ValueError(f"unsupported module_shape: {config.module_shape}")
    qr = make_qr(data, config)
    if shape == "rounded":
        if config.kind.lower() != "png":
            raise ValueError("rounded modules are only supported for PNG output")
        return _render_rounded(qr, config)

    buf = io.BytesIO()
    colors = {"dark": _clean_color(config.dark), "light": _clean_color(config.light)}
    colors = {key: value for key, value in colors.items() if value is not None}
    qr.save(buf, kind=config.kind, scale=config.scale, border=config.border, **colors)
    return buf.getvalue()


class QrCodeGenerator:
    """Callable turning a link into PNG bytes for the code face."""

    def __init__(self, config: QrConfig | None = None) -> None:
        self.config = config or QrConfig()
        if self.config.kind.lower() != "png":
            raise ValueError("card code images must be PNG")

    def __call__(self, link: str) -> bytes:
        return render_qr(link, self.config)

    def options(self) -> dict[str, Any]:
        return asdict(self.config)


def _render_rounded(qr: Any, config: QrConfig) -> bytes:
    scale = config.scale
    width, height = qr.symbol_size(scale=scale, border=config.border)
    image = Image.new("RGBA", (width, height), _rgba(config.light, _WHITE))
    draw = ImageDraw.Draw(image)
    radius = _ROUNDED_RATIO * scale
    dark = _rgba(config.dark, _BLACK)

    for row, modules in enumerate(qr.matrix_iter(scale=1, border=config.border)):
        top = row * scale
        for col, is_dark in enumerate(modules):
            if is_dark:
                left = col * scale
                draw.rounded_rectangle(
                    (left, top, left + scale, top + scale), radius=radius, fill=dark
                )

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def _clean_color(value: Color) -> Color:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _rgba(value: Color, fallback: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    value = _clean_color(value)
    if value is None:
        return fallback
    if isinstance(value, str):
        if value.lower() in ("none", "transparent"):
            return fallback
        converted = ImageColor.getcolor(value, "RGBA")
        if isinstance(converted, int):
            return (converted, converted, converted, 255)
        return (converted[0], converted[1], converted[2], converted[3])
    if len(value) == 3:
        return (int(value[0]), int(value[1]), int(value[2]), 255)
    return (int(value[0]), int(value[1]), int(value[2]), int(value[3]))
