from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import re
from typing import Any, Mapping

from funcplot_plot.chart import ChartStyle
from funcplot_plot.raster import RGBA

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class ThemeTokens:
    """Chart color tokens, overridable from the `[theme]` table of funcplot.toml."""

    background: str = "#FFFFFF"
    plot_background: str = "#FFFFFF"
    grid: str = "#E0E0E0"
    reference: str = "#999999"
    axis: str = "#666666"
    text: str = "#374151"
    line: str = "#2563EB"
    error_background: str = "#FEE2E2"
    error_border: str = "#F87171"
    error_text: str = "#B91C1C"
    line_width: int = 2


DEFAULT_TOKENS = ThemeTokens()

_COLOR_TOKENS = tuple(f.name for f in fields(ThemeTokens) if f.name != "line_width")


def validate_theme_tokens(overrides: Mapping[str, Any] | None = None) -> ThemeTokens:
    raw: dict[str, Any] = asdict(DEFAULT_TOKENS)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    width = raw["line_width"]
    if isinstance(width, str) and width.isdigit():
        width = int(width)
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise ValueError("Token `line_width` must be a positive integer")
    raw["line_width"] = width
    return ThemeTokens(**raw)


def hex_to_rgba(value: str) -> RGBA:
    if not _HEX_COLOR.match(value):
        raise ValueError(f"not a hex color: {value!r}")
    digits = value[1:]
    alpha = int(digits[6:8], 16) if len(digits) == 8 else 255
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), alpha)


def chart_style(tokens: ThemeTokens = DEFAULT_TOKENS) -> ChartStyle:
    colors = {name: hex_to_rgba(getattr(tokens, name)) for name in _COLOR_TOKENS}
    return ChartStyle(line_width=tokens.line_width, **colors)
