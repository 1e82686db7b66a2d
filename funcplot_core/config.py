from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from pathlib import Path
import tomllib
from typing import Any, Mapping

from .sampler import DEFAULT_DECIMALS, DEFAULT_STEPS
from .viewport import DEFAULT_X_MAX, DEFAULT_X_MIN, ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR

LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME = "funcplot.toml"
DEFAULT_EXPRESSION = "x^2"
DEFAULT_TITLE = "2D Function Plotter"

_SECTIONS: dict[str, set[str]] = {
    "plot": {"expression", "x_min", "x_max", "steps", "decimals"},
    "zoom": {"in_factor", "out_factor"},
    "figure": {"width", "height", "title"},
}


@dataclass(frozen=True)
class PlotterConfig:
    default_expression: str = DEFAULT_EXPRESSION
    x_min: float = DEFAULT_X_MIN
    x_max: float = DEFAULT_X_MAX
    steps: int = DEFAULT_STEPS
    decimals: int = DEFAULT_DECIMALS
    zoom_in_factor: float = ZOOM_IN_FACTOR
    zoom_out_factor: float = ZOOM_OUT_FACTOR
    width: int = 960
    height: int = 540
    title: str = DEFAULT_TITLE
    theme: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x_min) and math.isfinite(self.x_max)):
            raise ValueError("plot.x_min/plot.x_max must be finite")
        if self.x_min >= self.x_max:
            raise ValueError("plot.x_min must be < plot.x_max")
        if self.steps <= 0:
            raise ValueError("plot.steps must be > 0")
        if not 0 <= self.decimals <= 12:
            raise ValueError("plot.decimals must be in [0, 12]")
        if self.zoom_in_factor <= 0 or self.zoom_out_factor <= 0:
            raise ValueError("zoom factors must be > 0")
        if self.width <= 1 or self.height <= 1:
            raise ValueError("figure width/height must be > 1")


def load_config(path: str | Path | None = None) -> PlotterConfig:
    if path is None:
        return PlotterConfig()
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"invalid TOML in {config_path}: {exc}") from exc
    LOGGER.debug("loaded config from %s", config_path)
    return config_from_mapping(raw)


def discover_config(directory: str | Path = ".") -> Path | None:
    candidate = Path(directory) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def config_from_mapping(raw: Mapping[str, Any]) -> PlotterConfig:
    for section, values in raw.items():
        if section == "theme":
            continue
        allowed = _SECTIONS.get(section)
        if allowed is None:
            raise ValueError(f"unknown config section: {section}")
        if not isinstance(values, Mapping):
            raise ValueError(f"config section `{section}` must be a table")
        for key in values:
            if key not in allowed:
                raise ValueError(f"unknown config key: {section}.{key}")

    plot = raw.get("plot", {})
    zoom = raw.get("zoom", {})
    fig = raw.get("figure", {})
    theme = raw.get("theme", {})
    if not isinstance(theme, Mapping):
        raise ValueError("config section `theme` must be a table")

    defaults = PlotterConfig()
    return PlotterConfig(
        default_expression=_coerce_str(plot.get("expression", defaults.default_expression), "plot.expression"),
        x_min=_coerce_float(plot.get("x_min", defaults.x_min), "plot.x_min"),
        x_max=_coerce_float(plot.get("x_max", defaults.x_max), "plot.x_max"),
        steps=_coerce_int(plot.get("steps", defaults.steps), "plot.steps"),
        decimals=_coerce_int(plot.get("decimals", defaults.decimals), "plot.decimals"),
        zoom_in_factor=_coerce_float(zoom.get("in_factor", defaults.zoom_in_factor), "zoom.in_factor"),
        zoom_out_factor=_coerce_float(zoom.get("out_factor", defaults.zoom_out_factor), "zoom.out_factor"),
        width=_coerce_int(fig.get("width", defaults.width), "figure.width"),
        height=_coerce_int(fig.get("height", defaults.height), "figure.height"),
        title=_coerce_str(fig.get("title", defaults.title), "figure.title"),
        theme={str(k): v for k, v in theme.items()},
    )


def _coerce_str(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"`{name}` must be a string")
    return value


def _coerce_float(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"`{name}` must be a number")
    return float(value)


def _coerce_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"`{name}` must be an integer")
    return value
