from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal


AUTO = "auto"
AxisBound = float | Literal["auto"]

DEFAULT_X_MIN = -5.0
DEFAULT_X_MAX = 5.0
ZOOM_IN_FACTOR = 0.7
ZOOM_OUT_FACTOR = 1.5


@dataclass(frozen=True)
class Domain:
    x_min: float = DEFAULT_X_MIN
    x_max: float = DEFAULT_X_MAX

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def center(self) -> float:
        return (self.x_max + self.x_min) / 2


def zoom_domain(domain: Domain, factor: float) -> Domain:
    """Scale the domain width by `factor` around its center."""
    if factor <= 0:
        raise ValueError("zoom factor must be > 0")
    center = domain.center
    half = domain.width * factor / 2
    return Domain(x_min=center - half, x_max=center + half)


def zoom_in(domain: Domain, factor: float = ZOOM_IN_FACTOR) -> Domain:
    return zoom_domain(domain, factor)


def zoom_out(domain: Domain, factor: float = ZOOM_OUT_FACTOR) -> Domain:
    return zoom_domain(domain, factor)


@dataclass(frozen=True)
class YScale:
    auto: bool = True
    y_min: float | None = None
    y_max: float | None = None

    def axis_domain(self) -> tuple[AxisBound, AxisBound]:
        if self.auto:
            return (AUTO, AUTO)
        lo: AxisBound = AUTO if self.y_min is None else self.y_min
        hi: AxisBound = AUTO if self.y_max is None else self.y_max
        return (lo, hi)


def parse_bound(raw: object, default: float | None) -> float | None:
    """Coerce a UI input to a finite float, or return `default`.

    `None`, empty strings, `"auto"`, non-numeric text and non-finite values
    all fall back; `0` is a valid bound.
    """

    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        text = raw.strip()
        if not text or text.lower() == AUTO:
            return default
        raw = text
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return value
