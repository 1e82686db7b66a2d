from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import math
from typing import Literal

import numpy as np

from funcplot_plot.errors import ChartDataError


AxisBound = float | Literal["auto"]

_FLOAT_MAX = float(np.finfo(np.float64).max)


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


def resolve_limits(
    xs: np.ndarray,
    ys: np.ndarray,
    *,
    y_domain: tuple[AxisBound, AxisBound] = ("auto", "auto"),
    fallback_x: tuple[float, float] = (-5.0, 5.0),
    y_pad_ratio: float = 0.05,
) -> DataLimits:
    """X spans the data; each y bound is either fixed or inferred from data."""
    if xs.size:
        xmin, xmax = float(np.min(xs)), float(np.max(xs))
    else:
        xmin, xmax = float(fallback_x[0]), float(fallback_x[1])
    if xmin == xmax:
        xmin -= 1.0
        xmax += 1.0

    if ys.size:
        data_lo, data_hi = float(np.min(ys)), float(np.max(ys))
    else:
        data_lo, data_hi = -1.0, 1.0
    if data_lo == data_hi:
        delta = max(1.0, abs(data_lo) * y_pad_ratio)
        data_lo -= delta
        data_hi += delta
    else:
        # Halve before subtracting so spans near float max stay finite.
        pad = (data_hi / 2 - data_lo / 2) * (2 * y_pad_ratio)
        data_lo -= pad
        data_hi += pad
    data_lo = max(data_lo, -_FLOAT_MAX)
    data_hi = min(data_hi, _FLOAT_MAX)

    lo_raw, hi_raw = y_domain
    lo = data_lo if lo_raw == "auto" else float(lo_raw)
    hi = data_hi if hi_raw == "auto" else float(hi_raw)
    if lo >= hi:
        if lo_raw != "auto" and hi_raw != "auto":
            raise ChartDataError("y axis min must be < y axis max")
        delta = max(1.0, abs(lo if lo_raw != "auto" else hi) * y_pad_ratio)
        if lo_raw == "auto":
            lo = hi - delta
        else:
            hi = lo + delta
    if not math.isfinite(xmax - xmin):
        raise ChartDataError("x range too large to plot")
    if not math.isfinite(hi - lo):
        raise ChartDataError("y range too large to plot")
    return DataLimits(xmin=xmin, xmax=xmax, ymin=lo, ymax=hi)


def build_transform(limits: DataLimits, width: int, height: int) -> PlotTransform:
    if width <= 1 or height <= 1:
        raise ChartDataError("plot area width/height must be > 1")
    sx = (width - 1) / (limits.xmax - limits.xmin)
    sy = (height - 1) / (limits.ymax - limits.ymin)
    return PlotTransform(sx=sx, tx=-limits.xmin * sx, sy=sy, ty=-limits.ymin * sy)


def map_to_pixels(
    x: np.ndarray,
    y: np.ndarray,
    transform: PlotTransform,
    width: int,
    height: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Data coordinates to pixel offsets inside the plot area; y grows downward."""
    px = np.rint(x * transform.sx + transform.tx)
    py = (height - 1) - np.rint(y * transform.sy + transform.ty)
    return (
        np.clip(px, 0, width - 1).astype(np.int32),
        np.clip(py, 0, height - 1).astype(np.int32),
    )


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Round-number ticks covering [vmin, vmax], roughly `target` of them."""
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    first = math.ceil(vmin / step - 1e-9)
    last = math.floor(vmax / step + 1e-9)
    ticks = np.arange(first, last + 1, dtype=np.float64) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    magnitude = abs(value)
    if magnitude != 0 and (magnitude >= 1e6 or magnitude < 1e-4):
        return f"{value:.2e}"
    decimals = _decimals_from_step(step) if step is not None else 6
    try:
        text = format(Decimal(repr(value)).quantize(Decimal(1).scaleb(-decimals)), "f")
    except InvalidOperation:
        text = repr(value)
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else None
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exponent = math.floor(math.log10(value))
    fraction = value / 10**exponent
    if round_result:
        bounds = ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0))
        nice = next((n for limit, n in bounds if fraction < limit), 10.0)
    else:
        bounds = ((1.0, 1.0), (2.0, 2.0), (5.0, 5.0))
        nice = next((n for limit, n in bounds if fraction <= limit), 10.0)
    return nice * 10**exponent


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 6
    exponent = Decimal(repr(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
