from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math

import numpy as np

from .errors import InvalidDomainError, NoValidPointsError, PlotError, PlotStatus
from .expression import CompiledExpression, compile_expression

LOGGER = logging.getLogger(__name__)

DEFAULT_STEPS = 500
DEFAULT_DECIMALS = 4


@dataclass(frozen=True)
class SamplePoint:
    x: float
    y: float

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class PlotRequest:
    expression: str
    x_min: float
    x_max: float
    steps: int = DEFAULT_STEPS
    decimals: int = DEFAULT_DECIMALS


@dataclass(frozen=True)
class PlotResult:
    status: PlotStatus
    points: tuple[SamplePoint, ...] = field(default_factory=tuple)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def xs(self) -> np.ndarray:
        return np.asarray([p.x for p in self.points], dtype=np.float64)

    def ys(self) -> np.ndarray:
        return np.asarray([p.y for p in self.points], dtype=np.float64)


def sample_grid(x_min: float, x_max: float, steps: int = DEFAULT_STEPS) -> np.ndarray:
    """Return `steps + 1` evenly spaced x values covering both endpoints."""
    if steps <= 0:
        raise ValueError("steps must be > 0")
    lo = float(x_min)
    hi = float(x_max)
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise InvalidDomainError("x min and x max must be finite numbers")
    if lo >= hi:
        raise InvalidDomainError()
    if not math.isfinite(hi - lo):
        raise InvalidDomainError("x range is too large")
    # Index-based spacing keeps the last sample exactly on x_max.
    return np.linspace(lo, hi, steps + 1, dtype=np.float64)


def _round_finite(values: np.ndarray, decimals: int) -> np.ndarray:
    # np.round scales by 10**decimals first; values near float max overflow there.
    with np.errstate(over="ignore", invalid="ignore"):
        rounded = np.round(values, decimals)
    return np.where(np.isfinite(rounded), rounded, values)


def sample_expression(
    expression: str | CompiledExpression,
    x_min: float,
    x_max: float,
    *,
    steps: int = DEFAULT_STEPS,
    decimals: int = DEFAULT_DECIMALS,
) -> tuple[SamplePoint, ...]:
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    compiled = compile_expression(expression) if isinstance(expression, str) else expression
    xs = sample_grid(x_min, x_max, steps)
    ys = compiled.evaluate_many(xs)
    mask = np.isfinite(ys)
    if not np.any(mask):
        raise NoValidPointsError()
    kept_x = _round_finite(xs[mask], decimals)
    kept_y = _round_finite(ys[mask], decimals)
    dropped = int(xs.size - kept_x.size)
    if dropped:
        LOGGER.debug("dropped %d non-finite samples for %r", dropped, compiled.source)
    return tuple(SamplePoint(x=float(x), y=float(y)) for x, y in zip(kept_x.tolist(), kept_y.tolist(), strict=True))


def compute_plot(request: PlotRequest) -> PlotResult:
    try:
        points = sample_expression(
            request.expression,
            request.x_min,
            request.x_max,
            steps=request.steps,
            decimals=request.decimals,
        )
    except PlotError as exc:
        LOGGER.warning("plot failed for %r: %s", request.expression, exc)
        return PlotResult(status=exc.status, points=(), error=str(exc))
    return PlotResult(status="ok", points=points, error="")
