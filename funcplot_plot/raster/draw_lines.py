from __future__ import annotations

import numpy as np

from funcplot_plot.raster.canvas import RGBA, fill_rect


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    """Join consecutive pixel coordinates with Bresenham segments."""
    if xs.shape != ys.shape:
        raise ValueError("xs and ys must have the same shape")
    if xs.size == 1:
        _stamp(dst, int(xs[0]), int(ys[0]), color, width)
        return
    for i in range(xs.size - 1):
        _draw_segment(dst, int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1]), color, width)


def _draw_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    step_x = 1 if x0 < x1 else -1
    step_y = 1 if y0 < y1 else -1
    err = dx + dy
    x, y = x0, y0
    while True:
        _stamp(dst, x, y, color, width)
        if x == x1 and y == y1:
            return
        doubled = 2 * err
        if doubled >= dy:
            err += dy
            x += step_x
        if doubled <= dx:
            err += dx
            y += step_y


def _stamp(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    lo = (max(1, width) - 1) // 2
    hi = max(1, width) - 1 - lo
    fill_rect(dst, x - lo, y - lo, x + hi, y + hi, color)
