from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def _blend(region: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32) * a
    region[..., :3] = (src + region[..., :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    region[..., 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if 0 <= y < dst.shape[0] and 0 <= x < dst.shape[1]:
        _blend(dst[y : y + 1, x : x + 1], color)


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Fill the inclusive rectangle spanned by two corners, clipped to the canvas."""
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if left > right or top > bottom:
        return
    _blend(dst[top : bottom + 1, left : right + 1], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, *, dash: tuple[int, int] | None = None) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    if left > right:
        return
    row = dst[y, left : right + 1]
    if dash is None:
        _blend(row, color)
        return
    _blend_masked(row, _dash_mask(row.shape[0], dash), color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, *, dash: tuple[int, int] | None = None) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if top > bottom:
        return
    column = dst[top : bottom + 1, x]
    if dash is None:
        _blend(column, color)
        return
    _blend_masked(column, _dash_mask(column.shape[0], dash), color)


def _dash_mask(length: int, dash: tuple[int, int]) -> np.ndarray:
    on, off = dash
    if on <= 0 or off < 0:
        raise ValueError("dash pattern must be (on > 0, off >= 0)")
    return (np.arange(length) % (on + off)) < on


def _blend_masked(line: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    # Fancy indexing copies, so blend the selection and write it back.
    selected = line[mask]
    _blend(selected, color)
    line[mask] = selected
