from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

import numpy as np

from funcplot_plot.errors import ChartDataError
from funcplot_plot.raster import (
    RGBA,
    draw_hline,
    draw_polyline,
    draw_text,
    draw_vline,
    fill_rect,
    new_canvas,
    text_size,
)
from funcplot_plot.scales import (
    AxisBound,
    DataLimits,
    build_transform,
    format_ticks_for_axis,
    generate_nice_ticks,
    map_to_pixels,
    resolve_limits,
)


DASH = (3, 3)


class PointLike(Protocol):
    x: float
    y: float


@dataclass(frozen=True)
class ChartStyle:
    background: RGBA = (255, 255, 255, 255)
    plot_background: RGBA = (255, 255, 255, 255)
    grid: RGBA = (224, 224, 224, 255)
    reference: RGBA = (153, 153, 153, 255)
    axis: RGBA = (102, 102, 102, 255)
    text: RGBA = (55, 65, 81, 255)
    line: RGBA = (37, 99, 235, 255)
    line_width: int = 2
    error_background: RGBA = (254, 226, 226, 255)
    error_border: RGBA = (248, 113, 113, 255)
    error_text: RGBA = (185, 28, 28, 255)
    # top, right, bottom, left
    margin: tuple[int, int, int, int] = (20, 30, 20, 20)


def format_tooltip(point: PointLike) -> tuple[str, str]:
    """Tooltip label and value, both fixed to 4 decimals."""
    return (f"x: {float(point.x):.4f}", f"{float(point.y):.4f}")


def nearest_point(points: Sequence[PointLike], x: float) -> PointLike | None:
    if not points:
        return None
    xs = np.asarray([p.x for p in points], dtype=np.float64)
    return points[int(np.argmin(np.abs(xs - float(x))))]


def _segments(xs: np.ndarray, ys: np.ndarray, limits: DataLimits, gap_ratio: float) -> list[tuple[int, int]]:
    """Index runs that can be joined: inside the y range, no dropped samples between."""
    inside = (ys >= limits.ymin) & (ys <= limits.ymax)
    breaks = np.zeros(xs.size, dtype=bool)
    if xs.size > 2:
        diffs = np.diff(xs)
        step = float(np.median(diffs))
        if step > 0:
            breaks[1:] = diffs > step * gap_ratio
    runs: list[tuple[int, int]] = []
    start: int | None = None
    for i in range(xs.size):
        if not inside[i]:
            if start is not None:
                runs.append((start, i))
                start = None
            continue
        if start is None:
            start = i
        elif breaks[i]:
            runs.append((start, i))
            start = i
    if start is not None:
        runs.append((start, xs.size))
    return runs


@dataclass
class LineChart:
    """Single-curve line chart rendered to an RGBA numpy frame."""

    width: int = 960
    height: int = 540
    style: ChartStyle = field(default_factory=ChartStyle)
    x_label: str = "x"
    y_label: str = "f(x)"
    title: str = ""
    gap_ratio: float = 1.5

    _last_limits: DataLimits | None = None
    _last_plot_rect_px: tuple[int, int, int, int] | None = None
    _last_tick_x: tuple[float, ...] = ()
    _last_tick_y: tuple[float, ...] = ()
    _last_segments: tuple[tuple[int, int], ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.gap_ratio <= 1:
            raise ValueError("gap_ratio must be > 1")

    def last_limits(self) -> DataLimits | None:
        return self._last_limits

    def last_plot_rect(self) -> tuple[int, int, int, int] | None:
        return self._last_plot_rect_px

    def last_tick_values(self) -> tuple[tuple[float, ...], tuple[float, ...]]:
        return (self._last_tick_x, self._last_tick_y)

    def last_segments(self) -> tuple[tuple[int, int], ...]:
        return self._last_segments

    def x_at_pixel(self, px: float) -> float | None:
        """Inverse x mapping for the last render; None outside the plot area."""
        if self._last_limits is None or self._last_plot_rect_px is None:
            return None
        x0, _, w, _ = self._last_plot_rect_px
        offset = float(px) - x0
        if offset < 0 or offset > w - 1:
            return None
        limits = self._last_limits
        return limits.xmin + offset * (limits.xmax - limits.xmin) / (w - 1)

    def tooltip_at(self, px: float, points: Sequence[PointLike]) -> tuple[str, str] | None:
        x = self.x_at_pixel(px)
        if x is None:
            return None
        point = nearest_point(points, x)
        return None if point is None else format_tooltip(point)

    def render(
        self,
        points: Sequence[PointLike],
        *,
        y_domain: tuple[AxisBound, AxisBound] = ("auto", "auto"),
        x_fallback: tuple[float, float] = (-5.0, 5.0),
        error: str = "",
    ) -> np.ndarray:
        style = self.style
        xs = np.asarray([p.x for p in points], dtype=np.float64)
        ys = np.asarray([p.y for p in points], dtype=np.float64)
        if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
            raise ChartDataError("points must be finite")
        limits = resolve_limits(xs, ys, y_domain=y_domain, fallback_x=x_fallback)

        scale_base = min(self.width, self.height)
        tick_font_px = max(10.0, min(18.0, scale_base * 0.025))
        label_font_px = max(11.0, min(20.0, scale_base * 0.03))
        title_font_px = max(13.0, min(26.0, scale_base * 0.04))
        tick_len = int(max(4.0, tick_font_px * 0.4))
        pad = int(max(4.0, tick_font_px * 0.4))

        # Measure y labels against a provisional height to size the left gutter.
        draft_h = max(40, self.height - 80)
        draft_y = generate_nice_ticks(limits.ymin, limits.ymax, max(3, draft_h // 70))
        max_y_tick_w = max((text_size(t, font_size_px=tick_font_px)[0] for t in format_ticks_for_axis(draft_y)), default=0)
        _, tick_h = text_size("0123456789", font_size_px=tick_font_px)
        x_label_w, x_label_h = text_size(self.x_label, font_size_px=label_font_px)
        y_label_w, y_label_h = text_size(self.y_label, font_size_px=label_font_px, rotate_deg=90)

        title_h = 0
        if self.title:
            title_h = text_size(self.title, font_size_px=title_font_px)[1] + pad
        banner_h = 0
        if error:
            banner_h = text_size(error, font_size_px=label_font_px)[1] + 2 * pad + pad

        m_top, m_right, m_bottom, m_left = style.margin
        left = m_left + y_label_w + pad + max_y_tick_w + pad + tick_len
        right = m_right
        top = m_top + title_h + banner_h
        bottom = m_bottom + tick_len + pad + tick_h + pad + x_label_h
        plot_x0, plot_y0 = left, top
        plot_w = self.width - left - right
        plot_h = self.height - top - bottom
        if plot_w <= 1 or plot_h <= 1:
            raise ChartDataError("figure too small for plotting area")
        self._last_plot_rect_px = (plot_x0, plot_y0, plot_w, plot_h)
        self._last_limits = limits

        transform = build_transform(limits, plot_w, plot_h)
        tick_x = generate_nice_ticks(limits.xmin, limits.xmax, max(3, plot_w // 90))
        tick_y = generate_nice_ticks(limits.ymin, limits.ymax, max(3, plot_h // 70))
        self._last_tick_x = tuple(float(v) for v in tick_x.tolist())
        self._last_tick_y = tuple(float(v) for v in tick_y.tolist())

        frame = new_canvas(self.width, self.height, color=style.background)
        fill_rect(frame, plot_x0, plot_y0, plot_x0 + plot_w - 1, plot_y0 + plot_h - 1, style.plot_background)

        tick_px, _ = map_to_pixels(tick_x, np.full(tick_x.shape, limits.ymin), transform, plot_w, plot_h)
        _, tick_py = map_to_pixels(np.full(tick_y.shape, limits.xmin), tick_y, transform, plot_w, plot_h)
        for px in tick_px.tolist():
            draw_vline(frame, plot_x0 + px, plot_y0, plot_y0 + plot_h - 1, style.grid, dash=DASH)
        for py in tick_py.tolist():
            draw_hline(frame, plot_x0, plot_x0 + plot_w - 1, plot_y0 + py, style.grid, dash=DASH)

        if limits.xmin <= 0.0 <= limits.xmax:
            zx, _ = map_to_pixels(np.zeros(1), np.zeros(1), transform, plot_w, plot_h)
            draw_vline(frame, plot_x0 + int(zx[0]), plot_y0, plot_y0 + plot_h - 1, style.reference, dash=DASH)
        if limits.ymin <= 0.0 <= limits.ymax:
            _, zy = map_to_pixels(np.zeros(1), np.zeros(1), transform, plot_w, plot_h)
            draw_hline(frame, plot_x0, plot_x0 + plot_w - 1, plot_y0 + int(zy[0]), style.reference, dash=DASH)

        segments = _segments(xs, ys, limits, self.gap_ratio) if xs.size else []
        self._last_segments = tuple(segments)
        for start, end in segments:
            px, py = map_to_pixels(xs[start:end], ys[start:end], transform, plot_w, plot_h)
            draw_polyline(frame, px + plot_x0, py + plot_y0, style.line, width=style.line_width)

        axis_y = plot_y0 + plot_h - 1
        draw_hline(frame, plot_x0, plot_x0 + plot_w - 1, axis_y, style.axis)
        draw_vline(frame, plot_x0, plot_y0, axis_y, style.axis)

        for px, label in zip(tick_px.tolist(), format_ticks_for_axis(tick_x), strict=True):
            gx = plot_x0 + px
            draw_vline(frame, gx, axis_y, axis_y + tick_len, style.axis)
            lw, _ = text_size(label, font_size_px=tick_font_px)
            draw_text(frame, gx - lw // 2, axis_y + tick_len + pad, label, style.text, font_size_px=tick_font_px)
        for py, label in zip(tick_py.tolist(), format_ticks_for_axis(tick_y), strict=True):
            gy = plot_y0 + py
            draw_hline(frame, plot_x0 - tick_len, plot_x0, gy, style.axis)
            lw, lh = text_size(label, font_size_px=tick_font_px)
            draw_text(frame, plot_x0 - tick_len - pad - lw, gy - lh // 2, label, style.text, font_size_px=tick_font_px)

        draw_text(
            frame,
            plot_x0 + plot_w // 2 - x_label_w // 2,
            self.height - m_bottom - x_label_h,
            self.x_label,
            style.text,
            font_size_px=label_font_px,
        )
        draw_text(
            frame,
            m_left,
            plot_y0 + plot_h // 2 - y_label_h // 2,
            self.y_label,
            style.text,
            font_size_px=label_font_px,
            rotate_deg=90,
        )

        if self.title:
            title_w, _ = text_size(self.title, font_size_px=title_font_px)
            draw_text(frame, (self.width - title_w) // 2, m_top, self.title, style.text, font_size_px=title_font_px)
        if error:
            self._draw_error_banner(frame, error, font_px=label_font_px, pad=pad, top=m_top + title_h)
        return frame

    def _draw_error_banner(self, frame: np.ndarray, message: str, *, font_px: float, pad: int, top: int) -> None:
        style = self.style
        _, m_right, _, m_left = style.margin
        _, th = text_size(message, font_size_px=font_px)
        x0, y0 = m_left, top
        x1, y1 = self.width - m_right - 1, top + th + 2 * pad
        fill_rect(frame, x0, y0, x1, y1, style.error_background)
        draw_hline(frame, x0, x1, y0, style.error_border)
        draw_hline(frame, x0, x1, y1, style.error_border)
        draw_vline(frame, x0, y0, y1, style.error_border)
        draw_vline(frame, x1, y0, y1, style.error_border)
        draw_text(frame, x0 + pad, y0 + pad, message, style.error_text, font_size_px=font_px)
