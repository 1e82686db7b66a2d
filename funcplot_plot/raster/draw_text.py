from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from funcplot_plot.raster.canvas import RGBA


DEFAULT_FONT_FILE = "DejaVuSans.ttf"
DEFAULT_FONT_SIZE_PX = 12.0

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Blend `text` onto `dst` with its top-left corner at (x, y)."""
    if not text:
        return
    mask = _rotate(_render_mask(text, _font_px(font_size_px)), rotate_deg)
    _blend_coverage(dst, x, y, mask, color)


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX, rotate_deg: int = 0) -> tuple[int, int]:
    if not text:
        return (0, _font_px(font_size_px))
    h, w = _rotate(_render_mask(text, _font_px(font_size_px)), rotate_deg).shape
    return (w, h)


def _font_px(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


@lru_cache(maxsize=16)
def _load_font(size_px: int) -> Font:
    try:
        return ImageFont.truetype(DEFAULT_FONT_FILE, size=size_px)
    except OSError:
        return ImageFont.load_default(size=size_px)


@lru_cache(maxsize=256)
def _render_mask(text: str, size_px: int) -> np.ndarray:
    font = _load_font(size_px)
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    mask = np.asarray(image, dtype=np.uint8)
    mask.flags.writeable = False
    return mask


def _rotate(mask: np.ndarray, rotate_deg: int) -> np.ndarray:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    turns = (rotate_deg // 90) % 4
    return mask if turns == 0 else np.rot90(mask, k=turns)


def _blend_coverage(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    coverage = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    alpha = (color[3] / 255.0) * coverage[:, :, None]
    patch = dst[y0:y1, x0:x1]
    src = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    patch[:, :, :3] = np.clip(src * alpha + patch[:, :, :3].astype(np.float32) * (1.0 - alpha), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.maximum(patch[:, :, 3], (alpha[:, :, 0] * 255.0).astype(np.uint8))
