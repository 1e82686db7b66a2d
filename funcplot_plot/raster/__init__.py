from .canvas import RGBA, draw_hline, draw_pixel, draw_vline, fill_rect, new_canvas
from .draw_lines import draw_polyline
from .draw_text import draw_text, text_size

__all__ = [
    "RGBA",
    "draw_hline",
    "draw_pixel",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "text_size",
]
