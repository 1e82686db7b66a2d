from funcplot_plot.chart import ChartStyle, LineChart, format_tooltip, nearest_point
from funcplot_plot.errors import ChartDataError
from funcplot_plot.export import frame_to_image, save_png

__all__ = [
    "ChartDataError",
    "ChartStyle",
    "LineChart",
    "format_tooltip",
    "frame_to_image",
    "nearest_point",
    "save_png",
]
