from funcplot_core.config import PlotterConfig, load_config
from funcplot_core.errors import InvalidDomainError, InvalidExpressionError, NoValidPointsError, PlotError
from funcplot_core.expression import CompiledExpression, compile_expression, evaluate, parse_expression
from funcplot_core.sampler import PlotRequest, PlotResult, SamplePoint, compute_plot, sample_expression
from funcplot_core.session import PlotSession
from funcplot_core.viewport import Domain, YScale, zoom_in, zoom_out

__all__ = [
    "CompiledExpression",
    "Domain",
    "InvalidDomainError",
    "InvalidExpressionError",
    "NoValidPointsError",
    "PlotError",
    "PlotRequest",
    "PlotResult",
    "PlotSession",
    "PlotterConfig",
    "SamplePoint",
    "YScale",
    "compile_expression",
    "compute_plot",
    "evaluate",
    "load_config",
    "parse_expression",
    "sample_expression",
    "zoom_in",
    "zoom_out",
]
