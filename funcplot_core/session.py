from __future__ import annotations

from dataclasses import dataclass, field
import logging

from .config import PlotterConfig
from .errors import PlotStatus
from .sampler import PlotRequest, PlotResult, SamplePoint, compute_plot
from .viewport import AxisBound, Domain, YScale, parse_bound, zoom_domain

LOGGER = logging.getLogger(__name__)


@dataclass
class PlotSession:
    """Mutable plot state driven by the control layer.

    Changing the expression or the x range resamples immediately. The y-axis
    settings only change the axis domain handed to the renderer.
    """

    config: PlotterConfig = field(default_factory=PlotterConfig)
    expression: str | None = None
    x_min: float | None = None
    x_max: float | None = None
    y_min: float | None = None
    y_max: float | None = None
    auto_y_scale: bool = True
    _result: PlotResult = field(default_factory=lambda: PlotResult(status="ok"), init=False, repr=False)

    def __post_init__(self) -> None:
        if self.expression is None:
            self.expression = self.config.default_expression
        if self.x_min is None:
            self.x_min = self.config.x_min
        if self.x_max is None:
            self.x_max = self.config.x_max
        self.recompute()

    @property
    def result(self) -> PlotResult:
        return self._result

    @property
    def points(self) -> tuple[SamplePoint, ...]:
        return self._result.points

    @property
    def error(self) -> str:
        return self._result.error

    @property
    def status(self) -> PlotStatus:
        return self._result.status

    @property
    def domain(self) -> Domain:
        return Domain(x_min=self.x_min, x_max=self.x_max)

    @property
    def y_scale(self) -> YScale:
        return YScale(auto=self.auto_y_scale, y_min=self.y_min, y_max=self.y_max)

    @property
    def y_domain(self) -> tuple[AxisBound, AxisBound]:
        return self.y_scale.axis_domain()

    def set_expression(self, expression: str) -> PlotResult:
        self.expression = expression
        return self.recompute()

    def set_x_min(self, raw: object) -> PlotResult:
        value = parse_bound(raw, None)
        self.x_min = self.config.x_min if value is None else value
        return self.recompute()

    def set_x_max(self, raw: object) -> PlotResult:
        value = parse_bound(raw, None)
        self.x_max = self.config.x_max if value is None else value
        return self.recompute()

    def set_y_min(self, raw: object) -> None:
        self.y_min = parse_bound(raw, None)

    def set_y_max(self, raw: object) -> None:
        self.y_max = parse_bound(raw, None)

    def set_auto_y_scale(self, enabled: bool) -> None:
        self.auto_y_scale = bool(enabled)

    def zoom_in(self) -> PlotResult:
        return self._apply_domain(zoom_domain(self.domain, self.config.zoom_in_factor))

    def zoom_out(self) -> PlotResult:
        return self._apply_domain(zoom_domain(self.domain, self.config.zoom_out_factor))

    def reset(self) -> PlotResult:
        self.auto_y_scale = True
        return self._apply_domain(Domain(x_min=self.config.x_min, x_max=self.config.x_max))

    def request(self) -> PlotRequest:
        return PlotRequest(
            expression=self.expression,
            x_min=self.x_min,
            x_max=self.x_max,
            steps=self.config.steps,
            decimals=self.config.decimals,
        )

    def recompute(self) -> PlotResult:
        self._result = compute_plot(self.request())
        if self._result.ok:
            LOGGER.debug(
                "plotted %r over [%g, %g]: %d points",
                self.expression,
                self.x_min,
                self.x_max,
                len(self._result.points),
            )
        return self._result

    def _apply_domain(self, domain: Domain) -> PlotResult:
        self.x_min = domain.x_min
        self.x_max = domain.x_max
        return self.recompute()
