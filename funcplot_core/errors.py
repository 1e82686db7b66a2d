from __future__ import annotations

from typing import Literal


PlotStatus = Literal["ok", "invalid_expression", "no_points", "invalid_domain"]


class PlotError(ValueError):
    """Recoverable failure of a plot recompute; the UI shows `str(exc)`."""

    status: PlotStatus = "ok"


class InvalidExpressionError(PlotError):
    status: PlotStatus = "invalid_expression"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        message = f"Invalid function: {detail}" if detail else "Invalid function"
        super().__init__(message)


class NoValidPointsError(PlotError):
    status: PlotStatus = "no_points"

    def __init__(self) -> None:
        super().__init__("No valid points to plot")


class InvalidDomainError(PlotError):
    status: PlotStatus = "invalid_domain"

    def __init__(self, detail: str = "x min must be less than x max") -> None:
        self.detail = detail
        super().__init__(f"Invalid domain: {detail}")
