from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when chart inputs cannot be laid out or drawn."""
