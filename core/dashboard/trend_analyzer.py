"""
Month-over-month trend calculation for dashboard counters.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Union


@dataclass(frozen=True)
class TrendMetric:
    """Current window count compared to the previous window"""
    current: int
    previous: int
    change: Union[int, float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_change(current: int, previous: int) -> Union[int, float]:
    """Percentage change from ``previous`` to ``current``.

    With no previous activity the change is ``100`` if anything happened in
    the current window and ``0`` otherwise. The ratio is not rounded.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return (current - previous) / previous * 100


def build_trend(current: int, previous: int) -> TrendMetric:
    if current < 0 or previous < 0:
        raise ValueError(f"Trend counts must be non-negative, got current={current}, previous={previous}")
    return TrendMetric(current=current, previous=previous, change=calculate_change(current, previous))
