"""
Admin dashboard statistics: time windows, query catalogue, concurrent
execution, trend and status post-processing, and response composition.
"""

from .aggregator import MetricsAggregator, FETCH_FAILED_MESSAGE
from .composer import DashboardStatsResponse, compose_dashboard
from .executor import QueryExecutor
from .queries import (
    Collection,
    CountQuery,
    DayBucketsQuery,
    FindRecentQuery,
    GroupByQuery,
    Join,
    QueryRequest,
    plan_dashboard_queries,
)
from .status import fold_status_breakdown, UNKNOWN_STATUS
from .trend_analyzer import TrendMetric, build_trend, calculate_change
from .windows import TimeWindows, resolve_time_windows

__all__ = [
    'MetricsAggregator',
    'FETCH_FAILED_MESSAGE',
    'DashboardStatsResponse',
    'compose_dashboard',
    'QueryExecutor',
    'Collection',
    'CountQuery',
    'DayBucketsQuery',
    'FindRecentQuery',
    'GroupByQuery',
    'Join',
    'QueryRequest',
    'plan_dashboard_queries',
    'fold_status_breakdown',
    'UNKNOWN_STATUS',
    'TrendMetric',
    'build_trend',
    'calculate_change',
    'TimeWindows',
    'resolve_time_windows',
]
