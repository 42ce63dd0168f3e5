"""
Dashboard statistics aggregation.

Resolves the time windows for the current instant, fans the declared queries
out over the store and composes the fixed-schema response.
"""
from datetime import datetime, tzinfo
from typing import Callable, Optional

from core.errors import AppError
from utils.logger import get_logger
from .composer import DashboardStatsResponse, compose_dashboard
from .executor import QueryExecutor
from .queries import plan_dashboard_queries
from .windows import resolve_time_windows

logger = get_logger(__name__)

FETCH_FAILED_MESSAGE = "Unable to fetch dashboard statistics"


class MetricsAggregator:
    """Builds the admin dashboard statistics from the live store."""

    def __init__(
        self,
        executor: QueryExecutor,
        tz: tzinfo,
        recent_limit: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.executor = executor
        self.tz = tz
        self.recent_limit = recent_limit
        self.clock = clock or (lambda: datetime.now(tz))

    async def aggregate(self) -> DashboardStatsResponse:
        """Run every dashboard query and compose the response.

        Any failure is raised as an :class:`AppError`; application errors pass
        through unchanged, everything else becomes a generic 500.
        """
        try:
            windows = resolve_time_windows(self.clock(), self.tz)
            plan = plan_dashboard_queries(windows.as_store_bounds(), self.recent_limit, self.tz)
            results = await self.executor.run(plan)
            return compose_dashboard(results)
        except Exception as e:
            logger.error(f"Get dashboard stats error: {e}", exc_info=True)
            if isinstance(e, AppError):
                raise
            raise AppError(FETCH_FAILED_MESSAGE, status=500) from e
