"""
Dashboard API routes for admin statistics.
"""
from fastapi import APIRouter, Depends

from core.auth import AuthenticatedUser, get_current_user
from core.config import settings
from core.dashboard import DashboardStatsResponse, MetricsAggregator, QueryExecutor
from core.database import DatabaseManager, get_db_manager
from utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["dashboard"])


def get_metrics_aggregator(db: DatabaseManager = Depends(get_db_manager)) -> MetricsAggregator:
    """Dependency building the aggregator over the shared database pool."""
    return MetricsAggregator(
        executor=QueryExecutor(db),
        tz=settings.timezone,
        recent_limit=settings.dashboard_recent_limit,
    )


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    user: AuthenticatedUser = Depends(get_current_user),
    aggregator: MetricsAggregator = Depends(get_metrics_aggregator),
):
    """Get aggregated statistics for the admin dashboard."""
    logger.info(f"Dashboard statistics requested by user {user.id}")
    return await aggregator.aggregate()
