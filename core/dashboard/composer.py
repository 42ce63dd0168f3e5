"""
Response models for the dashboard statistics endpoint and the composer that
fills them from executed query results.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .status import fold_status_breakdown
from .trend_analyzer import build_trend

SUCCESS_MESSAGE = "Dashboard statistics fetched successfully"


class DashboardModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Overview(DashboardModel):
    total_users: int = Field(alias="totalUsers")
    total_enquiries: int = Field(alias="totalEnquiries")
    total_projects: int = Field(alias="totalProjects")
    total_blogs: int = Field(alias="totalBlogs")
    total_videos: int = Field(alias="totalVideos")
    total_events: int = Field(alias="totalEvents")
    total_partners: int = Field(alias="totalPartners")


class ThisMonthCounts(DashboardModel):
    users: int
    contacts: int
    projects: int
    blogs: int


class Last7DaysCounts(DashboardModel):
    contacts: int
    projects: int
    blogs: int


class Trend(DashboardModel):
    current: int
    previous: int
    change: Union[int, float]


class Trends(DashboardModel):
    contacts: Trend
    projects: Trend
    blogs: Trend


class StatusBreakdown(DashboardModel):
    contacts: Dict[str, int]
    projects: Dict[str, int]
    blogs: Dict[str, int]


class RecentItem(DashboardModel):
    id: int = Field(alias="_id")
    status: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Stored timestamps are naive UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class RecentContact(RecentItem):
    name: str
    email: str
    subject: str


class ProjectManager(DashboardModel):
    id: int = Field(alias="_id")
    name: str


class RecentProject(RecentItem):
    project_name: str = Field(alias="projectName")
    client_name: str = Field(alias="clientName")
    project_manager: Optional[ProjectManager] = Field(default=None, alias="projectManager")


class RecentArticle(RecentItem):
    title: str
    category: Optional[str] = None


class RecentActivity(DashboardModel):
    contacts: List[RecentContact]
    projects: List[RecentProject]
    blogs: List[RecentArticle]
    events: List[RecentArticle]


class TimelineBucket(DashboardModel):
    day: str = Field(alias="_id")
    count: int


class ActivityTimeline(DashboardModel):
    contacts: List[TimelineBucket]
    projects: List[TimelineBucket]
    blogs: List[TimelineBucket]


class DashboardStats(DashboardModel):
    overview: Overview
    this_month: ThisMonthCounts = Field(alias="thisMonth")
    last_7_days: Last7DaysCounts = Field(alias="last7Days")
    trends: Trends
    status_breakdown: StatusBreakdown = Field(alias="statusBreakdown")
    recent: RecentActivity
    activity_timeline: ActivityTimeline = Field(alias="activityTimeline")


class DashboardStatsResponse(DashboardModel):
    success: bool = True
    message: str = SUCCESS_MESSAGE
    data: DashboardStats

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using the public field names."""
        return self.model_dump(by_alias=True, mode="json")


def _trend(results: Mapping[str, Any], name: str) -> Trend:
    metric = build_trend(results[f"{name}_this_month"], results[f"{name}_last_month"])
    return Trend(**metric.to_dict())


def compose_dashboard(results: Mapping[str, Any]) -> DashboardStatsResponse:
    """Assemble the dashboard payload from results keyed by query id."""
    stats = DashboardStats(
        overview=Overview(
            total_users=results["total_users"],
            total_enquiries=results["total_contacts"],
            total_projects=results["total_projects"],
            total_blogs=results["total_blogs"],
            total_videos=results["total_videos"],
            total_events=results["total_events"],
            total_partners=results["total_partners"],
        ),
        this_month=ThisMonthCounts(
            users=results["users_this_month"],
            contacts=results["contacts_this_month"],
            projects=results["projects_this_month"],
            blogs=results["blogs_this_month"],
        ),
        last_7_days=Last7DaysCounts(
            contacts=results["contacts_last_7_days"],
            projects=results["projects_last_7_days"],
            blogs=results["blogs_last_7_days"],
        ),
        trends=Trends(
            contacts=_trend(results, "contacts"),
            projects=_trend(results, "projects"),
            blogs=_trend(results, "blogs"),
        ),
        status_breakdown=StatusBreakdown(
            contacts=fold_status_breakdown(results["contacts_by_status"]),
            projects=fold_status_breakdown(results["projects_by_status"]),
            blogs=fold_status_breakdown(results["blogs_by_status"]),
        ),
        recent=RecentActivity(
            contacts=[RecentContact(**item) for item in results["recent_contacts"]],
            projects=[RecentProject(**item) for item in results["recent_projects"]],
            blogs=[RecentArticle(**item) for item in results["recent_blogs"]],
            events=[RecentArticle(**item) for item in results["recent_events"]],
        ),
        activity_timeline=ActivityTimeline(
            contacts=[TimelineBucket(**bucket) for bucket in results["contacts_timeline"]],
            projects=[TimelineBucket(**bucket) for bucket in results["projects_timeline"]],
            blogs=[TimelineBucket(**bucket) for bucket in results["blogs_timeline"]],
        ),
    )
    return DashboardStatsResponse(data=stats)
