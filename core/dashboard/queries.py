"""
Declarative catalogue of the read queries behind the dashboard.

Every query is a small frozen value tagged by its kind, so the executor can
dispatch on type without knowing anything about the dashboard layout.
"""
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Dict, Optional, Tuple, Type, Union

from core.database.models import (
    Base, User, ContactMessage, Project, BlogPost, Video, Event, Partner
)
from .windows import TimeWindows


class Collection(Enum):
    """Store collections the dashboard reads from"""
    USERS = "users"
    CONTACTS = "contacts"
    PROJECTS = "projects"
    BLOGS = "blogs"
    VIDEOS = "videos"
    EVENTS = "events"
    PARTNERS = "partners"


COLLECTION_MODELS: Dict[Collection, Type[Base]] = {
    Collection.USERS: User,
    Collection.CONTACTS: ContactMessage,
    Collection.PROJECTS: Project,
    Collection.BLOGS: BlogPost,
    Collection.VIDEOS: Video,
    Collection.EVENTS: Event,
    Collection.PARTNERS: Partner,
}

# Public (response) field name -> model attribute
_COMMON_FIELDS = {"_id": "id", "status": "status", "createdAt": "created_at"}

COLLECTION_FIELDS: Dict[Collection, Dict[str, str]] = {
    Collection.USERS: {**_COMMON_FIELDS, "name": "name", "email": "email"},
    Collection.CONTACTS: {**_COMMON_FIELDS, "name": "name", "email": "email", "subject": "subject"},
    Collection.PROJECTS: {**_COMMON_FIELDS, "projectName": "project_name", "clientName": "client_name"},
    Collection.BLOGS: {**_COMMON_FIELDS, "title": "title", "category": "category"},
    Collection.VIDEOS: {**_COMMON_FIELDS, "title": "title", "category": "category"},
    Collection.EVENTS: {**_COMMON_FIELDS, "title": "title", "category": "category"},
    Collection.PARTNERS: {**_COMMON_FIELDS, "name": "name"},
}


def resolve_column(collection: Collection, field: str):
    """Map a public field name of ``collection`` to its ORM column."""
    try:
        attribute = COLLECTION_FIELDS[collection][field]
    except KeyError:
        raise ValueError(f"Unknown field '{field}' for collection '{collection.value}'")
    return getattr(COLLECTION_MODELS[collection], attribute)


@dataclass(frozen=True)
class Join:
    """Reference resolution: replace ``local_key`` with the referenced record's fields."""
    field: str
    local_key: str
    collection: Collection
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class CountQuery:
    """Count of records, optionally restricted to ``since <= createdAt < until``"""
    collection: Collection
    since: Optional[datetime] = None
    until: Optional[datetime] = None


@dataclass(frozen=True)
class GroupByQuery:
    """``(value, count)`` pairs grouped on one field over the whole collection"""
    collection: Collection
    field: str


@dataclass(frozen=True)
class FindRecentQuery:
    """Latest records by ``createdAt`` descending, projected onto ``fields``"""
    collection: Collection
    fields: Tuple[str, ...]
    limit: int = 10
    joins: Tuple[Join, ...] = ()


@dataclass(frozen=True)
class DayBucketsQuery:
    """Per-day record counts with ``createdAt >= since``, ascending by day in ``tz``"""
    collection: Collection
    since: datetime
    tz: tzinfo = timezone.utc


QueryRequest = Union[CountQuery, GroupByQuery, FindRecentQuery, DayBucketsQuery]

CONTACT_FIELDS = ("name", "email", "subject", "status", "createdAt")
PROJECT_FIELDS = ("projectName", "clientName", "status", "createdAt")
ARTICLE_FIELDS = ("title", "category", "status", "createdAt")
PROJECT_MANAGER_JOIN = Join(
    field="projectManager",
    local_key="project_manager_id",
    collection=Collection.USERS,
    fields=("name",),
)

TREND_COLLECTIONS = {
    "contacts": Collection.CONTACTS,
    "projects": Collection.PROJECTS,
    "blogs": Collection.BLOGS,
}


def plan_dashboard_queries(
    windows: TimeWindows, recent_limit: int = 10, tz: tzinfo = timezone.utc
) -> Dict[str, QueryRequest]:
    """Declare every query the dashboard needs, keyed by the id the composer reads.

    ``windows`` must already be expressed in the store's timezone
    (see :meth:`TimeWindows.as_store_bounds`); ``tz`` is the civil zone they
    were resolved in and decides the timeline's calendar days.
    """
    plan: Dict[str, QueryRequest] = {
        "total_users": CountQuery(Collection.USERS),
        "total_contacts": CountQuery(Collection.CONTACTS),
        "total_projects": CountQuery(Collection.PROJECTS),
        "total_blogs": CountQuery(Collection.BLOGS),
        "total_videos": CountQuery(Collection.VIDEOS),
        "total_events": CountQuery(Collection.EVENTS),
        "total_partners": CountQuery(Collection.PARTNERS),
        "users_this_month": CountQuery(Collection.USERS, since=windows.this_month),
    }

    for name, collection in TREND_COLLECTIONS.items():
        plan[f"{name}_this_month"] = CountQuery(collection, since=windows.this_month)
        plan[f"{name}_last_7_days"] = CountQuery(collection, since=windows.last_7_days)
        plan[f"{name}_last_month"] = CountQuery(
            collection, since=windows.last_month, until=windows.this_month
        )
        plan[f"{name}_by_status"] = GroupByQuery(collection, "status")
        plan[f"{name}_timeline"] = DayBucketsQuery(collection, since=windows.last_30_days, tz=tz)

    plan["recent_contacts"] = FindRecentQuery(Collection.CONTACTS, CONTACT_FIELDS, recent_limit)
    plan["recent_projects"] = FindRecentQuery(
        Collection.PROJECTS, PROJECT_FIELDS, recent_limit, joins=(PROJECT_MANAGER_JOIN,)
    )
    plan["recent_blogs"] = FindRecentQuery(Collection.BLOGS, ARTICLE_FIELDS, recent_limit)
    plan["recent_events"] = FindRecentQuery(Collection.EVENTS, ARTICLE_FIELDS, recent_limit)

    return plan
