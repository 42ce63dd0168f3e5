import asyncio
import threading
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from core.dashboard import (
    Collection,
    CountQuery,
    DayBucketsQuery,
    FindRecentQuery,
    GroupByQuery,
    Join,
    QueryExecutor,
    plan_dashboard_queries,
    resolve_time_windows,
)
from core.database.models import BlogPost, ContactMessage, Project, User

from conftest import at, insert_rows


def _contact(created_at, status="New", name="Jane"):
    return {
        "name": name,
        "email": f"{name.lower()}@example.com",
        "subject": "Hello",
        "message": "Hi there",
        "status": status,
        "created_at": created_at,
    }


def test_count_respects_half_open_window(db):
    insert_rows(db, ContactMessage, [
        _contact(at(2026, 2, 1, 0, 0)),
        _contact(at(2026, 2, 28, 23, 59)),
        _contact(at(2026, 3, 1, 0, 0)),
    ])
    executor = QueryExecutor(db)

    assert executor.execute(CountQuery(Collection.CONTACTS)) == 3
    assert executor.execute(
        CountQuery(Collection.CONTACTS, since=datetime(2026, 2, 1), until=datetime(2026, 3, 1))
    ) == 2
    assert executor.execute(CountQuery(Collection.CONTACTS, since=datetime(2026, 3, 1))) == 1


def test_group_by_returns_raw_pairs(db):
    insert_rows(db, ContactMessage, [
        _contact(at(2026, 3, 1, 9, 0), "New"),
        _contact(at(2026, 3, 2, 9, 0), "New"),
        _contact(at(2026, 3, 3, 9, 0), None),
    ])
    pairs = QueryExecutor(db).execute(GroupByQuery(Collection.CONTACTS, "status"))
    assert sorted(pairs, key=lambda p: str(p[0])) == [("New", 2), (None, 1)]


def test_find_recent_orders_limits_and_resolves_references(db):
    insert_rows(db, User, [{"name": "Priya", "email": "priya@example.com", "created_at": at(2026, 1, 1)}])
    insert_rows(db, Project, [
        {
            "project_name": f"Project {i}",
            "client_name": "Acme",
            "status": "Drafting",
            "project_manager_id": 1 if i % 2 else None,
            "created_at": at(2026, 3, 1 + i, 10, 0),
        }
        for i in range(1, 5)
    ])
    query = FindRecentQuery(
        Collection.PROJECTS,
        ("projectName", "clientName", "status", "createdAt"),
        limit=3,
        joins=(Join("projectManager", "project_manager_id", Collection.USERS, ("name",)),),
    )

    items = QueryExecutor(db).execute(query)

    assert [item["projectName"] for item in items] == ["Project 4", "Project 3", "Project 2"]
    assert items[0]["projectManager"] is None
    assert items[1]["projectManager"] == {"_id": 1, "name": "Priya"}
    assert set(items[1]) == {"_id", "projectName", "clientName", "status", "createdAt", "projectManager"}
    assert items[1]["createdAt"] == at(2026, 3, 4, 10, 0)


def test_day_buckets_skip_empty_days_and_ascend(db):
    insert_rows(db, BlogPost, [
        {"title": "a", "category": "News", "status": "Draft", "created_at": at(2026, 3, 18, 9, 0)},
        {"title": "b", "category": "News", "status": "Draft", "created_at": at(2026, 3, 18, 23, 59)},
        {"title": "c", "category": "News", "status": "Draft", "created_at": at(2026, 3, 10, 0, 0)},
        {"title": "d", "category": "News", "status": "Draft", "created_at": at(2026, 2, 15, 23, 59)},
    ])
    buckets = QueryExecutor(db).execute(DayBucketsQuery(Collection.BLOGS, since=datetime(2026, 2, 16)))
    assert buckets == [
        {"_id": "2026-03-10", "count": 1},
        {"_id": "2026-03-18", "count": 2},
    ]


def test_run_keys_results_by_query_id(db):
    insert_rows(db, ContactMessage, [_contact(at(2026, 3, 5, 12, 0))])
    plan = {
        "contacts": CountQuery(Collection.CONTACTS),
        "blogs": CountQuery(Collection.BLOGS),
        "statuses": GroupByQuery(Collection.CONTACTS, "status"),
    }
    results = asyncio.run(QueryExecutor(db).run(plan))
    assert results == {"contacts": 1, "blogs": 0, "statuses": [("New", 1)]}


class FailingExecutor(QueryExecutor):
    def _count(self, query, session):
        if query.collection is Collection.CONTACTS:
            raise RuntimeError("contacts collection unavailable")
        return super()._count(query, session)


def test_run_fails_when_any_query_fails(db):
    plan = {
        "users": CountQuery(Collection.USERS),
        "contacts": CountQuery(Collection.CONTACTS),
    }
    with pytest.raises(RuntimeError, match="contacts collection unavailable"):
        asyncio.run(FailingExecutor(db).run(plan))


def test_unknown_query_type_is_rejected(db):
    with pytest.raises(TypeError):
        QueryExecutor(db).execute(object())


def test_day_buckets_follow_the_civil_timezone(db):
    kolkata = ZoneInfo("Asia/Kolkata")
    insert_rows(db, ContactMessage, [
        # 00:30 on 03-11 in Kolkata, 19:00 on 03-10 in UTC
        _contact(at(2026, 3, 10, 19, 0)),
        _contact(at(2026, 4, 9, 20, 30)),
    ])
    windows = resolve_time_windows(datetime(2026, 4, 10, 2, 0, tzinfo=kolkata), kolkata)
    query = DayBucketsQuery(Collection.CONTACTS, since=windows.as_store_bounds().last_30_days, tz=kolkata)

    buckets = QueryExecutor(db).execute(query)

    assert buckets == [
        {"_id": "2026-03-11", "count": 1},
        {"_id": "2026-04-10", "count": 1},
    ]
    assert buckets[0]["_id"] >= windows.last_30_days.date().isoformat()


class BarrierExecutor(QueryExecutor):
    """Blocks every query until all of them have started."""

    def __init__(self, db, parties):
        super().__init__(db)
        self.barrier = threading.Barrier(parties)

    def execute(self, query):
        self.barrier.wait(timeout=5)
        return super().execute(query)


def test_run_issues_the_whole_plan_at_once(db):
    windows = resolve_time_windows(datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)).as_store_bounds()
    plan = plan_dashboard_queries(windows)
    executor = BarrierExecutor(db, len(plan))

    results = asyncio.run(executor.run(plan))

    assert set(results) == set(plan)
    assert not executor.barrier.broken


def test_worker_count_is_bounded_by_connection_pool(db):
    executor = QueryExecutor(db)
    assert executor.max_workers(25) == 25
    assert executor.max_workers(db.pool_capacity + 5) == db.pool_capacity
    assert executor.max_workers(0) == 1
