"""
Concurrent execution of declared dashboard queries against the store.
"""
import asyncio
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from datetime import timezone
from typing import Any, Dict, List, Mapping, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from core.database import DatabaseManager
from utils.logger import get_logger
from .queries import (
    COLLECTION_FIELDS,
    COLLECTION_MODELS,
    CountQuery,
    DayBucketsQuery,
    FindRecentQuery,
    GroupByQuery,
    QueryRequest,
    resolve_column,
)

logger = get_logger(__name__)


class QueryExecutor:
    """Runs dashboard queries, one short-lived session per query."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def max_workers(self, query_count: int) -> int:
        """One thread per query, bounded by the connections the pool can hand out."""
        if self.db.engine is None:
            self.db.initialize()
        capacity = self.db.pool_capacity
        if capacity is None:
            return max(query_count, 1)
        return max(min(query_count, capacity), 1)

    async def run(self, plan: Mapping[str, QueryRequest]) -> Dict[str, Any]:
        """Issue every query in ``plan`` concurrently and key results by query id.

        The first failing query fails the whole run; no partial map is returned.
        """
        query_ids = list(plan)
        if not query_ids:
            return {}
        started = time.perf_counter()

        loop = asyncio.get_running_loop()
        workers = ThreadPoolExecutor(
            max_workers=self.max_workers(len(query_ids)),
            thread_name_prefix="dashboard-query",
        )
        try:
            results = await asyncio.gather(
                *(loop.run_in_executor(workers, self.execute, plan[query_id]) for query_id in query_ids)
            )
        finally:
            workers.shutdown(wait=False)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"Executed {len(query_ids)} dashboard queries in {elapsed_ms:.1f} ms")
        return dict(zip(query_ids, results))

    def execute(self, query: QueryRequest) -> Any:
        """Run a single query synchronously in its own session."""
        with self.db.session_scope() as session:
            return self._dispatch(query, session)

    def _dispatch(self, query: QueryRequest, session: Session) -> Any:
        if isinstance(query, CountQuery):
            return self._count(query, session)
        if isinstance(query, GroupByQuery):
            return self._group_by(query, session)
        if isinstance(query, FindRecentQuery):
            return self._find_recent(query, session)
        if isinstance(query, DayBucketsQuery):
            return self._day_buckets(query, session)
        raise TypeError(f"Unsupported dashboard query: {query!r}")

    def _count(self, query: CountQuery, session: Session) -> int:
        model = COLLECTION_MODELS[query.collection]
        statement = select(func.count()).select_from(model)
        if query.since is not None:
            statement = statement.where(model.created_at >= query.since)
        if query.until is not None:
            statement = statement.where(model.created_at < query.until)
        return int(session.execute(statement).scalar_one())

    def _group_by(self, query: GroupByQuery, session: Session) -> List[Tuple[Any, int]]:
        column = resolve_column(query.collection, query.field)
        statement = select(column, func.count()).group_by(column)
        return [(value, int(count)) for value, count in session.execute(statement)]

    def _find_recent(self, query: FindRecentQuery, session: Session) -> List[Dict[str, Any]]:
        model = COLLECTION_MODELS[query.collection]
        columns = [model.id.label("_id")]
        columns += [resolve_column(query.collection, field).label(field) for field in query.fields]

        statement = select(*columns)
        for join in query.joins:
            target = aliased(COLLECTION_MODELS[join.collection])
            statement = statement.outerjoin(target, target.id == getattr(model, join.local_key))
            statement = statement.add_columns(target.id.label(f"{join.field}___id"))
            for field in join.fields:
                column = getattr(target, COLLECTION_FIELDS[join.collection][field])
                statement = statement.add_columns(column.label(f"{join.field}__{field}"))

        statement = statement.order_by(model.created_at.desc(), model.id.desc()).limit(query.limit)

        items = []
        for row in session.execute(statement).mappings():
            item = {"_id": row["_id"]}
            item.update({field: row[field] for field in query.fields})
            for join in query.joins:
                ref_id = row[f"{join.field}___id"]
                if ref_id is None:
                    item[join.field] = None
                else:
                    item[join.field] = {"_id": ref_id}
                    item[join.field].update({field: row[f"{join.field}__{field}"] for field in join.fields})
            items.append(item)
        return items

    def _day_buckets(self, query: DayBucketsQuery, session: Session) -> List[Dict[str, Any]]:
        model = COLLECTION_MODELS[query.collection]
        # Stored timestamps are naive UTC; days are civil dates in query.tz
        statement = (
            select(model.created_at)
            .where(model.created_at >= query.since)
            .execution_options(yield_per=500)
        )
        counts: Counter = Counter()
        for created_at in session.execute(statement).scalars():
            local = created_at.replace(tzinfo=timezone.utc).astimezone(query.tz)
            counts[local.date().isoformat()] += 1
        return [{"_id": day, "count": counts[day]} for day in sorted(counts)]
