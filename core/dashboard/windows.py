"""
Calendar-aligned time windows used by the dashboard counts.
"""
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional


@dataclass(frozen=True)
class TimeWindows:
    """Inclusive lower bounds derived from a single wall-clock instant.

    ``this_month`` is also the exclusive upper bound of the last-month range.
    """
    today: datetime
    last_7_days: datetime
    last_30_days: datetime
    this_month: datetime
    last_month: datetime

    def as_store_bounds(self) -> "TimeWindows":
        """Same windows as naive UTC datetimes, comparable with stored ``created_at``."""
        return TimeWindows(**{
            f.name: _to_naive_utc(getattr(self, f.name)) for f in fields(self)
        })


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def resolve_time_windows(now: Optional[datetime] = None, tz: tzinfo = timezone.utc) -> TimeWindows:
    """Resolve the dashboard windows for ``now`` in the civil timezone ``tz``.

    A naive ``now`` is taken to already be expressed in ``tz``.
    """
    if now is None:
        now = datetime.now(tz)
    local = now.astimezone(tz) if now.tzinfo is not None else now.replace(tzinfo=tz)

    today = datetime(local.year, local.month, local.day, tzinfo=tz)
    this_month = datetime(local.year, local.month, 1, tzinfo=tz)
    if local.month == 1:
        last_month = datetime(local.year - 1, 12, 1, tzinfo=tz)
    else:
        last_month = datetime(local.year, local.month - 1, 1, tzinfo=tz)

    return TimeWindows(
        today=today,
        last_7_days=today - timedelta(days=7),
        last_30_days=today - timedelta(days=30),
        this_month=this_month,
        last_month=last_month,
    )
