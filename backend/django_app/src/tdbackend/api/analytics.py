"""
Completion analytics for a single owner.

A snapshot is computed fresh on every call: four status counts over the
owner's tasks plus a 30-day series of completed tasks per calendar day,
bucketed by creation date (tasks carry no separate completion timestamp).
"""

import datetime
import logging
from collections import Counter
from dataclasses import dataclass

from django.utils import timezone

from tdbackend.api.models import TaskStatus

logger = logging.getLogger(__name__)

WINDOW_DAYS = 30


@dataclass(frozen=True)
class DayCount:
    date: datetime.date
    count: int


@dataclass(frozen=True)
class AnalyticsSnapshot:
    total: int
    completed: int
    pending: int
    in_progress: int
    completed_per_day: tuple


def window_dates(today, days=WINDOW_DAYS):
    """The `days` calendar dates ending at `today`, oldest first."""
    since = today - datetime.timedelta(days=days - 1)
    return [since + datetime.timedelta(days=i) for i in range(days)]


def _start_of_day(day, tz):
    return timezone.make_aware(datetime.datetime.combine(day, datetime.time.min), tz)


def compute_analytics(store, owner_id, *, today=None):
    """
    Build an AnalyticsSnapshot for `owner_id` from `store`.

    `today` is taken once (current timezone's local date) and every window
    bound is derived from it. Store failures propagate as StoreFailure.
    """
    tz = timezone.get_current_timezone()
    if today is None:
        today = timezone.localdate(timezone=tz)
    dates = window_dates(today)

    total = store.count(owner_id)
    completed = store.count(owner_id, TaskStatus.COMPLETED)
    pending = store.count(owner_id, TaskStatus.PENDING)
    in_progress = store.count(owner_id, TaskStatus.IN_PROGRESS)

    created = store.list_created_within_range(
        owner_id,
        TaskStatus.COMPLETED,
        _start_of_day(dates[0], tz),
        _start_of_day(today + datetime.timedelta(days=1), tz),
    )
    buckets = Counter(timezone.localtime(ts, tz).date() for ts in created)

    logger.debug(
        'analytics owner=%s total=%s completed=%s window=%s..%s',
        owner_id, total, completed, dates[0], dates[-1],
    )
    return AnalyticsSnapshot(
        total=total,
        completed=completed,
        pending=pending,
        in_progress=in_progress,
        completed_per_day=tuple(DayCount(d, buckets.get(d, 0)) for d in dates),
    )
