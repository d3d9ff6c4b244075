"""Completion analytics for taskpulse.

Pure functions over a snapshot of tasks and a reference time. Nothing here
mutates tasks or touches the repository.

Bucketing rules:
- A task counts as "completed" in a bucket when its `completed_at` falls in it.
- A task counts as "due" in a bucket when its `due_date` (calendar day) falls in it.
- Tasks without `due_date` are never due; tasks without `completed_at` never
  count toward a time-bucketed completed count.
- Weeks start on Sunday.
- Calendar days are UTC days (timestamps are stored as naive UTC).
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from taskpulse.errors import ValidationError
from taskpulse.models.category import Category
from taskpulse.models.summary import (
    Bucket,
    CategoryStat,
    OverallStats,
    PeriodStats,
    TotalStats,
)
from taskpulse.models.task import Task
from taskpulse.models.task_factory import to_naive_utc, utcnow

_LABEL_FORMAT = "%b %d"


def completion_rate(completed: int, denominator: int) -> float:
    """completed/denominator as a percentage in [0, 100]; 0 when denominator is 0.

    Completions are not a subset of due tasks (a task can be completed on a
    day other than its due day), so the raw ratio is capped at 100.
    """
    if denominator <= 0:
        return 0.0
    return min(100.0, completed / denominator * 100)


def week_start(day: date) -> date:
    """Sunday on or before `day`."""
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _today(now: Optional[datetime]) -> date:
    return (to_naive_utc(now) or utcnow()).date()


def _in_range(value: Optional[datetime], first: date, last: date) -> bool:
    """True if the calendar day of `value` is within [first, last]."""
    if value is None:
        return False
    return first <= value.date() <= last


def _count_range(tasks: List[Task], first: date, last: date) -> Tuple[int, int]:
    """(completed, due) counts for the inclusive day range."""
    completed = sum(1 for t in tasks if _in_range(t.completed_at, first, last))
    due = sum(1 for t in tasks if _in_range(t.due_date, first, last))
    return completed, due


def daily_summary(
    tasks: Iterable[Task],
    days: int = 7,
    now: Optional[datetime] = None,
) -> List[Bucket]:
    """One bucket per calendar day for the `days` days ending today, oldest first."""
    if days < 1:
        raise ValidationError("days must be at least 1")
    tasks = list(tasks)
    today = _today(now)

    buckets: List[Bucket] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        completed, total = _count_range(tasks, day, day)
        buckets.append(
            Bucket(
                date=day.isoformat(),
                label=day.strftime(_LABEL_FORMAT),
                completed=completed,
                total=total,
                completion_rate=completion_rate(completed, total),
            )
        )
    return buckets


def weekly_summary(
    tasks: Iterable[Task],
    weeks: int = 4,
    now: Optional[datetime] = None,
) -> List[Bucket]:
    """One bucket per Sunday-start week for the `weeks` weeks ending with the current one, oldest first."""
    if weeks < 1:
        raise ValidationError("weeks must be at least 1")
    tasks = list(tasks)
    current = week_start(_today(now))

    buckets: List[Bucket] = []
    for offset in range(weeks - 1, -1, -1):
        first = current - timedelta(weeks=offset)
        last = first + timedelta(days=6)
        completed, total = _count_range(tasks, first, last)
        buckets.append(
            Bucket(
                date=first.isoformat(),
                label=f"{first.strftime(_LABEL_FORMAT)} - {last.strftime(_LABEL_FORMAT)}",
                completed=completed,
                total=total,
                completion_rate=completion_rate(completed, total),
            )
        )
    return buckets


def category_breakdown(
    tasks: Iterable[Task],
    categories: Optional[Mapping[str, Category]] = None,
) -> List[CategoryStat]:
    """Per-category totals for every category that has at least one task.

    `completed` counts the tasks' `completed` flag. Tasks without a category
    are ignored. With a directory, results follow directory order and carry
    the category's name/color/icon; ids missing from the directory come last.
    """
    counts: Dict[str, List[int]] = {}
    for task in tasks:
        if task.category_id is None:
            continue
        entry = counts.setdefault(task.category_id, [0, 0])
        entry[0] += 1
        if task.completed:
            entry[1] += 1

    order = list(counts)
    if categories:
        known = [cid for cid in categories if cid in counts]
        order = known + [cid for cid in order if cid not in categories]

    stats: List[CategoryStat] = []
    for category_id in order:
        total, completed = counts[category_id]
        category = categories.get(category_id) if categories else None
        stats.append(
            CategoryStat(
                category_id=category_id,
                name=category.name if category else None,
                color=category.color if category else None,
                icon=category.icon if category else None,
                total=total,
                completed=completed,
                completion_rate=completion_rate(completed, total),
            )
        )
    return stats


def overall_stats(tasks: Iterable[Task], now: Optional[datetime] = None) -> OverallStats:
    """Today, this week (Sunday start) and all-time completion statistics."""
    tasks = list(tasks)
    today = _today(now)
    first = week_start(today)

    today_completed, today_due = _count_range(tasks, today, today)
    week_completed, week_due = _count_range(tasks, first, first + timedelta(days=6))
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)

    return OverallStats(
        today=PeriodStats(
            completed=today_completed,
            due=today_due,
            completion_rate=completion_rate(today_completed, today_due),
        ),
        week=PeriodStats(
            completed=week_completed,
            due=week_due,
            completion_rate=completion_rate(week_completed, week_due),
        ),
        overall=TotalStats(
            completed=completed,
            total=total,
            completion_rate=completion_rate(completed, total),
        ),
    )
