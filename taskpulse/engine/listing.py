"""Search, sort and headline counts for task lists.

Every function is deterministic and leaves its input untouched.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from taskpulse.models.category import Category, category_name
from taskpulse.models.summary import ProgressStats
from taskpulse.models.task import Task
from taskpulse.models.task_factory import to_naive_utc, utcnow


class SortKey(str, Enum):
    """Task list sort options."""
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    CATEGORY = "category"
    STATUS = "status"
    CREATED = "created"


def search_tasks(tasks: Iterable[Task], query: Optional[str]) -> List[Task]:
    """Tasks whose title or description contains `query` (case-insensitive)."""
    tasks = list(tasks)
    if not query:
        return tasks
    needle = query.lower()
    return [
        t for t in tasks
        if needle in t.title.lower() or needle in (t.description or "").lower()
    ]


def sort_tasks(
    tasks: Iterable[Task],
    sort_by: SortKey = SortKey.DUE_DATE,
    categories: Optional[Mapping[str, Category]] = None,
) -> List[Task]:
    """Sort tasks by one key. Ties keep their input order.

    - due_date: earliest first, tasks without a due date last
    - priority: highest first
    - category: category name A-Z (unknown categories sort as "")
    - status: incomplete before completed
    - created: newest first
    """
    tasks = list(tasks)
    sort_by = SortKey(sort_by)

    if sort_by == SortKey.DUE_DATE:
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or datetime.min))
    if sort_by == SortKey.PRIORITY:
        return sorted(tasks, key=lambda t: int(t.priority), reverse=True)
    if sort_by == SortKey.CATEGORY:
        directory = categories or {}
        return sorted(tasks, key=lambda t: category_name(directory, t.category_id).lower())
    if sort_by == SortKey.STATUS:
        return sorted(tasks, key=lambda t: t.completed)
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def progress_stats(tasks: Iterable[Task], now: Optional[datetime] = None) -> ProgressStats:
    """Total / completed counts, plus incomplete tasks due today and overdue."""
    tasks = list(tasks)
    now = to_naive_utc(now) or utcnow()
    today = now.date()

    pending = [t for t in tasks if not t.completed and t.due_date is not None]
    return ProgressStats(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.completed),
        due_today=sum(1 for t in pending if t.due_date.date() == today),
        overdue=sum(1 for t in pending if t.due_date < now and t.due_date.date() != today),
    )


def pending_counts_by_category(
    tasks: Iterable[Task],
    categories: Mapping[str, Category],
) -> Dict[str, int]:
    """Incomplete task count for every category in the directory (zeros included)."""
    counts = {category_id: 0 for category_id in categories}
    for task in tasks:
        if not task.completed and task.category_id in counts:
            counts[task.category_id] += 1
    return counts
