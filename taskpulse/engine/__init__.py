"""Analytics and listing engine for taskpulse."""

from taskpulse.engine.summary import (
    category_breakdown,
    completion_rate,
    daily_summary,
    overall_stats,
    weekly_summary,
)
from taskpulse.engine.listing import (
    SortKey,
    pending_counts_by_category,
    progress_stats,
    search_tasks,
    sort_tasks,
)

__all__ = [
    "category_breakdown",
    "completion_rate",
    "daily_summary",
    "overall_stats",
    "weekly_summary",
    "SortKey",
    "pending_counts_by_category",
    "progress_stats",
    "search_tasks",
    "sort_tasks",
]
