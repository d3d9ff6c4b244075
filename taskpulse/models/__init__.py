"""Data models for taskpulse."""

from taskpulse.models.task import Task, TaskUpdate, Priority
from taskpulse.models.recurrence import RecurrenceSpec, SchedulePattern
from taskpulse.models.category import Category, DEFAULT_CATEGORIES
from taskpulse.models.summary import (
    Bucket,
    CategoryStat,
    OverallStats,
    PeriodStats,
    ProgressStats,
    TotalStats,
)

__all__ = [
    "Task",
    "TaskUpdate",
    "Priority",
    "RecurrenceSpec",
    "SchedulePattern",
    "Category",
    "DEFAULT_CATEGORIES",
    "Bucket",
    "CategoryStat",
    "OverallStats",
    "PeriodStats",
    "ProgressStats",
    "TotalStats",
]
