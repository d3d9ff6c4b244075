"""Analytics result models for taskpulse."""

from typing import Optional

from pydantic import BaseModel, Field


class Bucket(BaseModel):
    """Completion counts for one day or one week."""

    date: str = Field(..., description="Bucket start date (YYYY-MM-DD)")
    label: str = Field(..., description="Human-readable bucket label")
    completed: int = Field(0, description="Tasks completed inside the bucket")
    total: int = Field(0, description="Tasks due inside the bucket")
    completion_rate: float = Field(0.0, ge=0.0, le=100.0, description="completed/total*100, 0 if total is 0")


class CategoryStat(BaseModel):
    """Completion counts for one category."""

    category_id: str
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    total: int = 0
    completed: int = 0
    completion_rate: float = Field(0.0, ge=0.0, le=100.0)


class PeriodStats(BaseModel):
    """Due vs. completed counts for a period (today / this week)."""

    completed: int = 0
    due: int = 0
    completion_rate: float = Field(0.0, ge=0.0, le=100.0)


class TotalStats(BaseModel):
    """Completed vs. total counts across all tasks."""

    completed: int = 0
    total: int = 0
    completion_rate: float = Field(0.0, ge=0.0, le=100.0)


class OverallStats(BaseModel):
    """Today / this week / overall completion statistics."""

    today: PeriodStats
    week: PeriodStats
    overall: TotalStats


class ProgressStats(BaseModel):
    """Headline counts shown next to the task list."""

    total: int = 0
    completed: int = 0
    due_today: int = 0
    overdue: int = 0
