"""Recurrence models for taskpulse.

A RecurrenceSpec describes one logical repeating task. It is never stored:
it is expanded into concrete Task occurrences by
`taskpulse.recurrence.expand.expand_recurrence`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taskpulse.models.constants import DEFAULT_RECURRING_PRIORITY
from taskpulse.models.task import Priority


class SchedulePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RecurrenceSpec(BaseModel):
    """Recurring task definition.

    Notes:
    - `interval` is a step count in pattern units (days/weeks/months).
    - At least one of `max_occurrences` / `end_date` must be set; this is checked
      at expansion time so callers get a `taskpulse.errors.ValidationError`.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str
    description: str = ""
    category_id: Optional[str] = None
    priority: Priority = DEFAULT_RECURRING_PRIORITY

    schedule_pattern: SchedulePattern = SchedulePattern.DAILY
    interval: int = Field(1, description="Every N units (days/weeks/months)")

    # Termination
    max_occurrences: Optional[int] = Field(None, description="Stop after this many occurrences")
    end_date: Optional[datetime] = Field(None, description="No occurrence is due after this time")
