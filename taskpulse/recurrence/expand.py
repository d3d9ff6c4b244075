"""Expand a recurrence spec into concrete Task occurrences."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Iterator, List, Optional

from dateutil.relativedelta import relativedelta

from taskpulse.database.repository import TaskRepository
from taskpulse.errors import ValidationError
from taskpulse.models.constants import MAX_RECURRING_OCCURRENCES
from taskpulse.models.recurrence import RecurrenceSpec, SchedulePattern
from taskpulse.models.task import Task
from taskpulse.models.task_factory import (
    create_task_base,
    to_naive_utc,
    utcnow,
    validate_required_fields,
)

logger = logging.getLogger(__name__)


def _validate(spec: RecurrenceSpec) -> None:
    validate_required_fields(spec.title, spec.category_id)
    if spec.interval < 1:
        raise ValidationError("interval must be at least 1")
    if spec.max_occurrences is None and spec.end_date is None:
        raise ValidationError("either max_occurrences or end_date must be set")
    if spec.max_occurrences is not None and spec.max_occurrences < 1:
        raise ValidationError("max_occurrences must be at least 1")


def _step(pattern: SchedulePattern, interval: int):
    """Calendar offset between two consecutive occurrences."""
    pattern = SchedulePattern(pattern)
    if pattern == SchedulePattern.DAILY:
        return timedelta(days=interval)
    if pattern == SchedulePattern.WEEKLY:
        return timedelta(days=interval * 7)
    # relativedelta clamps the day to the end of a shorter month (Jan 31 -> Feb 28/29).
    return relativedelta(months=interval)


def _due_dates(spec: RecurrenceSpec, anchor: datetime) -> Iterator[datetime]:
    limit = MAX_RECURRING_OCCURRENCES
    if spec.max_occurrences is not None:
        limit = min(limit, spec.max_occurrences)
    end_date = to_naive_utc(spec.end_date)
    step = None

    due = anchor
    for produced in range(1, limit + 1):
        if end_date is not None and due > end_date:
            return
        yield due
        if produced == limit:
            return
        # Each occurrence is computed from the previous one, so a clamped day carries forward.
        try:
            if step is None:
                step = _step(spec.schedule_pattern, spec.interval)
            due = due + step
        except (OverflowError, ValueError) as e:
            # Past the last representable date, so also past any end_date.
            if end_date is not None:
                return
            raise ValidationError("due date out of range") from e


def _occurrence_title(title: str, sequence: int) -> str:
    return title if sequence == 1 else f"{title} ({sequence})"


def expand_recurrence(
    spec: RecurrenceSpec,
    anchor_date: datetime,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Expand a recurrence spec into an ordered list of new (unsaved) tasks.

    The first occurrence is due at `anchor_date`; each following one is due
    one step (interval days / weeks / months) after the previous one.
    Expansion stops after `max_occurrences`, before the first occurrence due
    after `end_date`, or at MAX_RECURRING_OCCURRENCES, whichever comes first.

    All occurrences share one `recurring_id`. The first keeps the spec title,
    later ones are suffixed "(2)", "(3)", ... Every occurrence is created at
    `now` (defaults to the current UTC time).

    Raises:
        ValidationError: If the spec is malformed
    """
    _validate(spec)
    anchor = to_naive_utc(anchor_date)
    recurring_id = str(uuid.uuid4())
    now = now or utcnow()

    tasks: List[Task] = []
    for sequence, due in enumerate(_due_dates(spec, anchor), start=1):
        tasks.append(
            create_task_base(
                title=_occurrence_title(spec.title, sequence),
                category_id=spec.category_id,
                description=spec.description,
                priority=spec.priority,
                due_date=due,
                is_recurring=True,
                recurring_id=recurring_id,
                now=now,
            )
        )
    return tasks


def create_recurring_tasks(
    repo: TaskRepository,
    spec: RecurrenceSpec,
    anchor_date: Optional[datetime] = None,
) -> List[Task]:
    """Expand a recurrence spec and store every occurrence in one atomic batch.

    Returns the stored tasks. If any occurrence is rejected, nothing is stored.
    """
    now = repo.clock()
    tasks = expand_recurrence(spec, anchor_date or now, now=now)
    created = repo.create_many(tasks)
    logger.info(
        f"Created {len(created)} recurring tasks ({spec.schedule_pattern}, every {spec.interval})"
        + (f" recurring_id={created[0].recurring_id}" if created else "")
    )
    return created
