"""Task creation factory for taskpulse.

This module centralizes task creation logic so that single creates and
recurrence expansion apply the same defaults.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pydantic

from taskpulse.errors import ValidationError
from taskpulse.models.constants import DEFAULT_PRIORITY
from taskpulse.models.task import Priority, Task


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_required_fields(title: Optional[str], category_id: Optional[str]) -> None:
    """Raise ValidationError if a task would be stored without a title or category.

    Args:
        title: Task title
        category_id: Category reference

    Raises:
        ValidationError: If either value is missing or blank
    """
    if not title or not title.strip():
        raise ValidationError("Task title is required")
    if not category_id or not str(category_id).strip():
        raise ValidationError("Task category_id is required")


def validate_new_task(task: Task) -> None:
    """Raise ValidationError unless `task` is fit to be stored as a new task.

    A new task has a title and category, is not completed and is not archived.

    Raises:
        ValidationError: If a required field is missing or the task carries
            completion or archive state
    """
    validate_required_fields(task.title, task.category_id)
    if task.completed or task.completed_at is not None:
        raise ValidationError("New task must not be completed")
    if task.archived or task.archived_at is not None:
        raise ValidationError("New task must not be archived")


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary."""
    return {
        "description": "",
        "priority": DEFAULT_PRIORITY,
        "due_date": None,
        "completed": False,
        "completed_at": None,
        "archived": False,
        "archived_at": None,
        "is_recurring": False,
        "recurring_id": None,
    }


def create_task_base(
    title: str,
    category_id: Optional[str],
    description: Optional[str] = None,
    priority: Optional[Priority] = None,
    due_date: Optional[datetime] = None,
    is_recurring: Optional[bool] = None,
    recurring_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Task:
    """Create a new, not yet stored task with defaults applied.

    The task gets a fresh id, `created_at = now` and starts incomplete,
    unarchived and without a completion time.

    Args:
        title: Task title (required)
        category_id: Category reference (required)
        description: Task description (defaults to "")
        priority: Task priority (defaults to LOW)
        due_date: Optional deadline
        is_recurring: Whether the task is a recurrence occurrence
        recurring_id: Recurrence identity shared by a batch
        now: Creation time (defaults to current UTC time)

    Returns:
        Task object with defaults applied

    Raises:
        ValidationError: If title or category_id is missing, or a field has the wrong type
    """
    validate_required_fields(title, category_id)
    defaults = create_task_defaults()

    try:
        return Task(
            id=str(uuid.uuid4()),
            title=title,
            description=description if description is not None else defaults["description"],
            category_id=category_id,
            priority=priority if priority is not None else defaults["priority"],
            due_date=to_naive_utc(due_date) if due_date is not None else defaults["due_date"],
            completed=defaults["completed"],
            completed_at=defaults["completed_at"],
            created_at=to_naive_utc(now) or utcnow(),
            archived=defaults["archived"],
            archived_at=defaults["archived_at"],
            is_recurring=is_recurring if is_recurring is not None else defaults["is_recurring"],
            recurring_id=recurring_id,
        )
    except pydantic.ValidationError as e:
        raise ValidationError(str(e)) from e
