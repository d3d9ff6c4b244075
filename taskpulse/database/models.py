"""SQLAlchemy database models for taskpulse."""

from typing import Type, TypeVar, Union
import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from taskpulse.database.database import Base
from taskpulse.models.task import Priority, Task
from taskpulse.models.task_factory import to_naive_utc

T = TypeVar("T")


def enum_to_value(enum_obj: Union[int, str, T]):
    """Convert enum to its raw value (handles both enum and raw values).

    Args:
        enum_obj: Enum instance or raw value

    Returns:
        Raw value of the enum, or the value itself if already raw
    """
    if hasattr(enum_obj, "value"):
        return enum_obj.value
    return enum_obj


def value_to_enum(value, enum_class: Type[T], default: T) -> T:
    """Convert a raw value to enum with fallback to default.

    Args:
        value: Raw value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if value is None:
        return default
    try:
        return enum_class(value)
    except (ValueError, TypeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Basic fields
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    category_id = Column(String, nullable=True, index=True)
    priority = Column(Integer, nullable=False, default=Priority.LOW.value)
    due_date = Column(DateTime, nullable=True, index=True)

    # Completion
    completed = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, index=True)

    # Archive
    archived = Column(Boolean, nullable=False, default=False, index=True)
    archived_at = Column(DateTime, nullable=True)

    # Recurrence linkage (optional)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_id = Column(String, nullable=True, index=True)

    def to_pydantic(self) -> Task:
        """Convert database model to Pydantic model."""
        return Task(
            id=self.id,
            title=self.title,
            description=self.description or "",
            category_id=self.category_id,
            priority=value_to_enum(self.priority, Priority, Priority.LOW),
            due_date=self.due_date,
            completed=bool(self.completed),
            completed_at=self.completed_at,
            created_at=self.created_at,
            archived=bool(self.archived),
            archived_at=self.archived_at,
            is_recurring=bool(self.is_recurring),
            recurring_id=self.recurring_id,
        )

    @classmethod
    def from_pydantic(cls, task: Task) -> "TaskDB":
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            category_id=task.category_id,
            priority=int(enum_to_value(task.priority)),
            due_date=to_naive_utc(task.due_date),
            completed=task.completed,
            completed_at=to_naive_utc(task.completed_at),
            created_at=to_naive_utc(task.created_at),
            archived=task.archived,
            archived_at=to_naive_utc(task.archived_at),
            is_recurring=task.is_recurring,
            recurring_id=task.recurring_id,
        )
