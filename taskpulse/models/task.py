"""Task data model for taskpulse."""

from datetime import datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Priority(IntEnum):
    """Task priority enumeration."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class Task(BaseModel):
    """Canonical Task model."""

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., description="Task title")
    description: str = Field("", description="Task description")
    category_id: Optional[str] = Field(None, description="Category reference (lookup only)")
    priority: Priority = Field(Priority.LOW, description="Task priority")
    due_date: Optional[datetime] = Field(None, description="Deadline (null means no deadline)")
    completed: bool = Field(False, description="Whether the task is completed")
    completed_at: Optional[datetime] = Field(
        None,
        description="Time of the last incomplete -> complete transition",
    )
    created_at: datetime = Field(..., description="Task creation timestamp")
    archived: bool = Field(False, description="Whether the task is archived")
    archived_at: Optional[datetime] = Field(None, description="Archive timestamp (null if active)")

    # Recurrence linkage (optional)
    is_recurring: bool = Field(False, description="Whether produced by a recurrence expansion")
    recurring_id: Optional[str] = Field(
        None, description="Shared by every occurrence of one recurrence expansion"
    )


class TaskUpdate(BaseModel):
    """Partial update for a Task. Only fields that were explicitly set are applied."""

    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None
