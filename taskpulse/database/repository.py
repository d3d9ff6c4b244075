"""Repository layer for task storage."""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Mapping, Optional, Union

import pydantic
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskpulse.database.models import TaskDB, enum_to_value
from taskpulse.errors import NotFoundError, ValidationError
from taskpulse.models.task import Task, TaskUpdate
from taskpulse.models.task_factory import (
    to_naive_utc,
    utcnow,
    validate_new_task,
    validate_required_fields,
)

logger = logging.getLogger(__name__)

# Serializes every mutation of the task store (single writer at a time).
_write_lock = threading.RLock()


class TaskRepository:
    """Repository for Task database operations.

    Every read returns fresh Task copies: mutating a returned Task never
    changes the store.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    def _get_row(self, task_id: str) -> TaskDB:
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            raise NotFoundError(task_id)
        return task_db

    def _commit(self, action: str, task_id: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Failed to {action} task {task_id}: duplicate task id")
            raise ValidationError("duplicate task id") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to {action} task {task_id}: {type(e).__name__}: {str(e)}")
            raise

    def create(self, task: Task) -> Task:
        """Store a new task.

        Raises:
            ValidationError: If the task has no title or no category_id, is
                already completed or archived, or reuses an existing id
        """
        validate_new_task(task)
        with _write_lock:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self._commit("create", task.id)
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()

    def create_many(self, tasks: List[Task]) -> List[Task]:
        """Store a batch of tasks in one transaction: all of them or none.

        Every task is validated before anything is added, and a failed commit
        rolls the whole batch back.
        """
        for task in tasks:
            validate_new_task(task)
        if not tasks:
            return []

        with _write_lock:
            rows = [TaskDB.from_pydantic(task) for task in tasks]
            try:
                self.db.add_all(rows)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                logger.error(f"Failed to create batch of {len(rows)} tasks: duplicate task id")
                raise ValidationError("duplicate task id") from e
            except Exception as e:
                self.db.rollback()
                logger.error(f"Failed to create batch of {len(rows)} tasks: {type(e).__name__}: {str(e)}")
                raise
            for row in rows:
                self.db.refresh(row)
            logger.debug(f"Created batch of {len(rows)} tasks")
            return [row.to_pydantic() for row in rows]

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def list(
        self,
        category_id: Optional[str] = None,
        completed: Optional[bool] = None,
        archived: Optional[bool] = None,
    ) -> List[Task]:
        """Snapshot of tasks matching every given criterion, oldest first."""
        query = self.db.query(TaskDB)
        if category_id is not None:
            query = query.filter(TaskDB.category_id == category_id)
        if completed is not None:
            query = query.filter(TaskDB.completed == completed)
        if archived is not None:
            query = query.filter(TaskDB.archived == archived)
        tasks_db = query.order_by(TaskDB.created_at, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_all(self) -> List[Task]:
        return self.list()

    def get_by_category(self, category_id: str) -> List[Task]:
        return self.list(category_id=category_id)

    def get_completed(self) -> List[Task]:
        return self.list(completed=True)

    def get_pending(self) -> List[Task]:
        return self.list(completed=False)

    def get_archived(self) -> List[Task]:
        return self.list(archived=True)

    def count(self) -> int:
        return self.db.query(TaskDB).count()

    def update(self, task_id: str, patch: Union[TaskUpdate, Mapping]) -> Task:
        """Merge a partial update onto an existing task.

        `completed_at` is set to the current time only when `completed` goes
        from False to True; in every other case it is carried over unchanged
        (un-completing a task keeps its last completion time).

        Raises:
            NotFoundError: If the task does not exist
            ValidationError: If the patch is malformed or blanks title/category_id
        """
        if not isinstance(patch, TaskUpdate):
            try:
                patch = TaskUpdate.model_validate(dict(patch))
            except pydantic.ValidationError as e:
                raise ValidationError(str(e)) from e
        changes = patch.model_dump(exclude_unset=True)

        with _write_lock:
            task_db = self._get_row(task_id)

            title = changes.get("title", task_db.title)
            category_id = changes.get("category_id", task_db.category_id)
            validate_required_fields(title, category_id)

            task_db.title = title
            task_db.category_id = category_id
            if changes.get("description") is not None:
                task_db.description = changes["description"]
            if changes.get("priority") is not None:
                task_db.priority = int(enum_to_value(changes["priority"]))
            if "due_date" in changes:
                task_db.due_date = to_naive_utc(changes["due_date"])
            if changes.get("completed") is not None:
                if changes["completed"] and not task_db.completed:
                    task_db.completed_at = self.clock()
                task_db.completed = changes["completed"]

            self._commit("update", task_id)
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task_id}: {sorted(changes)}")
            return task_db.to_pydantic()

    def delete(self, task_id: str) -> bool:
        """Permanently delete a task by ID.

        Raises:
            NotFoundError: If the task does not exist
        """
        with _write_lock:
            task_db = self._get_row(task_id)
            self.db.delete(task_db)
            self._commit("delete", task_id)
            logger.debug(f"Deleted task {task_id}")
            return True

    def archive(self, task_id: str) -> Task:
        """Archive a task. Completion state is left as is.

        Raises:
            NotFoundError: If the task does not exist
        """
        with _write_lock:
            task_db = self._get_row(task_id)
            task_db.archived = True
            task_db.archived_at = self.clock()
            self._commit("archive", task_id)
            self.db.refresh(task_db)
            logger.debug(f"Archived task {task_id}")
            return task_db.to_pydantic()

    def restore(self, task_id: str) -> Task:
        """Return an archived task to the active list.

        Raises:
            NotFoundError: If the task does not exist
        """
        with _write_lock:
            task_db = self._get_row(task_id)
            task_db.archived = False
            task_db.archived_at = None
            self._commit("restore", task_id)
            self.db.refresh(task_db)
            logger.debug(f"Restored task {task_id}")
            return task_db.to_pydantic()
