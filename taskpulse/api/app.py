"""FastAPI web application for taskpulse."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from taskpulse import __version__
from taskpulse.config import SUMMARY_DAYS, SUMMARY_WEEKS, configure_logging
from taskpulse.database.database import get_db, init_db
from taskpulse.database.repository import TaskRepository
from taskpulse.engine.listing import (
    SortKey,
    pending_counts_by_category,
    progress_stats,
    search_tasks,
    sort_tasks,
)
from taskpulse.engine.summary import (
    category_breakdown,
    daily_summary,
    overall_stats,
    weekly_summary,
)
from taskpulse.errors import NotFoundError, ValidationError
from taskpulse.models.category import DEFAULT_CATEGORIES, Category, build_directory
from taskpulse.models.constants import MAX_SUMMARY_DAYS, MAX_SUMMARY_WEEKS
from taskpulse.models.recurrence import RecurrenceSpec
from taskpulse.models.summary import Bucket, CategoryStat, OverallStats, ProgressStats
from taskpulse.models.task import Priority, Task, TaskUpdate
from taskpulse.models.task_factory import create_task_base
from taskpulse.recurrence.expand import create_recurring_tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    logger.info("taskpulse API ready")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="taskpulse API",
    description="To-do tasks with recurring series and completion analytics",
    version=__version__,
    lifespan=lifespan,
)


# Request / response models
class TaskCreateRequest(BaseModel):
    """Request body for creating a single task."""
    title: Optional[str] = None
    description: str = ""
    category_id: Optional[str] = None
    priority: Priority = Priority.LOW
    due_date: Optional[datetime] = None


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int


class CategoryListResponse(BaseModel):
    categories: List[Category]
    pending_counts: Dict[str, int] = Field(default_factory=dict)


def get_repository(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


def get_categories() -> Dict[str, Category]:
    """Category directory (override to plug in another source)."""
    return build_directory(DEFAULT_CATEGORIES)


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _invalid(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/categories", response_model=CategoryListResponse)
def list_categories(
    repo: TaskRepository = Depends(get_repository),
    categories: Dict[str, Category] = Depends(get_categories),
):
    """Category directory with the number of incomplete tasks per category."""
    return CategoryListResponse(
        categories=list(categories.values()),
        pending_counts=pending_counts_by_category(repo.get_all(), categories),
    )


@app.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    category_id: Optional[str] = None,
    completed: Optional[bool] = None,
    archived: Optional[bool] = None,
    q: Optional[str] = None,
    sort_by: Optional[SortKey] = None,
    repo: TaskRepository = Depends(get_repository),
    categories: Dict[str, Category] = Depends(get_categories),
):
    """List tasks, optionally filtered, searched and sorted."""
    tasks = repo.list(category_id=category_id, completed=completed, archived=archived)
    tasks = search_tasks(tasks, q)
    if sort_by is not None:
        tasks = sort_tasks(tasks, sort_by, categories)
    return TaskListResponse(tasks=tasks, count=len(tasks))


@app.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(request: TaskCreateRequest, repo: TaskRepository = Depends(get_repository)):
    """Create a single task."""
    try:
        task = create_task_base(
            title=request.title,
            category_id=request.category_id,
            description=request.description,
            priority=request.priority,
            due_date=request.due_date,
            now=repo.clock(),
        )
        return TaskResponse(task=repo.create(task))
    except ValidationError as e:
        raise _invalid(e)


@app.post("/tasks/recurring", response_model=TaskListResponse, status_code=201)
def create_recurring(
    spec: RecurrenceSpec,
    anchor_date: Optional[datetime] = None,
    repo: TaskRepository = Depends(get_repository),
):
    """Expand a recurrence spec and store every occurrence (all or nothing)."""
    try:
        tasks = create_recurring_tasks(repo, spec, anchor_date)
    except ValidationError as e:
        raise _invalid(e)
    return TaskListResponse(tasks=tasks, count=len(tasks))


@app.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, repo: TaskRepository = Depends(get_repository)):
    task = repo.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return TaskResponse(task=task)


@app.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, patch: TaskUpdate, repo: TaskRepository = Depends(get_repository)):
    """Apply a partial update (including toggling `completed`)."""
    try:
        return TaskResponse(task=repo.update(task_id, patch))
    except NotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise _invalid(e)


@app.delete("/tasks/{task_id}", status_code=204, response_class=Response)
def delete_task(task_id: str, repo: TaskRepository = Depends(get_repository)):
    try:
        repo.delete(task_id)
    except NotFoundError as e:
        raise _not_found(e)
    return Response(status_code=204)


@app.post("/tasks/{task_id}/archive", response_model=TaskResponse)
def archive_task(task_id: str, repo: TaskRepository = Depends(get_repository)):
    try:
        return TaskResponse(task=repo.archive(task_id))
    except NotFoundError as e:
        raise _not_found(e)


@app.post("/tasks/{task_id}/restore", response_model=TaskResponse)
def restore_task(task_id: str, repo: TaskRepository = Depends(get_repository)):
    try:
        return TaskResponse(task=repo.restore(task_id))
    except NotFoundError as e:
        raise _not_found(e)


@app.get("/summary/daily", response_model=List[Bucket])
def get_daily_summary(
    days: int = Query(SUMMARY_DAYS, ge=1, le=MAX_SUMMARY_DAYS),
    repo: TaskRepository = Depends(get_repository),
):
    return daily_summary(repo.get_all(), days=days, now=repo.clock())


@app.get("/summary/weekly", response_model=List[Bucket])
def get_weekly_summary(
    weeks: int = Query(SUMMARY_WEEKS, ge=1, le=MAX_SUMMARY_WEEKS),
    repo: TaskRepository = Depends(get_repository),
):
    return weekly_summary(repo.get_all(), weeks=weeks, now=repo.clock())


@app.get("/summary/categories", response_model=List[CategoryStat])
def get_category_breakdown(
    repo: TaskRepository = Depends(get_repository),
    categories: Dict[str, Category] = Depends(get_categories),
):
    return category_breakdown(repo.get_all(), categories)


@app.get("/summary/overall", response_model=OverallStats)
def get_overall_stats(repo: TaskRepository = Depends(get_repository)):
    return overall_stats(repo.get_all(), now=repo.clock())


@app.get("/summary/progress", response_model=ProgressStats)
def get_progress_stats(repo: TaskRepository = Depends(get_repository)):
    return progress_stats(repo.get_all(), now=repo.clock())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
