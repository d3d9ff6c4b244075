"""Error taxonomy for taskpulse."""


class TaskPulseError(Exception):
    """Base class for errors reported to callers of the core."""


class ValidationError(TaskPulseError):
    """Malformed input: missing required task fields or a bad recurrence spec."""


class NotFoundError(TaskPulseError):
    """An operation referenced a task id that does not exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")
