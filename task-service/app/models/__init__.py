from app.models.ErrorResponse import ErrorDetail, ErrorResponse
from app.models.Task import Task, TaskFields, TaskStatus
from app.models.TaskPayload import TaskPayload

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "Task",
    "TaskFields",
    "TaskPayload",
    "TaskStatus",
]
