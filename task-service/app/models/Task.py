from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    TODO = "ToDo"
    IN_PROGRESS = "InProgress"
    DONE = "Done"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def is_valid(cls, value) -> bool:
        """Exact, case-sensitive membership check. Statuses are unordered:
        any member may follow any other."""
        if not isinstance(value, str):
            return False
        return any(value == status.value for status in cls)


class TaskFields(BaseModel):
    """The caller-settable part of a task."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str
    due_date: Optional[datetime] = None
    status: TaskStatus = TaskStatus.TODO


class Task(TaskFields):
    id: int
    created_at: datetime
    updated_at: datetime
