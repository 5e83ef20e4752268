"""Persistent access to tasks.

Handlers only ever talk to a ``TaskRepository``. The redis implementation
keeps one JSON document per task plus a sorted set of ids that gives the
listing its insertion order:

    task:next_id   counter used to assign ids
    task:{id}      the task, serialized with camelCase keys
    tasks          sorted set, member and score are both the id
"""

import logging
from datetime import datetime, timezone
from typing import List, Protocol

import redis
from pydantic import ValidationError

from app.models import Task, TaskFields

logger = logging.getLogger(__name__)

ID_COUNTER_KEY = "task:next_id"
INDEX_KEY = "tasks"


class StorageError(Exception):
    """The store failed or returned something unreadable."""


class TaskNotFound(LookupError):
    def __init__(self, task_id: int):
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class TaskRepository(Protocol):
    def create(self, fields: TaskFields) -> Task: ...

    def find_all(self) -> List[Task]: ...

    def find_by_id(self, task_id: int) -> Task: ...

    def update(self, task: Task) -> Task: ...

    def delete(self, task_id: int) -> None: ...


def task_key(task_id: int) -> str:
    return f"task:{task_id}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RedisTaskRepository:
    """TaskRepository over a redis client created and closed by the caller.

    The client must be built with ``decode_responses=True``. There is no
    caching and nothing is retried: a failed command surfaces as
    ``StorageError`` straight away.
    """

    def __init__(self, client: redis.Redis):
        self._redis = client

    def create(self, fields: TaskFields) -> Task:
        now = _now()
        try:
            task_id = int(self._redis.incr(ID_COUNTER_KEY))
            task = Task(id=task_id, created_at=now, updated_at=now, **fields.model_dump())
            self._write(task)
        except redis.RedisError as e:
            raise StorageError(f"create failed: {e}") from e
        return task

    def find_all(self) -> List[Task]:
        try:
            ids = self._redis.zrange(INDEX_KEY, 0, -1)
            if not ids:
                return []
            raw = self._redis.mget([task_key(task_id) for task_id in ids])
        except redis.RedisError as e:
            raise StorageError(f"list failed: {e}") from e
        # A record deleted between ZRANGE and MGET comes back as None.
        return [self._load(doc) for doc in raw if doc is not None]

    def find_by_id(self, task_id: int) -> Task:
        try:
            raw = self._redis.get(task_key(task_id))
        except redis.RedisError as e:
            raise StorageError(f"get failed: {e}") from e
        if raw is None:
            raise TaskNotFound(task_id)
        return self._load(raw)

    def update(self, task: Task) -> Task:
        """Replace the stored task with ``task`` as a whole.

        ``task.id`` must already be the id of an existing record; existence
        is checked by the caller, so a record deleted in between is written
        back rather than reported.
        """
        updated = task.model_copy(update={"updated_at": _now()})
        try:
            self._write(updated)
        except redis.RedisError as e:
            raise StorageError(f"update failed: {e}") from e
        return updated

    def delete(self, task_id: int) -> None:
        try:
            with self._redis.pipeline(transaction=True) as p:
                p.delete(task_key(task_id))
                p.zrem(INDEX_KEY, task_id)
                p.execute()
        except redis.RedisError as e:
            raise StorageError(f"delete failed: {e}") from e

    def _write(self, task: Task) -> None:
        with self._redis.pipeline(transaction=True) as p:
            p.set(task_key(task.id), task.model_dump_json(by_alias=True))
            p.zadd(INDEX_KEY, {str(task.id): task.id})
            p.execute()

    @staticmethod
    def _load(raw: str) -> Task:
        try:
            return Task.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Unreadable task record", extra={"error": str(e)})
            raise StorageError("stored task is unreadable") from e
