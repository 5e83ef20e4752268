"""HTTP handlers for /tasks.

Each handler is a fixed pipeline; the first failing step decides the
response and nothing after it runs. Update and Delete check that the task
exists and then act on it in a second storage call. A concurrent delete
between the two is not guarded against.

The repository talks to redis synchronously, so its calls run in the
threadpool to keep the event loop free.
"""

import json
import logging
import re
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from app.errors import internal_server_error, invalid_request, task_not_found
from app.models import Task, TaskFields, TaskPayload, TaskStatus
from app.repository import StorageError, TaskNotFound, TaskRepository
from app.validation import ValidationFailure, validate_task

logger = logging.getLogger(__name__)

router = APIRouter()

_TASK_ID = re.compile(r"[0-9]+")
MAX_TASK_ID = 2**64 - 1


def get_repository(request: Request) -> TaskRepository:
    return request.app.state.repository


def parse_task_id(raw: str) -> int:
    """Path ids are unsigned decimal integers; signs, spaces and fractions are rejected."""
    if not _TASK_ID.fullmatch(raw):
        raise invalid_request("Invalid task ID")
    task_id = int(raw)
    if task_id > MAX_TASK_ID:
        raise invalid_request("Invalid task ID")
    return task_id


async def read_payload(request: Request) -> TaskFields:
    """Decode and validate a task body, defaulting an empty status to ToDo."""
    body = await request.body()
    try:
        data = json.loads(body) if body.strip() else {}
    except ValueError as e:
        raise invalid_request(f"Invalid input: {e}")
    if not isinstance(data, dict):
        raise invalid_request("Invalid input: body must be a JSON object")
    try:
        payload = TaskPayload.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise invalid_request(f"Invalid input: {field} {first['msg']}")

    try:
        validate_task(payload)
    except ValidationFailure as e:
        raise invalid_request(f"Validation failed: {e}")

    return TaskFields(
        title=payload.title,
        description=payload.description,
        due_date=payload.due_date,
        status=TaskStatus(payload.status) if payload.status else TaskStatus.TODO,
    )


async def find_existing(repo: TaskRepository, task_id: int) -> Task:
    try:
        return await run_in_threadpool(repo.find_by_id, task_id)
    except TaskNotFound:
        raise task_not_found()
    except StorageError:
        logger.exception("Failed to get task", extra={"task_id": task_id})
        raise internal_server_error("Failed to get task")


@router.post("/tasks", status_code=201, response_model=Task)
async def create_task(request: Request, repo: TaskRepository = Depends(get_repository)):
    fields = await read_payload(request)
    try:
        task = await run_in_threadpool(repo.create, fields)
    except StorageError:
        logger.exception("Failed to create task")
        raise internal_server_error("Failed to create task")
    logger.info("Task created", extra={"task_id": task.id, "status": task.status.value})
    return task


@router.get("/tasks", response_model=List[Task])
async def list_tasks(repo: TaskRepository = Depends(get_repository)):
    try:
        return await run_in_threadpool(repo.find_all)
    except StorageError:
        logger.exception("Failed to get tasks")
        raise internal_server_error("Failed to get tasks")


@router.get("/tasks/{task_id}", response_model=Task)
async def get_task(task_id: str, repo: TaskRepository = Depends(get_repository)):
    return await find_existing(repo, parse_task_id(task_id))


@router.put("/tasks/{task_id}", response_model=Task)
async def update_task(task_id: str, request: Request, repo: TaskRepository = Depends(get_repository)):
    existing = await find_existing(repo, parse_task_id(task_id))
    # The body is only read once the task is known to exist, so a bad body
    # on a missing task is a 404.
    fields = await read_payload(request)
    # id and createdAt always come from the stored record, never the body.
    task = Task(
        id=existing.id,
        created_at=existing.created_at,
        updated_at=existing.updated_at,
        **fields.model_dump(),
    )
    try:
        task = await run_in_threadpool(repo.update, task)
    except StorageError:
        logger.exception("Failed to update task", extra={"task_id": existing.id})
        raise internal_server_error("Failed to update task")
    logger.info("Task updated", extra={"task_id": task.id, "status": task.status.value})
    return task


@router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str, repo: TaskRepository = Depends(get_repository)):
    existing = await find_existing(repo, parse_task_id(task_id))
    try:
        await run_in_threadpool(repo.delete, existing.id)
    except StorageError:
        logger.exception("Failed to delete task", extra={"task_id": existing.id})
        raise internal_server_error("Failed to delete task")
    logger.info("Task deleted", extra={"task_id": existing.id})
    return Response(status_code=204)
