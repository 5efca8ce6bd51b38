"""
Task service. Every query is scoped to the caller's identity; a task owned by
someone else is reported exactly like a missing one.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func

from models import storage
from models.task import Task, TaskStatus
from services.exceptions import NotFound
from utils.security import Identity

TASK_NOT_FOUND = "Task not found"


def list_tasks(
    identity: Identity,
    page: int,
    limit: int,
    status: Optional[TaskStatus] = None,
    q: Optional[str] = None,
) -> Tuple[List[Task], int]:
    """Newest first. Returns the requested page and the total match count."""
    session = storage.get_session()
    query = session.query(Task).filter(Task.user_id == identity.user_id)

    if status is not None:
        query = query.filter(Task.status == status)
    if q:
        query = query.filter(func.lower(Task.title).contains(q.strip().lower(), autoescape=True))

    total = query.count()
    rows = (
        query.order_by(Task.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total


def get_task(identity: Identity, task_id: str) -> Task:
    session = storage.get_session()
    task = (
        session.query(Task)
        .filter(Task.id == task_id, Task.user_id == identity.user_id)
        .first()
    )
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    return task


def create_task(identity: Identity, data: dict) -> Task:
    task = Task(
        title=data["title"],
        description=data.get("description"),
        status=data.get("status") or TaskStatus.TODO,
        user_id=identity.user_id,
    )
    storage.new(task)
    storage.save()
    return task


def update_task(identity: Identity, task_id: str, data: dict) -> Task:
    task = get_task(identity, task_id)
    for key in ("title", "description", "status"):
        if key in data:
            setattr(task, key, data[key])
    task.save()
    return task


def toggle_task(identity: Identity, task_id: str) -> Task:
    task = get_task(identity, task_id)
    task.status = TaskStatus(task.status).next()
    task.save()
    return task


def delete_task(identity: Identity, task_id: str) -> None:
    task = get_task(identity, task_id)
    task.delete()
    storage.save()
