from __future__ import annotations

import math
from typing import Optional, Tuple

from flask import Blueprint, request, jsonify, abort

from models.schemas.task import TaskCreateSchema, TaskUpdateSchema, TaskOutSchema
from models.task import TaskStatus
from services import task_service
from utils.decorators import jwt_required
from utils.security import Identity

bp = Blueprint("tasks", __name__)

task_create_schema = TaskCreateSchema()
task_update_schema = TaskUpdateSchema()
task_out_schema = TaskOutSchema()
tasks_out_schema = TaskOutSchema(many=True)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(DEFAULT_LIMIT)))
        page = max(page, 1)
        limit = max(1, min(limit, MAX_LIMIT))
        return page, limit
    except ValueError:
        abort(400, description="page and limit must be integers")


def parse_status() -> Optional[TaskStatus]:
    raw = request.args.get("status")
    if not raw:
        return None
    try:
        return TaskStatus(raw.upper())
    except ValueError:
        allowed = [s.value for s in TaskStatus]
        abort(400, description=f"status must be one of {allowed}")


@bp.get("/tasks")
@jwt_required()
def list_tasks(identity: Identity):
    """
    List the caller's tasks, newest first, with pagination, status filter and title search
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10, maximum: 100 }
      - { in: query, name: status, type: string, enum: [TODO, IN_PROGRESS, DONE] }
      - { in: query, name: q, type: string, description: "Case-insensitive title search" }
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    page, limit = parse_pagination()
    rows, total = task_service.list_tasks(
        identity, page, limit, status=parse_status(), q=request.args.get("q")
    )
    return jsonify(
        {
            "tasks": tasks_out_schema.dump(rows),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }
    ), 200


@bp.post("/tasks")
@jwt_required()
def create_task(identity: Identity):
    """
    Create a task
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title]
          properties:
            title: { type: string, maxLength: 255 }
            description: { type: string }
            status: { type: string, enum: [TODO, IN_PROGRESS, DONE], default: TODO }
    responses:
      201:
        description: Created
      400:
        description: Validation error
    """
    data = task_create_schema.load(request.get_json(silent=True) or {})
    task = task_service.create_task(identity, data)
    return jsonify(task_out_schema.dump(task)), 201


@bp.get("/tasks/<task_id>")
@jwt_required()
def get_task(task_id: str, identity: Identity):
    """
    Get one task
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - { in: path, name: task_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Task not found
    """
    task = task_service.get_task(identity, task_id)
    return jsonify(task_out_schema.dump(task)), 200


@bp.patch("/tasks/<task_id>")
@jwt_required()
def update_task(task_id: str, identity: Identity):
    """
    Partially update a task
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: task_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            title: { type: string, maxLength: 255 }
            description: { type: string }
            status: { type: string, enum: [TODO, IN_PROGRESS, DONE] }
    responses:
      200:
        description: OK
      400:
        description: Validation error
      404:
        description: Task not found
    """
    data = task_update_schema.load(request.get_json(silent=True) or {})
    task = task_service.update_task(identity, task_id, data)
    return jsonify(task_out_schema.dump(task)), 200


@bp.patch("/tasks/<task_id>/toggle")
@jwt_required()
def toggle_task(task_id: str, identity: Identity):
    """
    Advance the task status: TODO -> IN_PROGRESS -> DONE -> TODO
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - { in: path, name: task_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Task not found
    """
    task = task_service.toggle_task(identity, task_id)
    return jsonify(task_out_schema.dump(task)), 200


@bp.delete("/tasks/<task_id>")
@jwt_required()
def delete_task(task_id: str, identity: Identity):
    """
    Delete a task
    ---
    tags:
      - Tasks
    security:
      - Bearer: []
    parameters:
      - { in: path, name: task_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      404:
        description: Task not found
    """
    task_service.delete_task(identity, task_id)
    return jsonify({"message": "Task deleted successfully"}), 200
