from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import TodoCreate, TodoUpdate
from personal_hub.core.serializers import page_to_dict, todo_to_dict
from personal_hub.db.models import TodoPriority, TodoStatus, User
from personal_hub.db.repositories import todos_repo
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/todos")
def list_todos(
    status: TodoStatus | None = Query(default=None),
    priority: TodoPriority | None = Query(default=None),
    parent_id: str | None = Query(default=None, alias="parentId"),
    root_only: bool = Query(default=False, alias="rootOnly"),
    is_repeatable: bool | None = Query(default=None, alias="isRepeatable"),
    due_from: datetime | None = Query(default=None, alias="dueFrom"),
    due_to: datetime | None = Query(default=None, alias="dueTo"),
    sort_by: Literal["createdAt", "updatedAt", "dueDate", "priority"] = Query(default="createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = todos_repo.list_todos(
        db,
        user.id,
        status=status.value if status else None,
        priority=priority.value if priority else None,
        parent_id=parent_id,
        root_only=root_only,
        is_repeatable=is_repeatable,
        due_from=due_from,
        due_to=due_to,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    return page_to_dict([todo_to_dict(row) for row in rows], total, limit, offset)


@router.post("/todos", status_code=201)
def create_todo(
    payload: TodoCreate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    todo = todos_repo.create_todo(db, user.id, **payload.model_dump())
    return todo_to_dict(todo)


@router.get("/todos/{todo_id}")
def get_todo(todo_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return todo_to_dict(todos_repo.get_todo(db, user.id, todo_id))


@router.api_route("/todos/{todo_id}", methods=["PUT", "PATCH"])
def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    todo = todos_repo.update_todo(db, user.id, todo_id, **payload.changes())
    return todo_to_dict(todo)


@router.delete("/todos/{todo_id}")
def delete_todo(todo_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    todos_repo.delete_todo(db, user.id, todo_id)
    return {"message": "Todo deleted successfully"}


@router.post("/todos/{todo_id}/toggle-status")
def toggle_status(todo_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return todo_to_dict(todos_repo.toggle_status(db, user.id, todo_id))


@router.get("/todos/{todo_id}/children")
def list_children(todo_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    rows = todos_repo.list_children(db, user.id, todo_id)
    return {"items": [todo_to_dict(row) for row in rows], "total": len(rows)}
