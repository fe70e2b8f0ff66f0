from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import asc, case, delete, desc, select
from sqlalchemy.orm import Session

from personal_hub.core.errors import ConflictError, NotFoundError
from personal_hub.db.models import Todo, TodoStatus
from personal_hub.db.repositories.common import apply_fields, fetch_page, get_owned

_NEXT_STATUS = {
    TodoStatus.TODO.value: TodoStatus.IN_PROGRESS.value,
    TodoStatus.IN_PROGRESS.value: TodoStatus.DONE.value,
    TodoStatus.DONE.value: TodoStatus.TODO.value,
}

_REQUIRED = ("title", "status", "priority", "is_repeatable")

_PRIORITY_RANK = case(
    (Todo.priority == "HIGH", 3),
    (Todo.priority == "MEDIUM", 2),
    else_=1,
)

_SORT_COLUMNS = {
    "createdAt": Todo.created_at,
    "updatedAt": Todo.updated_at,
    "dueDate": Todo.due_date,
    "priority": _PRIORITY_RANK,
}


def next_status(status: str) -> str:
    return _NEXT_STATUS.get(status, TodoStatus.TODO.value)


def get_todo(session: Session, user_id: str, todo_id: str) -> Todo:
    return get_owned(session, Todo, user_id, todo_id, "Todo")


def list_todos(
    session: Session,
    user_id: str,
    *,
    status: str | None = None,
    priority: str | None = None,
    parent_id: str | None = None,
    root_only: bool = False,
    is_repeatable: bool | None = None,
    due_from: datetime | None = None,
    due_to: datetime | None = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Todo], int]:
    stmt = select(Todo).where(Todo.user_id == user_id)
    if status:
        stmt = stmt.where(Todo.status == status)
    if priority:
        stmt = stmt.where(Todo.priority == priority)
    if parent_id:
        stmt = stmt.where(Todo.parent_id == parent_id)
    elif root_only:
        stmt = stmt.where(Todo.parent_id.is_(None))
    if is_repeatable is not None:
        stmt = stmt.where(Todo.is_repeatable == is_repeatable)
    if due_from is not None:
        stmt = stmt.where(Todo.due_date >= due_from)
    if due_to is not None:
        stmt = stmt.where(Todo.due_date <= due_to)

    column = _SORT_COLUMNS.get(sort_by, Todo.created_at)
    direction = asc if sort_order == "asc" else desc
    stmt = stmt.order_by(direction(column), direction(Todo.created_at))
    return fetch_page(session, stmt, limit=limit, offset=offset)


def list_children(session: Session, user_id: str, todo_id: str) -> list[Todo]:
    get_todo(session, user_id, todo_id)
    stmt = (
        select(Todo)
        .where(Todo.user_id == user_id, Todo.parent_id == todo_id)
        .order_by(Todo.created_at.desc())
    )
    return list(session.scalars(stmt).all())


def _require_parent(session: Session, user_id: str, parent_id: str) -> Todo:
    try:
        return get_owned(session, Todo, user_id, parent_id, "Parent todo")
    except NotFoundError:
        logger.info("Parent todo rejected user_id={} parent_id={}", user_id, parent_id)
        raise


def creates_cycle(session: Session, user_id: str, todo_id: str, parent_id: str) -> bool:
    """True when ``todo_id`` is ``parent_id`` or one of its ancestors."""
    seen: set[str] = set()
    current: str | None = parent_id
    while current is not None:
        if current == todo_id:
            return True
        if current in seen:
            return True
        seen.add(current)
        current = session.scalar(
            select(Todo.parent_id).where(Todo.id == current, Todo.user_id == user_id)
        )
    return False


def create_todo(session: Session, user_id: str, **fields: Any) -> Todo:
    parent_id = fields.get("parent_id")
    if parent_id:
        _require_parent(session, user_id, parent_id)

    todo = Todo(user_id=user_id)
    apply_fields(todo, fields, required=_REQUIRED)
    session.add(todo)
    session.commit()
    session.refresh(todo)
    logger.info("Todo created id={} user_id={}", todo.id, user_id)
    return todo


def update_todo(session: Session, user_id: str, todo_id: str, **fields: Any) -> Todo:
    todo = get_todo(session, user_id, todo_id)
    parent_id = fields.get("parent_id")
    if parent_id:
        if parent_id == todo_id:
            raise ConflictError("Circular dependency detected")
        _require_parent(session, user_id, parent_id)
        if creates_cycle(session, user_id, todo_id, parent_id):
            raise ConflictError("Circular dependency detected")

    apply_fields(todo, fields, required=_REQUIRED)
    session.commit()
    session.refresh(todo)
    return todo


def toggle_status(session: Session, user_id: str, todo_id: str) -> Todo:
    todo = get_todo(session, user_id, todo_id)
    todo.status = next_status(todo.status)
    session.commit()
    session.refresh(todo)
    return todo


def _descendant_ids(session: Session, user_id: str, root_id: str) -> list[str]:
    ids = [root_id]
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        children = session.scalars(
            select(Todo.id).where(Todo.user_id == user_id, Todo.parent_id == current)
        ).all()
        for child_id in children:
            if child_id not in ids:
                ids.append(child_id)
                queue.append(child_id)
    return ids


def delete_todo(session: Session, user_id: str, todo_id: str) -> None:
    get_todo(session, user_id, todo_id)
    ids = _descendant_ids(session, user_id, todo_id)
    session.execute(delete(Todo).where(Todo.user_id == user_id, Todo.id.in_(ids)))
    session.commit()
    logger.info("Todo deleted id={} removed={}", todo_id, len(ids))
