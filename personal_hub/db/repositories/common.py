from __future__ import annotations

import json
from typing import Any, Iterable, TypeVar

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from personal_hub.core.errors import NotFoundError

T = TypeVar("T")


def fetch_page(session: Session, stmt: Select, *, limit: int, offset: int) -> tuple[list[Any], int]:
    total = session.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    rows = list(session.scalars(stmt.limit(limit).offset(offset)).all())
    return rows, int(total or 0)


def get_owned(session: Session, model: type[T], user_id: str, row_id: str, entity: str) -> T:
    row = session.scalar(select(model).where(model.id == row_id, model.user_id == user_id))
    if row is None:
        raise NotFoundError(entity)
    return row


def apply_fields(row: Any, fields: dict[str, Any], *, required: Iterable[str] = ()) -> None:
    required = set(required)
    for name, value in fields.items():
        if value is None and name in required:
            continue
        setattr(row, name, value)


def dump_tags(tags: list[str] | None) -> str | None:
    if tags is None:
        return None
    return json.dumps(list(tags), ensure_ascii=False)


def load_tags(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value]


def tags_match_any(column, tags: Iterable[str]):
    """SQL predicate: the JSON tag list in ``column`` holds at least one of ``tags``."""
    clauses = [column.contains(json.dumps(tag, ensure_ascii=False), autoescape=True) for tag in tags]
    if not clauses:
        return None
    return or_(*clauses)


def text_match_any(term: str, *columns):
    return or_(*(col.contains(term, autoescape=True) for col in columns))
