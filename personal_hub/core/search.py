"""Cross-entity text search.

Each entity type is searched on its own, bounded by the same limit/offset.
Hits are normalized to one record shape, merged, sorted by ``updatedAt``
descending and cut back to ``limit``. ``total`` is the merged count before
that final cut, so it is an approximation once a type has more hits than
``limit``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from personal_hub.core.clock import isoformat
from personal_hub.core.errors import ValidationFailed
from personal_hub.db.models import Event, Goal, Moment, Note, Todo
from personal_hub.db.repositories.common import load_tags, text_match_any

ENTITY_TYPES = ("todos", "goals", "events", "notes", "moments")

MOMENT_TITLE_LIMIT = 50
NOTE_CONTENT_LIMIT = 200


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def parse_types(raw: Iterable[str] | None) -> list[str]:
    """Accepts repeated values and comma separated lists; empty means all types."""
    requested: list[str] = []
    for chunk in raw or []:
        for part in chunk.split(","):
            name = part.strip()
            if name and name not in requested:
                requested.append(name)
    if not requested:
        return list(ENTITY_TYPES)
    unknown = [name for name in requested if name not in ENTITY_TYPES]
    if unknown:
        raise ValidationFailed(
            "Invalid input",
            details={"types": [f"Unknown type: {name}" for name in unknown]},
        )
    return requested


def _hit(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def _todo_hit(row: Todo) -> dict[str, Any]:
    return _hit(
        id=row.id,
        type="todos",
        title=row.title,
        content=row.description or None,
        status=row.status,
        priority=row.priority,
        date=isoformat(row.due_date),
        url=f"/todos/{row.id}",
        createdAt=isoformat(row.created_at),
        updatedAt=isoformat(row.updated_at),
    )


def _goal_hit(row: Goal) -> dict[str, Any]:
    return _hit(
        id=row.id,
        type="goals",
        title=row.title,
        content=row.description or None,
        status=row.status,
        url=f"/goals/{row.id}",
        createdAt=isoformat(row.created_at),
        updatedAt=isoformat(row.updated_at),
    )


def _event_hit(row: Event) -> dict[str, Any]:
    return _hit(
        id=row.id,
        type="events",
        title=row.title,
        content=row.description or None,
        date=isoformat(row.start_date_time),
        url=f"/events/{row.id}",
        createdAt=isoformat(row.created_at),
        updatedAt=isoformat(row.updated_at),
    )


def _note_hit(row: Note) -> dict[str, Any]:
    return _hit(
        id=row.id,
        type="notes",
        title=row.title,
        content=truncate(row.content, NOTE_CONTENT_LIMIT) if row.content else None,
        tags=load_tags(row.tags) if row.tags else None,
        url=f"/notes/{row.id}",
        createdAt=isoformat(row.created_at),
        updatedAt=isoformat(row.updated_at),
    )


def _moment_hit(row: Moment) -> dict[str, Any]:
    return _hit(
        id=row.id,
        type="moments",
        title=truncate(row.content, MOMENT_TITLE_LIMIT),
        content=row.content,
        tags=load_tags(row.tags),
        url=f"/moments/{row.id}",
        createdAt=isoformat(row.created_at),
        updatedAt=isoformat(row.updated_at),
    )


_SOURCES: dict[str, tuple[type, tuple[str, ...], Callable[[Any], dict[str, Any]]]] = {
    "todos": (Todo, ("title", "description"), _todo_hit),
    "goals": (Goal, ("title", "description"), _goal_hit),
    "events": (Event, ("title", "description", "location"), _event_hit),
    "notes": (Note, ("title", "content"), _note_hit),
    "moments": (Moment, ("content",), _moment_hit),
}


def _search_type(
    session: Session, user_id: str, entity_type: str, term: str, *, limit: int, offset: int
) -> list[dict[str, Any]]:
    model, field_names, to_hit = _SOURCES[entity_type]
    columns = [getattr(model, name) for name in field_names]
    stmt = (
        select(model)
        .where(model.user_id == user_id, text_match_any(term, *columns))
        .order_by(model.updated_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return [to_hit(row) for row in session.scalars(stmt).all()]


def merge_hits(groups: Iterable[list[dict[str, Any]]], limit: int) -> tuple[list[dict[str, Any]], int]:
    merged = [hit for group in groups for hit in group]
    merged.sort(key=lambda hit: datetime.fromisoformat(hit["updatedAt"]), reverse=True)
    return merged[:limit], len(merged)


def search(
    session: Session,
    user_id: str,
    query: str,
    *,
    types: Iterable[str] | None = None,
    limit: int = 20,
    offset: int = 0,
) -> dict[str, Any]:
    term = (query or "").strip()
    if not term:
        raise ValidationFailed("Invalid input", details={"query": ["Search query is required"]})
    selected = parse_types(types)

    groups = [
        _search_type(session, user_id, entity_type, term, limit=limit, offset=offset)
        for entity_type in selected
    ]
    results, total = merge_hits(groups, limit)
    return {
        "results": results,
        "total": total,
        "limit": limit,
        "offset": offset,
        "query": term,
        "types": selected,
    }
