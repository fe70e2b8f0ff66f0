from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import asc, desc, select
from sqlalchemy.orm import Session

from personal_hub.db.models import Note
from personal_hub.db.repositories.common import (
    apply_fields,
    dump_tags,
    fetch_page,
    get_owned,
    tags_match_any,
    text_match_any,
)

_SORT_COLUMNS = {
    "createdAt": Note.created_at,
    "updatedAt": Note.updated_at,
    "title": Note.title,
}


def get_note(session: Session, user_id: str, note_id: str) -> Note:
    return get_owned(session, Note, user_id, note_id, "Note")


def list_notes(
    session: Session,
    user_id: str,
    *,
    search: str | None = None,
    tags: list[str] | None = None,
    sort_by: str = "updatedAt",
    sort_order: str = "desc",
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Note], int]:
    stmt = select(Note).where(Note.user_id == user_id)
    if search:
        stmt = stmt.where(text_match_any(search, Note.title, Note.content))
    if tags:
        stmt = stmt.where(tags_match_any(Note.tags, tags))

    column = _SORT_COLUMNS.get(sort_by, Note.updated_at)
    direction = asc if sort_order == "asc" else desc
    stmt = stmt.order_by(direction(column))
    return fetch_page(session, stmt, limit=limit, offset=offset)


def create_note(session: Session, user_id: str, **fields: Any) -> Note:
    if "tags" in fields:
        fields["tags"] = dump_tags(fields["tags"])
    note = Note(user_id=user_id)
    apply_fields(note, fields, required=("title",))
    session.add(note)
    session.commit()
    session.refresh(note)
    logger.info("Note created id={} user_id={}", note.id, user_id)
    return note


def update_note(session: Session, user_id: str, note_id: str, **fields: Any) -> Note:
    note = get_note(session, user_id, note_id)
    if "tags" in fields:
        fields["tags"] = dump_tags(fields["tags"])
    apply_fields(note, fields, required=("title",))
    session.commit()
    session.refresh(note)
    return note


def delete_note(session: Session, user_id: str, note_id: str) -> None:
    note = get_note(session, user_id, note_id)
    session.delete(note)
    session.commit()
    logger.info("Note deleted id={}", note_id)
