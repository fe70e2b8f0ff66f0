from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import NoteCreate, NoteUpdate
from personal_hub.core.serializers import note_to_dict, page_to_dict
from personal_hub.db.models import User
from personal_hub.db.repositories import notes_repo
from personal_hub.db.session import get_db

router = APIRouter()


def _split_tags(raw: list[str] | None) -> list[str]:
    tags: list[str] = []
    for chunk in raw or []:
        tags.extend(part.strip() for part in chunk.split(",") if part.strip())
    return tags


@router.get("/notes")
def list_notes(
    search: str | None = Query(default=None, max_length=255),
    tags: list[str] | None = Query(default=None),
    sort_by: Literal["createdAt", "updatedAt", "title"] = Query(default="updatedAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = notes_repo.list_notes(
        db,
        user.id,
        search=(search or "").strip() or None,
        tags=_split_tags(tags),
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    return page_to_dict([note_to_dict(row) for row in rows], total, limit, offset)


@router.post("/notes", status_code=201)
def create_note(payload: NoteCreate, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return note_to_dict(notes_repo.create_note(db, user.id, **payload.model_dump()))


@router.get("/notes/{note_id}")
def get_note(note_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return note_to_dict(notes_repo.get_note(db, user.id, note_id))


@router.api_route("/notes/{note_id}", methods=["PUT", "PATCH"])
def update_note(
    note_id: str,
    payload: NoteUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return note_to_dict(notes_repo.update_note(db, user.id, note_id, **payload.changes()))


@router.delete("/notes/{note_id}")
def delete_note(note_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    notes_repo.delete_note(db, user.id, note_id)
    return {"message": "Note deleted successfully"}
