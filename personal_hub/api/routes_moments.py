from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import MomentCreate, MomentUpdate
from personal_hub.core.serializers import moment_to_dict, page_to_dict
from personal_hub.db.models import User
from personal_hub.db.repositories import moments_repo
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/moments")
def list_moments(
    search: str | None = Query(default=None, max_length=255),
    tag: str | None = Query(default=None, max_length=100),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = moments_repo.list_moments(
        db,
        user.id,
        search=(search or "").strip() or None,
        tag=(tag or "").strip() or None,
        limit=limit,
        offset=offset,
    )
    return page_to_dict([moment_to_dict(row) for row in rows], total, limit, offset)


@router.post("/moments", status_code=201)
def create_moment(payload: MomentCreate, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    moment = moments_repo.create_moment(db, user.id, content=payload.content, tags=payload.tags)
    return moment_to_dict(moment)


@router.get("/moments/{moment_id}")
def get_moment(moment_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return moment_to_dict(moments_repo.get_moment(db, user.id, moment_id))


@router.api_route("/moments/{moment_id}", methods=["PUT", "PATCH"])
def update_moment(
    moment_id: str,
    payload: MomentUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return moment_to_dict(moments_repo.update_moment(db, user.id, moment_id, **payload.changes()))


@router.delete("/moments/{moment_id}")
def delete_moment(moment_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    moments_repo.delete_moment(db, user.id, moment_id)
    return {"message": "Moment deleted successfully"}
