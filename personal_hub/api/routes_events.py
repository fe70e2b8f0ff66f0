from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import EventCreate, EventUpdate
from personal_hub.core.serializers import event_to_dict, page_to_dict
from personal_hub.db.models import User
from personal_hub.db.repositories import events_repo
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/events")
def list_events(
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    search: str | None = Query(default=None, max_length=255),
    all_day: bool | None = Query(default=None, alias="allDay"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = events_repo.list_events(
        db,
        user.id,
        start_date=start_date,
        end_date=end_date,
        search=(search or "").strip() or None,
        all_day=all_day,
        limit=limit,
        offset=offset,
    )
    return page_to_dict([event_to_dict(row) for row in rows], total, limit, offset)


@router.post("/events", status_code=201)
def create_event(payload: EventCreate, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return event_to_dict(events_repo.create_event(db, user.id, **payload.model_dump()))


@router.get("/events/{event_id}")
def get_event(event_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return event_to_dict(events_repo.get_event(db, user.id, event_id))


@router.api_route("/events/{event_id}", methods=["PUT", "PATCH"])
def update_event(
    event_id: str,
    payload: EventUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return event_to_dict(events_repo.update_event(db, user.id, event_id, **payload.changes()))


@router.delete("/events/{event_id}")
def delete_event(event_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    events_repo.delete_event(db, user.id, event_id)
    return {"message": "Event deleted successfully"}
