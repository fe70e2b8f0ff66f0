from __future__ import annotations

from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from personal_hub.core.clock import as_utc
from personal_hub.core.errors import ConflictError
from personal_hub.db.models import Event
from personal_hub.db.repositories.common import apply_fields, fetch_page, get_owned, text_match_any

_REQUIRED = ("title", "start_date_time", "end_date_time", "all_day")


def _check_range(start: datetime, end: datetime) -> None:
    if as_utc(end) <= as_utc(start):
        raise ConflictError("End date must be after start date")


def get_event(session: Session, user_id: str, event_id: str) -> Event:
    return get_owned(session, Event, user_id, event_id, "Event")


def list_events(
    session: Session,
    user_id: str,
    *,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    search: str | None = None,
    all_day: bool | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Event], int]:
    stmt = select(Event).where(Event.user_id == user_id)
    # overlap with the requested window
    if start_date is not None:
        stmt = stmt.where(Event.end_date_time >= start_date)
    if end_date is not None:
        stmt = stmt.where(Event.start_date_time <= end_date)
    if search:
        stmt = stmt.where(text_match_any(search, Event.title, Event.description, Event.location))
    if all_day is not None:
        stmt = stmt.where(Event.all_day == all_day)
    stmt = stmt.order_by(Event.start_date_time.asc())
    return fetch_page(session, stmt, limit=limit, offset=offset)


def create_event(session: Session, user_id: str, **fields: Any) -> Event:
    _check_range(fields["start_date_time"], fields["end_date_time"])
    event = Event(user_id=user_id)
    apply_fields(event, fields, required=_REQUIRED)
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info("Event created id={} user_id={}", event.id, user_id)
    return event


def update_event(session: Session, user_id: str, event_id: str, **fields: Any) -> Event:
    event = get_event(session, user_id, event_id)
    start = fields.get("start_date_time") or event.start_date_time
    end = fields.get("end_date_time") or event.end_date_time
    _check_range(start, end)
    apply_fields(event, fields, required=_REQUIRED)
    session.commit()
    session.refresh(event)
    return event


def delete_event(session: Session, user_id: str, event_id: str) -> None:
    event = get_event(session, user_id, event_id)
    session.delete(event)
    session.commit()
    logger.info("Event deleted id={}", event_id)
