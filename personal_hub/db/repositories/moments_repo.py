from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from personal_hub.db.models import Moment
from personal_hub.db.repositories.common import apply_fields, dump_tags, fetch_page, get_owned, tags_match_any


def get_moment(session: Session, user_id: str, moment_id: str) -> Moment:
    return get_owned(session, Moment, user_id, moment_id, "Moment")


def list_moments(
    session: Session,
    user_id: str,
    *,
    search: str | None = None,
    tag: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Moment], int]:
    stmt = select(Moment).where(Moment.user_id == user_id)
    if search:
        stmt = stmt.where(Moment.content.contains(search, autoescape=True))
    if tag:
        stmt = stmt.where(tags_match_any(Moment.tags, [tag]))
    stmt = stmt.order_by(Moment.created_at.desc())
    return fetch_page(session, stmt, limit=limit, offset=offset)


def create_moment(session: Session, user_id: str, *, content: str, tags: list[str] | None = None) -> Moment:
    moment = Moment(user_id=user_id, content=content, tags=dump_tags(tags or []))
    session.add(moment)
    session.commit()
    session.refresh(moment)
    logger.info("Moment created id={} user_id={}", moment.id, user_id)
    return moment


def update_moment(session: Session, user_id: str, moment_id: str, **fields: Any) -> Moment:
    moment = get_moment(session, user_id, moment_id)
    if "tags" in fields:
        fields["tags"] = dump_tags(fields["tags"] or [])
    apply_fields(moment, fields, required=("content",))
    session.commit()
    session.refresh(moment)
    return moment


def delete_moment(session: Session, user_id: str, moment_id: str) -> None:
    moment = get_moment(session, user_id, moment_id)
    session.delete(moment)
    session.commit()
    logger.info("Moment deleted id={}", moment_id)
