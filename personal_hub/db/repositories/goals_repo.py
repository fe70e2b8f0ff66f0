from __future__ import annotations

from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from personal_hub.core.clock import as_utc, utcnow
from personal_hub.core.errors import ConflictError, NotFoundError
from personal_hub.db.models import Goal, GoalProgress
from personal_hub.db.repositories.common import apply_fields, fetch_page, get_owned

_REQUIRED = ("title", "type", "start_date", "end_date", "status", "current_value")


def _check_dates(start: datetime, end: datetime) -> None:
    if as_utc(end) < as_utc(start):
        raise ConflictError("End date must be after or equal to start date")


def get_goal(session: Session, user_id: str, goal_id: str) -> Goal:
    return get_owned(session, Goal, user_id, goal_id, "Goal")


def list_progress(session: Session, goal_id: str) -> list[GoalProgress]:
    stmt = (
        select(GoalProgress)
        .where(GoalProgress.goal_id == goal_id)
        .order_by(GoalProgress.date.desc(), GoalProgress.created_at.desc())
    )
    return list(session.scalars(stmt).all())


def list_goals(
    session: Session,
    user_id: str,
    *,
    type: str | None = None,
    status: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Goal], int]:
    stmt = select(Goal).where(Goal.user_id == user_id)
    if type:
        stmt = stmt.where(Goal.type == type)
    if status:
        stmt = stmt.where(Goal.status == status)
    if start_date is not None:
        stmt = stmt.where(Goal.start_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Goal.end_date <= end_date)
    stmt = stmt.order_by(Goal.created_at.desc())
    return fetch_page(session, stmt, limit=limit, offset=offset)


def create_goal(session: Session, user_id: str, **fields: Any) -> Goal:
    _check_dates(fields["start_date"], fields["end_date"])
    # progress entries are the only source of current_value
    fields.pop("current_value", None)
    goal = Goal(user_id=user_id, current_value=0)
    apply_fields(goal, fields, required=_REQUIRED)
    session.add(goal)
    session.commit()
    session.refresh(goal)
    logger.info("Goal created id={} user_id={}", goal.id, user_id)
    return goal


def update_goal(session: Session, user_id: str, goal_id: str, **fields: Any) -> Goal:
    goal = get_goal(session, user_id, goal_id)
    start = fields.get("start_date") or goal.start_date
    end = fields.get("end_date") or goal.end_date
    _check_dates(start, end)
    apply_fields(goal, fields, required=_REQUIRED)
    session.commit()
    session.refresh(goal)
    return goal


def delete_goal(session: Session, user_id: str, goal_id: str) -> None:
    goal = get_goal(session, user_id, goal_id)
    session.delete(goal)
    session.commit()
    logger.info("Goal deleted id={}", goal_id)


def add_progress(
    session: Session,
    user_id: str,
    goal_id: str,
    *,
    value: float,
    note: str | None = None,
    date: datetime | None = None,
) -> tuple[GoalProgress, Goal]:
    goal = get_goal(session, user_id, goal_id)
    entry = GoalProgress(goal_id=goal.id, value=value, note=note, date=date or utcnow())
    session.add(entry)
    session.flush()
    session.execute(
        update(Goal)
        .where(Goal.id == goal.id, Goal.user_id == user_id)
        .values(current_value=Goal.current_value + value)
        .execution_options(synchronize_session=False)
    )
    session.commit()
    session.refresh(entry)
    session.refresh(goal)
    logger.info("Goal progress added goal_id={} value={}", goal.id, value)
    return entry, goal


def delete_progress(session: Session, user_id: str, goal_id: str, progress_id: str) -> Goal:
    goal = get_goal(session, user_id, goal_id)
    entry = session.scalar(
        select(GoalProgress).where(GoalProgress.id == progress_id, GoalProgress.goal_id == goal.id)
    )
    if entry is None:
        raise NotFoundError("Progress entry")

    value = entry.value
    session.delete(entry)
    session.flush()
    remaining = Goal.current_value - value
    session.execute(
        update(Goal)
        .where(Goal.id == goal.id, Goal.user_id == user_id)
        .values(current_value=case((remaining < 0, 0), else_=remaining))
        .execution_options(synchronize_session=False)
    )
    session.commit()
    session.refresh(goal)
    logger.info("Goal progress deleted goal_id={} value={}", goal.id, value)
    return goal
