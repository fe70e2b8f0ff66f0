from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from personal_hub.core.clock import as_utc, day_range, local_date_key, utcnow
from personal_hub.db.models import PomodoroConfig, PomodoroSession, SessionType
from personal_hub.db.repositories.common import apply_fields, fetch_page, get_owned

_CONFIG_REQUIRED = (
    "work_duration",
    "short_break_duration",
    "long_break_duration",
    "long_break_interval",
    "auto_start_breaks",
    "auto_start_pomodoros",
    "sound_enabled",
)


def get_config(session: Session, user_id: str) -> PomodoroConfig:
    config = session.scalar(select(PomodoroConfig).where(PomodoroConfig.user_id == user_id))
    if config is not None:
        return config
    config = PomodoroConfig(user_id=user_id)
    session.add(config)
    session.commit()
    session.refresh(config)
    logger.info("Pomodoro config created user_id={}", user_id)
    return config


def update_config(session: Session, user_id: str, **fields: Any) -> PomodoroConfig:
    config = get_config(session, user_id)
    apply_fields(config, fields, required=_CONFIG_REQUIRED)
    session.commit()
    session.refresh(config)
    return config


def get_pomodoro_session(session: Session, user_id: str, session_id: str) -> PomodoroSession:
    return get_owned(session, PomodoroSession, user_id, session_id, "Session")


def list_sessions(
    session: Session,
    user_id: str,
    *,
    start_from: datetime | None = None,
    start_to: datetime | None = None,
    session_type: str | None = None,
    completed: bool | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[PomodoroSession], int]:
    stmt = select(PomodoroSession).where(PomodoroSession.user_id == user_id)
    if start_from is not None:
        stmt = stmt.where(PomodoroSession.start_time >= start_from)
    if start_to is not None:
        stmt = stmt.where(PomodoroSession.start_time <= start_to)
    if session_type:
        stmt = stmt.where(PomodoroSession.session_type == session_type)
    if completed is not None:
        stmt = stmt.where(PomodoroSession.completed == completed)
    stmt = stmt.order_by(PomodoroSession.start_time.desc())
    return fetch_page(session, stmt, limit=limit, offset=offset)


def create_session(
    session: Session,
    user_id: str,
    *,
    session_type: str,
    duration: int,
    task_id: str | None = None,
    now: datetime | None = None,
) -> PomodoroSession:
    row = PomodoroSession(
        user_id=user_id,
        session_type=session_type,
        duration=duration,
        task_id=task_id,
        start_time=now or utcnow(),
        completed=False,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    logger.info("Pomodoro session started id={} type={} duration={}m", row.id, session_type, duration)
    return row


def update_session(session: Session, user_id: str, session_id: str, **fields: Any) -> PomodoroSession:
    row = get_pomodoro_session(session, user_id, session_id)
    apply_fields(row, fields, required=("completed", "duration", "session_type"))
    session.commit()
    session.refresh(row)
    return row


def delete_session(session: Session, user_id: str, session_id: str) -> None:
    row = get_pomodoro_session(session, user_id, session_id)
    session.delete(row)
    session.commit()


def remaining_seconds(row: PomodoroSession, now: datetime) -> int:
    elapsed = (as_utc(now) - as_utc(row.start_time)).total_seconds()
    return max(0, row.duration * 60 - int(elapsed))


def expire_if_due(session: Session, row: PomodoroSession, now: datetime | None = None) -> bool:
    """Mark an unfinished session completed once its countdown has run out.

    Returns True when the session is (now) expired. Calling it again on an
    already completed row is a no-op that still reports True.
    """
    if row.completed:
        return True
    now = now or utcnow()
    if remaining_seconds(row, now) > 0:
        return False
    row.completed = True
    row.end_time = as_utc(row.start_time) + timedelta(minutes=row.duration)
    session.commit()
    logger.info("Pomodoro session expired id={}", row.id)
    return True


def find_active_session(
    session: Session, user_id: str, now: datetime | None = None
) -> PomodoroSession | None:
    now = now or utcnow()
    row = session.scalar(
        select(PomodoroSession)
        .where(PomodoroSession.user_id == user_id, PomodoroSession.completed.is_(False))
        .order_by(PomodoroSession.start_time.desc())
        .limit(1)
    )
    if row is None or expire_if_due(session, row, now):
        return None
    return row


def session_stats(session: Session, user_id: str, *, days: int = 7, now: datetime | None = None) -> dict[str, Any]:
    now = now or utcnow()
    since, _ = day_range(now - timedelta(days=days))
    rows = session.scalars(
        select(PomodoroSession)
        .where(PomodoroSession.user_id == user_id, PomodoroSession.start_time >= since)
        .order_by(PomodoroSession.start_time.asc())
    ).all()

    total = len(rows)
    completed = sum(1 for row in rows if row.completed)
    work_time = sum(row.duration for row in rows if row.session_type == SessionType.WORK.value)
    break_time = sum(row.duration for row in rows if row.session_type != SessionType.WORK.value)

    daily: dict[str, dict[str, int]] = {}
    for row in rows:
        key = local_date_key(row.start_time)
        bucket = daily.setdefault(key, {"sessions": 0, "completedSessions": 0, "workTime": 0, "breakTime": 0})
        bucket["sessions"] += 1
        if row.completed:
            bucket["completedSessions"] += 1
        if row.session_type == SessionType.WORK.value:
            bucket["workTime"] += row.duration
        else:
            bucket["breakTime"] += row.duration

    return {
        "totalSessions": total,
        "completedSessions": completed,
        "totalWorkTime": work_time,
        "totalBreakTime": break_time,
        "completionRate": completed / total if total else 0,
        "dailyStats": [{"date": key, **daily[key]} for key in sorted(daily)],
    }
