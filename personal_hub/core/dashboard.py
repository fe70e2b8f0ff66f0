from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from personal_hub.core.clock import day_range, isoformat, utcnow
from personal_hub.core.search import MOMENT_TITLE_LIMIT, truncate
from personal_hub.db.models import (
    Event,
    Goal,
    GoalStatus,
    Moment,
    Note,
    PomodoroSession,
    Todo,
    TodoStatus,
)
from personal_hub.db.repositories.common import load_tags
from personal_hub.db.repositories.pomodoro_repo import find_active_session, remaining_seconds

ACTIVITY_SOURCES = 3


def goal_progress_percent(current: float | None, target: float | None) -> int:
    if not current or not target:
        return 0
    # half-up, not banker's rounding
    return int(math.floor(current / target * 100 + 0.5))


def _count(session: Session, model, *conditions) -> int:
    return int(session.scalar(select(func.count()).select_from(model).where(*conditions)) or 0)


def _recent(session: Session, model, user_id: str, order_by, limit: int, *conditions) -> list[Any]:
    stmt = select(model).where(model.user_id == user_id, *conditions).order_by(order_by).limit(limit)
    return list(session.scalars(stmt).all())


def _todo_stats(session: Session, user_id: str, limit: int) -> dict[str, Any]:
    total = _count(session, Todo, Todo.user_id == user_id)
    completed = _count(session, Todo, Todo.user_id == user_id, Todo.status == TodoStatus.DONE.value)
    recent = _recent(session, Todo, user_id, Todo.created_at.desc(), limit)
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "recentItems": [
            {
                "id": todo.id,
                "title": todo.title,
                "completed": todo.status == TodoStatus.DONE.value,
                "createdAt": isoformat(todo.created_at),
            }
            for todo in recent
        ],
    }


def _goal_stats(session: Session, user_id: str, limit: int) -> dict[str, Any]:
    row = session.execute(
        select(
            func.count(),
            func.sum(case((Goal.status == GoalStatus.ACTIVE.value, 1), else_=0)),
            func.sum(case((Goal.status == GoalStatus.COMPLETED.value, 1), else_=0)),
        ).where(Goal.user_id == user_id)
    ).one()
    recent = _recent(session, Goal, user_id, Goal.created_at.desc(), limit)
    return {
        "total": int(row[0] or 0),
        "inProgress": int(row[1] or 0),
        "completed": int(row[2] or 0),
        "recentItems": [
            {
                "id": goal.id,
                "title": goal.title,
                "status": goal.status,
                "progress": goal_progress_percent(goal.current_value, goal.target_value),
                "createdAt": isoformat(goal.created_at),
            }
            for goal in recent
        ],
    }


def _event_stats(session: Session, user_id: str, limit: int, now: datetime) -> dict[str, Any]:
    today_start, today_end = day_range(now)
    upcoming = _recent(session, Event, user_id, Event.start_date_time.asc(), limit, Event.start_date_time >= now)
    return {
        "total": _count(session, Event, Event.user_id == user_id),
        "upcoming": _count(session, Event, Event.user_id == user_id, Event.start_date_time >= now),
        "today": _count(
            session,
            Event,
            Event.user_id == user_id,
            Event.start_date_time >= today_start,
            Event.start_date_time < today_end,
        ),
        "recentItems": [
            {
                "id": event.id,
                "title": event.title,
                "startDate": isoformat(event.start_date_time),
                "endDate": isoformat(event.end_date_time),
                "allDay": event.all_day,
            }
            for event in upcoming
        ],
    }


def _note_stats(session: Session, user_id: str, limit: int) -> dict[str, Any]:
    recent = _recent(session, Note, user_id, Note.updated_at.desc(), limit)
    return {
        "total": _count(session, Note, Note.user_id == user_id),
        "recentItems": [
            {
                "id": note.id,
                "title": note.title,
                "tags": load_tags(note.tags),
                "createdAt": isoformat(note.created_at),
                "updatedAt": isoformat(note.updated_at),
            }
            for note in recent
        ],
    }


def _moment_stats(session: Session, user_id: str, limit: int, now: datetime) -> dict[str, Any]:
    today_start, today_end = day_range(now)
    recent = _recent(session, Moment, user_id, Moment.created_at.desc(), limit)
    return {
        "total": _count(session, Moment, Moment.user_id == user_id),
        "todayCount": _count(
            session,
            Moment,
            Moment.user_id == user_id,
            Moment.created_at >= today_start,
            Moment.created_at < today_end,
        ),
        "recentItems": [
            {
                "id": moment.id,
                "content": moment.content,
                "tags": load_tags(moment.tags),
                "createdAt": isoformat(moment.created_at),
            }
            for moment in recent
        ],
    }


def _pomodoro_totals(session: Session, user_id: str, *conditions) -> tuple[int, int]:
    row = session.execute(
        select(func.count(), func.coalesce(func.sum(PomodoroSession.duration), 0)).where(
            PomodoroSession.user_id == user_id,
            PomodoroSession.completed.is_(True),
            *conditions,
        )
    ).one()
    return int(row[0] or 0), int(round(row[1] or 0))


def _active_session(session: Session, user_id: str, now: datetime) -> dict[str, Any] | None:
    row = find_active_session(session, user_id, now)
    if row is None:
        return None
    return {
        "id": row.id,
        "type": row.session_type,
        "remainingSeconds": remaining_seconds(row, now),
    }


def _pomodoro_stats(session: Session, user_id: str, now: datetime) -> dict[str, Any]:
    # expire first so the totals below include a session that just ran out
    active = _active_session(session, user_id, now)
    today_start, today_end = day_range(now)
    today_sessions, today_minutes = _pomodoro_totals(
        session,
        user_id,
        PomodoroSession.start_time >= today_start,
        PomodoroSession.start_time < today_end,
    )
    week_sessions, week_minutes = _pomodoro_totals(
        session, user_id, PomodoroSession.start_time >= now - timedelta(days=7)
    )
    return {
        "todaySessions": today_sessions,
        "todayMinutes": today_minutes,
        "weekSessions": week_sessions,
        "weekMinutes": week_minutes,
        "activeSession": active,
    }


def build_stats(
    session: Session, user_id: str, *, recent_limit: int = 5, now: datetime | None = None
) -> dict[str, Any]:
    now = now or utcnow()
    return {
        "todos": _todo_stats(session, user_id, recent_limit),
        "goals": _goal_stats(session, user_id, recent_limit),
        "events": _event_stats(session, user_id, recent_limit, now),
        "notes": _note_stats(session, user_id, recent_limit),
        "moments": _moment_stats(session, user_id, recent_limit, now),
        "pomodoro": _pomodoro_stats(session, user_id, now),
    }


def _activity_item(
    kind: str, row_id: str, action: str, title: str, description: str | None, at: datetime, metadata: dict
) -> dict[str, Any]:
    return {
        "id": f"{kind}-{row_id}",
        "type": kind,
        "action": action,
        "title": title,
        "description": description,
        "timestamp": isoformat(at),
        "metadata": metadata,
        "_at": at,
    }


def build_activity(session: Session, user_id: str, *, limit: int = 10) -> dict[str, Any]:
    per_source = math.ceil(limit / ACTIVITY_SOURCES)
    items: list[dict[str, Any]] = []

    for todo in _recent(session, Todo, user_id, Todo.updated_at.desc(), per_source):
        done = todo.status == TodoStatus.DONE.value
        items.append(
            _activity_item(
                "todo",
                todo.id,
                "completed" if done else "updated",
                todo.title,
                None,
                todo.updated_at,
                {"completed": done, "status": todo.status, "priority": todo.priority},
            )
        )

    for goal in _recent(session, Goal, user_id, Goal.updated_at.desc(), per_source):
        items.append(
            _activity_item(
                "goal",
                goal.id,
                "completed" if goal.status == GoalStatus.COMPLETED.value else "updated",
                goal.title,
                goal.description,
                goal.updated_at,
                {
                    "status": goal.status,
                    "progress": goal_progress_percent(goal.current_value, goal.target_value),
                },
            )
        )

    for moment in _recent(session, Moment, user_id, Moment.created_at.desc(), per_source):
        items.append(
            _activity_item(
                "moment",
                moment.id,
                "created",
                truncate(moment.content, MOMENT_TITLE_LIMIT),
                None,
                moment.created_at,
                {"tags": load_tags(moment.tags)},
            )
        )

    items.sort(key=lambda item: item["_at"], reverse=True)
    for item in items:
        item.pop("_at")
    return {"items": items[:limit], "hasMore": len(items) > limit}
