from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from personal_hub.core.clock import as_utc, isoformat, reference_tz
from personal_hub.core.errors import ValidationFailed
from personal_hub.core.serializers import goal_to_dict, note_to_dict, todo_to_dict
from personal_hub.db.models import (
    Event,
    Goal,
    GoalStatus,
    GoalType,
    Moment,
    Note,
    PomodoroSession,
    SessionType,
    Todo,
    TodoPriority,
    TodoStatus,
)
from personal_hub.db.repositories.common import load_tags, tags_match_any

TODO_COLUMNS = ["id", "title", "description", "status", "priority", "dueDate", "createdAt", "updatedAt"]

GOAL_COLUMNS = [
    "id",
    "title",
    "description",
    "type",
    "status",
    "targetValue",
    "currentValue",
    "unit",
    "startDate",
    "endDate",
    "createdAt",
    "updatedAt",
]

EVENT_COLUMNS = [
    "id",
    "title",
    "description",
    "startDate",
    "endDate",
    "allDay",
    "location",
    "reminder",
    "createdAt",
    "updatedAt",
]

NOTE_COLUMNS = ["id", "title", "content", "tags", "createdAt", "updatedAt"]

MOMENT_COLUMNS = ["id", "content", "tags", "createdAt", "updatedAt"]

POMODORO_COLUMNS = ["id", "type", "duration", "startTime", "endTime", "completed", "createdAt"]


@dataclass(slots=True)
class ExportFilters:
    date_from: str | None = None
    date_to: str | None = None
    status: str | None = None
    priority: str | None = None
    type: str | None = None
    all_day: bool | None = None
    tags: str | None = None
    session_type: str | None = None
    completed: bool | None = None

    def tag_list(self) -> list[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


_DATE_FILTERS = ("dateFrom", "dateTo")

# query filters each exporter honors
ENTITY_FILTERS: dict[str, tuple[str, ...]] = {
    "todos": _DATE_FILTERS + ("status", "priority"),
    "goals": _DATE_FILTERS + ("status", "type"),
    "events": _DATE_FILTERS + ("allDay",),
    "notes": _DATE_FILTERS + ("tags",),
    "moments": _DATE_FILTERS + ("tags",),
    "pomodoro": _DATE_FILTERS + ("sessionType", "completed"),
}

_FILTER_ENUMS: dict[str, dict[str, type[StrEnum]]] = {
    "todos": {"status": TodoStatus, "priority": TodoPriority},
    "goals": {"status": GoalStatus, "type": GoalType},
    "pomodoro": {"sessionType": SessionType},
}


def applied_filters(entity: str, params: dict[str, Any]) -> dict[str, Any]:
    """Validated query filters that apply to ``entity``; others are dropped."""
    enums = _FILTER_ENUMS.get(entity, {})
    applied: dict[str, Any] = {}
    for name in ENTITY_FILTERS[entity]:
        value = params.get(name)
        if value is None or value == "":
            continue
        enum = enums.get(name)
        if enum is not None:
            try:
                value = enum(value).value
            except ValueError:
                allowed = ", ".join(member.value for member in enum)
                raise ValidationFailed("Invalid input", details={name: [f"Must be one of: {allowed}"]})
        applied[name] = value
    return applied


def filters_from_params(applied: dict[str, Any]) -> ExportFilters:
    return ExportFilters(
        date_from=applied.get("dateFrom"),
        date_to=applied.get("dateTo"),
        status=applied.get("status"),
        priority=applied.get("priority"),
        type=applied.get("type"),
        all_day=applied.get("allDay"),
        tags=applied.get("tags"),
        session_type=applied.get("sessionType"),
        completed=applied.get("completed"),
    )


def parse_bound(raw: str | None, field: str, *, end: bool = False) -> datetime | None:
    """Parse an ISO date or datetime bound.

    A bare date covers the whole local day, so an ``end`` bound moves to the
    last instant of that day.
    """
    if raw is None or not raw.strip():
        return None
    text = raw.strip()
    try:
        if len(text) == 10:
            day = date.fromisoformat(text)
            tz = reference_tz()
            if end:
                moment = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz) - timedelta(microseconds=1)
            else:
                moment = datetime.combine(day, time.min, tzinfo=tz)
            return as_utc(moment)
        return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        raise ValidationFailed("Invalid input", details={field: ["Invalid date format"]})


def _date_conditions(column, filters: ExportFilters) -> list:
    conditions = []
    date_from = parse_bound(filters.date_from, "dateFrom")
    date_to = parse_bound(filters.date_to, "dateTo", end=True)
    if date_from is not None:
        conditions.append(column >= date_from)
    if date_to is not None:
        conditions.append(column <= date_to)
    return conditions


def _fetch(session: Session, model, user_id: str, order_by, conditions: list) -> list[Any]:
    stmt = select(model).where(model.user_id == user_id, *conditions).order_by(order_by)
    return list(session.scalars(stmt).all())


def export_todos(session: Session, user_id: str, filters: ExportFilters) -> list[dict[str, Any]]:
    conditions = _date_conditions(Todo.created_at, filters)
    if filters.status:
        conditions.append(Todo.status == filters.status)
    if filters.priority:
        conditions.append(Todo.priority == filters.priority)
    return [todo_to_dict(row) for row in _fetch(session, Todo, user_id, Todo.created_at.desc(), conditions)]


def export_goals(session: Session, user_id: str, filters: ExportFilters) -> list[dict[str, Any]]:
    conditions = _date_conditions(Goal.created_at, filters)
    if filters.status:
        conditions.append(Goal.status == filters.status)
    if filters.type:
        conditions.append(Goal.type == filters.type)
    return [goal_to_dict(row) for row in _fetch(session, Goal, user_id, Goal.created_at.desc(), conditions)]


def export_events(session: Session, user_id: str, filters: ExportFilters) -> list[dict[str, Any]]:
    conditions = _date_conditions(Event.start_date_time, filters)
    if filters.all_day is not None:
        conditions.append(Event.all_day == filters.all_day)
    rows = _fetch(session, Event, user_id, Event.start_date_time.desc(), conditions)
    return [
        {
            "id": row.id,
            "title": row.title,
            "description": row.description,
            "startDate": isoformat(row.start_date_time),
            "endDate": isoformat(row.end_date_time),
            "allDay": row.all_day,
            "location": row.location,
            "reminder": str(row.reminder_minutes) if row.reminder_minutes is not None else None,
            "createdAt": isoformat(row.created_at),
            "updatedAt": isoformat(row.updated_at),
        }
        for row in rows
    ]


def export_notes(session: Session, user_id: str, filters: ExportFilters) -> list[dict[str, Any]]:
    conditions = _date_conditions(Note.created_at, filters)
    tags = filters.tag_list()
    if tags:
        conditions.append(tags_match_any(Note.tags, tags))
    return [note_to_dict(row) for row in _fetch(session, Note, user_id, Note.created_at.desc(), conditions)]


def export_moments(session: Session, user_id: str, filters: ExportFilters) -> list[dict[str, Any]]:
    conditions = _date_conditions(Moment.created_at, filters)
    tags = filters.tag_list()
    if tags:
        conditions.append(tags_match_any(Moment.tags, tags))
    rows = _fetch(session, Moment, user_id, Moment.created_at.desc(), conditions)
    return [
        {
            "id": row.id,
            "content": row.content,
            "tags": load_tags(row.tags),
            "createdAt": isoformat(row.created_at),
            "updatedAt": isoformat(row.updated_at),
        }
        for row in rows
    ]


def export_pomodoro(session: Session, user_id: str, filters: ExportFilters) -> list[dict[str, Any]]:
    conditions = _date_conditions(PomodoroSession.start_time, filters)
    if filters.session_type:
        conditions.append(PomodoroSession.session_type == filters.session_type)
    if filters.completed is not None:
        conditions.append(PomodoroSession.completed == filters.completed)
    rows = _fetch(session, PomodoroSession, user_id, PomodoroSession.start_time.desc(), conditions)
    return [
        {
            "id": row.id,
            "type": row.session_type,
            "duration": row.duration,
            "startTime": isoformat(row.start_time),
            "endTime": isoformat(row.end_time),
            "completed": row.completed,
            "createdAt": isoformat(row.created_at),
        }
        for row in rows
    ]


EXPORTERS: dict[str, tuple[Callable[[Session, str, ExportFilters], list[dict[str, Any]]], list[str]]] = {
    "todos": (export_todos, TODO_COLUMNS),
    "goals": (export_goals, GOAL_COLUMNS),
    "events": (export_events, EVENT_COLUMNS),
    "notes": (export_notes, NOTE_COLUMNS),
    "moments": (export_moments, MOMENT_COLUMNS),
    "pomodoro": (export_pomodoro, POMODORO_COLUMNS),
}
