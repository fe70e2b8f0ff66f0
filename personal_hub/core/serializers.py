from __future__ import annotations

from typing import Any

from personal_hub.core.clock import isoformat
from personal_hub.db.models import (
    Event,
    Goal,
    GoalProgress,
    Moment,
    Note,
    PomodoroConfig,
    PomodoroSession,
    Todo,
    User,
)
from personal_hub.db.repositories.common import load_tags


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "enabled": user.enabled,
        "createdAt": isoformat(user.created_at),
        "updatedAt": isoformat(user.updated_at),
    }


def todo_to_dict(todo: Todo) -> dict[str, Any]:
    return {
        "id": todo.id,
        "title": todo.title,
        "description": todo.description,
        "status": todo.status,
        "priority": todo.priority,
        "dueDate": isoformat(todo.due_date),
        "parentId": todo.parent_id,
        "isRepeatable": todo.is_repeatable,
        "repeatType": todo.repeat_type,
        "repeatInterval": todo.repeat_interval,
        "repeatDaysOfWeek": todo.repeat_days_of_week,
        "repeatDayOfMonth": todo.repeat_day_of_month,
        "repeatEndDate": isoformat(todo.repeat_end_date),
        "originalTodoId": todo.original_todo_id,
        "createdAt": isoformat(todo.created_at),
        "updatedAt": isoformat(todo.updated_at),
    }


def progress_to_dict(entry: GoalProgress) -> dict[str, Any]:
    return {
        "id": entry.id,
        "goalId": entry.goal_id,
        "value": entry.value,
        "note": entry.note,
        "date": isoformat(entry.date),
        "createdAt": isoformat(entry.created_at),
    }


def goal_to_dict(goal: Goal, progress: list[GoalProgress] | None = None) -> dict[str, Any]:
    data = {
        "id": goal.id,
        "title": goal.title,
        "description": goal.description,
        "type": goal.type,
        "targetValue": goal.target_value,
        "currentValue": goal.current_value,
        "unit": goal.unit,
        "startDate": isoformat(goal.start_date),
        "endDate": isoformat(goal.end_date),
        "status": goal.status,
        "color": goal.color,
        "createdAt": isoformat(goal.created_at),
        "updatedAt": isoformat(goal.updated_at),
    }
    if progress is not None:
        data["progress"] = [progress_to_dict(entry) for entry in progress]
    return data


def event_to_dict(event: Event) -> dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "startDateTime": isoformat(event.start_date_time),
        "endDateTime": isoformat(event.end_date_time),
        "location": event.location,
        "allDay": event.all_day,
        "reminderMinutes": event.reminder_minutes,
        "color": event.color,
        "createdAt": isoformat(event.created_at),
        "updatedAt": isoformat(event.updated_at),
    }


def note_to_dict(note: Note) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "content": note.content,
        "tags": load_tags(note.tags),
        "createdAt": isoformat(note.created_at),
        "updatedAt": isoformat(note.updated_at),
    }


def moment_to_dict(moment: Moment) -> dict[str, Any]:
    return {
        "id": moment.id,
        "content": moment.content,
        "tags": load_tags(moment.tags),
        "createdAt": isoformat(moment.created_at),
        "updatedAt": isoformat(moment.updated_at),
    }


def pomodoro_session_to_dict(row: PomodoroSession) -> dict[str, Any]:
    return {
        "id": row.id,
        "taskId": row.task_id,
        "sessionType": row.session_type,
        "duration": row.duration,
        "startTime": isoformat(row.start_time),
        "endTime": isoformat(row.end_time),
        "completed": row.completed,
        "createdAt": isoformat(row.created_at),
    }


def pomodoro_config_to_dict(config: PomodoroConfig) -> dict[str, Any]:
    return {
        "id": config.id,
        "workDuration": config.work_duration,
        "shortBreakDuration": config.short_break_duration,
        "longBreakDuration": config.long_break_duration,
        "longBreakInterval": config.long_break_interval,
        "autoStartBreaks": config.auto_start_breaks,
        "autoStartPomodoros": config.auto_start_pomodoros,
        "soundEnabled": config.sound_enabled,
        "createdAt": isoformat(config.created_at),
        "updatedAt": isoformat(config.updated_at),
    }


def page_to_dict(items: list[dict[str, Any]], total: int, limit: int, offset: int) -> dict[str, Any]:
    return {"items": items, "total": total, "limit": limit, "offset": offset}
