from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from personal_hub.db.models import (
    GoalStatus,
    GoalType,
    RepeatType,
    SessionType,
    TodoPriority,
    TodoStatus,
)

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
_DAYS_OF_WEEK_PATTERN = r"^[1-7](,[1-7])*$"


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )

    def changes(self) -> dict:
        """Fields the client actually sent, keyed by column name."""
        return self.model_dump(exclude_unset=True)


class RegisterIn(ApiModel):
    email: str = Field(pattern=_EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    username: str | None = Field(default=None, min_length=3, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)


class LoginIn(ApiModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class _TodoFields(ApiModel):
    description: str | None = Field(default=None, max_length=1000)
    due_date: datetime | None = None
    parent_id: str | None = None
    repeat_type: RepeatType | None = None
    repeat_interval: int | None = Field(default=None, gt=0)
    repeat_days_of_week: str | None = Field(default=None, pattern=_DAYS_OF_WEEK_PATTERN)
    repeat_day_of_month: int | None = Field(default=None, ge=1, le=31)
    repeat_end_date: datetime | None = None


class TodoCreate(_TodoFields):
    title: str = Field(min_length=1, max_length=255)
    status: TodoStatus = TodoStatus.TODO
    priority: TodoPriority = TodoPriority.MEDIUM
    is_repeatable: bool = False

    @model_validator(mode="after")
    def check_repeat_type(self) -> "TodoCreate":
        if self.is_repeatable and not self.repeat_type:
            raise ValueError("repeatType is required when isRepeatable is true")
        return self


class TodoUpdate(_TodoFields):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    status: TodoStatus | None = None
    priority: TodoPriority | None = None
    is_repeatable: bool | None = None

    @model_validator(mode="after")
    def check_repeat_type(self) -> "TodoUpdate":
        if self.is_repeatable and "repeat_type" in self.model_fields_set and not self.repeat_type:
            raise ValueError("repeatType is required when isRepeatable is true")
        return self


class GoalCreate(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    type: GoalType
    target_value: float | None = Field(default=None, gt=0)
    unit: str | None = Field(default=None, max_length=64)
    start_date: datetime
    end_date: datetime
    status: GoalStatus = GoalStatus.ACTIVE
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


class GoalUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    type: GoalType | None = None
    target_value: float | None = Field(default=None, gt=0)
    current_value: float | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, max_length=64)
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: GoalStatus | None = None
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


class ProgressCreate(ApiModel):
    value: float
    note: str | None = Field(default=None, max_length=1000)
    date: datetime | None = None


class EventCreate(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date_time: datetime
    end_date_time: datetime
    all_day: bool = False
    location: str | None = Field(default=None, max_length=255)
    reminder_minutes: int | None = Field(default=None, ge=0)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


class EventUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    all_day: bool | None = None
    location: str | None = Field(default=None, max_length=255)
    reminder_minutes: int | None = Field(default=None, ge=0)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class _TaggedModel(ApiModel):
    @field_validator("tags", check_fields=False)
    @classmethod
    def normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value)


class NoteCreate(_TaggedModel):
    title: str = Field(min_length=1, max_length=255)
    content: str | None = None
    tags: list[str] | None = None


class NoteUpdate(_TaggedModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None
    tags: list[str] | None = None


class MomentCreate(_TaggedModel):
    content: str = Field(min_length=1, max_length=1000)
    tags: list[str] = Field(default_factory=list)


class MomentUpdate(_TaggedModel):
    content: str | None = Field(default=None, min_length=1, max_length=1000)
    tags: list[str] | None = None


class PomodoroSessionCreate(ApiModel):
    session_type: SessionType
    # minutes
    duration: int = Field(gt=0, le=240)
    task_id: str | None = None


class PomodoroSessionUpdate(ApiModel):
    end_time: datetime | None = None
    completed: bool | None = None


class PomodoroConfigUpdate(ApiModel):
    work_duration: int | None = Field(default=None, ge=1, le=60)
    short_break_duration: int | None = Field(default=None, ge=1, le=30)
    long_break_duration: int | None = Field(default=None, ge=1, le=60)
    long_break_interval: int | None = Field(default=None, ge=1, le=10)
    auto_start_breaks: bool | None = None
    auto_start_pomodoros: bool | None = None
    sound_enabled: bool | None = None
