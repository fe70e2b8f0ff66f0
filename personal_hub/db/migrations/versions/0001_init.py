"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-18 12:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _owner() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.String(length=36),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=True),
        sa.Column("last_name", sa.String(length=255), nullable=True),
        sa.Column("enabled", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(length=64), primary_key=True),
        _owner(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_sessions_user_id", "sessions", ["user_id"])

    op.create_table(
        "todos",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), server_default=sa.text("'TODO'"), nullable=False),
        sa.Column("priority", sa.String(length=16), server_default=sa.text("'MEDIUM'"), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "parent_id",
            sa.String(length=36),
            sa.ForeignKey("todos.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("is_repeatable", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("repeat_type", sa.String(length=16), nullable=True),
        sa.Column("repeat_interval", sa.Integer(), nullable=True),
        sa.Column("repeat_days_of_week", sa.String(length=32), nullable=True),
        sa.Column("repeat_day_of_month", sa.Integer(), nullable=True),
        sa.Column("repeat_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("original_todo_id", sa.String(length=36), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_todos_user_id", "todos", ["user_id"])
    op.create_index("ix_todos_status", "todos", ["status"])
    op.create_index("ix_todos_due_date", "todos", ["due_date"])
    op.create_index("ix_todos_parent_id", "todos", ["parent_id"])
    op.create_index("ix_todos_updated_at", "todos", ["updated_at"])
    op.create_index("ix_todos_user_created", "todos", ["user_id", "created_at"])

    op.create_table(
        "goals",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("target_value", sa.Float(), nullable=True),
        sa.Column("current_value", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("unit", sa.String(length=64), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=16), server_default=sa.text("'ACTIVE'"), nullable=False),
        sa.Column("color", sa.String(length=16), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_goals_user_id", "goals", ["user_id"])
    op.create_index("ix_goals_status", "goals", ["status"])
    op.create_index("ix_goals_updated_at", "goals", ["updated_at"])

    op.create_table(
        "goal_progress",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "goal_id",
            sa.String(length=36),
            sa.ForeignKey("goals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_goal_progress_goal_id", "goal_progress", ["goal_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("all_day", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("reminder_minutes", sa.Integer(), nullable=True),
        sa.Column("color", sa.String(length=16), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_events_user_id", "events", ["user_id"])
    op.create_index("ix_events_start_date_time", "events", ["start_date_time"])

    op.create_table(
        "notes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("tags", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_notes_user_id", "notes", ["user_id"])
    op.create_index("ix_notes_updated_at", "notes", ["updated_at"])

    op.create_table(
        "moments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("content", sa.String(length=1000), nullable=False),
        sa.Column("tags", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_moments_user_id", "moments", ["user_id"])
    op.create_index("ix_moments_created_at", "moments", ["created_at"])

    op.create_table(
        "pomodoro_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("task_id", sa.String(length=36), nullable=True),
        sa.Column("session_type", sa.String(length=16), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_pomodoro_sessions_user_id", "pomodoro_sessions", ["user_id"])
    op.create_index("ix_pomodoro_sessions_user_start", "pomodoro_sessions", ["user_id", "start_time"])

    op.create_table(
        "pomodoro_configs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        _owner(),
        sa.Column("work_duration", sa.Integer(), server_default=sa.text("25"), nullable=False),
        sa.Column("short_break_duration", sa.Integer(), server_default=sa.text("5"), nullable=False),
        sa.Column("long_break_duration", sa.Integer(), server_default=sa.text("15"), nullable=False),
        sa.Column("long_break_interval", sa.Integer(), server_default=sa.text("4"), nullable=False),
        sa.Column("auto_start_breaks", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("auto_start_pomodoros", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("sound_enabled", sa.Boolean(), server_default=sa.text("1"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_pomodoro_configs_user_id"),
    )


def downgrade() -> None:
    op.drop_table("pomodoro_configs")
    op.drop_index("ix_pomodoro_sessions_user_start", table_name="pomodoro_sessions")
    op.drop_index("ix_pomodoro_sessions_user_id", table_name="pomodoro_sessions")
    op.drop_table("pomodoro_sessions")
    op.drop_index("ix_moments_created_at", table_name="moments")
    op.drop_index("ix_moments_user_id", table_name="moments")
    op.drop_table("moments")
    op.drop_index("ix_notes_updated_at", table_name="notes")
    op.drop_index("ix_notes_user_id", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_events_start_date_time", table_name="events")
    op.drop_index("ix_events_user_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_goal_progress_goal_id", table_name="goal_progress")
    op.drop_table("goal_progress")
    op.drop_index("ix_goals_updated_at", table_name="goals")
    op.drop_index("ix_goals_status", table_name="goals")
    op.drop_index("ix_goals_user_id", table_name="goals")
    op.drop_table("goals")
    op.drop_index("ix_todos_user_created", table_name="todos")
    op.drop_index("ix_todos_updated_at", table_name="todos")
    op.drop_index("ix_todos_parent_id", table_name="todos")
    op.drop_index("ix_todos_due_date", table_name="todos")
    op.drop_index("ix_todos_status", table_name="todos")
    op.drop_index("ix_todos_user_id", table_name="todos")
    op.drop_table("todos")
    op.drop_index("ix_sessions_user_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("users")
