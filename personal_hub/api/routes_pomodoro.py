from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import PomodoroConfigUpdate, PomodoroSessionCreate, PomodoroSessionUpdate
from personal_hub.core.clock import utcnow
from personal_hub.core.errors import NotFoundError
from personal_hub.core.serializers import page_to_dict, pomodoro_config_to_dict, pomodoro_session_to_dict
from personal_hub.db.models import SessionType, User
from personal_hub.db.repositories import pomodoro_repo
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/pomodoro/config")
def get_config(user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return pomodoro_config_to_dict(pomodoro_repo.get_config(db, user.id))


@router.put("/pomodoro/config")
def update_config(
    payload: PomodoroConfigUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return pomodoro_config_to_dict(pomodoro_repo.update_config(db, user.id, **payload.changes()))


@router.get("/pomodoro/sessions")
def list_sessions(
    start_from: datetime | None = Query(default=None, alias="from"),
    start_to: datetime | None = Query(default=None, alias="to"),
    session_type: SessionType | None = Query(default=None, alias="sessionType"),
    completed: bool | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = pomodoro_repo.list_sessions(
        db,
        user.id,
        start_from=start_from,
        start_to=start_to,
        session_type=session_type.value if session_type else None,
        completed=completed,
        limit=limit,
        offset=offset,
    )
    return page_to_dict([pomodoro_session_to_dict(row) for row in rows], total, limit, offset)


@router.post("/pomodoro/sessions", status_code=201)
def create_session(
    payload: PomodoroSessionCreate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    row = pomodoro_repo.create_session(
        db,
        user.id,
        session_type=payload.session_type,
        duration=payload.duration,
        task_id=payload.task_id,
    )
    return pomodoro_session_to_dict(row)


# declared before /{session_id} so "active" is not taken as an id
@router.get("/pomodoro/sessions/active")
def get_active_session(user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    now = utcnow()
    row = pomodoro_repo.find_active_session(db, user.id, now)
    if row is None:
        raise NotFoundError("Active session")
    data = pomodoro_session_to_dict(row)
    data["remainingSeconds"] = pomodoro_repo.remaining_seconds(row, now)
    return data


@router.get("/pomodoro/sessions/{session_id}")
def get_session(session_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    return pomodoro_session_to_dict(pomodoro_repo.get_pomodoro_session(db, user.id, session_id))


@router.api_route("/pomodoro/sessions/{session_id}", methods=["PUT", "PATCH"])
def update_session(
    session_id: str,
    payload: PomodoroSessionUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    row = pomodoro_repo.update_session(db, user.id, session_id, **payload.changes())
    return pomodoro_session_to_dict(row)


@router.delete("/pomodoro/sessions/{session_id}")
def delete_session(session_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    pomodoro_repo.delete_session(db, user.id, session_id)
    return {"message": "Session deleted successfully"}


@router.get("/pomodoro/stats")
def get_stats(
    days: int = Query(default=7, ge=1, le=365),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return pomodoro_repo.session_stats(db, user.id, days=days)
