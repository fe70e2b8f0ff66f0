from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import GoalCreate, GoalUpdate, ProgressCreate
from personal_hub.core.serializers import goal_to_dict, page_to_dict, progress_to_dict
from personal_hub.db.models import GoalStatus, GoalType, User
from personal_hub.db.repositories import goals_repo
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/goals")
def list_goals(
    type: GoalType | None = Query(default=None),
    status: GoalStatus | None = Query(default=None),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = goals_repo.list_goals(
        db,
        user.id,
        type=type.value if type else None,
        status=status.value if status else None,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return page_to_dict([goal_to_dict(row) for row in rows], total, limit, offset)


@router.post("/goals", status_code=201)
def create_goal(payload: GoalCreate, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    goal = goals_repo.create_goal(db, user.id, **payload.model_dump())
    return goal_to_dict(goal)


@router.get("/goals/{goal_id}")
def get_goal(goal_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    goal = goals_repo.get_goal(db, user.id, goal_id)
    return goal_to_dict(goal, goals_repo.list_progress(db, goal.id))


@router.api_route("/goals/{goal_id}", methods=["PUT", "PATCH"])
def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    goal = goals_repo.update_goal(db, user.id, goal_id, **payload.changes())
    return goal_to_dict(goal)


@router.delete("/goals/{goal_id}")
def delete_goal(goal_id: str, user: User = Depends(current_user), db: Session = Depends(get_db)) -> dict:
    goals_repo.delete_goal(db, user.id, goal_id)
    return {"message": "Goal deleted successfully"}


@router.post("/goals/{goal_id}/progress", status_code=201)
def add_progress(
    goal_id: str,
    payload: ProgressCreate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    entry, goal = goals_repo.add_progress(
        db, user.id, goal_id, value=payload.value, note=payload.note, date=payload.date
    )
    return {"progress": progress_to_dict(entry), "goal": goal_to_dict(goal)}


@router.delete("/goals/{goal_id}/progress/{progress_id}")
def delete_progress(
    goal_id: str,
    progress_id: str,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    goal = goals_repo.delete_progress(db, user.id, goal_id, progress_id)
    return {"message": "Progress entry deleted successfully", "goal": goal_to_dict(goal)}
