from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.core.dashboard import build_activity, build_stats
from personal_hub.db.models import User
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/dashboard/stats")
def dashboard_stats(
    recent_items_limit: int = Query(default=5, ge=1, le=10, alias="recentItemsLimit"),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return build_stats(db, user.id, recent_limit=recent_items_limit)


@router.get("/dashboard/activity")
def dashboard_activity(
    activity_limit: int = Query(default=10, ge=1, le=50, alias="activityLimit"),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    return build_activity(db, user.id, limit=activity_limit)
