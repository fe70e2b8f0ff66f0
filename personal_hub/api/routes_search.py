from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.core.search import search
from personal_hub.db.models import User
from personal_hub.db.session import get_db

router = APIRouter()


@router.get("/search")
def search_all(
    query: str = Query(..., max_length=255),
    types: list[str] | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> dict:
    result = search(db, user.id, query, types=types, limit=limit, offset=offset)
    logger.info("Search user_id={} types={} hits={}", user.id, result["types"], result["total"])
    return result
