from fastapi import APIRouter

from personal_hub.core.clock import isoformat, utcnow

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok", "timestamp": isoformat(utcnow())}
