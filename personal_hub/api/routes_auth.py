from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from loguru import logger
from sqlalchemy.orm import Session

from personal_hub.api.deps import current_user
from personal_hub.api.schemas import LoginIn, RegisterIn
from personal_hub.config import settings
from personal_hub.core.serializers import user_to_dict
from personal_hub.db.models import User
from personal_hub.db.repositories import users_repo
from personal_hub.db.session import get_db

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/auth/register", status_code=201)
def register(payload: RegisterIn, response: Response, db: Session = Depends(get_db)) -> dict:
    user = users_repo.create_user(
        db,
        email=payload.email,
        password=payload.password,
        username=payload.username,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    row = users_repo.create_session(db, user.id)
    _set_session_cookie(response, row.id)
    return {"user": user_to_dict(user)}


@router.post("/auth/login")
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)) -> dict:
    user = users_repo.authenticate(db, payload.email, payload.password)
    row = users_repo.create_session(db, user.id)
    _set_session_cookie(response, row.id)
    logger.info("User logged in id={}", user.id)
    return {"user": user_to_dict(user)}


@router.post("/auth/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)) -> dict:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        users_repo.delete_session(db, token)
    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Logged out successfully"}


@router.get("/auth/me")
def me(user: User = Depends(current_user)) -> dict:
    return {"user": user_to_dict(user)}
