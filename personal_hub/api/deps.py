from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from personal_hub.config import settings
from personal_hub.core.errors import AuthenticationError
from personal_hub.db.models import User
from personal_hub.db.repositories.users_repo import resolve_session
from personal_hub.db.session import get_db


def current_user(request: Request, db: Session = Depends(get_db)) -> User:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise AuthenticationError("Unauthorized")
    user = resolve_session(db, token)
    if user is None:
        raise AuthenticationError("Unauthorized")
    return user
