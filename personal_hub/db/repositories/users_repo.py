from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from personal_hub.config import settings
from personal_hub.core.clock import utcnow
from personal_hub.core.errors import AuthenticationError, ConflictError
from personal_hub.core.passwords import hash_password, needs_rehash, verify_password
from personal_hub.db.models import User, UserSession


def get_user_by_email(session: Session, email: str) -> User | None:
    return session.scalar(select(User).where(User.email == email.strip().lower()))


def create_user(
    session: Session,
    *,
    email: str,
    password: str,
    username: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    email = email.strip().lower()
    if get_user_by_email(session, email) is not None:
        raise ConflictError("Email already registered")
    if username and session.scalar(select(User).where(User.username == username)) is not None:
        raise ConflictError("Username already taken")

    user = User(
        email=email,
        username=username or None,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("User registered id={}", user.id)
    return user


def authenticate(session: Session, email: str, password: str) -> User:
    user = get_user_by_email(session, email)
    if user is None or not user.password_hash or not user.enabled:
        raise AuthenticationError("Invalid email or password")
    if not verify_password(user.password_hash, password):
        raise AuthenticationError("Invalid email or password")
    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        session.commit()
    return user


def create_session(session: Session, user_id: str, *, now: datetime | None = None) -> UserSession:
    now = now or utcnow()
    row = UserSession(
        id=secrets.token_urlsafe(32),
        user_id=user_id,
        expires_at=now + timedelta(days=settings.session_ttl_days),
    )
    session.add(row)
    session.commit()
    return row


def resolve_session(session: Session, token: str, *, now: datetime | None = None) -> User | None:
    now = now or utcnow()
    row = session.get(UserSession, token)
    if row is None:
        return None
    if row.expires_at <= now:
        session.delete(row)
        session.commit()
        logger.info("Expired session removed user_id={}", row.user_id)
        return None
    user = session.get(User, row.user_id)
    if user is None or not user.enabled:
        return None
    return user


def delete_session(session: Session, token: str) -> None:
    session.execute(delete(UserSession).where(UserSession.id == token))
    session.commit()
