"""Repository helpers for user accounts."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from bookreviews.db import app_session
from bookreviews.db.errors import ConstraintViolationError
from bookreviews.db.models import Review, User
from bookreviews.utils.logging import get_logger

LOG = get_logger("users_repo")
_UPDATABLE = {"name", "email"}


def create_user(name: str, email: Optional[str] = None) -> User:
    user = User(name=name, email=email)
    try:
        with app_session() as session:
            session.add(user)
    except IntegrityError as exc:
        raise ConstraintViolationError(f"User email already in use: {email}") from exc
    LOG.debug("Created user id=%s", user.id)
    return user


def get_user(user_id: int) -> Optional[User]:
    with app_session() as session:
        return session.get(User, user_id)


def get_user_by_email(email: str) -> Optional[User]:
    with app_session() as session:
        return session.query(User).filter(User.email == email).one_or_none()


def list_users() -> List[User]:
    with app_session() as session:
        return session.query(User).order_by(User.id).all()


def email_exists(email: str) -> bool:
    with app_session() as session:
        return session.scalar(select(func.count()).select_from(User).where(User.email == email)) > 0


def update_user(user_id: int, **fields) -> Optional[User]:
    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ConstraintViolationError(f"User fields not updatable: {sorted(unknown)}")
    try:
        with app_session() as session:
            user = session.get(User, user_id)
            if not user:
                return None
            for key, value in fields.items():
                setattr(user, key, value)
    except IntegrityError as exc:
        raise ConstraintViolationError("User update violates a unique constraint") from exc
    return user


def delete_user(user_id: int) -> bool:
    """Delete a user without reviews. Reviews must be removed first."""
    with app_session() as session:
        user = session.get(User, user_id)
        if not user:
            return False
        review_count = session.scalar(
            select(func.count()).select_from(Review).where(Review.user_id == user_id)
        )
        if review_count:
            LOG.info("Refusing to delete user id=%s with %d review(s)", user_id, review_count)
            raise ConstraintViolationError(f"User {user_id} still has {review_count} review(s)")
        session.delete(user)
        return True


__all__ = [
    "create_user",
    "get_user",
    "get_user_by_email",
    "list_users",
    "email_exists",
    "update_user",
    "delete_user",
]
