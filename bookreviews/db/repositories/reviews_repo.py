"""Repository helpers for reviews (user ↔ book scores)."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreviews.db import app_session
from bookreviews.db.errors import ConstraintViolationError
from bookreviews.db.models import MAX_SCORE, MIN_SCORE, Book, Review, User
from bookreviews.utils.logging import get_logger

LOG = get_logger("reviews_repo")


def _validate_score(score: int) -> int:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ConstraintViolationError(f"Review score must be an integer, got {score!r}")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise ConstraintViolationError(
            f"Review score {score} outside [{MIN_SCORE}, {MAX_SCORE}]"
        )
    return score


def _require_parents(session: Session, user_id: int, book_id: int) -> None:
    if session.get(User, user_id) is None:
        raise ConstraintViolationError(f"Review references missing user {user_id}")
    if session.get(Book, book_id) is None:
        raise ConstraintViolationError(f"Review references missing book {book_id}")


def create_review(user_id: int, book_id: int, score: int) -> Review:
    _validate_score(score)
    review = Review(user_id=user_id, book_id=book_id, score=score)
    try:
        with app_session() as session:
            _require_parents(session, user_id, book_id)
            session.add(review)
    except IntegrityError as exc:
        raise ConstraintViolationError("Review rejected by database constraints") from exc
    LOG.debug("Created review id=%s user_id=%s book_id=%s", review.id, user_id, book_id)
    return review


def get_review(review_id: int) -> Optional[Review]:
    with app_session() as session:
        return session.get(Review, review_id)


def list_reviews() -> List[Review]:
    with app_session() as session:
        return session.query(Review).order_by(Review.id).all()


def list_for_user(user_id: int) -> List[Review]:
    with app_session() as session:
        return (
            session.query(Review)
            .filter(Review.user_id == user_id)
            .order_by(Review.id)
            .all()
        )


def list_for_book(book_id: int) -> List[Review]:
    with app_session() as session:
        return (
            session.query(Review)
            .filter(Review.book_id == book_id)
            .order_by(Review.id)
            .all()
        )


def update_score(review_id: int, score: int) -> Optional[Review]:
    _validate_score(score)
    with app_session() as session:
        review = session.get(Review, review_id)
        if not review:
            return None
        review.score = score
        return review


def delete_review(review_id: int) -> bool:
    with app_session() as session:
        review = session.get(Review, review_id)
        if not review:
            return False
        session.delete(review)
        return True


__all__ = [
    "create_review",
    "get_review",
    "list_reviews",
    "list_for_user",
    "list_for_book",
    "update_score",
    "delete_review",
]
