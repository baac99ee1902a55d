"""Repository helpers for genres."""
from __future__ import annotations

from typing import List, Optional, Set

from sqlalchemy import func, select

from bookreviews.db import app_session
from bookreviews.db.errors import ConstraintViolationError
from bookreviews.db.models import Genre, books_genres
from bookreviews.utils.logging import get_logger

LOG = get_logger("genres_repo")


def create_genre(name: str) -> Genre:
    if not (name or "").strip():
        raise ConstraintViolationError("Genre name must not be empty")
    genre = Genre(name=name)
    with app_session() as session:
        session.add(genre)
    LOG.debug("Created genre id=%s name=%s", genre.id, genre.name)
    return genre


def get_genre(genre_id: int) -> Optional[Genre]:
    with app_session() as session:
        return session.get(Genre, genre_id)


def get_genre_by_name(name: str) -> Optional[Genre]:
    """First genre with the given name (names are unique by convention only)."""
    with app_session() as session:
        return (
            session.query(Genre)
            .filter(Genre.name == name)
            .order_by(Genre.id)
            .first()
        )


def list_genres() -> List[Genre]:
    with app_session() as session:
        return session.query(Genre).order_by(Genre.id).all()


def existing_names() -> Set[str]:
    with app_session() as session:
        return set(session.scalars(select(Genre.name)))


def rename_genre(genre_id: int, name: str) -> Optional[Genre]:
    if not (name or "").strip():
        raise ConstraintViolationError("Genre name must not be empty")
    with app_session() as session:
        genre = session.get(Genre, genre_id)
        if not genre:
            return None
        genre.name = name
        return genre


def delete_genre(genre_id: int) -> bool:
    """Delete a genre that is not linked to any book."""
    with app_session() as session:
        genre = session.get(Genre, genre_id)
        if not genre:
            return False
        link_count = session.scalar(
            select(func.count()).select_from(books_genres).where(books_genres.c.genre_id == genre_id)
        )
        if link_count:
            LOG.info("Refusing to delete genre id=%s linked to %d book(s)", genre_id, link_count)
            raise ConstraintViolationError(f"Genre {genre_id} still linked to {link_count} book(s)")
        session.delete(genre)
        return True


__all__ = [
    "create_genre",
    "get_genre",
    "get_genre_by_name",
    "list_genres",
    "existing_names",
    "rename_genre",
    "delete_genre",
]
