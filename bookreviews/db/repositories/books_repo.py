"""Repository helpers for catalog books."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select

from bookreviews.db import app_session
from bookreviews.db.errors import ConstraintViolationError
from bookreviews.db.models import Book, Review, books_genres
from bookreviews.utils.logging import get_logger

LOG = get_logger("books_repo")
_UPDATABLE = {"title", "publisher"}


def create_book(title: str, publisher: Optional[str] = None) -> Book:
    if not (title or "").strip():
        raise ConstraintViolationError("Book title must not be empty")
    book = Book(title=title, publisher=publisher)
    with app_session() as session:
        session.add(book)
    LOG.debug("Created book id=%s", book.id)
    return book


def get_book(book_id: int) -> Optional[Book]:
    with app_session() as session:
        return session.get(Book, book_id)


def list_books() -> List[Book]:
    with app_session() as session:
        return session.query(Book).order_by(Book.id).all()


def update_book(book_id: int, **fields) -> Optional[Book]:
    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ConstraintViolationError(f"Book fields not updatable: {sorted(unknown)}")
    if "title" in fields and not (fields["title"] or "").strip():
        raise ConstraintViolationError("Book title must not be empty")
    with app_session() as session:
        book = session.get(Book, book_id)
        if not book:
            return None
        for key, value in fields.items():
            setattr(book, key, value)
        return book


def delete_book(book_id: int) -> bool:
    """Delete a book with no reviews and no genre links."""
    with app_session() as session:
        book = session.get(Book, book_id)
        if not book:
            return False
        review_count = session.scalar(
            select(func.count()).select_from(Review).where(Review.book_id == book_id)
        )
        link_count = session.scalar(
            select(func.count()).select_from(books_genres).where(books_genres.c.book_id == book_id)
        )
        if review_count or link_count:
            LOG.info(
                "Refusing to delete book id=%s (reviews=%d genres=%d)",
                book_id,
                review_count,
                link_count,
            )
            raise ConstraintViolationError(
                f"Book {book_id} still referenced by {review_count} review(s) and {link_count} genre link(s)"
            )
        session.delete(book)
        return True


__all__ = [
    "create_book",
    "get_book",
    "list_books",
    "update_book",
    "delete_book",
]
