"""Repository helpers for the ``books_genres`` join table."""
from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import select

from bookreviews.db import app_session
from bookreviews.db.models import Book, Genre, books_genres
from bookreviews.db.repositories.association import SymmetricAssociation

BY_BOOK = SymmetricAssociation(
    books_genres,
    "book_id",
    "genre_id",
    left_model=Book,
    right_model=Genre,
)
BY_GENRE = BY_BOOK.flipped()


def attach_genres(book_id: int, genre_ids: Iterable[int], *, strict: bool = False) -> int:
    return BY_BOOK.attach(book_id, genre_ids, strict=strict)


def attach_books(genre_id: int, book_ids: Iterable[int], *, strict: bool = False) -> int:
    return BY_GENRE.attach(genre_id, book_ids, strict=strict)


def detach_genres(book_id: int, genre_ids: Iterable[int]) -> int:
    return BY_BOOK.detach(book_id, genre_ids)


def detach_books(genre_id: int, book_ids: Iterable[int]) -> int:
    return BY_GENRE.detach(genre_id, book_ids)


def genres_for_book(book_id: int) -> List[Genre]:
    with app_session() as session:
        stmt = (
            select(Genre)
            .join(books_genres, books_genres.c.genre_id == Genre.id)
            .where(books_genres.c.book_id == book_id)
            .order_by(Genre.id)
        )
        return list(session.scalars(stmt))


def books_for_genre(genre_id: int) -> List[Book]:
    with app_session() as session:
        stmt = (
            select(Book)
            .join(books_genres, books_genres.c.book_id == Book.id)
            .where(books_genres.c.genre_id == genre_id)
            .order_by(Book.id)
        )
        return list(session.scalars(stmt))


def genre_count_for_book(book_id: int) -> int:
    return BY_BOOK.count_for_left(book_id)


def book_count_for_genre(genre_id: int) -> int:
    return BY_BOOK.count_for_right(genre_id)


__all__ = [
    "BY_BOOK",
    "BY_GENRE",
    "attach_genres",
    "attach_books",
    "detach_genres",
    "detach_books",
    "genres_for_book",
    "books_for_genre",
    "genre_count_for_book",
    "book_count_for_genre",
]
