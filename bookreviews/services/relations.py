"""Relationship accessors for users, books, genres and reviews.

These functions are the only surface outer layers (HTTP handlers, scripts)
should use to walk the relationship graph. Accessors accept either an entity
instance or its integer id, except `reviews_of`, which dispatches on the
entity type; use `reviews_of_user` / `reviews_of_book` with bare ids. All
return detached ORM objects.

Attach policy for the book/genre association: linking an already-linked
pair is a no-op (returns ``False``) unless ``strict=True`` is passed, in
which case `DuplicateAssociationError` is raised.
"""
from __future__ import annotations

from functools import singledispatch
from typing import Iterable, List, Union

from bookreviews.db.errors import NotFoundError
from bookreviews.db.models import Book, Genre, Review, User
from bookreviews.db.repositories import (
    book_genres_repo,
    books_repo,
    genres_repo,
    reviews_repo,
    users_repo,
)

BookRef = Union[Book, int]
GenreRef = Union[Genre, int]
ReviewRef = Union[Review, int]
UserRef = Union[User, int]


def _id(ref) -> int:
    if isinstance(ref, bool):
        raise TypeError("Boolean is not a valid entity reference")
    if isinstance(ref, int):
        return ref
    ident = getattr(ref, "id", None)
    if ident is None:
        raise TypeError(f"Unsaved or unsupported entity reference: {ref!r}")
    return int(ident)


def _ids(refs: Iterable) -> List[int]:
    return [_id(ref) for ref in refs]


# ---------------- reviews ----------------

@singledispatch
def reviews_of(owner) -> List[Review]:
    """Reviews written by a user or written about a book."""
    raise TypeError(f"reviews_of() expects a User or Book, got {type(owner).__name__}")


@reviews_of.register
def _(owner: User) -> List[Review]:
    return reviews_repo.list_for_user(_id(owner))


@reviews_of.register
def _(owner: Book) -> List[Review]:
    return reviews_repo.list_for_book(_id(owner))


def reviews_of_user(user: UserRef) -> List[Review]:
    return reviews_repo.list_for_user(_id(user))


def reviews_of_book(book: BookRef) -> List[Review]:
    return reviews_repo.list_for_book(_id(book))


def _require_review(review: ReviewRef) -> Review:
    if isinstance(review, Review) and review.user_id is not None and review.book_id is not None:
        return review
    review_id = _id(review)
    found = reviews_repo.get_review(review_id)
    if found is None:
        raise NotFoundError(f"Review {review_id} not found")
    return found


def user_of(review: ReviewRef) -> User:
    record = _require_review(review)
    user = users_repo.get_user(record.user_id)
    if user is None:
        raise NotFoundError(f"User {record.user_id} referenced by review {record.id} not found")
    return user


def book_of(review: ReviewRef) -> Book:
    record = _require_review(review)
    book = books_repo.get_book(record.book_id)
    if book is None:
        raise NotFoundError(f"Book {record.book_id} referenced by review {record.id} not found")
    return book


# ---------------- genres ----------------

def genres_of(book: BookRef) -> List[Genre]:
    return book_genres_repo.genres_for_book(_id(book))


def books_of(genre: GenreRef) -> List[Book]:
    return book_genres_repo.books_for_genre(_id(genre))


def attach_genre(book: BookRef, genre: GenreRef, *, strict: bool = False) -> bool:
    return book_genres_repo.attach_genres(_id(book), [_id(genre)], strict=strict) == 1


def attach_book(genre: GenreRef, book: BookRef, *, strict: bool = False) -> bool:
    return book_genres_repo.attach_books(_id(genre), [_id(book)], strict=strict) == 1


def attach_genres(book: BookRef, genres: Iterable[GenreRef], *, strict: bool = False) -> int:
    return book_genres_repo.attach_genres(_id(book), _ids(genres), strict=strict)


def attach_books(genre: GenreRef, books: Iterable[BookRef], *, strict: bool = False) -> int:
    return book_genres_repo.attach_books(_id(genre), _ids(books), strict=strict)


def detach_genre(book: BookRef, genre: GenreRef) -> bool:
    return book_genres_repo.detach_genres(_id(book), [_id(genre)]) == 1


def detach_book(genre: GenreRef, book: BookRef) -> bool:
    return book_genres_repo.detach_books(_id(genre), [_id(book)]) == 1


# ---------------- lookups ----------------

def require_user(user_id: int) -> User:
    user = users_repo.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def require_book(book_id: int) -> Book:
    book = books_repo.get_book(book_id)
    if book is None:
        raise NotFoundError(f"Book {book_id} not found")
    return book


def require_genre(genre_id: int) -> Genre:
    genre = genres_repo.get_genre(genre_id)
    if genre is None:
        raise NotFoundError(f"Genre {genre_id} not found")
    return genre


def require_review(review_id: int) -> Review:
    return _require_review(review_id)


__all__ = [
    "reviews_of",
    "reviews_of_user",
    "reviews_of_book",
    "user_of",
    "book_of",
    "genres_of",
    "books_of",
    "attach_genre",
    "attach_book",
    "attach_genres",
    "attach_books",
    "detach_genre",
    "detach_book",
    "require_user",
    "require_book",
    "require_genre",
    "require_review",
]
