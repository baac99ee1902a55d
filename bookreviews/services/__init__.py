"""Service exports."""

from . import relations
from .relations import (
    reviews_of,
    user_of,
    book_of,
    genres_of,
    books_of,
    attach_genre,
    attach_book,
    attach_genres,
    attach_books,
    detach_genre,
    detach_book,
)

__all__ = [
    "relations",
    "reviews_of",
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
]
