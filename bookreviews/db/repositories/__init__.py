"""Per-entity repository modules."""
from . import books_repo, book_genres_repo, genres_repo, reviews_repo, users_repo

__all__ = [
    "books_repo",
    "book_genres_repo",
    "genres_repo",
    "reviews_repo",
    "users_repo",
]
