"""Test-data factories for users, books, genres and reviews.

Each factory exposes ``build(**overrides)`` (unsaved instance),
``create(**overrides)`` (persisted through the repositories) and
``create_batch(count, **overrides)``. Overrides pin fields; everything else
is drawn at random from fixed word lists.
"""
from __future__ import annotations

import itertools
import random
from typing import Any, Dict, Iterable, List, Optional, Set

from bookreviews.db.errors import ConstraintViolationError
from bookreviews.db.models import MAX_SCORE, MIN_SCORE, Book, Genre, Review, User
from bookreviews.db.repositories import books_repo, genres_repo, reviews_repo, users_repo

GENRE_NAMES = (
    "Science Fiction",
    "Fantasy",
    "Mystery",
    "Thriller",
    "Romance",
    "Horror",
    "Historical Fiction",
    "Biography",
    "Self-Help",
    "Business",
)

FIRST_NAMES = ("Ada", "Ben", "Chloe", "Dmitri", "Elena", "Farid", "Grace", "Hugo", "Ines", "Jonas")
LAST_NAMES = ("Adler", "Berzins", "Costa", "Dubois", "Eriksen", "Fischer", "Garcia", "Hale", "Ito", "Kalnins")
TITLE_ADJECTIVES = ("Silent", "Broken", "Hidden", "Last", "Golden", "Distant", "Crimson", "Endless")
TITLE_NOUNS = ("River", "Empire", "Garden", "Signal", "Harbor", "Archive", "Winter", "Machine")
PUBLISHERS = ("Penguin", "HarperCollins", "Macmillan", "Hachette", "Simon & Schuster", "Vintage", "Tor")


class UniquePool:
    """Random draws from a fixed candidate list, never repeating a value.

    ``taken`` is consulted on every draw so values already stored elsewhere
    are skipped as well.
    """

    def __init__(self, candidates: Iterable[str], *, rng: Optional[random.Random] = None) -> None:
        self.candidates = tuple(candidates)
        self.rng = rng or random.Random()
        self._used: Set[str] = set()

    def draw(self, taken: Iterable[str] = ()) -> str:
        blocked = self._used | set(taken)
        remaining = [c for c in self.candidates if c not in blocked]
        if not remaining:
            raise ConstraintViolationError(
                f"Unique pool exhausted after {len(self.candidates)} value(s)"
            )
        value = self.rng.choice(remaining)
        self._used.add(value)
        return value

    def mark_used(self, value: str) -> None:
        self._used.add(value)

    def reset(self) -> None:
        self._used.clear()


class BaseFactory:
    model: type = object
    # Fields `create()` can hand to the repository; others are build-only.
    persisted: frozenset = frozenset()

    @classmethod
    def definition(cls) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def check_fields(cls, overrides: Dict[str, Any]) -> None:
        unknown = set(overrides) - set(cls.model.__table__.columns.keys())
        if unknown:
            raise TypeError(f"{cls.model.__name__} has no field(s) {sorted(unknown)}")

    @classmethod
    def check_persisted(cls, overrides: Dict[str, Any]) -> None:
        cls.check_fields(overrides)
        rejected = set(overrides) - cls.persisted
        if rejected:
            raise TypeError(
                f"{cls.__name__}.create() cannot persist field(s) {sorted(rejected)}; use build()"
            )

    @classmethod
    def attributes(cls, **overrides: Any) -> Dict[str, Any]:
        cls.check_fields(overrides)
        fields = cls.definition()
        fields.update(overrides)
        return fields

    @classmethod
    def build(cls, **overrides: Any):
        return cls.model(**cls.attributes(**overrides))

    @classmethod
    def create(cls, **overrides: Any):
        raise NotImplementedError

    @classmethod
    def create_batch(cls, count: int, **overrides: Any) -> List[Any]:
        if count < 0:
            raise ValueError("count must be non-negative")
        return [cls.create(**overrides) for _ in range(count)]


class UserFactory(BaseFactory):
    model = User
    persisted = frozenset({"name", "email"})
    _sequence = itertools.count(1)

    @classmethod
    def definition(cls) -> Dict[str, Any]:
        n = next(cls._sequence)
        first = random.choice(FIRST_NAMES)
        last = random.choice(LAST_NAMES)
        return {
            "name": f"{first} {last}",
            "email": f"{first}.{last}.{n}@example.com".lower(),
        }

    @classmethod
    def create(cls, **overrides: Any) -> User:
        cls.check_persisted(overrides)
        fields = cls.attributes(**overrides)
        email = fields.get("email")
        while "email" not in overrides and email and users_repo.email_exists(email):
            email = cls.definition()["email"]
        return users_repo.create_user(name=fields["name"], email=email)


class BookFactory(BaseFactory):
    model = Book
    persisted = frozenset({"title", "publisher"})

    @classmethod
    def definition(cls) -> Dict[str, Any]:
        return {
            "title": f"The {random.choice(TITLE_ADJECTIVES)} {random.choice(TITLE_NOUNS)}",
            "publisher": random.choice(PUBLISHERS),
        }

    @classmethod
    def create(cls, **overrides: Any) -> Book:
        cls.check_persisted(overrides)
        fields = cls.attributes(**overrides)
        return books_repo.create_book(title=fields["title"], publisher=fields.get("publisher"))


class GenreFactory(BaseFactory):
    model = Genre
    persisted = frozenset({"name"})
    pool = UniquePool(GENRE_NAMES)

    @classmethod
    def definition(cls) -> Dict[str, Any]:
        return {"name": cls.pool.draw()}

    @classmethod
    def attributes(cls, **overrides: Any) -> Dict[str, Any]:
        # A pinned name must not consume a draw from the pool.
        if "name" in overrides:
            cls.check_fields(overrides)
            cls.pool.mark_used(overrides["name"])
            return dict(overrides)
        return super().attributes(**overrides)

    @classmethod
    def create(cls, **overrides: Any) -> Genre:
        cls.check_persisted(overrides)
        if "name" not in overrides:
            overrides["name"] = cls.pool.draw(taken=genres_repo.existing_names())
        fields = cls.attributes(**overrides)
        return genres_repo.create_genre(fields["name"])


class ReviewFactory(BaseFactory):
    model = Review
    persisted = frozenset({"user_id", "book_id", "score"})

    @classmethod
    def definition(cls) -> Dict[str, Any]:
        return {"score": random.randint(MIN_SCORE, MAX_SCORE)}

    @classmethod
    def create(cls, **overrides: Any) -> Review:
        cls.check_persisted(overrides)
        fields = cls.attributes(**overrides)
        user_id = fields.get("user_id")
        if user_id is None:
            user_id = UserFactory.create().id
        book_id = fields.get("book_id")
        if book_id is None:
            book_id = BookFactory.create().id
        return reviews_repo.create_review(user_id=user_id, book_id=book_id, score=fields["score"])


def reset_factories() -> None:
    """Forget unique values handed out so far (call between tests)."""
    GenreFactory.pool.reset()


__all__ = [
    "GENRE_NAMES",
    "UniquePool",
    "UserFactory",
    "BookFactory",
    "GenreFactory",
    "ReviewFactory",
    "reset_factories",
]
