"""ORM models for the book review catalog.

Four entity tables plus the ``books_genres`` pure association table. All
foreign keys are ``ON DELETE RESTRICT``: rows that are still referenced by
reviews or genre links cannot be removed until the references are gone.
"""
from __future__ import annotations

import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

MIN_SCORE = 1
MAX_SCORE = 5


def _iso(value: datetime.datetime | None) -> str | None:
    return value.isoformat() if value else None


books_genres = Table(
    "books_genres",
    Base.metadata,
    Column(
        "book_id",
        Integer,
        ForeignKey("books.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
    Column(
        "genre_id",
        Integer,
        ForeignKey("genres.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
    Index("ix_books_genres_genre_id", "genre_id"),
)


class User(Base):
    """Account entity; owns zero or more reviews."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    reviews = relationship("Review", back_populates="user", passive_deletes="all")

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} name={self.name!r}>"


class Book(Base):
    """Catalog entity; owns reviews and links to genres via ``books_genres``."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    publisher = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    reviews = relationship("Review", back_populates="book", passive_deletes="all")
    genres = relationship(
        "Genre",
        secondary=books_genres,
        back_populates="books",
        passive_deletes=True,
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "publisher": self.publisher,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Book id={self.id} title={self.title!r}>"


class Genre(Base):
    """Classification entity. Name uniqueness is a fixture convention only."""

    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    books = relationship(
        "Book",
        secondary=books_genres,
        back_populates="genres",
        passive_deletes=True,
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Genre id={self.id} name={self.name!r}>"


class Review(Base):
    """A user's score for a book."""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    book_id = Column(
        Integer,
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    score = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    user = relationship("User", back_populates="reviews")
    book = relationship("Book", back_populates="reviews")

    __table_args__ = (
        CheckConstraint(
            f"score >= {MIN_SCORE} AND score <= {MAX_SCORE}",
            name="ck_reviews_score_range",
        ),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "book_id": self.book_id,
            "score": self.score,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return (
            "<Review id={0} user_id={1} book_id={2} score={3}>".format(
                self.id,
                self.user_id,
                self.book_id,
                self.score,
            )
        )


__all__ = [
    "Base",
    "User",
    "Book",
    "Genre",
    "Review",
    "books_genres",
    "MIN_SCORE",
    "MAX_SCORE",
]
