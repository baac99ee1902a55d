"""Tests for the entity factories."""
from __future__ import annotations

import random
from datetime import datetime

import pytest

from bookreviews.db.errors import ConstraintViolationError
from bookreviews.db.models import Book, Genre
from bookreviews.db.repositories import books_repo, genres_repo, reviews_repo, users_repo
from bookreviews.factories import (
    GENRE_NAMES,
    BookFactory,
    GenreFactory,
    ReviewFactory,
    UniquePool,
    UserFactory,
)


def test_build_returns_unsaved_instance_with_overrides():
    book = BookFactory.build(title="Pinned")
    assert isinstance(book, Book)
    assert book.id is None
    assert book.title == "Pinned"
    assert book.publisher
    assert books_repo.list_books() == []


def test_build_rejects_unknown_fields():
    with pytest.raises(TypeError):
        UserFactory.build(nickname="x")


def test_user_factory_produces_unique_emails():
    users = UserFactory.create_batch(5)
    emails = [u.email for u in users]
    assert len(set(emails)) == 5
    assert len(users_repo.list_users()) == 5


def test_genre_factory_draws_unique_names_from_candidates():
    genres = GenreFactory.create_batch(len(GENRE_NAMES))
    names = [g.name for g in genres]
    assert sorted(names) == sorted(GENRE_NAMES)

    with pytest.raises(ConstraintViolationError):
        GenreFactory.create()


def test_genre_factory_skips_names_already_stored():
    genres_repo.create_genre("Fantasy")
    names = {g.name for g in GenreFactory.create_batch(len(GENRE_NAMES) - 1)}
    assert "Fantasy" not in names


def test_pinned_genre_names_are_excluded_from_later_draws():
    GenreFactory.create(name="Test Genre")
    genre = GenreFactory.build(name="Fantasy")
    assert isinstance(genre, Genre)

    remaining = GenreFactory.create_batch(len(GENRE_NAMES) - 1)
    assert "Fantasy" not in {g.name for g in remaining}


def test_unique_pool_reset_and_taken():
    pool = UniquePool(["a", "b"], rng=random.Random(7))
    assert pool.draw(taken=["a"]) == "b"
    with pytest.raises(ConstraintViolationError):
        pool.draw(taken=["a"])
    pool.reset()
    assert pool.draw(taken=["b"]) == "a"


def test_review_factory_creates_parents_and_random_score():
    review = ReviewFactory.create()
    assert 1 <= review.score <= 5
    assert users_repo.get_user(review.user_id) is not None
    assert books_repo.get_book(review.book_id) is not None


def test_review_factory_honours_overrides():
    user = UserFactory.create()
    book = BookFactory.create()
    review = ReviewFactory.create(user_id=user.id, book_id=book.id, score=5)
    assert (review.user_id, review.book_id, review.score) == (user.id, book.id, 5)
    assert len(reviews_repo.list_reviews()) == 1
    assert len(users_repo.list_users()) == 1


def test_create_rejects_overrides_it_cannot_persist():
    with pytest.raises(TypeError):
        UserFactory.create(created_at=datetime(2001, 1, 1))
    with pytest.raises(TypeError):
        BookFactory.create(id=4242)
    with pytest.raises(TypeError):
        GenreFactory.create(created_at=datetime(2001, 1, 1))
    with pytest.raises(TypeError):
        ReviewFactory.create(id=7, score=3)

    assert users_repo.list_users() == []
    assert books_repo.list_books() == []
    assert genres_repo.list_genres() == []
    assert reviews_repo.list_reviews() == []


def test_build_still_accepts_any_column():
    stamp = datetime(2001, 1, 1)
    user = UserFactory.build(created_at=stamp)
    book = BookFactory.build(id=4242)
    assert user.created_at == stamp
    assert book.id == 4242
