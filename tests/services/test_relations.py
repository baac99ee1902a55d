"""Relationship tests for users, books, genres and reviews."""
from __future__ import annotations

import random

import pytest

from bookreviews.db.errors import DuplicateAssociationError, NotFoundError
from bookreviews.db.models import Review
from bookreviews.factories import BookFactory, GenreFactory, ReviewFactory, UserFactory
from bookreviews.services import relations


# ---------------- user -> reviews ----------------

def test_user_reviews_relationship_returns_created_review():
    user = UserFactory.create()
    book = BookFactory.create()
    review = ReviewFactory.create(user_id=user.id, book_id=book.id)

    reviews = relations.reviews_of(user)
    assert len(reviews) == 1
    assert reviews[0].id == review.id


def test_user_can_have_multiple_reviews():
    user = UserFactory.create()
    for book in BookFactory.create_batch(3):
        ReviewFactory.create(user_id=user.id, book_id=book.id)

    assert len(relations.reviews_of(user)) == 3


def test_reviews_of_user_matches_user_id_regardless_of_creation_order():
    users = UserFactory.create_batch(3)
    books = BookFactory.create_batch(2)
    pairs = [(u, b) for u in users for b in books]
    random.shuffle(pairs)
    created = [ReviewFactory.create(user_id=u.id, book_id=b.id) for u, b in pairs]

    for user in users:
        expected = {r.id for r in created if r.user_id == user.id}
        assert {r.id for r in relations.reviews_of(user)} == expected
    for book in books:
        expected = {r.id for r in created if r.book_id == book.id}
        assert {r.id for r in relations.reviews_of(book)} == expected


def test_reviews_of_accepts_ids_through_explicit_helpers():
    review = ReviewFactory.create()
    assert [r.id for r in relations.reviews_of_user(review.user_id)] == [review.id]
    assert [r.id for r in relations.reviews_of_book(review.book_id)] == [review.id]


def test_reviews_of_rejects_unsupported_types():
    genre = GenreFactory.create()
    with pytest.raises(TypeError):
        relations.reviews_of(genre)


# ---------------- book -> reviews / genres ----------------

def test_book_reviews_relationship_returns_created_review():
    book = BookFactory.create()
    user = UserFactory.create()
    review = ReviewFactory.create(book_id=book.id, user_id=user.id)

    reviews = relations.reviews_of(book)
    assert len(reviews) == 1
    assert reviews[0].id == review.id


def test_book_can_have_multiple_reviews_from_different_users():
    book = BookFactory.create()
    for user in UserFactory.create_batch(5):
        ReviewFactory.create(book_id=book.id, user_id=user.id)

    assert len(relations.reviews_of(book)) == 5


def test_book_genres_relationship_returns_attached_genre():
    book = BookFactory.create()
    genre = GenreFactory.create()

    assert relations.attach_genre(book, genre) is True

    genres = relations.genres_of(book)
    assert len(genres) == 1
    assert genres[0].id == genre.id


def test_book_can_have_multiple_genres():
    book = BookFactory.create()
    genres = GenreFactory.create_batch(3)

    assert relations.attach_genres(book, [g.id for g in genres]) == 3
    assert len(relations.genres_of(book)) == 3


# ---------------- genre -> books ----------------

def test_genre_books_relationship_returns_attached_book():
    genre = GenreFactory.create()
    book = BookFactory.create()

    relations.attach_book(genre, book.id)

    books = relations.books_of(genre)
    assert len(books) == 1
    assert books[0].id == book.id


def test_genre_can_have_multiple_books():
    genre = GenreFactory.create()
    books = BookFactory.create_batch(4)

    relations.attach_books(genre, books)
    assert len(relations.books_of(genre)) == 4


def test_attach_is_symmetric():
    book = BookFactory.create()
    genre = GenreFactory.create()

    relations.attach_genre(book, genre)

    assert [g.id for g in relations.genres_of(book)] == [genre.id]
    assert [b.id for b in relations.books_of(genre)] == [book.id]


def test_attaching_same_pair_twice_is_a_noop():
    book = BookFactory.create()
    genre = GenreFactory.create()

    assert relations.attach_genre(book, genre) is True
    assert relations.attach_genre(book, genre) is False
    assert relations.attach_book(genre, book) is False

    assert [g.id for g in relations.genres_of(book)] == [genre.id]
    assert [b.id for b in relations.books_of(genre)] == [book.id]


def test_strict_attach_raises_duplicate_association():
    book = BookFactory.create()
    genre = GenreFactory.create()
    relations.attach_genre(book, genre)

    with pytest.raises(DuplicateAssociationError):
        relations.attach_genre(book, genre, strict=True)
    assert len(relations.genres_of(book)) == 1


def test_detach_removes_pair_from_both_sides():
    book = BookFactory.create()
    genres = GenreFactory.create_batch(2)
    relations.attach_genres(book, genres)

    assert relations.detach_genre(book, genres[0]) is True
    assert relations.detach_book(genres[0], book) is False

    assert [g.id for g in relations.genres_of(book)] == [genres[1].id]
    assert relations.books_of(genres[0]) == []


# ---------------- review -> user / book ----------------

def test_review_user_relationship():
    user = UserFactory.create()
    book = BookFactory.create()
    review = ReviewFactory.create(user_id=user.id, book_id=book.id)

    owner = relations.user_of(review)
    assert owner is not None
    assert owner.id == user.id


def test_review_book_relationship():
    user = UserFactory.create()
    book = BookFactory.create()
    review = ReviewFactory.create(user_id=user.id, book_id=book.id)

    target = relations.book_of(review.id)
    assert target.id == book.id


def test_user_of_unknown_review_raises_not_found():
    with pytest.raises(NotFoundError):
        relations.user_of(9999)
    with pytest.raises(NotFoundError):
        relations.book_of(9999)


def test_unsaved_review_is_rejected():
    with pytest.raises(TypeError):
        relations.user_of(Review(score=3))


# ---------------- complete flow ----------------

def test_all_relationships_work_together():
    user = UserFactory.create(name="Test User")
    book = BookFactory.create(title="Test Book")
    genre = GenreFactory.create(name="Test Genre")

    relations.attach_genre(book, genre.id)

    review = ReviewFactory.create(user_id=user.id, book_id=book.id, score=5)

    user_reviews = relations.reviews_of(user)
    assert len(user_reviews) == 1
    assert user_reviews[0].score == 5

    book_reviews = relations.reviews_of(book)
    assert len(book_reviews) == 1
    assert book_reviews[0].user_id == user.id

    book_genres = relations.genres_of(book)
    assert len(book_genres) == 1
    assert book_genres[0].name == "Test Genre"

    genre_books = relations.books_of(genre)
    assert len(genre_books) == 1
    assert genre_books[0].title == "Test Book"

    assert relations.user_of(review).name == "Test User"
    assert relations.book_of(review).title == "Test Book"


def test_multiple_users_can_review_the_same_book():
    book = BookFactory.create()
    users = UserFactory.create_batch(3)

    for user in users:
        ReviewFactory.create(user_id=user.id, book_id=book.id)

    assert len(relations.reviews_of(book)) == 3
    for user in users:
        assert len(relations.reviews_of(user)) == 1


def test_books_and_genres_link_many_to_many():
    books = BookFactory.create_batch(2)
    genres = GenreFactory.create_batch(2)

    relations.attach_genres(books[0], genres)
    relations.attach_genre(books[1], genres[0])

    assert len(relations.genres_of(books[0])) == 2
    assert len(relations.genres_of(books[1])) == 1
    assert len(relations.books_of(genres[0])) == 2
    assert len(relations.books_of(genres[1])) == 1


def test_strict_attach_from_genre_side_raises_duplicate_association():
    book = BookFactory.create()
    genre = GenreFactory.create()
    relations.attach_book(genre, book)

    with pytest.raises(DuplicateAssociationError):
        relations.attach_book(genre, book, strict=True)
    assert [b.id for b in relations.books_of(genre)] == [book.id]


def test_reviews_of_requires_an_entity_not_a_bare_id():
    review = ReviewFactory.create()
    with pytest.raises(TypeError):
        relations.reviews_of(review.user_id)
