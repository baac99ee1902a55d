"""Read-only JSON endpoints over the relationship accessors.

Handlers depend only on `bookreviews.services.relations`; they never touch
repositories or sessions directly.
"""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from bookreviews.db.errors import NotFoundError
from bookreviews.services import relations
from bookreviews.utils.logging import get_logger

LOG = get_logger("catalog_api")

bp = Blueprint("catalog_api", __name__, url_prefix="/api")


@bp.errorhandler(NotFoundError)
def _not_found(exc: NotFoundError):
    LOG.debug("Lookup failed: %s", exc)
    return jsonify({"error": "not_found", "detail": str(exc)}), 404


@bp.route("/users/<int:user_id>/reviews", methods=["GET"])
def user_reviews(user_id: int):
    user = relations.require_user(user_id)
    reviews = relations.reviews_of(user)
    return jsonify({"user": user.as_dict(), "reviews": [r.as_dict() for r in reviews]})


@bp.route("/books/<int:book_id>/reviews", methods=["GET"])
def book_reviews(book_id: int):
    book = relations.require_book(book_id)
    reviews = relations.reviews_of(book)
    return jsonify({"book": book.as_dict(), "reviews": [r.as_dict() for r in reviews]})


@bp.route("/books/<int:book_id>/genres", methods=["GET"])
def book_genres(book_id: int):
    book = relations.require_book(book_id)
    genres = relations.genres_of(book)
    return jsonify({"book": book.as_dict(), "genres": [g.as_dict() for g in genres]})


@bp.route("/genres/<int:genre_id>/books", methods=["GET"])
def genre_books(genre_id: int):
    genre = relations.require_genre(genre_id)
    books = relations.books_of(genre)
    return jsonify({"genre": genre.as_dict(), "books": [b.as_dict() for b in books]})


@bp.route("/reviews/<int:review_id>", methods=["GET"])
def review_detail(review_id: int):
    review = relations.require_review(review_id)
    payload = review.as_dict()
    payload["user"] = relations.user_of(review).as_dict()
    payload["book"] = relations.book_of(review).as_dict()
    return jsonify({"review": payload})


def register_catalog_api(app: Any) -> None:
    if getattr(app, "_catalog_api_bp", None):  # idempotent
        return
    app.register_blueprint(bp)
    setattr(app, "_catalog_api_bp", bp)
    LOG.debug("catalog_api blueprint registered")


__all__ = ["bp", "register_catalog_api"]
