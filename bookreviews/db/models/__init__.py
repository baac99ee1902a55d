"""ORM models aggregate exports."""
from .catalog import (  # noqa: F401
	Base,
	Book,
	Genre,
	Review,
	User,
	books_genres,
	MIN_SCORE,
	MAX_SCORE,
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
