"""Book review data layer.

Users, books and genres linked through reviews and a many-to-many
book/genre association. Persistence lives under `bookreviews.db`; the
relationship accessors other layers should depend on live in
`bookreviews.services.relations`.
"""

__all__ = [
]
