"""Symmetric many-to-many association over a single pair table.

A pure join table keyed by ``(left_id, right_id)`` is read from either side:
``right_ids(left_id)`` and ``left_ids(right_id)`` are two indexed lookups over
the same rows. Attaching an existing pair is a no-op unless ``strict`` is set.
"""
from __future__ import annotations

from typing import Iterable, List, Set

from sqlalchemy import Table, delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreviews.db import app_session
from bookreviews.db.errors import ConstraintViolationError, DuplicateAssociationError
from bookreviews.utils.logging import get_logger

LOG = get_logger("association_repo")


class SymmetricAssociation:
    def __init__(
        self,
        table: Table,
        left_column: str,
        right_column: str,
        *,
        left_model: type,
        right_model: type,
    ) -> None:
        self.table = table
        self.left = table.c[left_column]
        self.right = table.c[right_column]
        self.left_model = left_model
        self.right_model = right_model

    @property
    def name(self) -> str:
        return self.table.name

    def _require_rows(self, session: Session, left_id: int, right_ids: Set[int]) -> None:
        if session.get(self.left_model, left_id) is None:
            raise ConstraintViolationError(
                f"{self.name}: {self.left.name}={left_id} does not exist"
            )
        if not right_ids:
            return
        found = set(
            session.scalars(
                select(self.right_model.id).where(self.right_model.id.in_(right_ids))
            )
        )
        missing = sorted(right_ids - found)
        if missing:
            raise ConstraintViolationError(
                f"{self.name}: {self.right.name} values {missing} do not exist"
            )

    def _linked(self, session: Session, left_id: int, right_ids: Set[int]) -> Set[int]:
        if not right_ids:
            return set()
        return set(
            session.scalars(
                select(self.right).where(self.left == left_id, self.right.in_(right_ids))
            )
        )

    def attach(self, left_id: int, right_ids: Iterable[int], *, strict: bool = False) -> int:
        """Link ``left_id`` to each of ``right_ids``; return the number of new rows."""
        wanted = {int(r) for r in right_ids}
        try:
            with app_session() as session:
                self._require_rows(session, left_id, wanted)
                existing = self._linked(session, left_id, wanted)
                if existing and strict:
                    raise DuplicateAssociationError(
                        f"{self.name}: {self.left.name}={left_id} already linked to {sorted(existing)}"
                    )
                fresh = sorted(wanted - existing)
                if fresh:
                    session.execute(
                        insert(self.table),
                        [{self.left.name: left_id, self.right.name: r} for r in fresh],
                    )
        except IntegrityError as exc:
            raise ConstraintViolationError(f"{self.name}: attach rejected") from exc
        if existing:
            LOG.debug("%s: skipped %d existing pair(s) for %s=%s", self.name, len(existing), self.left.name, left_id)
        LOG.debug("%s: attached %d pair(s) for %s=%s", self.name, len(fresh), self.left.name, left_id)
        return len(fresh)

    def detach(self, left_id: int, right_ids: Iterable[int]) -> int:
        """Remove the given pairs; return the number of rows deleted."""
        targets = {int(r) for r in right_ids}
        if not targets:
            return 0
        with app_session() as session:
            result = session.execute(
                delete(self.table).where(self.left == left_id, self.right.in_(targets))
            )
            return int(result.rowcount or 0)

    def right_ids(self, left_id: int) -> List[int]:
        with app_session() as session:
            return list(session.scalars(select(self.right).where(self.left == left_id)))

    def left_ids(self, right_id: int) -> List[int]:
        with app_session() as session:
            return list(session.scalars(select(self.left).where(self.right == right_id)))

    def count_for_left(self, left_id: int) -> int:
        with app_session() as session:
            return int(
                session.scalar(select(func.count()).select_from(self.table).where(self.left == left_id))
                or 0
            )

    def count_for_right(self, right_id: int) -> int:
        with app_session() as session:
            return int(
                session.scalar(select(func.count()).select_from(self.table).where(self.right == right_id))
                or 0
            )

    def flipped(self) -> "SymmetricAssociation":
        """The same association read from the other side."""
        return SymmetricAssociation(
            self.table,
            self.right.name,
            self.left.name,
            left_model=self.right_model,
            right_model=self.left_model,
        )


__all__ = ["SymmetricAssociation"]
