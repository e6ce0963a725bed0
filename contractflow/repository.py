"""
Soft-delete aware data access shared by every service module.

Rows are never removed physically: deleting an entity sets ``is_deleted``
and every read goes through :class:`Repository`, whose ``get``/``list``/
``query``/``exists`` methods take ``exclude_deleted=True`` by default.  Ad hoc
joined queries in the services use :func:`not_deleted` to apply the same
filter to every joined model, and :func:`live` filters relationship
collections loaded from the ORM.

Usage example::

    contracts = Repository(db, Contract)
    contract = contracts.get_or_404(contract_id)
    contracts.soft_delete(contract)
    commit(db)
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Generic, Iterable, Sequence, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def not_deleted(*models: Any) -> list[Any]:
    """Return ``is_deleted = false`` criteria for each of ``models``.

    Args:
        models: Mapped classes (or aliases) taking part in a joined query.

    Returns:
        A list of SQL criteria suitable for ``Query.filter(*criteria)``.
    """
    return [model.is_deleted.is_(False) for model in models]


def live(items: Iterable[ModelT] | None) -> list[ModelT]:
    """Drop soft-deleted members from a loaded relationship collection."""
    return [item for item in (items or []) if not item.is_deleted]


def commit(
    db: Session,
    conflict_detail: str = "The operation conflicts with an existing record.",
    conflict_status: int = status.HTTP_409_CONFLICT,
) -> None:
    """Commit the session, turning an ``IntegrityError`` into an HTTP error.

    The session is rolled back before the exception is raised so it stays
    usable for the rest of the request.

    Args:
        db: Active SQLAlchemy session.
        conflict_detail: Detail message returned to the client on conflict.
        conflict_status: HTTP status used for the conflict (409 by default).

    Raises:
        HTTPException: When the database rejects the write with a
                       constraint violation.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("commit: integrity error mapped to %d: %s", conflict_status, exc.orig)
        raise HTTPException(status_code=conflict_status, detail=conflict_detail) from exc


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class Repository(Generic[ModelT]):
    """Generic repository over one mapped class.

    Args:
        db: Active SQLAlchemy session (the request's or the job's own).
        model: Mapped class deriving from ``EntityMixin``.
    """

    def __init__(self, db: Session, model: type[ModelT]) -> None:
        self.db = db
        self.model = model

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def query(self, exclude_deleted: bool = True) -> Query:
        query = self.db.query(self.model)
        if exclude_deleted:
            query = query.filter(self.model.is_deleted.is_(False))
        return query

    def get(self, entity_id: uuid.UUID, exclude_deleted: bool = True) -> ModelT | None:
        return self.query(exclude_deleted).filter(self.model.id == entity_id).first()

    def get_or_404(self, entity_id: uuid.UUID, exclude_deleted: bool = True) -> ModelT:
        """Return the entity or raise a 404 naming the missing model.

        Raises:
            HTTPException 404: If no matching (non-deleted) row exists.
        """
        entity = self.get(entity_id, exclude_deleted=exclude_deleted)
        if entity is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.model.__name__} {entity_id} not found.",
            )
        return entity

    def list(
        self,
        *criteria: Any,
        order_by: Sequence[Any] = (),
        exclude_deleted: bool = True,
    ) -> list[ModelT]:
        query = self.query(exclude_deleted)
        if criteria:
            query = query.filter(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        return query.all()

    def exists(self, *criteria: Any, exclude_deleted: bool = True) -> bool:
        query = self.db.query(self.model.id)
        if exclude_deleted:
            query = query.filter(self.model.is_deleted.is_(False))
        return query.filter(*criteria).first() is not None

    # -----------------------------------------------------------------------
    # Writes (the caller commits)
    # -----------------------------------------------------------------------

    def add(self, entity: ModelT) -> ModelT:
        """Stage ``entity``; constraint violations surface in :func:`commit`."""
        self.db.add(entity)
        return entity

    def soft_delete(self, entity: ModelT) -> list[Any]:
        """Flag ``entity`` deleted and follow its declared cascade.

        Each model lists in ``__soft_delete_cascade__`` the relationships
        whose members are deleted with it; one-to-one relationships yield a
        single object or ``None``.  Rows already deleted are skipped.

        Returns:
            Every entity flagged by this call, ``entity`` first.
        """
        flagged: list[Any] = []
        self._flag(entity, flagged)
        logger.debug(
            "soft_delete: %s id=%s (%d rows)",
            type(entity).__name__, entity.id, len(flagged),
        )
        return flagged

    def _flag(self, entity: Any, flagged: list[Any]) -> None:
        if entity.is_deleted:
            return
        entity.is_deleted = True
        entity.touch()
        flagged.append(entity)

        for name in entity.__soft_delete_cascade__:
            related = getattr(entity, name)
            if related is None:
                continue
            children = related if isinstance(related, (list, tuple, set)) else [related]
            for child in children:
                self._flag(child, flagged)
