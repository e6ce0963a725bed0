"""Columns and soft-delete metadata shared by every ContractFlow table."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Uuid

from contractflow.utils.dates import utcnow


class EntityMixin:
    """Identity, audit timestamps and the soft-delete flag.

    Attributes:
        id: UUID primary key, assigned on flush.
        created_at: Row creation timestamp (naive UTC).
        updated_at: Last modification timestamp; ``None`` until first update.
        is_deleted: Soft-delete flag. Rows are never removed physically.

    ``__soft_delete_cascade__`` names the relationships whose members are
    soft-deleted together with the row (see ``Repository.soft_delete``).
    Relationships not listed there are left untouched.
    """

    __soft_delete_cascade__: tuple[str, ...] = ()

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)

    def touch(self) -> None:
        self.updated_at = utcnow()
