"""Evidence model — supporting file attached to a deliverable or an inspection."""

import uuid

from sqlalchemy import CheckConstraint, Column, Enum, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin
from contractflow.utils.constants import EvidenceOwnerKind


class Evidence(EntityMixin, Base):
    """File gathered during a delivery or an inspection.

    Ownership is a tagged variant: ``owner_kind`` names the parent type and
    exactly the matching foreign key is set.  The check constraint keeps the
    two in agreement, so an evidence row can never belong to both parents or
    to neither.

    Attributes:
        file_name: Original file name supplied by the uploader.
        mime_type: MIME type reported at upload time.
        storage_path: Path relative to the storage root.
        notes: Optional free-text notes.
        owner_kind: :class:`EvidenceOwnerKind`.
        deliverable_id / inspection_id: FK of the owning row.
    """

    __tablename__ = "evidence"
    __table_args__ = (
        CheckConstraint(
            "(owner_kind = 'deliverable' AND deliverable_id IS NOT NULL AND inspection_id IS NULL)"
            " OR (owner_kind = 'inspection' AND inspection_id IS NOT NULL AND deliverable_id IS NULL)",
            name="ck_evidence_owner",
        ),
    )

    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    storage_path = Column(String(500), nullable=False)
    notes = Column(String(1000), nullable=True)
    owner_kind = Column(
        Enum(
            EvidenceOwnerKind,
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    deliverable_id = Column(Uuid, ForeignKey("deliverable.id"), nullable=True, index=True)
    inspection_id = Column(Uuid, ForeignKey("inspection.id"), nullable=True, index=True)

    # Relationships
    deliverable = relationship("Deliverable", back_populates="evidences", lazy="select")
    inspection = relationship("Inspection", back_populates="evidences", lazy="select")

    @classmethod
    def for_owner(cls, owner_kind: EvidenceOwnerKind, owner_id: uuid.UUID, **fields) -> "Evidence":
        """Build an evidence row with the foreign key matching ``owner_kind``."""
        if owner_kind is EvidenceOwnerKind.DELIVERABLE:
            return cls(owner_kind=owner_kind, deliverable_id=owner_id, **fields)
        if owner_kind is EvidenceOwnerKind.INSPECTION:
            return cls(owner_kind=owner_kind, inspection_id=owner_id, **fields)
        raise ValueError(f"Unknown evidence owner kind: {owner_kind!r}")

    @property
    def owner_id(self) -> uuid.UUID | None:
        if self.owner_kind is EvidenceOwnerKind.INSPECTION:
            return self.inspection_id
        return self.deliverable_id

    @property
    def uploaded_at(self):
        return self.created_at
