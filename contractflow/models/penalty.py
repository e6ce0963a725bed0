"""Penalty model — sanction applied in response to a non-compliance."""

from sqlalchemy import Column, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class Penalty(EntityMixin, Base):
    """Sanction tied one-to-one to a :class:`NonCompliance`.

    The unique constraint on ``non_compliance_id`` backs the rule that a
    non-compliance holds zero or one penalty; a soft-deleted penalty still
    occupies the slot.
    """

    __tablename__ = "penalty"

    non_compliance_id = Column(
        Uuid, ForeignKey("non_compliance.id"), unique=True, nullable=False
    )
    type = Column(String(60), nullable=False)  # e.g. "Warning", "Fine"
    legal_basis = Column(String(500), nullable=True)
    amount = Column(Numeric(18, 2), nullable=True)

    # Relationships
    non_compliance = relationship("NonCompliance", back_populates="penalty", lazy="select")
