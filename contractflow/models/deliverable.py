"""Deliverable model — a concrete expected delivery under an obligation."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class Deliverable(EntityMixin, Base):
    """Expected delivery; ``delivered_at`` being set means it is completed.

    Soft-deleting a deliverable also deletes its inspections, but never its
    evidence, which is removed independently.
    """

    __tablename__ = "deliverable"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_deliverable_quantity"),
        Index("ix_deliverable_obligation_expected", "obligation_id", "expected_date"),
    )
    __soft_delete_cascade__ = ("inspections",)

    obligation_id = Column(Uuid, ForeignKey("obligation.id"), nullable=False)
    expected_date = Column(DateTime, nullable=False)
    quantity = Column(Numeric(18, 2), nullable=False)
    unit = Column(String(20), nullable=False)
    delivered_at = Column(DateTime, nullable=True)

    # Relationships
    obligation = relationship("Obligation", back_populates="deliverables", lazy="select")
    inspections = relationship(
        "Inspection",
        back_populates="deliverable",
        order_by="Inspection.date.desc()",
        lazy="select",
    )
    evidences = relationship(
        "Evidence", back_populates="deliverable", lazy="select"
    )
