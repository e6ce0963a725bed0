"""Obligation model — a contractual clause tracked to completion."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin
from contractflow.utils.constants import OBLIGATION_DEFAULT_STATUS


class Obligation(EntityMixin, Base):
    """Clause of a contract requiring specific performance.

    Attributes:
        contract_id: FK to Contract.
        clause_ref: Human-readable clause reference, e.g. ``"Cláusula 5.1"``.
        description: What the supplier must do.
        due_date: Optional deadline for the whole obligation.
        status: Free-text progress label; ``"Completed"`` (any case) marks
            the obligation as done in the contract status report.
    """

    __tablename__ = "obligation"
    __soft_delete_cascade__ = ("deliverables", "non_compliances")

    contract_id = Column(Uuid, ForeignKey("contract.id"), nullable=False, index=True)
    clause_ref = Column(String(50), nullable=False)
    description = Column(String(2000), nullable=False)
    due_date = Column(DateTime, nullable=True)
    status = Column(String(30), default=OBLIGATION_DEFAULT_STATUS, nullable=False)

    # Relationships
    contract = relationship("Contract", back_populates="obligations", lazy="select")
    deliverables = relationship(
        "Deliverable",
        back_populates="obligation",
        order_by="Deliverable.expected_date",
        lazy="select",
    )
    non_compliances = relationship(
        "NonCompliance",
        back_populates="obligation",
        order_by="NonCompliance.registered_at",
        lazy="select",
    )
