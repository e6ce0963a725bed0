"""Alert model — system-generated notice of an approaching or missed deadline."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class Alert(EntityMixin, Base):
    """Alert produced by the scan job.

    Attributes:
        message: Human-readable notice.
        contract_id: Optional FK to the contract the alert is about.
        deliverable_id: Optional FK to the deliverable the alert is about.
        target_date: The deadline that triggered the alert.
    """

    __tablename__ = "alert"

    message = Column(String(500), nullable=False)
    contract_id = Column(Uuid, ForeignKey("contract.id"), nullable=True, index=True)
    deliverable_id = Column(Uuid, ForeignKey("deliverable.id"), nullable=True, index=True)
    target_date = Column(DateTime, nullable=False)

    # Relationships
    contract = relationship("Contract", lazy="select")
    deliverable = relationship("Deliverable", lazy="select")
