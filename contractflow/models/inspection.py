"""Inspection model — a recorded conformance check of a deliverable."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class Inspection(EntityMixin, Base):
    __tablename__ = "inspection"

    deliverable_id = Column(Uuid, ForeignKey("deliverable.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False)
    inspector = Column(String(200), nullable=False)
    notes = Column(String(2000), nullable=True)

    # Relationships
    deliverable = relationship("Deliverable", back_populates="inspections", lazy="select")
    evidences = relationship("Evidence", back_populates="inspection", lazy="select")
