"""NonCompliance model — a recorded failure to meet an obligation."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin
from contractflow.utils.constants import severity_level
from contractflow.utils.dates import utcnow


class NonCompliance(EntityMixin, Base):
    """Non-compliance event; carries at most one :class:`Penalty`.

    Attributes:
        obligation_id: FK to Obligation.
        reason: Description of the failure.
        severity: Free-text severity, classified by :attr:`severity_level`.
        registered_at: When the event was registered (UTC).
    """

    __tablename__ = "non_compliance"
    __table_args__ = (
        Index("ix_non_compliance_obligation_registered", "obligation_id", "registered_at"),
    )
    __soft_delete_cascade__ = ("penalty",)

    obligation_id = Column(Uuid, ForeignKey("obligation.id"), nullable=False)
    reason = Column(String(1000), nullable=False)
    severity = Column(String(20), nullable=False)
    registered_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    obligation = relationship("Obligation", back_populates="non_compliances", lazy="select")
    penalty = relationship(
        "Penalty", back_populates="non_compliance", uselist=False, lazy="select"
    )

    @property
    def severity_level(self) -> str | None:
        return severity_level(self.severity)
