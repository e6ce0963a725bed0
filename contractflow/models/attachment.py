"""Attachment model — document stored against a contract."""

from sqlalchemy import Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class Attachment(EntityMixin, Base):
    """File metadata for a contract document; bytes live under the storage root."""

    __tablename__ = "attachment"

    contract_id = Column(Uuid, ForeignKey("contract.id"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    storage_path = Column(String(500), nullable=False)

    # Relationships
    contract = relationship("Contract", back_populates="attachments", lazy="select")

    @property
    def uploaded_at(self):
        return self.created_at
