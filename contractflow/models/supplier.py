"""Supplier model — company supplying goods or services under a contract."""

from sqlalchemy import Boolean, Column, String

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class Supplier(EntityMixin, Base):
    """Supplier registered in the system.

    Attributes:
        corporate_name: Legal company name.
        tax_id: Unique tax identification number (CNPJ).
        active: Whether the supplier may be used on new contracts.
    """

    __tablename__ = "supplier"

    corporate_name = Column(String(300), nullable=False)
    tax_id = Column(String(20), unique=True, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
