"""OrgUnit model — organisational unit responsible for contracts."""

from sqlalchemy import Column, String

from contractflow.database import Base
from contractflow.models.base import EntityMixin


class OrgUnit(EntityMixin, Base):
    __tablename__ = "org_unit"

    name = Column(String(200), nullable=False)
    code = Column(String(50), unique=True, nullable=True)  # unique when present
