"""Contract model — the aggregate root of the contract lifecycle."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from contractflow.database import Base
from contractflow.models.base import EntityMixin
from contractflow.models.value_objects import Money, Period
from contractflow.utils.constants import (
    DEFAULT_CURRENCY,
    ContractModality,
    ContractStatus,
    ContractType,
)


def _enum_column(enum_cls):
    # Persist the enum value ("Servico", "Active", ...) rather than the member name
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class Contract(EntityMixin, Base):
    """Procurement agreement between the organisation and a supplier.

    The term and total value are exposed as the ``term`` (:class:`Period`) and
    ``total_value`` (:class:`Money`) value objects; assigning either one
    validates it before the underlying columns are written.

    Attributes:
        official_number: Unique official contract number.
        administrative_process: Optional administrative process reference.
        supplier_id: FK to Supplier.
        org_unit_id: FK to OrgUnit.
        type: :class:`ContractType`.
        modality: :class:`ContractModality`.
        status: :class:`ContractStatus` (``Active`` on creation).
        term_start / term_end: Contract term; end strictly after start.
        total_amount / currency: Contract value.
    """

    __tablename__ = "contract"
    __table_args__ = (
        CheckConstraint("term_end > term_start", name="ck_contract_term"),
        CheckConstraint("total_amount >= 0", name="ck_contract_amount"),
    )
    __soft_delete_cascade__ = ("obligations",)

    official_number = Column(String(100), unique=True, nullable=False)
    administrative_process = Column(String(100), nullable=True)
    supplier_id = Column(Uuid, ForeignKey("supplier.id"), nullable=False)
    org_unit_id = Column(Uuid, ForeignKey("org_unit.id"), nullable=False)
    type = Column(_enum_column(ContractType), nullable=False)
    modality = Column(_enum_column(ContractModality), nullable=False)
    status = Column(
        _enum_column(ContractStatus), default=ContractStatus.ACTIVE, nullable=False
    )
    term_start = Column(DateTime, nullable=False)
    term_end = Column(DateTime, nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False)
    currency = Column(String(3), default=DEFAULT_CURRENCY, nullable=False)

    # Relationships
    supplier = relationship("Supplier", lazy="select")
    org_unit = relationship("OrgUnit", lazy="select")
    obligations = relationship(
        "Obligation",
        back_populates="contract",
        order_by="Obligation.clause_ref",
        lazy="select",
    )
    attachments = relationship(
        "Attachment", back_populates="contract", lazy="select"
    )

    @property
    def term(self) -> Period:
        return Period(self.term_start, self.term_end)

    @term.setter
    def term(self, value: Period) -> None:
        self.term_start = value.start
        self.term_end = value.end

    @property
    def total_value(self) -> Money:
        return Money(self.total_amount, self.currency)

    @total_value.setter
    def total_value(self, value: Money) -> None:
        self.total_amount = value.amount
        self.currency = value.currency
