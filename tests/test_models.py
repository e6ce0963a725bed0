"""Value objects, soft-delete cascade and evidence ownership."""

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from contractflow.models import (
    Attachment,
    Contract,
    Deliverable,
    Evidence,
    Inspection,
    NonCompliance,
    Obligation,
    Penalty,
)
from contractflow.models.value_objects import Money, Period
from contractflow.repository import Repository, commit, live
from contractflow.utils.constants import EvidenceOwnerKind, severity_level


class TestPeriod:
    def test_end_must_be_after_start(self):
        with pytest.raises(ValueError, match="End must be after Start."):
            Period(datetime(2024, 12, 31), datetime(2024, 1, 1))

    def test_equal_bounds_rejected(self):
        with pytest.raises(ValueError):
            Period(datetime(2024, 1, 1), datetime(2024, 1, 1))


class TestMoney:
    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            Money(Decimal("-0.01"))

    def test_blank_currency_defaults_to_brl(self):
        assert Money(Decimal("10"), "  ").currency == "BRL"
        assert Money(Decimal("10")).currency == "BRL"

    def test_str(self):
        assert str(Money(Decimal("1000"), "USD")) == "USD 1000.00"


class TestContractValueObjects:
    def test_term_and_value_round_through_columns(self, factory):
        contract = factory.contract()
        contract.term = Period(datetime(2025, 1, 1), datetime(2025, 6, 30))
        contract.total_value = Money(Decimal("250.50"), "EUR")

        assert contract.term_start == datetime(2025, 1, 1)
        assert contract.term_end == datetime(2025, 6, 30)
        assert contract.total_amount == Decimal("250.50")
        assert contract.currency == "EUR"
        assert contract.term == Period(datetime(2025, 1, 1), datetime(2025, 6, 30))


class TestSeverityLevel:
    @pytest.mark.parametrize(
        "label, expected",
        [("Alta", "high"), ("baixa", "low"), ("Média", "medium"), ("CRITICAL", "critical")],
    )
    def test_known_labels(self, label, expected):
        assert severity_level(label) == expected

    def test_unknown_label(self):
        assert severity_level("Severe-ish") is None
        assert severity_level(None) is None


class TestSoftDeleteCascade:
    """Deleting a contract walks obligations down to penalties, nothing else."""

    def _aggregate(self, factory, db):
        contract = factory.contract()
        obligation = factory.obligation(contract)
        deliverable = factory.deliverable(obligation)
        inspection = Inspection(
            deliverable_id=deliverable.id, date=datetime(2024, 2, 2), inspector="Ana"
        )
        attachment = Attachment(
            contract_id=contract.id,
            file_name="contract.pdf",
            mime_type="application/pdf",
            storage_path="2024/01/x.pdf",
        )
        db.add_all([inspection, attachment])
        db.commit()
        evidence = Evidence.for_owner(
            EvidenceOwnerKind.DELIVERABLE,
            deliverable.id,
            file_name="photo.jpg",
            mime_type="image/jpeg",
            storage_path="2024/02/y.jpg",
        )
        db.add(evidence)
        db.commit()
        non_compliance = factory.non_compliance(obligation)
        penalty = factory.penalty(non_compliance)
        return contract, obligation, deliverable, inspection, attachment, evidence, non_compliance, penalty

    def test_contract_cascade(self, factory, db_session):
        (contract, obligation, deliverable, inspection, attachment,
         evidence, non_compliance, penalty) = self._aggregate(factory, db_session)

        flagged = Repository(db_session, Contract).soft_delete(contract)
        commit(db_session)

        assert flagged[0] is contract
        assert {type(e) for e in flagged} == {
            Contract, Obligation, Deliverable, Inspection, NonCompliance, Penalty
        }
        assert not attachment.is_deleted
        assert not evidence.is_deleted

    def test_deleted_rows_are_kept_but_hidden(self, factory, db_session):
        obligation = factory.obligation()
        deliverable = factory.deliverable(obligation)

        repo = Repository(db_session, Obligation)
        repo.soft_delete(obligation)
        commit(db_session)

        assert repo.get(obligation.id) is None
        assert repo.get(obligation.id, exclude_deleted=False) is not None
        assert Repository(db_session, Deliverable).list() == []
        assert len(Repository(db_session, Deliverable).list(exclude_deleted=False)) == 1
        assert deliverable.is_deleted
        assert deliverable.updated_at is not None

    def test_get_or_404_names_the_model(self, db_session):
        import uuid

        with pytest.raises(HTTPException) as exc_info:
            Repository(db_session, Contract).get_or_404(uuid.uuid4())
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail.startswith("Contract ")

    def test_live_filters_loaded_collections(self, factory, db_session):
        obligation = factory.obligation()
        kept = factory.deliverable(obligation)
        gone = factory.deliverable(obligation, expected_date=datetime(2024, 3, 1))
        Repository(db_session, Deliverable).soft_delete(gone)
        commit(db_session)
        db_session.refresh(obligation)

        assert live(obligation.deliverables) == [kept]


class TestEvidenceOwnership:
    def test_for_owner_sets_matching_key(self):
        import uuid

        owner = uuid.uuid4()
        evidence = Evidence.for_owner(EvidenceOwnerKind.INSPECTION, owner, file_name="a.txt")
        assert evidence.inspection_id == owner
        assert evidence.deliverable_id is None
        assert evidence.owner_id == owner

    def test_for_owner_rejects_unknown_kind(self):
        import uuid

        with pytest.raises(ValueError):
            Evidence.for_owner("contract", uuid.uuid4())

    def test_check_constraint_rejects_mismatched_owner(self, factory, db_session):
        deliverable = factory.deliverable()
        inspection = Inspection(
            deliverable_id=deliverable.id, date=datetime(2024, 2, 2), inspector="Ana"
        )
        db_session.add(inspection)
        db_session.commit()

        db_session.add(
            Evidence(
                owner_kind=EvidenceOwnerKind.DELIVERABLE,
                deliverable_id=deliverable.id,
                inspection_id=inspection.id,
                file_name="both.txt",
                mime_type="text/plain",
                storage_path="2024/02/z.txt",
            )
        )
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestPenaltyUniqueness:
    def test_second_penalty_maps_to_400(self, factory, db_session):
        non_compliance = factory.non_compliance()
        factory.penalty(non_compliance)

        db_session.add(Penalty(non_compliance_id=non_compliance.id, type="Warning"))
        with pytest.raises(HTTPException) as exc_info:
            commit(db_session, "duplicate", conflict_status=400)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "duplicate"
