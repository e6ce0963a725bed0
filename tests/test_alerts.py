"""Alert scan rules, the on-demand endpoint and the recurring scheduler."""

import asyncio
import logging
import uuid
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from contractflow.models import Alert, Obligation
from contractflow.repository import Repository, commit
from contractflow.services import alert_service
from contractflow.services.alert_scheduler import AlertScheduler

NOW = datetime(2024, 2, 1, 9, 0)


class TestMessages:
    def test_deliverable_messages(self):
        deliverable_id = uuid.UUID("00000000-0000-0000-0000-000000000001")
        assert alert_service.deliverable_message(deliverable_id, datetime(2024, 1, 31), NOW) == (
            f"Deliverable {deliverable_id} is overdue (expected 2024-01-31)."
        )
        assert alert_service.deliverable_message(deliverable_id, datetime(2024, 2, 5), NOW) == (
            f"Deliverable {deliverable_id} is due soon (expected 2024-02-05)."
        )

    def test_contract_messages(self):
        contract_id = uuid.UUID("00000000-0000-0000-0000-000000000002")
        assert alert_service.contract_message(contract_id, datetime(2024, 1, 31), NOW) == (
            f"Contract {contract_id} has ended on 2024-01-31."
        )
        assert alert_service.contract_message(contract_id, datetime(2024, 2, 7), NOW) == (
            f"Contract {contract_id} is approaching end of term on 2024-02-07."
        )


class TestScan:
    def _seed(self, factory):
        contract = factory.contract(term_start=datetime(2023, 1, 1), term_end=datetime(2024, 2, 6))
        obligation = factory.obligation(contract)
        overdue = factory.deliverable(obligation, expected_date=datetime(2024, 1, 20))
        soon = factory.deliverable(obligation, expected_date=datetime(2024, 2, 4))
        factory.deliverable(obligation, expected_date=datetime(2024, 3, 1))  # beyond window
        factory.deliverable(
            obligation, expected_date=datetime(2024, 1, 10), delivered_at=datetime(2024, 1, 9)
        )
        ended = factory.contract(term_start=datetime(2023, 1, 1), term_end=datetime(2024, 1, 15))
        factory.contract()  # ends 2024-12-31, outside the window
        return contract, overdue, soon, ended

    def test_findings(self, factory, db_session):
        contract, overdue, soon, ended = self._seed(factory)

        alerts = alert_service.scan_due_items(db_session, now=NOW)

        messages = sorted(a.message for a in alerts)
        assert messages == sorted([
            f"Deliverable {overdue.id} is overdue (expected 2024-01-20).",
            f"Deliverable {soon.id} is due soon (expected 2024-02-04).",
            f"Contract {ended.id} has ended on 2024-01-15.",
            f"Contract {contract.id} is approaching end of term on 2024-02-06.",
        ])
        by_deliverable = {a.deliverable_id: a for a in alerts if a.deliverable_id}
        assert by_deliverable[overdue.id].target_date == datetime(2024, 1, 20)
        assert by_deliverable[overdue.id].contract_id is None
        assert len(Repository(db_session, Alert).list()) == 4

    def test_one_warning_per_alert(self, factory, db_session, caplog):
        self._seed(factory)
        with caplog.at_level(logging.WARNING, logger="contractflow.services.alert_service"):
            alerts = alert_service.scan_due_items(db_session, now=NOW)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == len(alerts) == 4

    def test_repeated_runs_duplicate_by_default(self, factory, db_session):
        self._seed(factory)
        alert_service.scan_due_items(db_session, now=NOW)
        alert_service.scan_due_items(db_session, now=NOW)
        assert len(Repository(db_session, Alert).list()) == 8

    def test_deduplicate_skips_known_findings(self, factory, db_session):
        self._seed(factory)
        alert_service.scan_due_items(db_session, now=NOW)
        second = alert_service.scan_due_items(db_session, now=NOW, deduplicate=True)
        assert second == []
        assert len(Repository(db_session, Alert).list()) == 4

    def test_lookahead_window(self, factory, db_session):
        obligation = factory.obligation(
            factory.contract(term_start=datetime(2023, 1, 1), term_end=datetime(2030, 1, 1))
        )
        factory.deliverable(obligation, expected_date=datetime(2024, 2, 20))

        assert alert_service.scan_due_items(db_session, now=NOW) == []
        assert len(alert_service.scan_due_items(db_session, now=NOW, lookahead_days=30)) == 1

    def test_failed_commit_leaves_no_alerts(self, factory, db_session, monkeypatch, caplog):
        self._seed(factory)

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        with caplog.at_level(logging.ERROR, logger="contractflow.services.alert_service"):
            with pytest.raises(OperationalError):
                alert_service.scan_due_items(db_session, now=NOW)
        monkeypatch.undo()

        assert any("rolling back" in r.getMessage() for r in caplog.records)
        assert Repository(db_session, Alert).list() == []

    def test_deleted_obligations_are_ignored(self, factory, db_session):
        obligation = factory.obligation(
            factory.contract(term_start=datetime(2023, 1, 1), term_end=datetime(2030, 1, 1))
        )
        factory.deliverable(obligation, expected_date=datetime(2024, 1, 20))
        Repository(db_session, Obligation).soft_delete(obligation)
        commit(db_session)

        assert alert_service.scan_due_items(db_session, now=NOW) == []


class TestAlertEndpoints:
    def test_scan_list_filter_dismiss(self, client, contract_id, deliverable_id):
        resp = client.post("/api/alerts/scan")
        assert resp.status_code == 200
        body = resp.json()
        # the 2024 deliverable and the 2024 contract term are both in the past
        assert body["generated"] == 2
        assert len(body["alerts"]) == 2

        [deliverable_alert] = client.get(
            "/api/alerts", params={"deliverableId": deliverable_id}
        ).json()
        assert "is overdue (expected 2024-02-01)" in deliverable_alert["message"]

        [contract_alert] = client.get("/api/alerts", params={"contractId": contract_id}).json()
        assert contract_alert["targetDate"] == "2024-12-31T00:00:00"

        assert client.delete(f"/api/alerts/{contract_alert['id']}").status_code == 204
        assert len(client.get("/api/alerts").json()) == 1
        assert client.delete(f"/api/alerts/{contract_alert['id']}").status_code == 404


class TestScheduler:
    def test_runs_immediately_and_stops_on_signal(self, factory, session_factory):
        factory.deliverable(expected_date=datetime(2024, 1, 20))

        async def exercise():
            scheduler = AlertScheduler(session_factory, interval_seconds=3600)
            scheduler.start()
            assert scheduler.running
            for _ in range(200):
                await asyncio.sleep(0.01)
                if scheduler.runs:
                    break
            await scheduler.stop()
            return scheduler

        scheduler = asyncio.run(exercise())
        assert scheduler.runs == 1
        assert not scheduler.running

        db = session_factory()
        try:
            assert len(Repository(db, Alert).list()) >= 1
        finally:
            db.close()

    def test_failed_run_is_logged_and_survived(self, caplog):
        def broken_factory():
            raise RuntimeError("database unavailable")

        scheduler = AlertScheduler(broken_factory)
        with caplog.at_level(logging.ERROR, logger="contractflow.services.alert_scheduler"):
            generated = asyncio.run(scheduler.run_once())
        assert generated == 0
        [record] = [r for r in caplog.records if "failed" in r.getMessage()]
        assert record.exc_info is not None
        assert isinstance(record.exc_info[1], RuntimeError)

    def test_stop_without_start_is_noop(self):
        asyncio.run(AlertScheduler(lambda: None).stop())
