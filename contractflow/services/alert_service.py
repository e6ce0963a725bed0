"""
Alerts service layer.

The module provides two distinct responsibilities:

1. **Query helpers** — ``list_alerts`` and ``delete_alert`` — standard
   read/soft-delete operations on existing ``Alert`` rows.

2. **Alert scan** — ``scan_due_items`` — looks for deadlines that are
   missed or fall inside the look-ahead window and inserts one ``Alert``
   per finding.  It is run by ``AlertScheduler`` once at start-up and then
   daily, and on demand through ``POST /api/alerts/scan``.

Scan rules
----------
Deliverable  — undelivered, expected on or before ``now + lookahead``
               → "overdue" when expected before ``now``, else "due soon".
Contract     — term ends on or before ``now + lookahead``
               → "has ended" when before ``now``, else "approaching end".

Design notes
------------
- All alerts of one run are written in a single commit; a failure rolls
  back the whole run and the next run starts from scratch.
- By default every run inserts a fresh alert for every finding, so a
  deliverable that stays overdue is reported once per run.  With
  ``deduplicate=True`` a finding is skipped when a non-deleted alert for
  the same entity and target date already exists.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from contractflow.models.alert import Alert
from contractflow.models.contract import Contract
from contractflow.models.deliverable import Deliverable
from contractflow.models.obligation import Obligation
from contractflow.repository import Repository, commit, not_deleted
from contractflow.utils.dates import utcnow

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 7


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------


def list_alerts(
    db: Session,
    contract_id: uuid.UUID | None = None,
    deliverable_id: uuid.UUID | None = None,
) -> list[Alert]:
    """Return non-deleted alerts, newest first, optionally narrowed to one target.

    Args:
        db: Active SQLAlchemy session.
        contract_id: If provided, only alerts about this contract.
        deliverable_id: If provided, only alerts about this deliverable.
    """
    criteria = []
    if contract_id is not None:
        criteria.append(Alert.contract_id == contract_id)
    if deliverable_id is not None:
        criteria.append(Alert.deliverable_id == deliverable_id)

    alerts = Repository(db, Alert).list(
        *criteria, order_by=(Alert.created_at.desc(), Alert.target_date)
    )
    logger.debug("list_alerts: %d alerts returned", len(alerts))
    return alerts


def delete_alert(db: Session, alert_id: uuid.UUID) -> None:
    """Dismiss an alert (soft delete)."""
    repo = Repository(db, Alert)
    repo.soft_delete(repo.get_or_404(alert_id))
    commit(db)
    logger.debug("delete_alert: id=%s dismissed", alert_id)


# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------


def deliverable_message(deliverable_id: uuid.UUID, expected_date: datetime, now: datetime) -> str:
    if expected_date < now:
        return f"Deliverable {deliverable_id} is overdue (expected {expected_date:%Y-%m-%d})."
    return f"Deliverable {deliverable_id} is due soon (expected {expected_date:%Y-%m-%d})."


def contract_message(contract_id: uuid.UUID, term_end: datetime, now: datetime) -> str:
    if term_end < now:
        return f"Contract {contract_id} has ended on {term_end:%Y-%m-%d}."
    return f"Contract {contract_id} is approaching end of term on {term_end:%Y-%m-%d}."


def _alert_exists(
    db: Session,
    target_date: datetime,
    contract_id: uuid.UUID | None = None,
    deliverable_id: uuid.UUID | None = None,
) -> bool:
    """Check whether a live alert already covers this entity and deadline."""
    return Repository(db, Alert).exists(
        Alert.contract_id == contract_id if contract_id else Alert.contract_id.is_(None),
        Alert.deliverable_id == deliverable_id
        if deliverable_id
        else Alert.deliverable_id.is_(None),
        Alert.target_date == target_date,
    )


# ---------------------------------------------------------------------------
# Alert scan
# ---------------------------------------------------------------------------


def scan_due_items(
    db: Session,
    now: datetime | None = None,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    deduplicate: bool = False,
) -> list[Alert]:
    """Insert alerts for overdue or soon-due deliverables and contract terms.

    Args:
        db: Active SQLAlchemy session; the scan commits it once.
        now: Evaluation time (defaults to the current UTC time).
        lookahead_days: Size of the "due soon" window in days.
        deduplicate: Skip findings already covered by a live alert.

    Returns:
        The ``Alert`` records inserted by this run.

    Raises:
        Exception: Any database error; the run is rolled back first.
    """
    now = now or utcnow()
    soon = now + timedelta(days=lookahead_days)
    staged: list[Alert] = []

    try:
        deliverables = (
            db.query(Deliverable)
            .join(Obligation, Deliverable.obligation_id == Obligation.id)
            .join(Contract, Obligation.contract_id == Contract.id)
            .filter(
                *not_deleted(Deliverable, Obligation, Contract),
                Deliverable.delivered_at.is_(None),
                Deliverable.expected_date <= soon,
            )
            .order_by(Deliverable.expected_date)
            .all()
        )
        for deliverable in deliverables:
            if deduplicate and _alert_exists(
                db, deliverable.expected_date, deliverable_id=deliverable.id
            ):
                continue
            alert = Alert(
                message=deliverable_message(deliverable.id, deliverable.expected_date, now),
                deliverable_id=deliverable.id,
                target_date=deliverable.expected_date,
            )
            logger.warning(alert.message)
            staged.append(alert)

        contracts = Repository(db, Contract).list(
            Contract.term_end <= soon, order_by=(Contract.term_end,)
        )
        for contract in contracts:
            if deduplicate and _alert_exists(db, contract.term_end, contract_id=contract.id):
                continue
            alert = Alert(
                message=contract_message(contract.id, contract.term_end, now),
                contract_id=contract.id,
                target_date=contract.term_end,
            )
            logger.warning(alert.message)
            staged.append(alert)

        db.add_all(staged)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("scan_due_items: run failed, rolling back")
        raise

    logger.info(
        "scan_due_items: %d alerts generated (now=%s, lookahead=%dd)",
        len(staged), now.isoformat(timespec="seconds"), lookahead_days,
    )
    return staged
