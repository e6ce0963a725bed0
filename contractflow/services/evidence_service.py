"""
Evidence — service layer for files gathered on deliveries and inspections.

Evidence belongs to exactly one owner, a deliverable or an inspection,
recorded as ``owner_kind`` plus the matching foreign key.  Uploads are
limited to ``MAX_EVIDENCE_BYTES``; deleting an evidence record also removes
its file from the storage root.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from contractflow.models.deliverable import Deliverable
from contractflow.models.evidence import Evidence
from contractflow.models.inspection import Inspection
from contractflow.repository import Repository, commit
from contractflow.services import file_storage
from contractflow.utils.constants import (
    DEFAULT_MIME_TYPE,
    MAX_EVIDENCE_BYTES,
    EvidenceOwnerKind,
)

logger = logging.getLogger(__name__)

_OWNER_MODELS = {
    EvidenceOwnerKind.DELIVERABLE: Deliverable,
    EvidenceOwnerKind.INSPECTION: Inspection,
}


def _owner_column(owner_kind: EvidenceOwnerKind):
    if owner_kind is EvidenceOwnerKind.INSPECTION:
        return Evidence.inspection_id
    return Evidence.deliverable_id


def list_for_owner(
    db: Session, owner_kind: EvidenceOwnerKind, owner_id: uuid.UUID
) -> list[Evidence]:
    """Return the evidence of one deliverable or inspection, oldest first.

    Raises:
        HTTPException 404: If the owner does not exist.
    """
    Repository(db, _OWNER_MODELS[owner_kind]).get_or_404(owner_id)
    return Repository(db, Evidence).list(
        Evidence.owner_kind == owner_kind,
        _owner_column(owner_kind) == owner_id,
        order_by=(Evidence.created_at,),
    )


def get_evidence(db: Session, evidence_id: uuid.UUID) -> Evidence:
    return Repository(db, Evidence).get_or_404(evidence_id)


def create_evidence(
    db: Session,
    owner_kind: EvidenceOwnerKind,
    owner_id: uuid.UUID,
    upload: UploadFile,
    notes: str | None,
    storage_root: Path,
) -> Evidence:
    """Store an uploaded file as evidence of a deliverable or an inspection.

    Args:
        db: Active SQLAlchemy session.
        owner_kind: Which kind of record owns the evidence.
        owner_id: Primary key of the owner.
        upload: Multipart file.
        notes: Optional free-text notes.
        storage_root: Root directory for stored files.

    Returns:
        The new ``Evidence`` record.

    Raises:
        HTTPException 404: If the owner does not exist.
        HTTPException 400: If the file is empty or exceeds the size limit.
    """
    Repository(db, _OWNER_MODELS[owner_kind]).get_or_404(owner_id)
    raw_bytes = file_storage.read_upload(upload, MAX_EVIDENCE_BYTES)
    storage_path = file_storage.save_upload(raw_bytes, upload.filename, storage_root)

    evidence = Repository(db, Evidence).add(
        Evidence.for_owner(
            owner_kind,
            owner_id,
            file_name=upload.filename or storage_path.rsplit("/", 1)[-1],
            mime_type=upload.content_type or DEFAULT_MIME_TYPE,
            storage_path=storage_path,
            notes=notes,
        )
    )
    try:
        commit(db)
    except Exception:
        file_storage.delete_file(storage_path, storage_root)
        raise
    db.refresh(evidence)

    logger.info(
        "create_evidence: id=%s %s=%s size=%d",
        evidence.id, owner_kind.value, owner_id, len(raw_bytes),
    )
    return evidence


def get_download(
    db: Session, evidence_id: uuid.UUID, storage_root: Path
) -> tuple[Path, str, str]:
    """Locate the stored file of an evidence record.

    Returns:
        ``(absolute_path, original_file_name, mime_type)``.

    Raises:
        HTTPException 404: If the record or its file is missing.
    """
    evidence = get_evidence(db, evidence_id)
    full_path = file_storage.resolve(evidence.storage_path, storage_root)
    if not full_path.is_file():
        logger.warning(
            "get_download: evidence %s points at missing file %s",
            evidence_id, evidence.storage_path,
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Stored file not found."
        )
    return full_path, evidence.file_name, evidence.mime_type


def delete_evidence(db: Session, evidence_id: uuid.UUID, storage_root: Path) -> None:
    """Soft-delete an evidence record and remove its file."""
    repo = Repository(db, Evidence)
    evidence = repo.get_or_404(evidence_id)
    storage_path = evidence.storage_path
    repo.soft_delete(evidence)
    commit(db)

    file_storage.delete_file(storage_path, storage_root)
    logger.info("delete_evidence: id=%s", evidence_id)
