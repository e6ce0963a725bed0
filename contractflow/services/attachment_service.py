"""Contract attachments — upload, listing, download and deletion of contract documents."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from contractflow.models.attachment import Attachment
from contractflow.models.contract import Contract
from contractflow.repository import Repository, commit
from contractflow.services import file_storage
from contractflow.utils.constants import DEFAULT_MIME_TYPE, MAX_ATTACHMENT_BYTES

logger = logging.getLogger(__name__)


def list_for_contract(db: Session, contract_id: uuid.UUID) -> list[Attachment]:
    Repository(db, Contract).get_or_404(contract_id)
    return Repository(db, Attachment).list(
        Attachment.contract_id == contract_id,
        order_by=(Attachment.created_at,),
    )


def get_attachment(db: Session, attachment_id: uuid.UUID) -> Attachment:
    return Repository(db, Attachment).get_or_404(attachment_id)


def create_attachment(
    db: Session, contract_id: uuid.UUID, upload: UploadFile, storage_root: Path
) -> Attachment:
    """Store an uploaded document against a contract.

    Raises:
        HTTPException 404: If the contract does not exist.
        HTTPException 400: If the file is empty or larger than 20 MB.
    """
    Repository(db, Contract).get_or_404(contract_id)
    raw_bytes = file_storage.read_upload(upload, MAX_ATTACHMENT_BYTES)
    storage_path = file_storage.save_upload(raw_bytes, upload.filename, storage_root)

    attachment = Repository(db, Attachment).add(
        Attachment(
            contract_id=contract_id,
            file_name=upload.filename or storage_path.rsplit("/", 1)[-1],
            mime_type=upload.content_type or DEFAULT_MIME_TYPE,
            storage_path=storage_path,
        )
    )
    try:
        commit(db)
    except Exception:
        file_storage.delete_file(storage_path, storage_root)
        raise
    db.refresh(attachment)

    logger.info(
        "create_attachment: id=%s contract_id=%s size=%d",
        attachment.id, contract_id, len(raw_bytes),
    )
    return attachment


def get_download(
    db: Session, attachment_id: uuid.UUID, storage_root: Path
) -> tuple[Path, str, str]:
    attachment = get_attachment(db, attachment_id)
    full_path = file_storage.resolve(attachment.storage_path, storage_root)
    if not full_path.is_file():
        logger.warning(
            "get_download: attachment %s points at missing file %s",
            attachment_id, attachment.storage_path,
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Stored file not found."
        )
    return full_path, attachment.file_name, attachment.mime_type


def delete_attachment(db: Session, attachment_id: uuid.UUID, storage_root: Path) -> None:
    """Soft-delete an attachment and remove its file; the contract is untouched."""
    repo = Repository(db, Attachment)
    attachment = repo.get_or_404(attachment_id)
    storage_path = attachment.storage_path
    repo.soft_delete(attachment)
    commit(db)

    file_storage.delete_file(storage_path, storage_root)
    logger.info("delete_attachment: id=%s", attachment_id)
