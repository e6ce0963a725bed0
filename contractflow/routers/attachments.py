"""
Contract attachments router.

Mounts under ``/api`` (prefix set in ``main.py``).

Endpoints
---------
GET    /contracts/{id}/attachments  — Documents attached to a contract.
POST   /contracts/{id}/attachments  — Upload a document (multipart, max 20 MB).
GET    /attachments/{id}            — Attachment metadata.
GET    /attachments/{id}/download   — Stored file with its original name.
DELETE /attachments/{id}            — Soft-delete the record, remove the file.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from contractflow.config import Settings, get_settings
from contractflow.database import get_db
from contractflow.schemas.files import AttachmentResponse
from contractflow.services import attachment_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Attachments"])

ContractId = Annotated[uuid.UUID, Path(description="Contract identifier.")]
AttachmentId = Annotated[uuid.UUID, Path(description="Attachment identifier.")]


@router.get(
    "/contracts/{contract_id}/attachments",
    response_model=list[AttachmentResponse],
    summary="List contract attachments",
    responses={404: {"description": "Contract not found."}},
)
def list_attachments(
    contract_id: ContractId,
    db: Annotated[Session, Depends(get_db)],
) -> list[AttachmentResponse]:
    return attachment_service.list_for_contract(db, contract_id)


@router.post(
    "/contracts/{contract_id}/attachments",
    response_model=AttachmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a document to a contract",
    responses={
        201: {"description": "Attachment stored."},
        400: {"description": "Empty file or file larger than 20 MB."},
        404: {"description": "Contract not found."},
    },
)
def upload_attachment(
    contract_id: ContractId,
    file: Annotated[UploadFile, File(description="Contract document (max 20 MB).")],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AttachmentResponse:
    """Store an uploaded document against a contract.

    Args:
        contract_id: Owning contract.
        file: Multipart file part.
        db: Database session.
        settings: Application settings; provides the storage root.

    Returns:
        Metadata of the stored attachment.
    """
    logger.info(
        "POST /contracts/%s/attachments filename=%s content_type=%s",
        contract_id, file.filename, file.content_type,
    )
    return attachment_service.create_attachment(db, contract_id, file, settings.UPLOADS_DIR)


@router.get(
    "/attachments/{attachment_id}",
    response_model=AttachmentResponse,
    summary="Get attachment metadata",
    responses={404: {"description": "Attachment not found."}},
)
def get_attachment(
    attachment_id: AttachmentId,
    db: Annotated[Session, Depends(get_db)],
) -> AttachmentResponse:
    return attachment_service.get_attachment(db, attachment_id)


@router.get(
    "/attachments/{attachment_id}/download",
    response_class=FileResponse,
    summary="Download an attachment",
    responses={
        200: {"description": "The stored file, served with its original name."},
        404: {"description": "Attachment or stored file not found."},
    },
)
def download_attachment(
    attachment_id: AttachmentId,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileResponse:
    path, file_name, mime_type = attachment_service.get_download(
        db, attachment_id, settings.UPLOADS_DIR
    )
    return FileResponse(path, media_type=mime_type, filename=file_name)


@router.delete(
    "/attachments/{attachment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an attachment",
    responses={
        204: {"description": "Attachment deleted and its file removed."},
        404: {"description": "Attachment not found."},
    },
)
def delete_attachment(
    attachment_id: AttachmentId,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    attachment_service.delete_attachment(db, attachment_id, settings.UPLOADS_DIR)
