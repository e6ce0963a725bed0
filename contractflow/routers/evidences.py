"""
Evidence router.

Mounts under ``/api`` (prefix set in ``main.py``).

Uploads are ``multipart/form-data`` with a ``file`` part and an optional
``notes`` field.  Files are kept under ``UPLOADS_DIR``; the database only
stores their relative path.

Endpoints
---------
GET    /deliverables/{id}/evidences  — Evidence of a deliverable.
POST   /deliverables/{id}/evidences  — Upload evidence for a deliverable.
GET    /inspections/{id}/evidences   — Evidence of an inspection.
POST   /inspections/{id}/evidences   — Upload evidence for an inspection.
GET    /evidences/{id}               — Evidence metadata.
GET    /evidences/{id}/download      — Stored file with its original name.
DELETE /evidences/{id}               — Soft-delete the record, remove the file.
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from contractflow.config import Settings, get_settings
from contractflow.database import get_db
from contractflow.schemas.files import EvidenceResponse
from contractflow.services import evidence_service
from contractflow.utils.constants import EvidenceOwnerKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Evidence"])

DeliverableId = Annotated[uuid.UUID, Path(description="Deliverable identifier.")]
InspectionId = Annotated[uuid.UUID, Path(description="Inspection identifier.")]
EvidenceId = Annotated[uuid.UUID, Path(description="Evidence identifier.")]

_UPLOAD_RESPONSES = {
    201: {"description": "Evidence stored."},
    400: {"description": "Empty file or file larger than 10 MB."},
    404: {"description": "Owner not found."},
}


# ---------------------------------------------------------------------------
# Deliverable evidence
# ---------------------------------------------------------------------------


@router.get(
    "/deliverables/{deliverable_id}/evidences",
    response_model=list[EvidenceResponse],
    summary="List the evidence of a deliverable",
    responses={404: {"description": "Deliverable not found."}},
)
def list_deliverable_evidences(
    deliverable_id: DeliverableId,
    db: Annotated[Session, Depends(get_db)],
) -> list[EvidenceResponse]:
    return evidence_service.list_for_owner(db, EvidenceOwnerKind.DELIVERABLE, deliverable_id)


@router.post(
    "/deliverables/{deliverable_id}/evidences",
    response_model=EvidenceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload evidence for a deliverable",
    responses=_UPLOAD_RESPONSES,
)
def upload_deliverable_evidence(
    deliverable_id: DeliverableId,
    file: Annotated[UploadFile, File(description="Evidence file (max 10 MB).")],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notes: Annotated[str | None, Form(description="Optional notes.")] = None,
) -> EvidenceResponse:
    logger.info(
        "POST /deliverables/%s/evidences filename=%s", deliverable_id, file.filename
    )
    return evidence_service.create_evidence(
        db, EvidenceOwnerKind.DELIVERABLE, deliverable_id, file, notes, settings.UPLOADS_DIR
    )


# ---------------------------------------------------------------------------
# Inspection evidence
# ---------------------------------------------------------------------------


@router.get(
    "/inspections/{inspection_id}/evidences",
    response_model=list[EvidenceResponse],
    summary="List the evidence of an inspection",
    responses={404: {"description": "Inspection not found."}},
)
def list_inspection_evidences(
    inspection_id: InspectionId,
    db: Annotated[Session, Depends(get_db)],
) -> list[EvidenceResponse]:
    return evidence_service.list_for_owner(db, EvidenceOwnerKind.INSPECTION, inspection_id)


@router.post(
    "/inspections/{inspection_id}/evidences",
    response_model=EvidenceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload evidence for an inspection",
    responses=_UPLOAD_RESPONSES,
)
def upload_inspection_evidence(
    inspection_id: InspectionId,
    file: Annotated[UploadFile, File(description="Evidence file (max 10 MB).")],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notes: Annotated[str | None, Form(description="Optional notes.")] = None,
) -> EvidenceResponse:
    logger.info(
        "POST /inspections/%s/evidences filename=%s", inspection_id, file.filename
    )
    return evidence_service.create_evidence(
        db, EvidenceOwnerKind.INSPECTION, inspection_id, file, notes, settings.UPLOADS_DIR
    )


# ---------------------------------------------------------------------------
# Single evidence record
# ---------------------------------------------------------------------------


@router.get(
    "/evidences/{evidence_id}",
    response_model=EvidenceResponse,
    summary="Get evidence metadata",
    responses={404: {"description": "Evidence not found."}},
)
def get_evidence(
    evidence_id: EvidenceId,
    db: Annotated[Session, Depends(get_db)],
) -> EvidenceResponse:
    return evidence_service.get_evidence(db, evidence_id)


@router.get(
    "/evidences/{evidence_id}/download",
    response_class=FileResponse,
    summary="Download an evidence file",
    responses={
        200: {"description": "The stored file, served with its original name."},
        404: {"description": "Evidence or stored file not found."},
    },
)
def download_evidence(
    evidence_id: EvidenceId,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileResponse:
    path, file_name, mime_type = evidence_service.get_download(
        db, evidence_id, settings.UPLOADS_DIR
    )
    logger.debug("GET /evidences/%s/download file=%s", evidence_id, file_name)
    return FileResponse(path, media_type=mime_type, filename=file_name)


@router.delete(
    "/evidences/{evidence_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete evidence",
    responses={
        204: {"description": "Evidence deleted and its file removed."},
        404: {"description": "Evidence not found."},
    },
)
def delete_evidence(
    evidence_id: EvidenceId,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    evidence_service.delete_evidence(db, evidence_id, settings.UPLOADS_DIR)
