"""Pydantic v2 schemas for stored files: contract attachments and evidence."""

from __future__ import annotations

import uuid
from datetime import datetime

from contractflow.schemas.common import ApiModel
from contractflow.utils.constants import EvidenceOwnerKind


class AttachmentResponse(ApiModel):
    """Metadata of a contract attachment; the bytes are served by ``/download``."""

    id: uuid.UUID
    contract_id: uuid.UUID
    file_name: str
    mime_type: str
    storage_path: str
    uploaded_at: datetime


class EvidenceResponse(ApiModel):
    """Metadata of an evidence file.

    Attributes:
        owner_kind: ``"deliverable"`` or ``"inspection"``.
        owner_id: Identifier of the owning deliverable or inspection.
        deliverable_id / inspection_id: The owner's id under its own key;
            the other one is always ``null``.
    """

    id: uuid.UUID
    file_name: str
    mime_type: str
    storage_path: str
    notes: str | None = None
    owner_kind: EvidenceOwnerKind
    owner_id: uuid.UUID
    deliverable_id: uuid.UUID | None = None
    inspection_id: uuid.UUID | None = None
    uploaded_at: datetime
