"""
Physical storage of uploaded files (contract attachments and evidence).

Files are written below the configured storage root under a generated name,
partitioned by upload month::

    {storage_root}/{year}/{month:02d}/{uuid4}{ext}

Only the path relative to the root is stored in the database, so the root
can be moved without touching rows.  The original file name and MIME type
are kept on the record itself.
"""

from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path, PurePosixPath

from fastapi import HTTPException, UploadFile, status

from contractflow.utils.dates import utcnow

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def _safe_extension(filename: str | None) -> str:
    """Return the lower-cased extension of ``filename`` if it looks sane, else ``""``.

    Args:
        filename: Original filename supplied by the uploader.

    Returns:
        Extension including the leading dot, e.g. ``".pdf"``.
    """
    suffix = PurePosixPath((filename or "").replace("\\", "/")).suffix
    return suffix.lower() if _EXTENSION_RE.match(suffix) else ""


def read_upload(upload: UploadFile, max_bytes: int) -> bytes:
    """Read an uploaded file fully, enforcing the non-empty and size rules.

    At most ``max_bytes + 1`` bytes are read so an oversized upload is
    detected without buffering all of it.

    Args:
        upload: Multipart file received by the endpoint.
        max_bytes: Size ceiling for this kind of file.

    Returns:
        The file contents.

    Raises:
        HTTPException 400: If the file is empty or larger than ``max_bytes``.
    """
    raw_bytes = upload.file.read(max_bytes + 1)
    if not raw_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The uploaded file is empty.",
        )
    if len(raw_bytes) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The uploaded file exceeds the {max_bytes // (1024 * 1024)} MB limit.",
        )
    return raw_bytes


def save_upload(raw_bytes: bytes, filename: str | None, storage_root: Path) -> str:
    """Save raw bytes under a generated name in a month-partitioned directory.

    Args:
        raw_bytes: File contents to persist.
        filename: Original filename; only its extension is reused.
        storage_root: Root directory for all stored files.

    Returns:
        Path of the saved file relative to ``storage_root`` as a
        forward-slash string, e.g. ``"2024/02/3f2b....pdf"``.
    """
    now = utcnow()
    dest_dir = storage_root / str(now.year) / f"{now.month:02d}"
    dest_dir.mkdir(parents=True, exist_ok=True)

    dest_path = dest_dir / f"{uuid.uuid4()}{_safe_extension(filename)}"
    dest_path.write_bytes(raw_bytes)
    logger.debug("save_upload: %d bytes -> %s", len(raw_bytes), dest_path)
    return dest_path.relative_to(storage_root).as_posix()


def resolve(storage_path: str, storage_root: Path) -> Path:
    """Return the absolute path of a stored file.

    Raises:
        HTTPException 404: If the path escapes the storage root.
    """
    root = storage_root.resolve()
    full_path = (root / storage_path).resolve()
    if root not in full_path.parents:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stored file not found.",
        )
    return full_path


def delete_file(storage_path: str, storage_root: Path) -> bool:
    """Remove a stored file; a file that is already gone is not an error.

    Returns:
        ``True`` when a file was removed.
    """
    full_path = resolve(storage_path, storage_root)
    try:
        full_path.unlink()
    except FileNotFoundError:
        logger.warning("delete_file: %s was already missing", storage_path)
        return False
    logger.debug("delete_file: removed %s", storage_path)
    return True
