"""
Upload intake validation
"""
import os
import re
from typing import Optional

from fastapi import UploadFile

from app.config import Settings
from app.core.exceptions import MissingFileError, SizeLimitExceededError, UnsupportedTypeError
from app.models.entities import ValidatedUpload
from app.utils.logger import get_logger

logger = get_logger(__name__)

PDF_SIGNATURE = b"%PDF-"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename

    Args:
        filename: Filename as sent by the client

    Returns:
        Basename with path separators and unusual characters replaced
    """
    # Clients on Windows may send backslash-separated paths
    base = os.path.basename(filename.replace("\\", "/"))
    safe = _UNSAFE_FILENAME_CHARS.sub("_", base).lstrip(".")
    return safe or "upload"


def normalize_content_type(content_type: Optional[str]) -> Optional[str]:
    """Drop parameters such as ``; charset=...`` and lowercase the media type"""
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower()


async def validate_upload_file(upload_file: Optional[UploadFile], settings: Settings) -> ValidatedUpload:
    """
    Validate an uploaded file before anything is written to disk

    Args:
        upload_file: FastAPI UploadFile object, or None when the field was absent
        settings: Settings holding the accepted type and size ceiling

    Returns:
        ValidatedUpload holding the file bytes and sanitized name

    Raises:
        MissingFileError: If no file was provided
        UnsupportedTypeError: If the declared type or file signature is not the accepted format
        SizeLimitExceededError: If the file exceeds the size ceiling
    """
    if upload_file is None or not upload_file.filename:
        raise MissingFileError()

    safe_filename = sanitize_filename(upload_file.filename)
    content_type = normalize_content_type(upload_file.content_type)

    if content_type != settings.ALLOWED_FILE_TYPE:
        raise UnsupportedTypeError(
            file_type=content_type,
            accepted_type=settings.ALLOWED_FILE_TYPE,
            file_name=safe_filename
        )

    # One byte past the ceiling is enough to know it is too big
    content = await upload_file.read(settings.MAX_FILE_SIZE + 1)
    if len(content) > settings.MAX_FILE_SIZE:
        raise SizeLimitExceededError(
            file_size=upload_file.size or len(content),
            max_size=settings.MAX_FILE_SIZE,
            file_name=safe_filename
        )

    if not content.startswith(PDF_SIGNATURE):
        raise UnsupportedTypeError(
            file_type=content_type,
            accepted_type=settings.ALLOWED_FILE_TYPE,
            file_name=safe_filename,
            reason="File content is not a valid PDF document"
        )

    logger.info(
        "file_validation_completed",
        filename=safe_filename,
        file_size=len(content),
        content_type=content_type
    )

    return ValidatedUpload(
        original_filename=upload_file.filename,
        safe_filename=safe_filename,
        content_type=content_type,
        content=content
    )

