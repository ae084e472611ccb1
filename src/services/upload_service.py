"""Upload service — staging, validation and relocation of uploaded files.

A multipart file is first written to the temp directory under a generated
name, then checked against the size floor and the type allow-list, and
finally moved into the public upload directory.
"""

import logging
import mimetypes
import shutil
from pathlib import Path
from typing import BinaryIO

from domain.model.errors import RelocationError, ValidationError
from domain.model.upload import UploadedFile, UploadResult
from utils.config import Settings
from utils.files import generate_unique_file_name, move_file, resolve_inside

logger = logging.getLogger(__name__)

FILE_NOT_PROVIDED = "File not provided"
FILE_TOO_SMALL = "File is too small"
INVALID_FILE_FORMAT = "Invalid file format"


def stage_upload(
    stream: BinaryIO,
    original_name: str,
    mime_type: str | None,
    temp_dir: Path,
) -> UploadedFile:
    """Write an incoming file stream into the temp directory.

    Raises:
        PathSecurityError: the generated name would leave the temp directory
        RelocationError: the staged copy could not be written
    """
    storage_name = generate_unique_file_name(original_name)
    temp_path = resolve_inside(temp_dir, storage_name)

    try:
        temp_dir.mkdir(parents=True, exist_ok=True)
        with open(temp_path, 'wb') as out:
            shutil.copyfileobj(stream, out)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise RelocationError(f"Failed to stage file {storage_name}: {e}") from e

    return UploadedFile(
        original_name=original_name,
        storage_name=storage_name,
        size=temp_path.stat().st_size,
        mime_type=mime_type,
        temp_path=temp_path,
    )


def _discard(upload: UploadedFile) -> None:
    """Remove a rejected staged file. A file that is already gone is fine."""
    upload.temp_path.unlink(missing_ok=True)
    logger.info("Rejected upload removed", extra={"fileName": upload.storage_name})


def is_allowed_type(upload: UploadedFile, allowed_types: tuple[str, ...], match_extension: bool = False) -> bool:
    """Check the declared MIME type (or, loosely, the extension) against the allow-list."""
    if upload.mime_type and upload.mime_type.lower() in allowed_types:
        return True
    if match_extension:
        guessed, _ = mimetypes.guess_type(upload.storage_name)
        return guessed is not None and guessed in allowed_types
    return False


def validate_upload(upload: UploadedFile | None, settings: Settings) -> UploadedFile:
    """Accept or reject a staged upload; the first failing rule wins.

    A rejected file is deleted from the temp directory exactly once.

    Raises:
        ValidationError: no file, file too small, or type not allowed
    """
    if upload is None or upload.temp_path is None:
        raise ValidationError(FILE_NOT_PROVIDED)

    if upload.size < settings.min_file_size:
        _discard(upload)
        raise ValidationError(FILE_TOO_SMALL)

    if not is_allowed_type(upload, settings.allowed_types, settings.match_extension):
        _discard(upload)
        raise ValidationError(INVALID_FILE_FORMAT)

    return upload


def public_path(storage_name: str, upload_path: str) -> str:
    """Path under which an accepted file is served."""
    return f"/{upload_path}/{storage_name}" if upload_path else f"/{storage_name}"


def accept_upload(upload: UploadedFile | None, settings: Settings) -> UploadResult:
    """Validate a staged upload and move it into permanent storage.

    Raises:
        ValidationError: the upload was rejected
        PathSecurityError, NotFoundError, RelocationError: the move failed
    """
    upload = validate_upload(upload, settings)
    upload.permanent_path = move_file(upload.storage_name, settings.temp_dir, settings.upload_dir)

    logger.info("File uploaded", extra={
        "fileName": upload.storage_name,
        "originalName": upload.original_name,
        "size": upload.size,
    })
    return UploadResult(
        file_name=public_path(upload.storage_name, settings.upload_path),
        original_name=upload.original_name,
    )
