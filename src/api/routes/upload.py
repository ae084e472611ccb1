"""File upload route."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from api.csrf import csrf_protect
from api.models import UploadResponse
from api.security import get_current_user_required
from domain.model.errors import NotFoundError, PathSecurityError, RelocationError, ValidationError
from domain.model.user import User
from services.upload_service import accept_upload, stage_upload
from utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(csrf_protect)],
)
async def upload_file(
    file: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user_required),
    settings: Settings = Depends(get_settings),
):
    """Store an uploaded file and return its public path.

    Raises:
        HTTPException: 400 if the file is missing, too small or of a
            disallowed type; 500 if it could not be written into storage
    """
    try:
        staged = None
        if file is not None and file.filename:
            try:
                staged = stage_upload(file.file, file.filename, file.content_type, settings.temp_dir)
            finally:
                await file.close()

        result = accept_upload(staged, settings)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (PathSecurityError, NotFoundError, RelocationError) as e:
        logger.error("Failed to store upload", extra={"userId": current_user.id, "error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to store file")

    return UploadResponse(file_name=result.file_name, original_name=result.original_name)
