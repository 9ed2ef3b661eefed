"""Serving of stored uploads."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from src.api.dependencies import get_current_user, get_upload_manager
from src.errors import NotFoundError
from src.models.user import User
from src.services.uploads import UploadManager

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.get("/{filename}")
async def get_upload_file(
    filename: str,
    current_user: Annotated[User, Depends(get_current_user)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Stream a stored file to an authenticated caller."""
    path = uploads.resolve(filename)
    if not path.is_file():
        raise NotFoundError("File not found")
    return FileResponse(path)
