"""Self-service user profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from src.api.dependencies import (
    get_current_user,
    get_form,
    get_upload,
    get_upload_manager,
    request_host,
)
from src.database import get_db
from src.errors import storage_guard
from src.models.user import User
from src.schemas.auth import UserResponse
from src.schemas.common import MessageResponse
from src.services.uploads import UploadManager, public_url
from src.services.validation import (
    FormField,
    boolean,
    ensure_known_fields,
    require_valid,
    text,
    validate_form,
)

router = APIRouter(prefix="/api/user", tags=["users"])

UPDATE_USER_FIELDS = [
    FormField("full_name", "full_name value is missing", text(max_length=255), optional=True),
    FormField("phone", "phone value is missing", text(max_length=50), optional=True),
    FormField("is_public", "is_public value must be true or false", boolean, optional=True),
]
USER_UPDATE_ALLOWLIST = {rule.name for rule in UPDATE_USER_FIELDS} | {"picture"}


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    request: Request,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Update the current user's profile. A new ``picture`` replaces the old one."""
    with uploads.scope() as scope:
        picture = get_upload(form, "picture")
        picture_name = await scope.stage(picture) if picture else None

        ensure_known_fields(form.keys(), USER_UPDATE_ALLOWLIST)
        data = require_valid(validate_form(form, UPDATE_USER_FIELDS))

        if picture_name:
            scope.replace(current_user.picture)
            data["picture"] = public_url(request_host(request), picture_name)

        with storage_guard(db, "Cannot update user, something went wrong"):
            for key, value in data.items():
                setattr(current_user, key, value)
            db.commit()
            db.refresh(current_user)
        scope.commit()

    return current_user


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Delete the current user and their profile picture.

    Templates, pages and groups the user created are kept.
    """
    picture = current_user.picture
    with storage_guard(db, "Cannot delete user, something went wrong"):
        db.delete(current_user)
        db.commit()

    uploads.discard_references([picture])
    return MessageResponse(message="User Deleted")
