"""FastAPI dependencies for authentication, storage and uploads."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from starlette.datastructures import FormData, UploadFile

from src.config import get_settings
from src.database import get_db
from src.errors import UnauthorizedError, ValidationError
from src.models.mixins import is_valid_id
from src.models.user import User
from src.services.auth import decode_access_token, get_user_by_id
from src.services.group_service import GroupService
from src.services.oauth import AuthProviders
from src.services.page_service import PageService
from src.services.template_service import TemplateService
from src.services.uploads import UploadManager

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise UnauthorizedError("Unauthorized")

    payload = decode_access_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise UnauthorizedError("Invalid authentication credentials")

    user = get_user_by_id(db, str(payload["sub"]))
    if user is None:
        raise UnauthorizedError("User not found")

    return user


def get_upload_manager() -> UploadManager:
    """Get the upload manager for the configured upload directory."""
    settings = get_settings()
    return UploadManager(settings.upload_dir, settings.max_upload_bytes)


def get_auth_providers(request: Request) -> AuthProviders:
    """Get the OAuth providers assembled at startup."""
    return request.app.state.auth_providers


def get_template_service(db: Annotated[Session, Depends(get_db)]) -> TemplateService:
    return TemplateService(db)


def get_page_service(db: Annotated[Session, Depends(get_db)]) -> PageService:
    return PageService(db)


def get_group_service(db: Annotated[Session, Depends(get_db)]) -> GroupService:
    return GroupService(db)


def request_host(request: Request) -> str:
    """Host part used when building public upload references."""
    return request.url.netloc


def check_id(resource_id: str, resource: str) -> str:
    """Reject path ids that are not in the storage id format."""
    if not is_valid_id(resource_id):
        raise ValidationError(f"Wrong {resource} id, please try again")
    return resource_id


def get_upload(form: FormData, name: str) -> UploadFile | None:
    """The uploaded file sent under ``name``, or None.

    Browsers submit an empty part with no filename when no file was chosen.
    """
    value = form.get(name)
    if value is None or isinstance(value, str) or not value.filename:
        return None
    return value


async def get_form(request: Request) -> AsyncIterator[FormData]:
    """Parsed multipart or urlencoded body; uploaded files are closed afterwards."""
    async with request.form() as form:
        yield form
