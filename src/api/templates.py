"""Template API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import FormData

from src.api.dependencies import (
    check_id,
    get_current_user,
    get_form,
    get_template_service,
    get_upload,
    get_upload_manager,
    request_host,
)
from src.errors import InternalServerError, NotFoundError, ValidationError, storage_guard
from src.models.user import User
from src.schemas.common import MessageResponse
from src.schemas.template import TemplateMinResponse, TemplateResponse
from src.services.ownership import load_owned
from src.services.template_service import TemplateService
from src.services.uploads import UploadManager, public_url
from src.services.validation import (
    TEMPLATE_LINKS,
    FormField,
    boolean,
    ensure_known_fields,
    json_of,
    require_valid,
    text,
    url,
    validate_form,
)

router = APIRouter(prefix="/api/template", tags=["templates"])

# Bounded by the column widths in src/models/template.py
short_text = text(max_length=255)

NEW_TEMPLATE_FIELDS = [
    FormField("url", "url value must be a string or it is missing", url),
    FormField("font_family", "font_family value must be a string or it is missing", short_text),
    FormField("corner_styles", "corner_styles value must be a string or it is missing", short_text),
    FormField("header", "header value must be true or false or it is missing", boolean),
    FormField("pagination", "pagination value must be true or false or it is missing", boolean),
    FormField("title", "title value must be a string or it is missing", short_text),
    FormField(
        "links",
        "links value must be a valid links array or it is missing",
        json_of(TEMPLATE_LINKS),
    ),
]

UPDATE_TEMPLATE_FIELDS = [
    FormField("url", "url value must be a valid url", url, optional=True),
    FormField("font_family", "font_family value is missing", short_text, optional=True),
    FormField("corner_styles", "corner_styles value is missing", short_text, optional=True),
    FormField("header", "header value must be true or false", boolean, optional=True),
    FormField("pagination", "pagination value must be true or false", boolean, optional=True),
    FormField("title", "title value is missing", short_text, optional=True),
    FormField(
        "links",
        "links value must be a valid links array or it is missing",
        json_of(TEMPLATE_LINKS),
        optional=True,
    ),
]

TEMPLATE_FILE_FIELDS = {"custom_logo"}
TEMPLATE_UPDATE_ALLOWLIST = {rule.name for rule in UPDATE_TEMPLATE_FIELDS} | TEMPLATE_FILE_FIELDS


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    request: Request,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Create a template. ``custom_logo`` is required."""
    with uploads.scope() as scope:
        logo = get_upload(form, "custom_logo")
        if logo is None:
            raise ValidationError("custom_logo must be image or it is missing")
        logo_name = await scope.stage(logo)

        data = require_valid(validate_form(form, NEW_TEMPLATE_FIELDS))

        with storage_guard(service.db, "Cannot create template, something went wrong"):
            template = service.create(
                {
                    **data,
                    "user_id": current_user.id,
                    "custom_logo": public_url(request_host(request), logo_name),
                }
            )
        scope.commit()

    return template


@router.get("/all", response_model=list[TemplateResponse])
async def get_templates(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
):
    """Get every template."""
    with storage_guard(service.db, "Something went wrong"):
        return service.find_all()


@router.get("/all/min", response_model=list[TemplateMinResponse])
async def get_templates_min(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
):
    """Get every template's id, url and title."""
    with storage_guard(service.db, "Something went wrong"):
        return service.find_all_min()


@router.get("/user/all", response_model=list[TemplateResponse])
async def get_user_templates(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
):
    """Get the current user's templates."""
    with storage_guard(service.db, "Something went wrong"):
        return service.find_all(user_id=current_user.id)


@router.get("/one/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
):
    """Get a specific template."""
    check_id(template_id, "template")
    with storage_guard(service.db, "Something went wrong"):
        template = service.find_by_id(template_id)
    if template is None:
        raise NotFoundError("Template with provided id not found")
    return template


@router.delete("/user/all", response_model=MessageResponse)
async def delete_user_templates(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Delete all of the current user's templates, then their logos."""
    with storage_guard(service.db, "Cannot delete templates, something went wrong"):
        templates = service.find_all(user_id=current_user.id)
        references = [ref for template in templates for ref in template.file_references()]
        deleted = service.delete_by_owner(current_user.id)

    if deleted == 0:
        raise NotFoundError("Template(s) with provided user id not found")

    uploads.discard_references(references)
    return MessageResponse(message="Template(s) Deleted")


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Delete a template (owner only) and its logo."""
    check_id(template_id, "template")
    with storage_guard(service.db, "Template does not exist or something went wrong"):
        template = load_owned(
            service,
            template_id,
            current_user.id,
            "Template",
            "Cannot delete template, only user who created template can delete it",
        )
        references = template.file_references()
        service.delete_by_id(template_id)

    uploads.discard_references(references)
    return MessageResponse(message="Template Deleted")


@router.patch("/{template_id}", response_model=MessageResponse)
async def update_template(
    template_id: str,
    request: Request,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TemplateService, Depends(get_template_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Update a template (owner only). A new ``custom_logo`` replaces the old file."""
    with uploads.scope() as scope:
        logo = get_upload(form, "custom_logo")
        logo_name = await scope.stage(logo) if logo else None

        check_id(template_id, "template")
        ensure_known_fields(form.keys(), TEMPLATE_UPDATE_ALLOWLIST)
        data = require_valid(validate_form(form, UPDATE_TEMPLATE_FIELDS))

        with storage_guard(service.db, "Template update failed, something went wrong"):
            template = load_owned(
                service,
                template_id,
                current_user.id,
                "Template",
                "Cannot update template, only user who created template can update it",
            )
            if logo_name:
                scope.replace(template.custom_logo)
                data["custom_logo"] = public_url(request_host(request), logo_name)

            updated = service.update_by_id(template_id, data)

        if not updated:
            raise InternalServerError("Template update failed, something went wrong")
        scope.commit()

    return MessageResponse(message="Template Updated")
