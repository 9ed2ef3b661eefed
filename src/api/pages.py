"""Page API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import FormData

from src.api.dependencies import (
    check_id,
    get_current_user,
    get_form,
    get_page_service,
    get_upload,
    get_upload_manager,
    request_host,
)
from src.errors import (
    BadRequestError,
    InternalServerError,
    NotFoundError,
    storage_guard,
)
from src.models.user import User
from src.schemas.common import MessageResponse
from src.schemas.page import PageContentsResponse, PageMinResponse, PageResponse
from src.services.ownership import load_owned
from src.services.page_service import PageService
from src.services.uploads import UploadManager, public_url
from src.services.validation import (
    FOOTER_CONFIG,
    PAGE_CONTENTS,
    THEME,
    FormField,
    boolean,
    ensure_known_fields,
    json_of,
    object_id,
    require_valid,
    text,
    url,
    validate_form,
)

router = APIRouter(prefix="/api/page", tags=["pages"])

# Bounded by the column widths in src/models/page.py
short_text = text(max_length=255)
color = text(max_length=50)

LOGO_FIELDS = ("custom_logo", "footer_logo")

NEW_PAGE_FIELDS = [
    FormField("title", "title value must be a string or it is missing", short_text),
    FormField("description", "description value must be a string or it is missing", text()),
    FormField("icon", "icon value must be a string or it is missing", short_text),
    FormField("template_id", "Wrong template id, please try again", object_id),
    FormField("url", "url value must be a string or it is missing", url),
    FormField("font_family", "font_family value must be a string or it is missing", short_text),
    FormField("corner_styles", "corner_styles value must be a string or it is missing", short_text),
    FormField(
        "footer_toggle", "footer_toggle value must be true or false or it is missing", boolean
    ),
    FormField(
        "pagination_bg_color",
        "pagination_bg_color value must be a string or it is missing",
        color,
    ),
    FormField(
        "pagination_text_color",
        "pagination_text_color value must be a string or it is missing",
        color,
    ),
    FormField("theme", "theme value must a valid theme object or it is missing", json_of(THEME)),
    FormField(
        "footer_config",
        "footer_config value must a valid footer_config object or it is missing",
        json_of(FOOTER_CONFIG),
    ),
]

UPDATE_PAGE_FIELDS = [
    FormField("url", "url value must be a valid url", url, optional=True),
    FormField("template_id", "Wrong template id, please try again", object_id, optional=True),
    FormField("font_family", "font_family value is missing", short_text, optional=True),
    FormField("corner_styles", "corner_styles value is missing", short_text, optional=True),
    FormField(
        "pagination_bg_color", "pagination_bg_color value is missing", color, optional=True
    ),
    FormField(
        "pagination_text_color", "pagination_text_color value is missing", color, optional=True
    ),
    FormField(
        "footer_toggle", "footer_toggle value must be true or false", boolean, optional=True
    ),
    FormField("title", "title value is missing", short_text, optional=True),
    FormField("description", "description value is missing", text(), optional=True),
    FormField("icon", "icon value is missing", short_text, optional=True),
    FormField(
        "theme",
        "theme value must a valid theme object or it is missing",
        json_of(THEME),
        optional=True,
    ),
    FormField(
        "footer_config",
        "footer_config value must a valid footer_config object or it is missing",
        json_of(FOOTER_CONFIG),
        optional=True,
    ),
]

PAGE_UPDATE_ALLOWLIST = {rule.name for rule in UPDATE_PAGE_FIELDS} | set(LOGO_FIELDS)

PAGE_CONTENT_FIELDS = [
    FormField(
        "contents",
        "contents must be a valid contents array or it is missing",
        json_of(PAGE_CONTENTS),
    ),
]


@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(
    request: Request,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Create a page. ``custom_logo`` and ``footer_logo`` are both required."""
    with uploads.scope() as scope:
        logos = {}
        for field in LOGO_FIELDS:
            upload = get_upload(form, field)
            if upload is not None:
                logos[field] = await scope.stage(upload)

        # A page is never saved with only one of its two logos
        if len(logos) != len(LOGO_FIELDS):
            raise BadRequestError("custom_logo and footer_logo, both are required")

        data = require_valid(validate_form(form, NEW_PAGE_FIELDS))

        host = request_host(request)
        with storage_guard(service.db, "Cannot create page, something went wrong"):
            page = service.create(
                {
                    **data,
                    "user_id": current_user.id,
                    "contents": [],
                    **{field: public_url(host, name) for field, name in logos.items()},
                }
            )
        scope.commit()

    return page


@router.post("/{page_id}/addContents", response_model=MessageResponse)
async def add_page_contents(
    page_id: str,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Append content blocks to a page (owner only)."""
    check_id(page_id, "page")
    data = require_valid(validate_form(form, PAGE_CONTENT_FIELDS))

    with storage_guard(service.db, "Cannot add contents to the page, something went wrong"):
        page = load_owned(
            service,
            page_id,
            current_user.id,
            "Page",
            "Cannot add contents to page, only user who created page can add contents",
        )
        service.append_contents(page, data["contents"])

    return MessageResponse(message="Contents added to the page")


@router.patch("/{page_id}/contents", response_model=MessageResponse)
async def replace_page_contents(
    page_id: str,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Replace a page's content blocks wholesale (owner only)."""
    check_id(page_id, "page")
    data = require_valid(validate_form(form, PAGE_CONTENT_FIELDS))

    with storage_guard(service.db, "Cannot update page contents, something went wrong"):
        load_owned(
            service,
            page_id,
            current_user.id,
            "Page",
            "Cannot update page content, only user who created page can update contents",
        )
        updated = service.replace_contents(page_id, data["contents"])

    if not updated:
        raise InternalServerError("Cannot update page contents, something went wrong")
    return MessageResponse(message="Page contents updated")


@router.get("/all", response_model=list[PageResponse])
async def get_pages(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Get every page."""
    with storage_guard(service.db, "Cannot get pages, something went wrong"):
        return service.find_all()


@router.get("/all/min", response_model=list[PageMinResponse])
async def get_pages_min(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    with storage_guard(service.db, "Cannot get pages, something went wrong"):
        return service.find_all_min()


@router.get("/user/all", response_model=list[PageResponse])
async def get_user_pages(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Get the current user's pages."""
    with storage_guard(service.db, "Cannot get pages, something went wrong"):
        return service.find_all(user_id=current_user.id)


@router.get("/template/{template_id}", response_model=list[PageResponse])
async def get_template_pages(
    template_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Get every page built from a template."""
    check_id(template_id, "template")
    with storage_guard(
        service.db, "Cannot get pages for provided template id, something went wrong"
    ):
        return service.find_by_template(template_id)


@router.get("/template/{template_id}/min", response_model=list[PageMinResponse])
async def get_template_pages_min(
    template_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    check_id(template_id, "template")
    with storage_guard(
        service.db, "Cannot get pages for provided template id, something went wrong"
    ):
        return service.find_by_template(template_id, minimal=True)


@router.get("/one/{page_id}", response_model=PageResponse)
async def get_page(
    page_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Get a specific page."""
    check_id(page_id, "page")
    with storage_guard(service.db, "Cannot get page for provided id, something went wrong"):
        page = service.find_by_id(page_id)
    if page is None:
        raise NotFoundError("Page with provided id not found")
    return page


@router.get("/{page_id}/getContents", response_model=PageContentsResponse)
async def get_page_contents(
    page_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
):
    """Get a page's title and content blocks."""
    check_id(page_id, "page")
    with storage_guard(
        service.db, "Cannot get contents for provided page id, something went wrong"
    ):
        row = service.find_contents(page_id)
    if row is None:
        raise NotFoundError("Page with provided id not found")
    return row


@router.delete("/user/all", response_model=MessageResponse)
async def delete_user_pages(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Delete all of the current user's pages, then their logos."""
    with storage_guard(service.db, "Cannot delete pages, something went wrong"):
        pages = service.find_all(user_id=current_user.id)
        references = [ref for page in pages for ref in page.file_references()]
        deleted = service.delete_by_owner(current_user.id)

    if deleted == 0:
        raise NotFoundError("Pages with provided user id not found")

    uploads.discard_references(references)
    return MessageResponse(message="Pages Deleted")


@router.delete("/{page_id}", response_model=MessageResponse)
async def delete_page(
    page_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Delete a page (owner only) and both of its logos."""
    check_id(page_id, "page")
    with storage_guard(service.db, "Page does not exist or something went wrong"):
        page = load_owned(
            service,
            page_id,
            current_user.id,
            "Page",
            "Cannot delete page, only user who created the page can delete it",
        )
        references = page.file_references()
        service.delete_by_id(page_id)

    uploads.discard_references(references)
    return MessageResponse(message="Page Deleted")


@router.patch("/{page_id}", response_model=MessageResponse)
async def update_page(
    page_id: str,
    request: Request,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[PageService, Depends(get_page_service)],
    uploads: Annotated[UploadManager, Depends(get_upload_manager)],
):
    """Update a page (owner only). Each logo can be replaced independently."""
    with uploads.scope() as scope:
        logos = {}
        for field in LOGO_FIELDS:
            upload = get_upload(form, field)
            if upload is not None:
                logos[field] = await scope.stage(upload)

        check_id(page_id, "page")
        ensure_known_fields(form.keys(), PAGE_UPDATE_ALLOWLIST)
        data = require_valid(validate_form(form, UPDATE_PAGE_FIELDS))

        host = request_host(request)
        with storage_guard(service.db, "Cannot update page for provided id, something went wrong"):
            page = load_owned(
                service,
                page_id,
                current_user.id,
                "Page",
                "Cannot update page, only user who created the page can update it",
            )
            for field, name in logos.items():
                scope.replace(getattr(page, field))
                data[field] = public_url(host, name)

            updated = service.update_by_id(page_id, data)

        if not updated:
            raise InternalServerError("Cannot update page for provided id, something went wrong")
        scope.commit()

    return MessageResponse(message="Page Updated")
