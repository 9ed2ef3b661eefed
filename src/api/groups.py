"""Group API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from starlette.datastructures import FormData

from src.api.dependencies import check_id, get_current_user, get_form, get_group_service
from src.errors import InternalServerError, NotFoundError, storage_guard
from src.models.group import Group
from src.models.user import User
from src.schemas.common import MessageResponse
from src.schemas.group import GroupFullResponse, GroupMinResponse, GroupResponse
from src.schemas.page import PageResponse
from src.services.group_service import GroupService
from src.services.ownership import load_owned
from src.services.validation import (
    PAGE_IDS,
    FormField,
    ensure_known_fields,
    json_of,
    require_valid,
    text,
    validate_form,
)

router = APIRouter(prefix="/api/group", tags=["groups"])

GROUP_NAME = FormField(
    "group_name", "group_name value must be a string or it is missing", text(max_length=255)
)
GROUP_PAGES = FormField(
    "pages", "pages value must be a valid array of page ids or it is missing", json_of(PAGE_IDS)
)

EMPTY_GROUP_FIELDS = [GROUP_NAME]
NEW_GROUP_FIELDS = [GROUP_NAME, GROUP_PAGES]
GROUP_PAGES_FIELDS = [GROUP_PAGES]
UPDATE_GROUP_FIELDS = [
    FormField("group_name", "group_name value is missing", text(max_length=255), optional=True),
]
GROUP_UPDATE_ALLOWLIST = {rule.name for rule in UPDATE_GROUP_FIELDS}


def _load_group(service: GroupService, group_id: str, user: User, action: str) -> Group:
    return load_owned(
        service,
        group_id,
        user.id,
        "Group",
        f"Cannot {action} group, only user who created the group can {action} it",
    )


@router.post("/empty", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_empty_group(
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Create a group with no pages."""
    data = require_valid(validate_form(form, EMPTY_GROUP_FIELDS))
    with storage_guard(service.db, "Cannot create group, something went wrong"):
        return service.create_group(current_user.id, data["group_name"])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Create a group with an initial list of page ids."""
    data = require_valid(validate_form(form, NEW_GROUP_FIELDS))
    with storage_guard(service.db, "Cannot create group, something went wrong"):
        return service.create_group(current_user.id, data["group_name"], data["pages"])


@router.get("/all", response_model=list[GroupResponse])
async def get_groups(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    with storage_guard(service.db, "Cannot get groups, something went wrong"):
        return service.find_all()


@router.get("/all/min", response_model=list[GroupMinResponse])
async def get_groups_min(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    with storage_guard(service.db, "Cannot get groups, something went wrong"):
        return service.find_all()


@router.get("/user/all", response_model=list[GroupResponse])
async def get_user_groups(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Get the current user's groups."""
    with storage_guard(service.db, "Cannot get groups, something went wrong"):
        return service.find_all(user_id=current_user.id)


@router.get("/one/{group_id}", response_model=GroupFullResponse)
async def get_group(
    group_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Get a group with its pages resolved into full records."""
    check_id(group_id, "group")
    with storage_guard(service.db, "Cannot get group for provided id, something went wrong"):
        group = service.find_by_id(group_id)
        if group is None:
            raise NotFoundError("Group with provided id not found")
        pages = service.resolve_pages(group)

    return GroupFullResponse(
        id=group.id,
        user_id=group.user_id,
        group_name=group.group_name,
        pages=[PageResponse.model_validate(page) for page in pages],
        created_at=group.created_at,
        updated_at=group.updated_at,
    )


@router.get("/one/{group_id}/min", response_model=GroupMinResponse)
async def get_group_min(
    group_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Get a group with bare page ids."""
    check_id(group_id, "group")
    with storage_guard(service.db, "Cannot get group for provided id, something went wrong"):
        group = service.find_by_id(group_id)
    if group is None:
        raise NotFoundError("Group with provided id not found")
    return group


@router.patch("/{group_id}/addPages", response_model=MessageResponse)
async def add_group_pages(
    group_id: str,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Append page ids to a group (owner only)."""
    check_id(group_id, "group")
    data = require_valid(validate_form(form, GROUP_PAGES_FIELDS))
    with storage_guard(service.db, "Cannot add pages to group, something went wrong"):
        group = _load_group(service, group_id, current_user, "update")
        service.add_pages(group, data["pages"])
    return MessageResponse(message="Pages added to the group")


@router.patch("/{group_id}/removePages", response_model=MessageResponse)
async def remove_group_pages(
    group_id: str,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Remove every occurrence of the given page ids from a group (owner only)."""
    check_id(group_id, "group")
    data = require_valid(validate_form(form, GROUP_PAGES_FIELDS))
    with storage_guard(service.db, "Cannot remove pages from group, something went wrong"):
        group = _load_group(service, group_id, current_user, "update")
        service.remove_pages(group, data["pages"])
    return MessageResponse(message="Pages removed from the group")


@router.patch("/{group_id}", response_model=MessageResponse)
async def update_group(
    group_id: str,
    form: Annotated[FormData, Depends(get_form)],
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Rename a group (owner only)."""
    check_id(group_id, "group")
    ensure_known_fields(form.keys(), GROUP_UPDATE_ALLOWLIST)
    data = require_valid(validate_form(form, UPDATE_GROUP_FIELDS))
    with storage_guard(service.db, "Cannot update group, something went wrong"):
        group = _load_group(service, group_id, current_user, "update")
        updated = service.rename(group.id, data["group_name"]) if data else True
    if not updated:
        raise InternalServerError("Cannot update group, something went wrong")
    return MessageResponse(message="Group Updated")


@router.delete("/user/all", response_model=MessageResponse)
async def delete_user_groups(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Delete all of the current user's groups. Member pages are untouched."""
    with storage_guard(service.db, "Cannot delete groups, something went wrong"):
        deleted = service.delete_by_owner(current_user.id)
    if deleted == 0:
        raise NotFoundError("Groups with provided user id not found")
    return MessageResponse(message="Groups Deleted")


@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GroupService, Depends(get_group_service)],
):
    """Delete a group (owner only). Member pages are untouched."""
    check_id(group_id, "group")
    with storage_guard(service.db, "Group does not exist or something went wrong"):
        _load_group(service, group_id, current_user, "delete")
        service.delete_by_id(group_id)
    return MessageResponse(message="Group Deleted")
