"""Ownership authorization for mutating routes."""

from typing import Any

from src.errors import NotFoundError, UnauthorizedError


def is_owner(resource: Any, caller_id: str) -> bool:
    return str(resource.user_id) == str(caller_id)


def authorize(resource: Any, caller_id: str, message: str) -> None:
    """Raise UnauthorizedError unless ``caller_id`` created ``resource``.

    Ownership is the only predicate; roles and ``is_admin`` are not consulted.
    """
    if not is_owner(resource, caller_id):
        raise UnauthorizedError(message)


def load_owned(service: Any, resource_id: str, caller_id: str, label: str, message: str) -> Any:
    """Fetch a resource by id and check that ``caller_id`` owns it.

    ``label`` names the resource in the not-found message.
    """
    resource = service.find_by_id(resource_id)
    if resource is None:
        raise NotFoundError(f"{label} with provided id not found")
    authorize(resource, caller_id, message)
    return resource
