"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AccessTokenResponse, AuthResponse, UserLogin, UserResponse, UserSignup
from src.schemas.common import ErrorResponse, MessageResponse
from src.schemas.group import GroupFullResponse, GroupMinResponse, GroupResponse
from src.schemas.page import (
    ContentBlock,
    FooterConfig,
    NavigationSection,
    NavLink,
    PageContentsResponse,
    PageMinResponse,
    PageResponse,
    Theme,
)
from src.schemas.template import TemplateLink, TemplateMinResponse, TemplateResponse

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "AccessTokenResponse",
    "MessageResponse",
    "ErrorResponse",
    "TemplateLink",
    "TemplateResponse",
    "TemplateMinResponse",
    "Theme",
    "NavLink",
    "NavigationSection",
    "FooterConfig",
    "ContentBlock",
    "PageResponse",
    "PageMinResponse",
    "PageContentsResponse",
    "GroupMinResponse",
    "GroupResponse",
    "GroupFullResponse",
]
