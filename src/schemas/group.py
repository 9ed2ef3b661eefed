"""Group schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from src.schemas.page import PageResponse


class GroupMinResponse(BaseModel):
    """Group with bare page ids."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    group_name: str
    pages: list[str]


class GroupResponse(GroupMinResponse):
    """Group response."""

    user_id: str
    created_at: datetime
    updated_at: datetime


class GroupFullResponse(BaseModel):
    """Group with member pages resolved into full records."""

    id: str
    user_id: str
    group_name: str
    pages: list[PageResponse]
    created_at: datetime
    updated_at: datetime
