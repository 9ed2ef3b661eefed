"""Template schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, StrictStr


class TemplateLink(BaseModel):
    """One entry of a template's link list."""

    model_config = ConfigDict(extra="forbid")

    title: StrictStr
    url: StrictStr


class TemplateResponse(BaseModel):
    """Template response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    url: str
    font_family: str
    corner_styles: str
    header: bool
    pagination: bool
    title: str
    custom_logo: str
    links: list[TemplateLink]
    created_at: datetime
    updated_at: datetime


class TemplateMinResponse(BaseModel):
    """Template list-view projection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    title: str
