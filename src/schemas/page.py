"""Page schemas, including the nested theme, footer and content shapes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr


class Theme(BaseModel):
    """Page color theme. Every key is required and no others are accepted."""

    model_config = ConfigDict(extra="forbid")

    type: StrictStr
    header_color: StrictStr
    subheader_color: StrictStr
    bg_color: StrictStr
    links_color: StrictStr
    toggle_mode: StrictBool
    default_mode: StrictStr


class NavLink(BaseModel):
    model_config = ConfigDict(extra="forbid")

    link_title: StrictStr
    link_url: StrictStr


class NavigationSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    section_title: StrictStr
    links: list[NavLink]


class FooterConfig(BaseModel):
    """Footer configuration; navigation and its link lists may be empty."""

    model_config = ConfigDict(extra="forbid")

    copyright_text: StrictStr
    copyright_color: StrictStr
    links_color: StrictStr
    bg_color: StrictStr
    navigation: list[NavigationSection]


class ContentBlock(BaseModel):
    """A content block; ``content`` is opaque to the API."""

    type: StrictStr
    content: Any = None


class PageResponse(BaseModel):
    """Page response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    template_id: str
    title: str
    description: str
    icon: str
    url: str
    custom_logo: str
    footer_logo: str
    font_family: str
    corner_styles: str
    footer_toggle: bool
    theme: Theme
    footer_config: FooterConfig
    pagination_bg_color: str
    pagination_text_color: str
    contents: list[ContentBlock]
    created_at: datetime
    updated_at: datetime


class PageMinResponse(BaseModel):
    """Page list-view projection."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    title: str
    description: str


class PageContentsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    contents: list[ContentBlock]
