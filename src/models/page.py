"""Page model."""

from sqlalchemy import JSON, Boolean, Column, String, Text

from src.database import Base
from src.models.mixins import IdMixin, TimestampMixin


class Page(Base, IdMixin, TimestampMixin):
    """A page built from a template.

    ``template_id`` is not a foreign key: pages may reference templates that
    no longer exist.
    """

    __tablename__ = "pages"

    user_id = Column(String(32), nullable=False, index=True)  # owner; survives user deletion
    template_id = Column(String(32), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    custom_logo = Column(String(1024), nullable=False)
    footer_logo = Column(String(1024), nullable=False)
    font_family = Column(String(255), nullable=False)
    corner_styles = Column(String(255), nullable=False)
    footer_toggle = Column(Boolean, nullable=False, default=False)
    theme = Column(JSON, nullable=False)
    footer_config = Column(JSON, nullable=False)
    pagination_bg_color = Column(String(50), nullable=False)
    pagination_text_color = Column(String(50), nullable=False)
    contents = Column(JSON, nullable=False, default=list)  # [{type, content}]

    def file_references(self) -> list[str]:
        return [self.custom_logo, self.footer_logo]
