"""Template model."""

from sqlalchemy import JSON, Boolean, Column, String

from src.database import Base
from src.models.mixins import IdMixin, TimestampMixin


class Template(Base, IdMixin, TimestampMixin):
    """Reusable page skin owned by a user."""

    __tablename__ = "templates"

    user_id = Column(String(32), nullable=False, index=True)  # owner; survives user deletion
    url = Column(String(2048), nullable=False)
    font_family = Column(String(255), nullable=False)
    corner_styles = Column(String(255), nullable=False)
    header = Column(Boolean, nullable=False, default=False)
    pagination = Column(Boolean, nullable=False, default=False)
    title = Column(String(255), nullable=False)
    custom_logo = Column(String(1024), nullable=False)
    links = Column(JSON, nullable=False, default=list)  # [{title, url}]

    def file_references(self) -> list[str]:
        return [self.custom_logo]
