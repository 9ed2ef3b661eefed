"""SQLAlchemy models."""

from src.models.group import Group, GroupPage
from src.models.page import Page
from src.models.template import Template
from src.models.user import User

__all__ = [
    "User",
    "Template",
    "Page",
    "Group",
    "GroupPage",
]
