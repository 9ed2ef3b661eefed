"""Template repository."""

from src.models.template import Template
from src.services.repository import ResourceService


class TemplateService(ResourceService):
    model = Template
    min_columns = ("id", "url", "title")
