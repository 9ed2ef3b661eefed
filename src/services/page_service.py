"""Page repository with content-block operations."""

from typing import Any

from src.models.page import Page
from src.services.repository import ResourceService


class PageService(ResourceService):
    model = Page
    min_columns = ("id", "url", "title", "description")

    def find_by_template(self, template_id: str, minimal: bool = False) -> list[Any]:
        if minimal:
            return self.find_all_min(template_id=template_id)
        return self.find_all(template_id=template_id)

    def find_contents(self, page_id: str) -> Any | None:
        """Row with the page's id, title and contents."""
        return (
            self.db.query(Page.id, Page.title, Page.contents).filter(Page.id == page_id).first()
        )

    def append_contents(self, page: Page, blocks: list[dict[str, Any]]) -> Page:
        """Append blocks to the end of the page's contents."""
        # Reassign so the JSON column is flagged as modified
        page.contents = [*(page.contents or []), *blocks]
        self.db.commit()
        self.db.refresh(page)
        return page

    def replace_contents(self, page_id: str, blocks: list[dict[str, Any]]) -> bool:
        return self.update_by_id(page_id, {"contents": blocks})
