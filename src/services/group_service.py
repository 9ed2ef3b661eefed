"""Group repository.

Group membership lives in ``group_pages`` rows ordered by ``position``.
Removing pages is a single ``DELETE`` on those rows, so two concurrent
removals cannot undo each other. Membership changes touch the group's
``updated_at`` explicitly since the group row itself is not modified.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from src.models.group import Group, GroupPage
from src.models.page import Page
from src.services.repository import ResourceService

logger = logging.getLogger(__name__)


class GroupService(ResourceService):
    model = Group

    def create_group(self, user_id: str, group_name: str, page_ids: Sequence[str] = ()) -> Group:
        group = Group(
            user_id=user_id,
            group_name=group_name,
            memberships=[
                GroupPage(page_id=page_id, position=position)
                for position, page_id in enumerate(page_ids)
            ],
        )
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group

    def find_all(self, **filters) -> list[Group]:
        return (
            self.db.query(Group)
            .options(selectinload(Group.memberships))
            .filter_by(**filters)
            .order_by(Group.created_at)
            .all()
        )

    def add_pages(self, group: Group, page_ids: Sequence[str]) -> Group:
        """Append page ids after the current last position. Duplicates are kept."""
        last_position = (
            self.db.query(func.max(GroupPage.position))
            .filter(GroupPage.group_id == group.id)
            .scalar()
        )
        start = 0 if last_position is None else last_position + 1
        for offset, page_id in enumerate(page_ids):
            self.db.add(GroupPage(group_id=group.id, page_id=page_id, position=start + offset))
        group.updated_at = func.now()
        self.db.commit()
        self.db.refresh(group)
        return group

    def remove_pages(self, group: Group, page_ids: Sequence[str]) -> int:
        """Remove every occurrence of the given page ids. Absent ids are ignored."""
        removed = (
            self.db.query(GroupPage)
            .filter(GroupPage.group_id == group.id, GroupPage.page_id.in_(set(page_ids)))
            .delete(synchronize_session=False)
        )
        group.updated_at = func.now()
        self.db.commit()
        self.db.refresh(group)
        logger.info(f"Removed {removed} page slot(s) from group {group.id}")
        return removed

    def rename(self, group_id: str, group_name: str) -> bool:
        return self.update_by_id(group_id, {"group_name": group_name})

    def resolve_pages(self, group: Group) -> list[Page]:
        """Member pages in group order; ids of deleted pages are skipped."""
        page_ids = group.pages
        if not page_ids:
            return []
        pages = self.db.query(Page).filter(Page.id.in_(set(page_ids))).all()
        by_id = {page.id: page for page in pages}
        return [by_id[page_id] for page_id in page_ids if page_id in by_id]

    def delete_by_id(self, resource_id: str) -> int:
        self.db.query(GroupPage).filter(GroupPage.group_id == resource_id).delete(
            synchronize_session=False
        )
        return super().delete_by_id(resource_id)

    def delete_by_owner(self, user_id: str) -> int:
        group_ids = select(Group.id).where(Group.user_id == user_id)
        self.db.query(GroupPage).filter(GroupPage.group_id.in_(group_ids)).delete(
            synchronize_session=False
        )
        return super().delete_by_owner(user_id)
