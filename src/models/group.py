"""Group models."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import IdMixin, TimestampMixin


class Group(Base, IdMixin, TimestampMixin):
    """Named ordered collection of page ids owned by a user."""

    __tablename__ = "groups"

    user_id = Column(String(32), nullable=False, index=True)  # owner; survives user deletion
    group_name = Column(String(255), nullable=False)

    # Relationships
    memberships = relationship(
        "GroupPage",
        back_populates="group",
        order_by="GroupPage.position",
        cascade="all, delete-orphan",
    )

    @property
    def pages(self) -> list[str]:
        """Member page ids in insertion order."""
        return [membership.page_id for membership in self.memberships]


class GroupPage(Base):
    """One slot in a group's page list.

    ``page_id`` is not a foreign key: deleting a page never
    touches the groups that list it, and the same id may appear twice.
    """

    __tablename__ = "group_pages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(String(32), ForeignKey("groups.id"), nullable=False, index=True)
    page_id = Column(String(32), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    # Relationships
    group = relationship("Group", back_populates="memberships")
