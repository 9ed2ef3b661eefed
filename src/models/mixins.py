"""Mixins and id helpers for SQLAlchemy models."""

import re
import uuid

from sqlalchemy import Column, DateTime, String, func

ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    """Generate a storage id (32 lowercase hex characters)."""
    return uuid.uuid4().hex


def is_valid_id(value: object) -> bool:
    """Check that a value has the canonical storage id format."""
    return isinstance(value, str) and ID_PATTERN.fullmatch(value) is not None


class IdMixin:
    """Mixin to add a storage-generated string primary key."""

    id = Column(String(32), primary_key=True, default=new_id)


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
