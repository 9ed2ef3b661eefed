"""User model."""

from sqlalchemy import Boolean, Column, String

from src.database import Base
from src.models.mixins import IdMixin, TimestampMixin


class User(Base, IdMixin, TimestampMixin):
    """User model for authentication and ownership.

    A password login is possible only when ``password_hash`` is set; accounts
    created through OAuth carry a provider id instead.
    """

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    picture = Column(String(1024), nullable=True)
    phone = Column(String(50), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=True)  # stored, never consulted
    is_public = Column(Boolean, nullable=False, default=False)
    google_id = Column(String(255), unique=True, nullable=True, index=True)
    facebook_id = Column(String(255), unique=True, nullable=True, index=True)
