"""Initial page builder schema

Revision ID: 4f2c9a7d1e30
Revises:
Create Date: 2026-10-18 10:12:44.218730

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2c9a7d1e30"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("picture", sa.String(length=1024), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("google_id", sa.String(length=255), nullable=True),
        sa.Column("facebook_id", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_google_id"), "users", ["google_id"], unique=True)
    op.create_index(op.f("ix_users_facebook_id"), "users", ["facebook_id"], unique=True)

    op.create_table(
        "templates",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(length=32), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("font_family", sa.String(length=255), nullable=False),
        sa.Column("corner_styles", sa.String(length=255), nullable=False),
        sa.Column("header", sa.Boolean(), nullable=False),
        sa.Column("pagination", sa.Boolean(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("custom_logo", sa.String(length=1024), nullable=False),
        sa.Column("links", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_templates_user_id"), "templates", ["user_id"], unique=False)

    op.create_table(
        "pages",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(length=32), nullable=False),
        sa.Column("template_id", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(length=255), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("custom_logo", sa.String(length=1024), nullable=False),
        sa.Column("footer_logo", sa.String(length=1024), nullable=False),
        sa.Column("font_family", sa.String(length=255), nullable=False),
        sa.Column("corner_styles", sa.String(length=255), nullable=False),
        sa.Column("footer_toggle", sa.Boolean(), nullable=False),
        sa.Column("theme", sa.JSON(), nullable=False),
        sa.Column("footer_config", sa.JSON(), nullable=False),
        sa.Column("pagination_bg_color", sa.String(length=50), nullable=False),
        sa.Column("pagination_text_color", sa.String(length=50), nullable=False),
        sa.Column("contents", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_pages_user_id"), "pages", ["user_id"], unique=False)
    op.create_index(op.f("ix_pages_template_id"), "pages", ["template_id"], unique=False)

    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(length=32), nullable=False),
        sa.Column("group_name", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_groups_user_id"), "groups", ["user_id"], unique=False)

    op.create_table(
        "group_pages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("group_id", sa.String(length=32), nullable=False),
        sa.Column("page_id", sa.String(length=32), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_group_pages_group_id"), "group_pages", ["group_id"], unique=False)
    op.create_index(op.f("ix_group_pages_page_id"), "group_pages", ["page_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_group_pages_page_id"), table_name="group_pages")
    op.drop_index(op.f("ix_group_pages_group_id"), table_name="group_pages")
    op.drop_table("group_pages")
    op.drop_index(op.f("ix_groups_user_id"), table_name="groups")
    op.drop_table("groups")
    op.drop_index(op.f("ix_pages_template_id"), table_name="pages")
    op.drop_index(op.f("ix_pages_user_id"), table_name="pages")
    op.drop_table("pages")
    op.drop_index(op.f("ix_templates_user_id"), table_name="templates")
    op.drop_table("templates")
    op.drop_index(op.f("ix_users_facebook_id"), table_name="users")
    op.drop_index(op.f("ix_users_google_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
