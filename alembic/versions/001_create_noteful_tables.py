"""Create users, folders, tags, notes and note_tags

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

Ids are 32-char lowercase hex strings generated by the application, so no
server-side defaults are needed for them. Timestamps are timezone-aware and
always written in UTC by the application. Names, titles and usernames are
TEXT because the API places no length limit on them.

Rollback: downgrade() drops every table (destructive, all data is lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(32)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", ID, nullable=False),
        sa.Column("fullname", sa.Text(), nullable=True),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    # Folders and tags: name unique per owner, not globally
    for table, constraint in (
        ("folders", "uq_folders_user_id_name"),
        ("tags", "uq_tags_user_id_name"),
    ):
        op.create_table(
            table,
            sa.Column("id", ID, nullable=False),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("user_id", "name", name=constraint),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    op.create_table(
        "notes",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        # No ON DELETE: folder deletion clears this column first
        sa.Column("folder_id", ID, sa.ForeignKey("folders.id"), nullable=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_folder_id", "notes", ["folder_id"])
    op.create_index("ix_notes_user_id", "notes", ["user_id"])
    # GET /api/notes orders by updated_at DESC
    op.create_index("idx_notes_updated_at", "notes", ["updated_at"])

    op.create_table(
        "note_tags",
        sa.Column("note_id", ID, sa.ForeignKey("notes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tag_id", ID, sa.ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
        sa.PrimaryKeyConstraint("note_id", "tag_id"),
    )


def downgrade() -> None:
    op.drop_table("note_tags")
    op.drop_index("idx_notes_updated_at", table_name="notes")
    op.drop_index("ix_notes_user_id", table_name="notes")
    op.drop_index("ix_notes_folder_id", table_name="notes")
    op.drop_table("notes")
    for table in ("tags", "folders"):
        op.drop_index(f"ix_{table}_user_id", table_name=table)
        op.drop_table(table)
    op.drop_table("users")
