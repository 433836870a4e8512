"""Create notes and folders tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the two document collections, `notes` and `folders`.
How:   Identical layout per table (see notebook_api/models/document.py):
       UUID primary key, indexed owner_id, JSONB user fields, timestamps.

Rollback: downgrade() drops both tables (all documents are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

COLLECTIONS = ("notes", "folders")


def _create_document_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column(
            "id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Store-assigned identifier, exposed as its canonical string",
        ),
        sa.Column(
            "owner_id",
            sa.Text(),
            nullable=False,
            comment="Subject id of the verified creator; immutable",
        ),
        sa.Column(
            "data",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
            comment="User-supplied top-level fields",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Every query filters on the owner
    op.create_index(f"ix_{name}_owner_id", name, ["owner_id"])


def upgrade() -> None:
    for name in COLLECTIONS:
        _create_document_table(name)


def downgrade() -> None:
    for name in reversed(COLLECTIONS):
        op.drop_index(f"ix_{name}_owner_id", table_name=name)
        op.drop_table(name)
