"""create contact table

Revision ID: 0001_create_contact
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_create_contact"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "contact",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone_number", sa.String(length=64), nullable=True),
        sa.Column("linked_id", sa.Integer(), nullable=True),
        sa.Column(
            "link_precedence",
            sa.Enum("PRIMARY", "SECONDARY", name="linkprecedence", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["linked_id"],
            ["contact.id"],
            name="fk_contact_linked_id_contact",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_contact"),
        sa.CheckConstraint(
            "email IS NOT NULL OR phone_number IS NOT NULL",
            name="ck_contact_email_or_phone",
        ),
        sa.CheckConstraint(
            "(link_precedence = 'PRIMARY' AND linked_id IS NULL) OR "
            "(link_precedence = 'SECONDARY' AND linked_id IS NOT NULL)",
            name="ck_contact_link_consistency",
        ),
        sa.CheckConstraint(
            "linked_id IS NULL OR linked_id != id",
            name="ck_contact_no_self_link",
        ),
    )
    op.create_index("ix_contact_email", "contact", ["email"])
    op.create_index("ix_contact_phone_number", "contact", ["phone_number"])
    op.create_index("ix_contact_linked_id", "contact", ["linked_id"])
    op.create_index(
        "ix_contact_precedence_created",
        "contact",
        ["link_precedence", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_contact_precedence_created", table_name="contact")
    op.drop_index("ix_contact_linked_id", table_name="contact")
    op.drop_index("ix_contact_phone_number", table_name="contact")
    op.drop_index("ix_contact_email", table_name="contact")
    op.drop_table("contact")
