"""Create apod, nasa_members and nasa_roles tables.

Revision ID: 20260301_01
Revises:
Create Date: 2026-03-01 00:00:00
"""

# pylint: disable=invalid-name,missing-module-docstring

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20260301_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # Databases created by create_all at startup already have these
    if not inspector.has_table("apod"):
        op.create_table(
            "apod",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("copyright", sa.String(length=255), nullable=True),
            sa.Column("date", sa.String(length=255), nullable=False),
            sa.Column("explanation", sa.Text(), nullable=False),
            sa.Column("hdurl", sa.String(length=255), nullable=True),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("url", sa.String(length=255), nullable=False),
        )
        op.create_index("ix_apod_date", "apod", ["date"])

    if not inspector.has_table("nasa_members"):
        op.create_table(
            "nasa_members",
            sa.Column("user_id", sa.String(length=50), primary_key=True),
            sa.Column("pw", sa.String(length=1024), nullable=False),
            sa.Column(
                "active", sa.Boolean(), nullable=False, server_default=sa.text("1")
            ),
        )

    if not inspector.has_table("nasa_roles"):
        op.create_table(
            "nasa_roles",
            sa.Column(
                "user_id",
                sa.String(length=50),
                sa.ForeignKey("nasa_members.user_id"),
                primary_key=True,
            ),
            sa.Column("role", sa.String(length=50), primary_key=True),
        )


def downgrade():
    op.drop_table("nasa_roles")
    op.drop_table("nasa_members")
    op.drop_index("ix_apod_date", table_name="apod")
    op.drop_table("apod")
