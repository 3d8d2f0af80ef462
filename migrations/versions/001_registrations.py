"""Registration store — registrations, selected sports and partners

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Changes:
  - Create registrations table (email unique)
  - Create registration_sports table (one row per selected sport)
  - Create registration_partners table (one row per partner-requiring sport)
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── registrations ─────────────────────────────────────────────────────────
    op.create_table(
        "registrations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("course", sa.String(100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column(
            "registration_date",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "last_updated",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_registrations_email", "registrations", ["email"], unique=True)
    op.create_index("ix_registrations_year", "registrations", ["year"])
    op.create_index("ix_registrations_gender", "registrations", ["gender"])
    op.create_index("ix_registrations_status", "registrations", ["status"])

    # ── registration_sports ───────────────────────────────────────────────────
    op.create_table(
        "registration_sports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "registration_id",
            sa.Integer(),
            sa.ForeignKey("registrations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sport", sa.String(50), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("registration_id", "sport", name="uq_registration_sport"),
    )
    op.create_index(
        "ix_registration_sports_registration_id", "registration_sports", ["registration_id"]
    )
    op.create_index("ix_registration_sports_sport", "registration_sports", ["sport"])

    # ── registration_partners ─────────────────────────────────────────────────
    op.create_table(
        "registration_partners",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "registration_id",
            sa.Integer(),
            sa.ForeignKey("registrations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sport", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.UniqueConstraint("registration_id", "sport", name="uq_registration_partner"),
    )
    op.create_index(
        "ix_registration_partners_registration_id", "registration_partners", ["registration_id"]
    )
    op.create_index("ix_registration_partners_sport", "registration_partners", ["sport"])


def downgrade() -> None:
    op.drop_index("ix_registration_partners_sport", table_name="registration_partners")
    op.drop_index("ix_registration_partners_registration_id", table_name="registration_partners")
    op.drop_table("registration_partners")
    op.drop_index("ix_registration_sports_sport", table_name="registration_sports")
    op.drop_index("ix_registration_sports_registration_id", table_name="registration_sports")
    op.drop_table("registration_sports")
    op.drop_index("ix_registrations_status", table_name="registrations")
    op.drop_index("ix_registrations_gender", table_name="registrations")
    op.drop_index("ix_registrations_year", table_name="registrations")
    op.drop_index("ix_registrations_email", table_name="registrations")
    op.drop_table("registrations")
