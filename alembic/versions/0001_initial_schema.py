"""initial schema: statistics tables, faq, operators, conversation log

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("IDP", "Returnee", "Host_Community")
BANDS = ("Girls", "Boys", "Women", "Men", "Elderly_Women", "Elderly_Men")


def _location_columns():
    return [
        sa.Column("Response_Year", sa.Integer(), nullable=True),
        sa.Column("State", sa.String(length=100), nullable=True),
        sa.Column("State_Pcode", sa.String(length=20), nullable=True),
        sa.Column("LGA", sa.String(length=100), nullable=True),
        sa.Column("LGA_Pcode", sa.String(length=20), nullable=True),
    ]


def _demographic_columns():
    return [
        sa.Column(f"{status}_{band}", sa.Integer(), nullable=True)
        for status in STATUSES
        for band in BANDS
    ]


def _location_indexes(table: str):
    for column in ("Response_Year", "State", "LGA"):
        op.create_index(f"ix_{table}_{column}", table, [column])


def upgrade() -> None:
    op.create_table(
        "users_table",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("role", sa.String(), server_default="user", nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_table_email", "users_table", ["email"], unique=True)

    op.create_table(
        "baselinedata",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_location_columns(),
        *_demographic_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    _location_indexes("baselinedata")

    op.create_table(
        "needsdata",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_location_columns(),
        *_demographic_columns(),
        sa.Column("Sector", sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _location_indexes("needsdata")
    op.create_index("ix_needsdata_Sector", "needsdata", ["Sector"])

    op.create_table(
        "severitydata",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        *_location_columns(),
        sa.Column("Sector", sa.String(length=100), nullable=True),
        sa.Column("IDP_Severity", sa.Integer(), nullable=True),
        sa.Column("Returnee_Severity", sa.Integer(), nullable=True),
        sa.Column("Host_Community_Severity", sa.Integer(), nullable=True),
        sa.Column("Final_Severity", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _location_indexes("severitydata")
    op.create_index("ix_severitydata_Sector", "severitydata", ["Sector"])

    op.create_table(
        "faq",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "conversation_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("response", sa.Text(), nullable=False),
        sa.Column("is_related", sa.Boolean(), nullable=False),
        sa.Column("is_in_need", sa.Boolean(), nullable=False),
        sa.Column("is_detailed", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("conversation_log")
    op.drop_table("faq")
    op.drop_table("severitydata")
    op.drop_table("needsdata")
    op.drop_table("baselinedata")
    op.drop_index("ix_users_table_email", table_name="users_table")
    op.drop_table("users_table")
