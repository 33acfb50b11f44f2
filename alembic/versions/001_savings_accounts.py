"""Initial schema: savings_accounts

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "savings_accounts",
        sa.Column("account_number", sa.String(13), primary_key=True),
        sa.Column("balance", sa.Float(precision=53), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("balance >= 0", name="ck_savings_accounts_balance_non_negative"),
        sa.CheckConstraint(
            "account_number ~ '^[0-9]-[0-9]{3}-[0-9]{3}-[0-9]{3}$'",
            name="ck_savings_accounts_account_number_format",
        ),
    )


def downgrade() -> None:
    op.drop_table("savings_accounts")
