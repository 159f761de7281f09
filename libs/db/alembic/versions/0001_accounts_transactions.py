# ruff: noqa: I001
"""Ledger core tables: accounts and transactions.

Revision ID: 0001_accounts_transactions
Revises: None
Create Date: 2025-10-12
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_accounts_transactions"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # accounts
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("openDate", sa.Date(), nullable=True),
        sa.Column("openingBalance", sa.String(), nullable=True),
        sa.Column("currentBalance", sa.String(), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("bankCode", sa.String(), nullable=False),
        sa.Column("isActive", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "createdAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("accounts_bankCode_idx", "accounts", ["bankCode"], unique=False)

    # transactions
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("accountId", sa.String(), nullable=False),
        sa.Column("counterpartyAccountId", sa.String(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.String(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("originalAmount", sa.String(), nullable=True),
        sa.Column("originalCurrency", sa.String(3), nullable=True),
        sa.Column("merchant", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("balance", sa.String(), nullable=True),
        sa.Column("externalId", sa.String(), nullable=True),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column(
            "importedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "createdAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updatedAt",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["accountId"],
            ["accounts.id"],
            name="fk_transactions_account",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["counterpartyAccountId"],
            ["accounts.id"],
            name="fk_transactions_counterparty_account",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint(
            "accountId",
            "date",
            "externalId",
            name="transactions_accountId_date_externalId_key",
        ),
        sa.CheckConstraint("type in ('CREDIT','DEBIT')", name="ck_transactions_type"),
    )

    # Indexes
    op.create_index("transactions_accountId_idx", "transactions", ["accountId"], unique=False)
    op.create_index(
        "transactions_counterpartyAccountId_idx",
        "transactions",
        ["counterpartyAccountId"],
        unique=False,
    )
    op.create_index(
        "transactions_accountId_date_idx", "transactions", ["accountId", "date"], unique=False
    )
    op.create_index("transactions_date_idx", "transactions", ["date"], unique=False)
    op.create_index("transactions_merchant_idx", "transactions", ["merchant"], unique=False)
    op.create_index("transactions_category_idx", "transactions", ["category"], unique=False)


def downgrade() -> None:
    op.drop_index("transactions_category_idx", table_name="transactions")
    op.drop_index("transactions_merchant_idx", table_name="transactions")
    op.drop_index("transactions_date_idx", table_name="transactions")
    op.drop_index("transactions_accountId_date_idx", table_name="transactions")
    op.drop_index("transactions_counterpartyAccountId_idx", table_name="transactions")
    op.drop_index("transactions_accountId_idx", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("accounts_bankCode_idx", table_name="accounts")
    op.drop_table("accounts")
