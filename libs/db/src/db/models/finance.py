from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import expression as sa_expr
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    pass


class DecimalString(TypeDecorator[Decimal]):
    """Persist ``Decimal`` values as their exact string form.

    SQLite has no fixed-point type and ``Numeric`` round-trips through REAL
    there, so running balances are stored as text and converted back to
    ``Decimal`` on load.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


# ---------------------------
# Reference: accounts
# ---------------------------


class Account(Base):
    __tablename__ = "accounts"

    # Bank account identifier as printed on statements (e.g. an IBAN)
    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    open_date: Mapped[date | None] = mapped_column("openDate", Date, nullable=True)
    opening_balance: Mapped[Decimal | None] = mapped_column(
        "openingBalance", DecimalString, nullable=True
    )
    # Running balance; mutated only together with a transaction insert.
    current_balance: Mapped[Decimal | None] = mapped_column(
        "currentBalance", DecimalString, nullable=True
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    bank_code: Mapped[str] = mapped_column("bankCode", String, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        "isActive", Boolean, nullable=False, server_default=sa_expr.true()
    )
    created_at: Mapped[datetime] = mapped_column(
        "createdAt", DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (Index("accounts_bankCode_idx", "bankCode"),)


# ---------------------------
# Core: transactions
# ---------------------------


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    account_id: Mapped[str] = mapped_column(
        "accountId",
        String,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
    )
    # Other side of an internal transfer; only set when that account is known.
    counterparty_account_id: Mapped[str | None] = mapped_column(
        "counterpartyAccountId",
        String,
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(DecimalString, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    original_amount: Mapped[Decimal | None] = mapped_column(
        "originalAmount", DecimalString, nullable=True
    )
    original_currency: Mapped[str | None] = mapped_column(
        "originalCurrency", String(3), nullable=True
    )
    merchant: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    # Account balance immediately after this transaction was applied
    balance: Mapped[Decimal | None] = mapped_column(DecimalString, nullable=True)
    external_id: Mapped[str | None] = mapped_column("externalId", String, nullable=True)
    source: Mapped[str] = mapped_column(String, nullable=False)
    imported_at: Mapped[datetime] = mapped_column(
        "importedAt", DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(
        "createdAt", DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "accountId", "date", "externalId", name="transactions_accountId_date_externalId_key"
        ),
        CheckConstraint("type in ('CREDIT','DEBIT')", name="ck_transactions_type"),
        Index("transactions_accountId_idx", "accountId"),
        Index("transactions_counterpartyAccountId_idx", "counterpartyAccountId"),
        Index("transactions_accountId_date_idx", "accountId", "date"),
        Index("transactions_date_idx", "date"),
        Index("transactions_merchant_idx", "merchant"),
        Index("transactions_category_idx", "category"),
    )


__all__ = [
    "Base",
    "DecimalString",
    "Account",
    "Transaction",
]
