# ruff: noqa: I001
"""Persistence integration for statement_import.

Functions here read and write the ledger owned by ``libs/db`` through a
caller-provided SQLAlchemy session. None of them commit; the importer wraps
each transaction apply in ``db.client.atomic`` so the insert and the balance
update land together or not at all.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.finance import Account, Transaction
from .errors import ErrorKind, StatementImportError
from .logging_setup import get_logger
from .models import BankCode, CanonicalTransaction, Currency, TransactionType

logger = get_logger("statement_import.persistence")


def find_missing_accounts(session: Session, account_ids: Iterable[str]) -> list[str]:
    """Return the ids from ``account_ids`` that have no ``accounts`` row."""

    wanted = list(dict.fromkeys(account_ids))
    if not wanted:
        return []
    existing = set(session.scalars(select(Account.id).where(Account.id.in_(wanted))))
    return [a for a in wanted if a not in existing]


def validate_accounts(session: Session, account_ids: Iterable[str]) -> None:
    missing = find_missing_accounts(session, account_ids)
    if missing:
        raise StatementImportError.missing_accounts(missing)


def create_account(
    session: Session,
    account_id: str,
    *,
    name: str | None = None,
    currency: Currency = Currency.EUR,
    bank_code: BankCode = BankCode.SEB,
    opening_balance: Decimal = Decimal("0"),
    open_date: date | None = None,
) -> Account:
    """Add a new account whose current balance starts at ``opening_balance``."""

    if session.get(Account, account_id) is not None:
        raise ValueError(f"Account already exists: {account_id}")
    account = Account(
        id=account_id,
        name=name or f"Account {account_id[-4:]}",
        currency=currency.value,
        bank_code=bank_code.value,
        opening_balance=opening_balance,
        current_balance=opening_balance,
        open_date=open_date,
        is_active=True,
    )
    session.add(account)
    session.flush()
    logger.info("Created account %s", account_id)
    return account


def list_accounts(session: Session) -> list[Account]:
    return list(session.scalars(select(Account).order_by(Account.id)))


def apply_transaction(
    session: Session,
    tx: CanonicalTransaction,
    *,
    account_id: str,
    source: BankCode = BankCode.SEB,
) -> Transaction:
    """Insert ``tx`` for ``account_id`` and advance the account balance.

    Steps, all on ``session`` without committing:
    - lock and read the account's current balance;
    - drop the counterparty reference when that account is not in the ledger;
    - insert the row with ``balance = current + amount``;
    - write the new balance back to the account.
    """

    account = session.execute(
        select(Account).where(Account.id == account_id).with_for_update()
    ).scalar_one_or_none()
    if account is None:
        raise StatementImportError(
            ErrorKind.STORE,
            f"Account not found: {account_id}",
            line=tx.line,
            account_ids=[account_id],
        )

    counterparty = tx.counterparty_account_id
    if counterparty is not None and session.get(Account, counterparty) is None:
        logger.debug("Counterparty %s not in ledger; reference dropped", counterparty)
        counterparty = None

    current = account.current_balance
    if current is None:
        current = account.opening_balance or Decimal("0")
    new_balance = current + tx.amount

    row = Transaction(
        id=str(uuid.uuid4()),
        account_id=account_id,
        counterparty_account_id=counterparty,
        date=tx.date,
        amount=tx.amount,
        currency=tx.currency.value,
        original_amount=tx.original_amount,
        original_currency=tx.original_currency,
        merchant=tx.merchant,
        description=tx.description or "",
        category=tx.category,
        type=TransactionType.for_amount(tx.amount).value,
        balance=new_balance,
        external_id=tx.external_id,
        source=source.value,
    )
    session.add(row)
    account.current_balance = new_balance
    session.flush()
    return row


__all__ = [
    "find_missing_accounts",
    "validate_accounts",
    "create_account",
    "list_accounts",
    "apply_transaction",
]
