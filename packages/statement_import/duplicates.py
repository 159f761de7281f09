"""Duplicate detection against the ledger.

A candidate is a duplicate when its key ``(account, date, external id)``
already exists in ``transactions`` or was already accepted earlier in the same
batch. The split is order-preserving: every candidate lands in exactly one of
the two lists, in input order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from db.models.finance import Transaction
from sqlalchemy import select
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import CanonicalTransaction

logger = get_logger("statement_import.duplicates")

type TransactionKey = tuple[str, str, str]


@dataclass(slots=True)
class DuplicateFilterResult:
    new_transactions: list[CanonicalTransaction] = field(default_factory=list)
    duplicate_transactions: list[CanonicalTransaction] = field(default_factory=list)


def target_account(tx: CanonicalTransaction, default_account_id: str) -> str:
    return tx.account_number or default_account_id


def transaction_key(tx: CanonicalTransaction, default_account_id: str) -> TransactionKey:
    return (
        target_account(tx, default_account_id),
        tx.date.isoformat(),
        tx.external_id or "",
    )


def is_duplicate(session: Session, tx: CanonicalTransaction, account_id: str) -> bool:
    """Return True when the ledger already holds ``tx`` for ``account_id``."""

    stmt = (
        select(Transaction.id)
        .where(
            Transaction.account_id == account_id,
            Transaction.external_id == tx.external_id,
            Transaction.date == tx.date,
        )
        .limit(1)
    )
    return session.execute(stmt).first() is not None


def filter_duplicates(
    session: Session,
    transactions: Iterable[CanonicalTransaction],
    default_account_id: str,
) -> DuplicateFilterResult:
    """Partition ``transactions`` into new and duplicate, preserving order.

    Parameters
    ----------
    session:
        Open session used for read-only lookups.
    transactions:
        Candidates in file order.
    default_account_id:
        Account used for candidates without an owning account.
    """

    result = DuplicateFilterResult()
    accepted: set[TransactionKey] = set()

    for tx in transactions:
        key = transaction_key(tx, default_account_id)
        if key in accepted:
            logger.debug("Duplicate within file: %s", key)
            result.duplicate_transactions.append(tx)
            continue
        if is_duplicate(session, tx, key[0]):
            logger.debug("Already imported: %s", key)
            result.duplicate_transactions.append(tx)
            continue
        accepted.add(key)
        result.new_transactions.append(tx)

    logger.info(
        "%d new, %d duplicate transaction(s)",
        len(result.new_transactions),
        len(result.duplicate_transactions),
    )
    return result


__all__ = [
    "TransactionKey",
    "DuplicateFilterResult",
    "target_account",
    "transaction_key",
    "is_duplicate",
    "filter_duplicates",
]
