from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from db.client import atomic
from statement_import.duplicates import filter_duplicates, transaction_key
from statement_import.models import CanonicalTransaction, Currency
from statement_import.persistence import apply_transaction
from tests.helpers.db import seed_account

ACCOUNT = "LT123456789012345678"
OTHER = "LT987654321098765432"


def _tx(external_id: str, *, day: int = 15, account: str = ACCOUNT, amount: str = "10") -> CanonicalTransaction:
    return CanonicalTransaction(
        external_id=external_id,
        date=date(2025, 1, day),
        amount=Decimal(amount),
        currency=Currency.EUR,
        merchant=None,
        description=None,
        category=None,
        type_indicator="C",
        account_number=account,
    )


def test_key_uses_iso_date_and_default_account():
    tx = _tx("RO1", account="")
    assert transaction_key(tx, OTHER) == (OTHER, "2025-01-15", "RO1")


def test_intra_batch_repeat_is_duplicate(session: Session):
    first, second = _tx("RO1", amount="1"), _tx("RO1", amount="2")

    result = filter_duplicates(session, [first, second], ACCOUNT)
    assert result.new_transactions == [first]
    assert result.duplicate_transactions == [second]

    result = filter_duplicates(session, [second, first], ACCOUNT)
    assert result.new_transactions == [second]
    assert result.duplicate_transactions == [first]


def test_same_reference_on_other_date_or_account_is_new(session: Session):
    batch = [_tx("RO1"), _tx("RO1", day=16), _tx("RO1", account=OTHER)]
    result = filter_duplicates(session, batch, ACCOUNT)
    assert result.new_transactions == batch
    assert result.duplicate_transactions == []


def test_persisted_transaction_is_duplicate(db_url: str, session: Session):
    seed_account(database_url=db_url, account_id=ACCOUNT)
    stored = _tx("RO1")
    with atomic(session):
        apply_transaction(session, stored, account_id=ACCOUNT)

    batch = [_tx("RO0"), _tx("RO1"), _tx("RO2")]
    result = filter_duplicates(session, batch, ACCOUNT)

    assert [t.external_id for t in result.new_transactions] == ["RO0", "RO2"]
    assert [t.external_id for t in result.duplicate_transactions] == ["RO1"]


def test_partition_preserves_every_candidate(session: Session):
    batch = [_tx("A"), _tx("B"), _tx("A"), _tx("C"), _tx("B")]
    result = filter_duplicates(session, batch, ACCOUNT)

    assert len(result.new_transactions) + len(result.duplicate_transactions) == len(batch)
    keys = [transaction_key(t, ACCOUNT) for t in result.new_transactions]
    assert len(keys) == len(set(keys))
    assert [t.external_id for t in result.duplicate_transactions] == ["A", "B"]
