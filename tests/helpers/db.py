"""DB helpers for tests: bootstrap a temporary SQLite ledger and seed accounts."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path

from db import Base
from db.client import get_engine, session_scope
from db.models.finance import Account, Transaction
from sqlalchemy import select
from sqlalchemy import text as sql_text


def bootstrap_sqlite_db(db_file: Path, *, set_default_env: bool = False) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    # Ensure parent exists before engine creation attempts any writes
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(database_url=url)
    Base.metadata.create_all(bind=engine)
    _assert_schema_in_sync(url)

    # Make it the default for any code paths that read from the environment
    if set_default_env:
        os.environ.setdefault("DATABASE_URL", url)
    return url


def seed_account(
    *,
    database_url: str,
    account_id: str,
    opening_balance: Decimal | str = "0",
    currency: str = "EUR",
) -> None:
    balance = Decimal(str(opening_balance))
    with session_scope(database_url=database_url) as session:
        session.add(
            Account(
                id=account_id,
                name=f"Test {account_id[-4:]}",
                currency=currency,
                bank_code="SEB",
                opening_balance=balance,
                current_balance=balance,
                is_active=True,
            )
        )


def fetch_transactions(database_url: str, account_id: str | None = None) -> list[Transaction]:
    """Return persisted transactions ordered by date (then insertion)."""

    with session_scope(database_url=database_url) as session:
        stmt = select(Transaction).order_by(Transaction.date, Transaction.imported_at)
        if account_id is not None:
            stmt = stmt.where(Transaction.account_id == account_id)
        return list(session.scalars(stmt))


def account_balance(database_url: str, account_id: str) -> Decimal | None:
    with session_scope(database_url=database_url) as session:
        account = session.get(Account, account_id)
        assert account is not None, f"missing account {account_id}"
        return account.current_balance


def _assert_schema_in_sync(database_url: str) -> None:
    """Quick sanity check: ORM column sets match the SQLite table column sets."""

    with session_scope(database_url=database_url) as session:
        for table in Base.metadata.sorted_tables:
            rows = session.execute(sql_text(f"PRAGMA table_info('{table.name}')")).fetchall()
            got = {row[1] for row in rows}  # (cid, name, type, notnull, dflt_value, pk)
            expected = {c.name for c in table.columns}
            assert got == expected, (
                f"{table.name} schema drift: missing={expected - got or '∅'}, "
                f"extra={got - expected or '∅'}"
            )
