"""Ledger storage for imported bank statements.

``Account`` holds a running balance; ``Transaction`` rows are unique per
account, date and external id. ``metadata`` is what ``init-db`` creates and what the
Alembic migrations target. Engines and sessions come from ``db.client``.
"""

from __future__ import annotations

from .models.finance import Account, Base, Transaction

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "Account",
    "Transaction",
]
