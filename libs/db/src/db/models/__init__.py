"""ORM tables of the statement ledger: accounts and their transactions."""

from .finance import Account, Base, Transaction

__all__ = ["Base", "Account", "Transaction"]
