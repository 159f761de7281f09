"""Error type raised by the statement import pipeline.

A single exception class carries a ``kind`` discriminator instead of a class
per failure. Callers branch on ``err.kind``; the payload fields are populated
only where they make sense for that kind:

- ``UNSUPPORTED_FORMAT``: no dialect recognized in the scan window.
- ``EMPTY_DATA``: no account sections, or no transactions in any section.
- ``ACCOUNT_VALIDATION``: referenced accounts missing from the store
  (``account_ids``).
- ``ROW_MAPPING``: one row could not be mapped (``line``, ``row``).
- ``DUPLICATE``: duplicates found while duplicate skipping is disabled.
- ``STORE``: an atomic apply unit failed (``line``; original cause chained).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import StrEnum


class ErrorKind(StrEnum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    EMPTY_DATA = "empty_data"
    ACCOUNT_VALIDATION = "account_validation"
    ROW_MAPPING = "row_mapping"
    DUPLICATE = "duplicate"
    STORE = "store"


class StatementImportError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        line: int | None = None,
        row: Mapping[str, str] | None = None,
        account_ids: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.line = line
        self.row = dict(row) if row is not None else None
        self.account_ids = tuple(account_ids)

    def __repr__(self) -> str:
        return f"StatementImportError(kind={self.kind.value!r}, message={self.message!r})"

    @classmethod
    def unsupported_format(cls, source: str) -> StatementImportError:
        return cls(
            ErrorKind.UNSUPPORTED_FORMAT,
            f"No parser found for file: {source}. Unable to detect bank format.",
        )

    @classmethod
    def empty_data(cls, message: str) -> StatementImportError:
        return cls(ErrorKind.EMPTY_DATA, message)

    @classmethod
    def missing_accounts(cls, account_ids: Iterable[str]) -> StatementImportError:
        ids = sorted(set(account_ids))
        return cls(
            ErrorKind.ACCOUNT_VALIDATION,
            "Account(s) not found: "
            + ", ".join(ids)
            + ". Create them first (financier add-account <id>).",
            account_ids=ids,
        )

    @classmethod
    def row_mapping(
        cls, message: str, *, line: int | None, row: Mapping[str, str] | None
    ) -> StatementImportError:
        return cls(ErrorKind.ROW_MAPPING, message, line=line, row=row)


class ConfigurationError(ValueError):
    """Raised when the config file cannot be read or fails validation."""


__all__ = [
    "ErrorKind",
    "StatementImportError",
    "ConfigurationError",
]
