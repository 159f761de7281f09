# ruff: noqa: I001
"""Import orchestration: parse, validate, de-duplicate, then apply in date order.

Flow for one call to :func:`import_statement`::

    parse -> collect accounts -> validate accounts (skipped on dry run)
          -> filter duplicates -> dry run? preview
          -> sort by date -> apply each transaction atomically

Parsing happens before any store access, so an unsupported file never touches
the database. Each transaction is its own atomic unit: a store failure stops
the import, keeps the units already committed, and reports them accurately.
"""

from __future__ import annotations

from dataclasses import replace
from os import PathLike

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.client import atomic

from .config import ImportSettings
from .duplicates import filter_duplicates, target_account
from .errors import ErrorKind, StatementImportError
from .ingest.utils import ParsedStatement, load_statement
from .logging_setup import get_logger
from .models import (
    CanonicalTransaction,
    ImportErrorRecord,
    ImportResult,
    ImportStatistics,
)
from .persistence import apply_transaction, validate_accounts

logger = get_logger("statement_import.importer")


def _retarget(
    transactions: list[CanonicalTransaction], account_id: str
) -> list[CanonicalTransaction]:
    return [replace(tx, account_number=account_id) for tx in transactions]


def _accounts_in(transactions: list[CanonicalTransaction], default_account_id: str) -> list[str]:
    return list(dict.fromkeys(target_account(tx, default_account_id) for tx in transactions))


def import_statement(
    csv_path: str | PathLike[str],
    *,
    session: Session,
    dry_run: bool = False,
    account_id: str | None = None,
    show_duplicates: bool = False,
    settings: ImportSettings | None = None,
) -> ImportResult:
    """Import one SEB statement export into the ledger.

    Parameters
    ----------
    csv_path:
        Path to the semicolon-delimited export.
    session:
        Open session; the caller owns its lifetime.
    dry_run:
        Report what would be imported without validating accounts or writing.
    account_id:
        Send every transaction to this account instead of the one named by
        its statement section.
    show_duplicates:
        Include the skipped duplicates in the result.
    settings:
        Import settings; defaults apply when omitted.

    Raises
    ------
    StatementImportError
        ``UNSUPPORTED_FORMAT`` / ``EMPTY_DATA`` from parsing,
        ``ACCOUNT_VALIDATION`` for unknown accounts, ``DUPLICATE`` when
        duplicates are present and ``skip_duplicates`` is off. All of these
        are raised before any mutation.
    """

    settings = settings or ImportSettings()

    parsed: ParsedStatement = load_statement(csv_path)
    candidates = parsed.transactions
    default_account = parsed.account_id
    if account_id is not None:
        logger.info("Account override: all transactions go to %s", account_id)
        candidates = _retarget(candidates, account_id)
        default_account = account_id

    accounts = _accounts_in(candidates, default_account)
    logger.info("Accounts in file: %s", ", ".join(accounts))

    if not dry_run:
        validate_accounts(session, accounts)

    split = filter_duplicates(session, candidates, default_account)
    duplicates = split.duplicate_transactions
    if duplicates and not settings.skip_duplicates and not dry_run:
        first = duplicates[0]
        raise StatementImportError(
            ErrorKind.DUPLICATE,
            f"{len(duplicates)} duplicate transaction(s) found and duplicate skipping is disabled",
            line=first.line,
            account_ids=_accounts_in(duplicates, default_account),
        )

    errors = list(parsed.errors)
    statistics = ImportStatistics(
        total_rows=parsed.total_rows,
        imported=0,
        duplicates=len(duplicates),
        failed=len(parsed.errors),
        accounts=accounts,
    )

    def result(success: bool) -> ImportResult:
        return ImportResult(
            success=success,
            statistics=statistics,
            errors=errors,
            duplicate_transactions=duplicates if show_duplicates else None,
        )

    if dry_run:
        statistics.imported = len(split.new_transactions)
        logger.info("Dry run: %d transaction(s) would be imported", statistics.imported)
        return result(True)

    ordered = sorted(split.new_transactions, key=lambda tx: tx.date)
    for tx in ordered:
        target = target_account(tx, default_account)
        try:
            with atomic(session):
                apply_transaction(session, tx, account_id=target, source=parsed.bank_code)
        except (SQLAlchemyError, StatementImportError) as exc:
            message = f"Failed to import transaction {tx.external_id} ({tx.date.isoformat()}): {exc}"
            logger.error("%s", message)
            errors.append(ImportErrorRecord(row=tx.line, message=message))
            statistics.failed += 1
            return result(False)

        statistics.imported += 1
        if statistics.imported % settings.batch_size == 0:
            logger.info("Imported %d/%d", statistics.imported, len(ordered))

    logger.info(
        "Imported %d, skipped %d duplicate(s), %d failed",
        statistics.imported,
        statistics.duplicates,
        statistics.failed,
    )
    return result(True)


__all__ = ["import_statement"]
