"""Ingest entry points shared by the importer and the CLI.

``load_statement`` reads a SEB export from disk and runs the full parse:
dialect detection, account segmentation, row normalization and mapping. No
store access happens here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from ..errors import StatementImportError
from ..logging_setup import get_logger
from ..models import BankCode, CanonicalTransaction, ImportErrorRecord
from .dialects import Dialect, detect_dialect
from .mapper import map_rows
from .normalize import normalize_chunk
from .segment import split_into_account_chunks

logger = get_logger("statement_import.ingest")


@dataclass(slots=True)
class ParsedStatement:
    account_id: str  # first section's account
    dialect: Dialect
    bank_code: BankCode = BankCode.SEB
    transactions: list[CanonicalTransaction] = field(default_factory=list)
    errors: list[ImportErrorRecord] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.transactions) + len(self.errors)


def parse_statement_text(text: str, *, source: str = "<memory>") -> ParsedStatement:
    """Parse a whole export held in memory.

    Raises
    ------
    StatementImportError
        ``UNSUPPORTED_FORMAT`` when no dialect is detected, ``EMPTY_DATA`` when
        there are no account sections or no transactions in any of them.
    """

    dialect = detect_dialect(text, source=source)
    logger.info("Detected %s statement format (%s)", BankCode.SEB.value, dialect.value)

    chunks = split_into_account_chunks(text, dialect)
    if not chunks:
        raise StatementImportError.empty_data("No account data found in CSV")

    parsed = ParsedStatement(account_id=chunks[0].account_id, dialect=dialect)
    for chunk in chunks:
        transactions, errors = map_rows(normalize_chunk(chunk), chunk.account_id)
        logger.info(
            "Account %s: %d transaction(s), %d unmapped row(s)",
            chunk.account_id,
            len(transactions),
            len(errors),
        )
        parsed.transactions.extend(transactions)
        parsed.errors.extend(errors)

    if not parsed.transactions:
        message = "No transactions found in CSV"
        if parsed.errors:
            message += f" ({len(parsed.errors)} row(s) could not be mapped; first: {parsed.errors[0].message})"
        raise StatementImportError.empty_data(message)
    return parsed


def load_statement(csv_path: str | PathLike[str]) -> ParsedStatement:
    """Read ``csv_path`` (UTF-8, optional BOM) and parse it."""

    p = Path(csv_path)
    text = p.read_text(encoding="utf-8-sig")
    return parse_statement_text(text, source=str(p))


__all__ = ["ParsedStatement", "parse_statement_text", "load_statement"]
