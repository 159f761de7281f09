"""Turn normalized rows into ``CanonicalTransaction`` values.

Mapping rules:
- ``external_id``: transaction code, else instruction id. The instruction id
  is shared by every transaction in one clearing batch, so it is only a
  fallback.
- ``amount``: account-currency amount (transfer amount when absent), decimal
  comma accepted. The file's own sign is discarded; the debit/credit marker
  decides: ``D`` is money out, anything else is money in.
- ``currency``: account currency, defaulting to EUR.
- ``merchant`` / ``description`` / ``category``: whitespace-collapsed text or
  ``None``.
- ``counterparty_account_id``: trimmed, ``None`` when blank.

A row that cannot be mapped raises ``StatementImportError`` with kind
``ROW_MAPPING``; ``map_rows`` collects those instead of aborting.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from ..errors import StatementImportError
from ..logging_setup import get_logger
from ..models import CanonicalTransaction, Currency, ImportErrorRecord
from .headers import CanonicalField
from .normalize import NormalizedRow

logger = get_logger("statement_import.ingest.mapper")

DEBIT_MARKER = "D"
DATE_FORMAT = "%Y-%m-%d"
DEFAULT_CURRENCY = Currency.EUR


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = re.sub(r"\s+", " ", value).strip()
    return cleaned if cleaned != "" else None


def parse_amount(value: str) -> Decimal:
    """Parse a localized decimal such as ``"1 234,50"`` into its magnitude."""

    s = value.replace("\u00a0", "").replace(" ", "").replace(",", ".")
    try:
        amount = Decimal(s)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return abs(amount)


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def signed_amount(magnitude: Decimal, type_indicator: str) -> Decimal:
    if type_indicator == DEBIT_MARKER and magnitude:
        return -magnitude
    return magnitude


def resolve_external_id(row: NormalizedRow) -> str | None:
    return row.get(CanonicalField.EXTERNAL_ID) or row.get(CanonicalField.INSTRUCTION_ID)


def _parse_currency(value: str | None) -> Currency:
    if value is None:
        return DEFAULT_CURRENCY
    try:
        return Currency(value.upper())
    except ValueError:
        raise ValueError(f"Unsupported currency: {value!r}") from None


def map_row(row: NormalizedRow, account_id: str) -> CanonicalTransaction:
    """Map one row owned by ``account_id``; raise ``ROW_MAPPING`` on bad input."""

    try:
        external_id = resolve_external_id(row)
        if external_id is None:
            raise ValueError("Missing transaction reference")

        date_raw = row.get(CanonicalField.DATE)
        if date_raw is None:
            raise ValueError("Missing date")
        tx_date = parse_date(date_raw)

        amount_raw = row.get(CanonicalField.AMOUNT) or row.get(CanonicalField.AMOUNT_ALT)
        if amount_raw is None:
            raise ValueError("Missing amount")

        type_indicator = row.get(CanonicalField.TYPE_INDICATOR)
        if type_indicator is None:
            raise ValueError("Missing debit/credit indicator")
        amount = signed_amount(parse_amount(amount_raw), type_indicator)

        currency = _parse_currency(row.get(CanonicalField.CURRENCY))

        # Foreign-currency transfers keep the amount as sent
        original_amount: Decimal | None = None
        original_currency: str | None = None
        transfer_currency = row.get(CanonicalField.TRANSFER_CURRENCY)
        transfer_amount = row.get(CanonicalField.AMOUNT_ALT)
        if transfer_currency and transfer_amount and transfer_currency.upper() != currency.value:
            original_amount = signed_amount(parse_amount(transfer_amount), type_indicator)
            original_currency = transfer_currency.upper()
    except ValueError as exc:
        raise StatementImportError.row_mapping(
            f"Line {row.line}: {exc}", line=row.line, row=row.raw
        ) from exc

    return CanonicalTransaction(
        external_id=external_id,
        date=tx_date,
        amount=amount,
        currency=currency,
        merchant=_clean_text(row.get(CanonicalField.MERCHANT)),
        description=_clean_text(row.get(CanonicalField.DESCRIPTION)),
        category=_clean_text(row.get(CanonicalField.CATEGORY)),
        type_indicator=type_indicator,
        account_number=account_id,
        counterparty_account_id=row.get(CanonicalField.COUNTERPARTY_ACCOUNT),
        original_amount=original_amount,
        original_currency=original_currency,
        line=row.line,
    )


def map_rows(
    rows: Iterable[NormalizedRow], account_id: str
) -> tuple[list[CanonicalTransaction], list[ImportErrorRecord]]:
    """Map every row, collecting per-row failures instead of raising."""

    transactions: list[CanonicalTransaction] = []
    errors: list[ImportErrorRecord] = []
    for row in rows:
        try:
            transactions.append(map_row(row, account_id))
        except StatementImportError as err:
            logger.warning("%s", err.message)
            errors.append(ImportErrorRecord(row=err.line, message=err.message, data=err.row))
    return transactions, errors


__all__ = [
    "DEBIT_MARKER",
    "parse_amount",
    "parse_date",
    "signed_amount",
    "resolve_external_id",
    "map_row",
    "map_rows",
]
