"""Data models for ``statement_import``.

Two layers live here:

- In-process values produced by the parser pipeline (``CanonicalTransaction``)
  are frozen ``dataclass`` instances with parsed Python types (``date``,
  ``Decimal``, enums).
- The import result returned to callers (``ImportResult`` and friends) is a
  set of pydantic models so it can be validated and dumped to JSON with the
  camelCase keys used by the rest of the tooling.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Reference enums
# ---------------------------------------------------------------------------


class Currency(StrEnum):
    """ISO 4217 codes accepted in statements and on accounts."""

    EUR = "EUR"
    UAH = "UAH"
    USD = "USD"
    GBP = "GBP"


@dataclass(frozen=True, slots=True)
class CurrencyMetadata:
    code: Currency
    name: str
    symbol: str
    decimals: int


CURRENCIES: dict[Currency, CurrencyMetadata] = {
    Currency.EUR: CurrencyMetadata(Currency.EUR, "Euro", "€", 2),
    Currency.UAH: CurrencyMetadata(Currency.UAH, "Ukrainian Hryvnia", "₴", 2),
    Currency.USD: CurrencyMetadata(Currency.USD, "US Dollar", "$", 2),
    Currency.GBP: CurrencyMetadata(Currency.GBP, "British Pound", "£", 2),
}


def format_amount(amount: Decimal, currency: str) -> str:
    """Render ``amount`` with the currency's symbol and minor-unit precision.

    Codes without metadata fall back to the plain value followed by the code.
    """

    if currency not in Currency:
        return f"{amount} {currency}"
    meta = CURRENCIES[Currency(currency)]
    value = amount.quantize(Decimal(1).scaleb(-meta.decimals))
    sign = "-" if value < 0 else ""
    return f"{sign}{meta.symbol}{abs(value)}"


class BankCode(StrEnum):
    REVOLUT = "REVOLUT"
    SEB = "SEB"
    SWEDBANK = "SWEDBANK"
    MONOBANK = "MONOBANK"
    PRIVATBANK = "PRIVATBANK"


class TransactionType(StrEnum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    @classmethod
    def for_amount(cls, amount: Decimal) -> TransactionType:
        """Money in (including zero) is a credit; money out is a debit."""

        return cls.CREDIT if amount >= 0 else cls.DEBIT


# ---------------------------------------------------------------------------
# Canonical transaction (parser output)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CanonicalTransaction:
    """A single statement row mapped onto the ledger's canonical fields.

    ``amount`` carries the derived sign: positive for money in, negative for
    money out. ``type_indicator`` keeps the raw debit/credit marker from the
    file for traceability. ``account_number`` is the owning account of the
    statement section the row came from.
    """

    external_id: str
    date: dt.date
    amount: Decimal
    currency: Currency
    merchant: str | None
    description: str | None
    category: str | None
    type_indicator: str
    account_number: str
    counterparty_account_id: str | None = None
    # Set only for transfers made in a currency other than the account's
    original_amount: Decimal | None = None
    original_currency: str | None = None
    # 1-based physical line in the source file, when known
    line: int | None = None


# ---------------------------------------------------------------------------
# Import result DTOs
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class ImportErrorRecord(_CamelModel):
    """One problem encountered while importing, tied to a file line when known."""

    row: PositiveInt | None = None
    message: str = Field(min_length=1)
    data: Any | None = None


class ImportStatistics(_CamelModel):
    total_rows: NonNegativeInt
    imported: NonNegativeInt
    duplicates: NonNegativeInt
    failed: NonNegativeInt
    accounts: list[str]


class ImportResult(_CamelModel):
    success: bool
    statistics: ImportStatistics
    errors: list[ImportErrorRecord] = Field(default_factory=list)
    # Populated only when the caller asked to see skipped duplicates
    duplicate_transactions: list[CanonicalTransaction] | None = None


__all__ = [
    "Currency",
    "CurrencyMetadata",
    "CURRENCIES",
    "format_amount",
    "BankCode",
    "TransactionType",
    "CanonicalTransaction",
    "ImportErrorRecord",
    "ImportStatistics",
    "ImportResult",
]
