"""Header table for SEB statement exports.

Every known column name, in both languages, maps to one ``CanonicalField``.
The two languages are listed as literal entries; matching is exact after
trimming surrounding whitespace.

The English export reuses ``ACCOUNT NO`` for two columns: the counterparty
account (first) and the owning account (last). The normalizer binds each
canonical field to the first column that carries it, so the duplicate name
resolves by position.
"""

from __future__ import annotations

from enum import StrEnum


class CanonicalField(StrEnum):
    EXTERNAL_ID = "externalId"  # per-transaction code
    INSTRUCTION_ID = "instructionId"  # batch/clearing reference, not unique
    DATE = "date"
    AMOUNT = "amount"  # amount in account currency
    AMOUNT_ALT = "amountAlt"  # amount in transfer currency
    CURRENCY = "currency"  # account currency
    TRANSFER_CURRENCY = "transferCurrency"
    MERCHANT = "merchant"
    COUNTERPARTY_CODE = "counterpartyCode"
    COUNTERPARTY_ACCOUNT = "counterpartyAccountId"
    BANK_NAME = "bankName"
    BANK_SWIFT = "bankSwift"
    DESCRIPTION = "description"
    DOCUMENT_DATE = "documentDate"
    CATEGORY = "category"
    REFERENCE = "reference"
    TYPE_INDICATOR = "typeIndicator"
    ACCOUNT_NUMBER = "accountNumber"


HEADER_FIELDS: dict[str, CanonicalField] = {
    # Lithuanian
    "DOK NR.": CanonicalField.INSTRUCTION_ID,
    "DATA": CanonicalField.DATE,
    "VALIUTA": CanonicalField.TRANSFER_CURRENCY,
    "SUMA": CanonicalField.AMOUNT_ALT,
    "MOKĖTOJO ARBA GAVĖJO PAVADINIMAS": CanonicalField.MERCHANT,
    "MOKĖTOJO ARBA GAVĖJO IDENTIFIKACINIS KODAS": CanonicalField.COUNTERPARTY_CODE,
    "SĄSKAITA": CanonicalField.COUNTERPARTY_ACCOUNT,
    "KREDITO ĮSTAIGOS PAVADINIMAS": CanonicalField.BANK_NAME,
    "KREDITO ĮSTAIGOS SWIFT KODAS": CanonicalField.BANK_SWIFT,
    "MOKĖJIMO PASKIRTIS": CanonicalField.DESCRIPTION,
    "TRANSAKCIJOS KODAS": CanonicalField.EXTERNAL_ID,
    "DOKUMENTO DATA": CanonicalField.DOCUMENT_DATE,
    "TRANSAKCIJOS TIPAS": CanonicalField.CATEGORY,
    "NUORODA": CanonicalField.REFERENCE,
    "DEBETAS/KREDITAS": CanonicalField.TYPE_INDICATOR,
    "SUMA SĄSKAITOS VALIUTA": CanonicalField.AMOUNT,
    "SĄSKAITOS NR": CanonicalField.ACCOUNT_NUMBER,
    "SĄSKAITOS VALIUTA": CanonicalField.CURRENCY,
    # English
    "INSTRUCTION ID": CanonicalField.INSTRUCTION_ID,
    "DATE": CanonicalField.DATE,
    "CURRENCY": CanonicalField.TRANSFER_CURRENCY,
    "AMOUNT": CanonicalField.AMOUNT_ALT,
    "COUNTERPARTY": CanonicalField.MERCHANT,
    "DEBTOR/CREDITOR ID": CanonicalField.COUNTERPARTY_CODE,
    "ACCOUNT NO": CanonicalField.COUNTERPARTY_ACCOUNT,
    "CREDIT INSTITUTION NAME": CanonicalField.BANK_NAME,
    "CREDIT INSTITUTION SWIFT": CanonicalField.BANK_SWIFT,
    "DETAILS OF PAYMENTS": CanonicalField.DESCRIPTION,
    "TRANSACTION CODE": CanonicalField.EXTERNAL_ID,
    "DOCUMENT DATE": CanonicalField.DOCUMENT_DATE,
    "TRANSACTION TYPE": CanonicalField.CATEGORY,
    "REFERENCE NO": CanonicalField.REFERENCE,
    "DEBIT/CREDIT": CanonicalField.TYPE_INDICATOR,
    "AMOUNT IN ACCOUNT CURRENCY": CanonicalField.AMOUNT,
    "ACCOUNT CURRENCY": CanonicalField.CURRENCY,
}


def canonical_field(header: str) -> CanonicalField | None:
    return HEADER_FIELDS.get(header.strip())


__all__ = ["CanonicalField", "HEADER_FIELDS", "canonical_field"]
