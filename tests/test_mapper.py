from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from statement_import.errors import ErrorKind, StatementImportError
from statement_import.ingest.headers import CanonicalField as F
from statement_import.ingest.mapper import map_row, map_rows, parse_amount, resolve_external_id
from statement_import.ingest.normalize import NormalizedRow
from statement_import.models import Currency

ACCOUNT = "LT123456789012345678"


def _row(line: int = 3, **overrides: str) -> NormalizedRow:
    fields: dict[F, str] = {
        F.INSTRUCTION_ID: "TM001",
        F.EXTERNAL_ID: "RO001",
        F.DATE: "2025-01-15",
        F.AMOUNT: "100,50",
        F.CURRENCY: "EUR",
        F.MERCHANT: "Test Merchant",
        F.CATEGORY: "Payment",
        F.TYPE_INDICATOR: "C",
    }
    for key, value in overrides.items():
        fields[F[key.upper()]] = value
    return NormalizedRow(line=line, fields=fields, raw={k.value: v for k, v in fields.items()})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("100,50", Decimal("100.50")),
        ("0,01", Decimal("0.01")),
        ("1 234,56", Decimal("1234.56")),
        ("-50,25", Decimal("50.25")),
        ("12", Decimal("12")),
    ],
)
def test_parse_amount_decimal_comma(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1,2,3", "NaN", "Infinity", ""])
def test_parse_amount_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_amount(raw)


def test_debit_row_is_negative_eur():
    tx = map_row(_row(amount="50,25", type_indicator="D"), ACCOUNT)
    assert tx.amount == Decimal("-50.25")
    assert tx.currency is Currency.EUR
    assert tx.type_indicator == "D"
    assert tx.account_number == ACCOUNT
    assert tx.date == date(2025, 1, 15)
    assert tx.line == 3


def test_credit_sign_ignores_source_sign():
    tx = map_row(_row(amount="-75,00", type_indicator="C"), ACCOUNT)
    assert tx.amount == Decimal("75.00")


def test_transaction_code_preferred_over_instruction_id():
    assert resolve_external_id(_row()) == "RO001"
    assert map_row(_row(), ACCOUNT).external_id == "RO001"


def test_instruction_id_used_when_transaction_code_blank():
    tx = map_row(_row(external_id="  "), ACCOUNT)
    assert tx.external_id == "TM001"


def test_amount_falls_back_to_transfer_amount():
    tx = map_row(_row(amount="", amount_alt="12,00"), ACCOUNT)
    assert tx.amount == Decimal("12.00")


def test_currency_defaults_to_eur():
    tx = map_row(_row(currency=""), ACCOUNT)
    assert tx.currency is Currency.EUR


def test_counterparty_trimmed_or_none():
    assert map_row(_row(counterparty_account="  LT555  "), ACCOUNT).counterparty_account_id == "LT555"
    assert map_row(_row(counterparty_account=" "), ACCOUNT).counterparty_account_id is None


def test_text_fields_are_collapsed():
    tx = map_row(_row(merchant="  UAB   Maxima \n LT ", description="", category="Card"), ACCOUNT)
    assert tx.merchant == "UAB Maxima LT"
    assert tx.description is None
    assert tx.category == "Card"


def test_foreign_transfer_keeps_original_amount():
    tx = map_row(
        _row(amount="92,00", amount_alt="100,00", transfer_currency="usd", type_indicator="D"),
        ACCOUNT,
    )
    assert tx.amount == Decimal("-92.00")
    assert tx.original_amount == Decimal("-100.00")
    assert tx.original_currency == "USD"


def test_same_currency_transfer_has_no_original_amount():
    tx = map_row(_row(amount_alt="100,50", transfer_currency="EUR"), ACCOUNT)
    assert tx.original_amount is None
    assert tx.original_currency is None


@pytest.mark.parametrize(
    ("overrides", "needle"),
    [
        ({"amount": "abc"}, "Invalid amount"),
        ({"date": "15.01.2025"}, "Invalid date"),
        ({"currency": "SEK"}, "Unsupported currency"),
        ({"type_indicator": ""}, "debit/credit"),
    ],
)
def test_bad_row_raises_row_mapping(overrides, needle):
    with pytest.raises(StatementImportError) as ei:
        map_row(_row(line=7, **overrides), ACCOUNT)
    err = ei.value
    assert err.kind is ErrorKind.ROW_MAPPING
    assert err.line == 7
    assert needle in err.message
    assert err.row is not None


def test_map_rows_skips_and_reports_bad_rows():
    rows = [_row(line=3), _row(line=4, amount="x"), _row(line=5, external_id="RO002")]
    txs, errors = map_rows(rows, ACCOUNT)

    assert [t.external_id for t in txs] == ["RO001", "RO002"]
    assert len(errors) == 1
    assert errors[0].row == 4
    assert "Invalid amount" in errors[0].message
    assert errors[0].data["externalId"] == "RO001"
