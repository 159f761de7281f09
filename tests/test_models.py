from __future__ import annotations

from decimal import Decimal

from statement_import.models import CURRENCIES, Currency, format_amount


def test_every_currency_has_metadata():
    assert set(CURRENCIES) == set(Currency)
    assert CURRENCIES[Currency.UAH].symbol == "₴"


def test_format_amount_pads_to_minor_units():
    assert format_amount(Decimal("5"), Currency.EUR) == "€5.00"
    assert format_amount(Decimal("12.3"), "GBP") == "£12.30"


def test_format_amount_puts_sign_before_symbol():
    assert format_amount(Decimal("-50.25"), Currency.USD) == "-$50.25"


def test_format_amount_unknown_code_keeps_value():
    assert format_amount(Decimal("1.5"), "SEK") == "1.5 SEK"
