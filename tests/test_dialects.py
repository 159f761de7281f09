from __future__ import annotations

import pytest

from statement_import.errors import ErrorKind, StatementImportError
from statement_import.ingest.dialects import Dialect, detect_dialect, extract_account_id, is_banner
from tests.helpers.statements import EN_HEADER, LT_HEADER, en_banner, lt_banner, row, statement


def test_detects_lithuanian_export():
    assert detect_dialect(statement([row()], lang="lt")) is Dialect.LANG_A


def test_detects_english_export():
    assert detect_dialect(statement([row()], lang="en")) is Dialect.LANG_B


def test_english_markers_take_priority():
    text = "\n".join([lt_banner(), LT_HEADER, en_banner(), EN_HEADER, row()])
    assert detect_dialect(text) is Dialect.LANG_B


def test_rejects_unknown_format():
    text = "Date,Description,Amount\n2025-01-01,Coffee,3.50\n"
    with pytest.raises(StatementImportError) as ei:
        detect_dialect(text, source="amex.csv")
    assert ei.value.kind is ErrorKind.UNSUPPORTED_FORMAT
    assert "amex.csv" in ei.value.message


def test_banner_without_header_is_rejected():
    text = "\n".join([lt_banner(), row()])
    with pytest.raises(StatementImportError) as ei:
        detect_dialect(text)
    assert ei.value.kind is ErrorKind.UNSUPPORTED_FORMAT


def test_markers_outside_scan_window_are_ignored():
    filler = [f'"note {i}";' for i in range(10)]
    text = "\n".join([*filler, lt_banner(), LT_HEADER, row()])
    with pytest.raises(StatementImportError):
        detect_dialect(text)


def test_extract_account_id():
    assert extract_account_id(lt_banner("LT999")) == "LT999"
    assert extract_account_id('"SĄSKAITOS IŠRAŠAS";') is None


def test_banner_needs_account_id_or_a_single_field():
    assert is_banner(en_banner(), Dialect.LANG_B)
    assert is_banner('"ACCOUNT STATEMENT";', Dialect.LANG_B)
    assert not is_banner(row(merchant="ACCOUNT STATEMENT FEE"), Dialect.LANG_B)
