"""Dialect detection for SEB account statement CSV exports.

SEB exports the same semicolon-delimited layout in two languages. Each account
section opens with a *banner* line (two tokens on one line, with the account
IBAN in parentheses) followed by a *header* line (two column names that only
appear on the header). Detection looks at the first ``SCAN_LINES`` lines only
and requires both a banner and a header of the same dialect; anything else is
rejected rather than guessed.
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from enum import StrEnum

from ..errors import StatementImportError

SCAN_LINES = 10
DELIMITER = ";"

# Account identifiers are embedded in the banner as ``(LT123...)``
ACCOUNT_ID_RE = re.compile(r"\(([A-Z]{2}[0-9]+)\)")


class Dialect(StrEnum):
    LANG_A = "lang_a"  # Lithuanian
    LANG_B = "lang_b"  # English


@dataclass(frozen=True, slots=True)
class DialectMarkers:
    banner: tuple[str, str]
    header: tuple[str, str]


MARKERS: dict[Dialect, DialectMarkers] = {
    Dialect.LANG_A: DialectMarkers(
        banner=("SĄSKAITOS", "IŠRAŠAS"),
        header=("DOK NR.", "DEBETAS/KREDITAS"),
    ),
    Dialect.LANG_B: DialectMarkers(
        banner=("ACCOUNT", "STATEMENT"),
        header=("INSTRUCTION ID", "DEBIT/CREDIT"),
    ),
}

# Probe order; the English variant wins when both would match.
_PRIORITY: tuple[Dialect, ...] = (Dialect.LANG_B, Dialect.LANG_A)


def _single_field(line: str) -> bool:
    values = next(csv.reader([line], delimiter=DELIMITER), [])
    return sum(1 for v in values if v.strip()) <= 1


def is_banner(line: str, dialect: Dialect) -> bool:
    """Banner tokens alone are not enough; data rows can mention them too.

    The line must also name an account id or be a lone field.
    """

    first, second = MARKERS[dialect].banner
    if first not in line or second not in line:
        return False
    return extract_account_id(line) is not None or _single_field(line)


def is_header(line: str, dialect: Dialect) -> bool:
    first, second = MARKERS[dialect].header
    return first in line and second in line


def extract_account_id(line: str) -> str | None:
    match = ACCOUNT_ID_RE.search(line)
    return match.group(1) if match else None


def _matches(lines: list[str], dialect: Dialect) -> bool:
    has_banner = any(is_banner(line, dialect) for line in lines)
    has_header = any(
        is_header(line, dialect) and not is_banner(line, dialect) for line in lines
    )
    return has_banner and has_header


def detect_dialect(text: str, *, source: str = "<memory>") -> Dialect:
    """Return the statement dialect of ``text``.

    Raises ``StatementImportError`` (``UNSUPPORTED_FORMAT``) when neither
    dialect has both a banner line and a header line inside the scan window.
    """

    head = text.splitlines()[:SCAN_LINES]
    for dialect in _PRIORITY:
        if _matches(head, dialect):
            return dialect
    raise StatementImportError.unsupported_format(source)


__all__ = [
    "SCAN_LINES",
    "DELIMITER",
    "ACCOUNT_ID_RE",
    "Dialect",
    "DialectMarkers",
    "MARKERS",
    "is_banner",
    "is_header",
    "extract_account_id",
    "detect_dialect",
]
