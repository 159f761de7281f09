"""Split a statement export into per-account chunks.

A single export may concatenate several account statements. Each section
starts with a banner line carrying the account id, then a header line, then
data rows until the next banner or end of file. Lines are kept verbatim along
with their 1-based line numbers so later stages can report problems against
the original file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from ..logging_setup import get_logger
from .dialects import Dialect, extract_account_id, is_banner, is_header

logger = get_logger("statement_import.ingest.segment")


def _odd_quotes(line: str) -> bool:
    # Escaped quotes come in pairs, so parity tracks whether a field is open
    return line.count('"') % 2 == 1


class SourceLine(NamedTuple):
    number: int
    text: str


@dataclass(slots=True)
class AccountChunk:
    account_id: str
    header: SourceLine
    rows: list[SourceLine] = field(default_factory=list)

    @property
    def raw_csv_block(self) -> str:
        return "\n".join([self.header.text, *(r.text for r in self.rows)])


def split_into_account_chunks(text: str, dialect: Dialect) -> list[AccountChunk]:
    """Return the account sections of ``text`` in file order.

    Blank lines are skipped unless they sit inside a quoted field, which may
    span several physical lines; such continuation lines always stay with the
    row that opened the quote. A banner without a recognizable account id opens
    a section that is ignored up to the next banner. Sections that never reach
    a header line produce no chunk.
    """

    chunks: list[AccountChunk] = []
    account_id: str | None = None
    current: AccountChunk | None = None
    in_quote = False

    def flush() -> None:
        if current is not None:
            chunks.append(current)

    for number, line in enumerate(text.splitlines(), start=1):
        if in_quote and current is not None:
            current.rows.append(SourceLine(number, line))
            in_quote ^= _odd_quotes(line)
            continue

        if not line.strip():
            continue

        if is_banner(line, dialect):
            flush()
            current = None
            account_id = extract_account_id(line)
            if account_id is None:
                logger.warning("Line %d: account banner without an account id; skipping section", number)
            continue

        if account_id is None:
            continue

        if current is None:
            if is_header(line, dialect):
                current = AccountChunk(account_id=account_id, header=SourceLine(number, line))
            else:
                logger.debug("Line %d: ignored before header for %s", number, account_id)
            continue

        current.rows.append(SourceLine(number, line))
        in_quote = _odd_quotes(line)

    flush()
    logger.debug("Found %d account section(s)", len(chunks))
    return chunks


__all__ = ["SourceLine", "AccountChunk", "split_into_account_chunks"]
