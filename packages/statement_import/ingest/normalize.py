"""Map raw statement rows onto canonical fields.

Each chunk is read as one semicolon-delimited CSV document, so a quoted
field may carry line breaks. Columns are resolved by position: each column
index is bound to the canonical field its name maps to, and a field already
bound by an earlier column is not rebound. This is what disambiguates the
repeated ``ACCOUNT NO`` column in the English export.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from ..errors import ErrorKind, StatementImportError
from ..logging_setup import get_logger
from .dialects import DELIMITER
from .headers import CanonicalField, canonical_field
from .segment import AccountChunk

logger = get_logger("statement_import.ingest.normalize")

# A header must carry these for rows to be mappable at all
_REQUIRED: tuple[CanonicalField, ...] = (CanonicalField.DATE, CanonicalField.TYPE_INDICATOR)


@dataclass(frozen=True, slots=True)
class NormalizedRow:
    """One data row keyed by canonical field and by raw header.

    ``raw`` is kept for diagnostics (error payloads); downstream mapping reads
    ``fields`` only.
    """

    line: int
    fields: Mapping[CanonicalField, str]
    raw: Mapping[str, str]

    def get(self, key: CanonicalField) -> str | None:
        value = self.fields.get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None


def _records(chunk: AccountChunk) -> Iterator[tuple[int, list[str]]]:
    """Parse the chunk block as one CSV document.

    Yields each record with the file line number it starts on. A quoted field
    may span physical lines, so records and lines are not one-to-one.
    """

    lines = [chunk.header, *chunk.rows]
    reader = csv.reader(io.StringIO(chunk.raw_csv_block), delimiter=DELIMITER)
    start = 0
    try:
        for values in reader:
            yield lines[start].number, values
            start = reader.line_num
    except csv.Error as exc:
        number = lines[min(start, len(lines) - 1)].number
        raise StatementImportError(
            ErrorKind.UNSUPPORTED_FORMAT,
            f"Line {number}: malformed CSV record",
            line=number,
        ) from exc


def resolve_columns(
    header_line: int, header_values: list[str]
) -> tuple[list[str], dict[int, CanonicalField]]:
    """Return trimmed header names and the column index -> field binding."""

    names = [name.strip() for name in header_values]
    bound: dict[CanonicalField, int] = {}
    for index, name in enumerate(names):
        if not name:
            continue
        key = canonical_field(name)
        if key is None:
            logger.debug("Line %d: unknown column %r ignored", header_line, name)
            continue
        if key in bound:
            logger.debug(
                "Line %d: column %d (%s) not bound; %s already taken by column %d",
                header_line,
                index,
                name,
                key.value,
                bound[key],
            )
            continue
        bound[key] = index

    has_amount = CanonicalField.AMOUNT in bound or CanonicalField.AMOUNT_ALT in bound
    missing = [k.value for k in _REQUIRED if k not in bound]
    if not has_amount:
        missing.append(CanonicalField.AMOUNT.value)
    if missing:
        raise StatementImportError(
            ErrorKind.UNSUPPORTED_FORMAT,
            f"Line {header_line}: header is missing columns: " + ", ".join(missing),
            line=header_line,
        )
    return names, {index: key for key, index in bound.items()}


def normalize_chunk(chunk: AccountChunk) -> Iterator[NormalizedRow]:
    """Yield the data rows of ``chunk`` that carry a transaction reference.

    Rows with neither a transaction code nor an instruction id are not data
    (totals, footers, stray lines) and are dropped without error.
    """

    records = _records(chunk)
    header_line, header_values = next(records, (chunk.header.number, []))
    names, columns = resolve_columns(header_line, header_values)
    for number, values in records:
        if not any(v.strip() for v in values):
            continue
        raw: dict[str, str] = {}
        for index, name in enumerate(names):
            if name:
                raw[name] = values[index] if index < len(values) else ""
        fields = {
            key: (values[index] if index < len(values) else "")
            for index, key in columns.items()
        }
        row = NormalizedRow(line=number, fields=fields, raw=raw)
        if row.get(CanonicalField.EXTERNAL_ID) is None and row.get(CanonicalField.INSTRUCTION_ID) is None:
            logger.debug("Line %d: no transaction reference; row dropped", number)
            continue
        yield row


__all__ = ["DELIMITER", "NormalizedRow", "resolve_columns", "normalize_chunk"]
