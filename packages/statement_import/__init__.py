"""Public interface for the ``statement_import`` package.

Re-exports the import entry point, the parser entry points and the public
models/errors. There is no runtime logic here, only symbol re-exports.
"""

from .errors import ConfigurationError, ErrorKind, StatementImportError
from .importer import import_statement
from .ingest import Dialect, ParsedStatement, load_statement, parse_statement_text
from .models import (
    BankCode,
    CanonicalTransaction,
    Currency,
    ImportErrorRecord,
    ImportResult,
    ImportStatistics,
    TransactionType,
)

__all__ = [
    # API
    "import_statement",
    "load_statement",
    "parse_statement_text",
    # Models / types
    "BankCode",
    "CanonicalTransaction",
    "Currency",
    "Dialect",
    "ImportErrorRecord",
    "ImportResult",
    "ImportStatistics",
    "ParsedStatement",
    "TransactionType",
    # Errors
    "ConfigurationError",
    "ErrorKind",
    "StatementImportError",
]
