"""SEB statement CSV parsing: detection, segmentation, normalization, mapping."""

from .dialects import Dialect, detect_dialect
from .utils import ParsedStatement, load_statement, parse_statement_text

__all__ = ["Dialect", "detect_dialect", "ParsedStatement", "load_statement", "parse_statement_text"]
