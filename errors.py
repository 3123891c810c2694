"""
Exceptions raised by the statement pipeline.

The parser itself never raises for malformed statement text; these cover the
stages around it (PDF text extraction, taxonomy configuration, and the
caller-side decision that a statement yielded nothing usable).
"""


class StatementError(ValueError):
    """Base class for statement processing failures."""


class ExtractionError(StatementError):
    """The PDF could not be turned into text (corrupt, encrypted, scanned, too large)."""


class UnsupportedStatementError(StatementError):
    """Text was extracted but no transactions could be parsed from it."""


class TaxonomyError(StatementError):
    """The category keyword configuration is invalid."""
