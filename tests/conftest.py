"""Shared fixtures for the statement pipeline tests."""

import textwrap

import pytest

from categorizer import TransactionCategorizer
from extractor import LineParser, StatementParser
from preprocess import DataPreprocessor


@pytest.fixture
def preprocessor() -> DataPreprocessor:
    return DataPreprocessor()


@pytest.fixture
def categorizer() -> TransactionCategorizer:
    return TransactionCategorizer()


@pytest.fixture
def line_parser(categorizer: TransactionCategorizer) -> LineParser:
    return LineParser(categorizer=categorizer)


@pytest.fixture
def statement_parser(line_parser: LineParser) -> StatementParser:
    return StatementParser(line_parser)


@pytest.fixture
def phonepe_text() -> str:
    # Layout as extracted from a PhonePe PDF: date on its own line, then the
    # transaction line, then reference lines.
    return textwrap.dedent(
        """
        Transaction Statement for 98XXXXXX10
        Date Transaction Details Type Amount

        Feb 22, 2026
        Paid to Swiggy DEBIT ₹350
        Transaction ID T2602221234
        UTR No. 604512345678
        Feb 21, 2026
        Received from Ramesh Kumar CREDIT ₹1,500.00
        Feb 20, 2026 Paid to Uber India ₹212.50

        Page 1 of 2
        """
    )
