"""
Extraction of transaction candidates from PhonePe statement text.
"""
import logging
import re
from typing import List, Optional, Union

from categorizer import TransactionCategorizer
from preprocess import DataPreprocessor
from schema import (
    MAX_MERCHANT_LENGTH,
    MAX_RAW_TEXT_LENGTH,
    UNKNOWN_MERCHANT,
    Direction,
    ParseContext,
    ParseResult,
    TransactionCandidate,
)

# Direction words and PhonePe boilerplate around the merchant name
NOISE_PATTERN = re.compile(
    r'\b(?:paid\s+to|received\s+from|sent\s+to|credit(?:ed)?|debit(?:ed)?|'
    r'received|cashback|refund(?:ed)?|upi|utr|ref)\b',
    re.IGNORECASE,
)
SEPARATOR_PATTERN = re.compile(r'[|•·:;,\-–—_/\\()\[\]{}*#~]+')
WHITESPACE_PATTERN = re.compile(r'\s+')


class LineParser:
    """Turns a single statement line into at most one transaction candidate."""

    def __init__(
        self,
        categorizer: Optional[TransactionCategorizer] = None,
        preprocessor: Optional[DataPreprocessor] = None,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.categorizer = categorizer or TransactionCategorizer()
        self.preprocessor = preprocessor or DataPreprocessor()

    def parse_line(self, line: str, ctx: ParseContext) -> Optional[TransactionCandidate]:
        """
        Parse one line, updating ctx.current_date when the line carries a date.

        Args:
            line: Trimmed statement line
            ctx: Context shared by the lines of one statement

        Returns:
            TransactionCandidate, or None when the line has no amount or no
            date is known yet
        """
        line_date = self.preprocessor.find_date(line)
        if line_date is not None:
            ctx.current_date = line_date

        amounts = self.preprocessor.find_amounts(line)
        if not amounts:
            return None
        if ctx.current_date is None:
            self.logger.debug(f"Line {ctx.line_index}: amount before any date, skipping")
            return None

        direction = Direction.CREDIT if self.preprocessor.is_credit(line) else Direction.DEBIT
        merchant = self.extract_merchant(line)

        return TransactionCandidate(
            date=ctx.current_date,
            merchant=merchant,
            amount=amounts[0],
            direction=direction,
            category=self.categorizer.classify(merchant),
            raw_text=line[:MAX_RAW_TEXT_LENGTH],
        )

    def extract_merchant(self, line: str) -> str:
        """Whatever remains after removing amounts, dates and boilerplate."""
        cleaned = self.preprocessor.strip_amounts(line)
        cleaned = self.preprocessor.strip_dates(cleaned)
        cleaned = NOISE_PATTERN.sub(' ', cleaned)
        cleaned = SEPARATOR_PATTERN.sub(' ', cleaned)
        cleaned = WHITESPACE_PATTERN.sub(' ', cleaned).strip(' .')

        if not cleaned:
            return UNKNOWN_MERCHANT
        return cleaned[:MAX_MERCHANT_LENGTH].rstrip()


class StatementParser:
    """Scans a whole statement line by line, carrying the last seen date."""

    def __init__(self, line_parser: Optional[LineParser] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.line_parser = line_parser or LineParser()
        self.preprocessor = self.line_parser.preprocessor

    def parse(self, raw_text: Union[str, List[str]]) -> ParseResult:
        """
        Extract transaction candidates from statement text.

        Never raises for malformed content; an empty transaction list is a
        valid result.

        Args:
            raw_text: Extracted statement text, or one string per page

        Returns:
            ParseResult with candidates in statement order and line counts
        """
        lines = self.preprocessor.preprocess_text_data(raw_text)
        ctx = ParseContext()

        transactions = []
        for index, line in enumerate(lines):
            ctx.line_index = index
            candidate = self.line_parser.parse_line(line, ctx)
            if candidate is not None:
                transactions.append(candidate)

        self.logger.info(
            f"Extracted {len(transactions)} transactions from {len(lines)} lines"
        )
        return ParseResult(
            transactions=transactions,
            line_count=len(lines),
            matched_count=len(transactions),
        )
