"""
Preprocessing utilities for cleaning and normalizing extracted statement text.
"""
import datetime
import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Callable, List, NamedTuple, Optional, Union

from dateutil import parser

from schema import MAX_AMOUNT

_MONTH = (
    r'(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|'
    r'Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)'
)

# Currency marker, then digits with optional thousands groups (1,234 or 1,00,000).
# Decimal digits past the second are consumed but not captured.
AMOUNT_PATTERN = re.compile(
    r'(?:₹|\bRs\.?|\bINR)\s*(\d+(?:,\d+)*(?:\.\d{1,2})?)\d*',
    re.IGNORECASE,
)

CREDIT_KEYWORDS = ('credit', 'received', 'cashback', 'refund')


def _parse_month_name(match) -> datetime.date:
    text = match.group(0)
    parsed = parser.parse(text).date()
    # dateutil maps years like 0000 onto a nearby century
    year = re.search(r'\d{4}', text).group(0)
    if parsed.year != int(year):
        raise ValueError(f"Year out of range: {year}")
    return parsed


def _parse_iso(match) -> datetime.date:
    year, month, day = match.groups()
    return datetime.date(int(year), int(month), int(day))


def _parse_day_first(match) -> datetime.date:
    day, month, year = match.groups()
    if len(year) == 2:
        year = f"20{year}"
    return datetime.date(int(year), int(month), int(day))


class DatePattern(NamedTuple):
    name: str
    regex: re.Pattern
    parse: Callable[[re.Match], datetime.date]


# Tried in order; the first regex that matches decides the line's date.
DATE_PATTERNS = (
    DatePattern(
        'month_day_year',
        re.compile(rf'\b{_MONTH}\s+\d{{1,2}},?\s+\d{{4}}\b', re.IGNORECASE),
        _parse_month_name,
    ),
    DatePattern(
        'day_month_year',
        re.compile(rf'\b\d{{1,2}}\s+{_MONTH},?\s+\d{{4}}\b', re.IGNORECASE),
        _parse_month_name,
    ),
    DatePattern(
        'iso',
        re.compile(r'\b(\d{4})-(\d{2})-(\d{2})\b'),
        _parse_iso,
    ),
    DatePattern(
        'day_month_slash',
        re.compile(r'\b(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})\b'),
        _parse_day_first,
    ),
)


class DataPreprocessor:
    """Splits statement text into lines and normalizes dates and amounts."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.date_patterns = DATE_PATTERNS
        self.amount_pattern = AMOUNT_PATTERN

    def preprocess_text_data(self, text_data: Union[str, List[str]]) -> List[str]:
        """
        Split extracted text into trimmed, non-blank lines.

        Args:
            text_data: Full statement text or a list of page texts

        Returns:
            List of cleaned text lines in statement order
        """
        if isinstance(text_data, str):
            text_data = [text_data]

        cleaned_lines = []
        for text_block in text_data:
            for line in (text_block or '').splitlines():
                line = line.strip()
                if line:
                    cleaned_lines.append(line)

        self.logger.debug(f"Preprocessed text data: {len(cleaned_lines)} non-blank lines")
        return cleaned_lines

    def find_date(self, line: str) -> Optional[datetime.date]:
        """
        Find the statement date on a line.

        Only the first pattern whose regex matches is used. If that fragment
        is not a real calendar date, the line has no date.
        """
        for pattern in self.date_patterns:
            match = pattern.regex.search(line)
            if not match:
                continue
            try:
                return pattern.parse(match)
            except (ValueError, OverflowError):
                self.logger.debug(f"Ignoring invalid {pattern.name} date: {match.group(0)!r}")
                return None
        return None

    def find_amounts(self, line: str) -> List[Decimal]:
        """Return every plausible currency amount on the line, in order."""
        amounts = []
        for match in self.amount_pattern.finditer(line):
            amount = self.clean_amount(match.group(1))
            if amount is None:
                continue
            if amount <= 0 or amount >= MAX_AMOUNT:
                self.logger.debug(f"Discarding implausible amount: {match.group(0)!r}")
                continue
            amounts.append(amount)
        return amounts

    def clean_amount(self, amount_str: str) -> Optional[Decimal]:
        """
        Convert a numeric token like "1,234.5" to a Decimal with 2 places.

        Returns None when the token is not a number.
        """
        cleaned = amount_str.replace(',', '').strip()
        if not cleaned:
            return None
        try:
            return Decimal(cleaned).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            self.logger.warning(f"Could not parse amount: {amount_str}")
            return None

    def strip_amounts(self, line: str) -> str:
        return self.amount_pattern.sub(' ', line)

    def strip_dates(self, line: str) -> str:
        """Remove date-like text of every supported format."""
        for pattern in self.date_patterns:
            line = pattern.regex.sub(' ', line)
        return line

    @staticmethod
    def is_credit(line: str) -> bool:
        lowered = line.lower()
        return any(keyword in lowered for keyword in CREDIT_KEYWORDS)
