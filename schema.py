import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_AMOUNT = Decimal("1000000")
MAX_MERCHANT_LENGTH = 40
MAX_RAW_TEXT_LENGTH = 200
UNKNOWN_MERCHANT = "Unknown Merchant"


class Category(str, Enum):
    """Spend categories. Declaration order is the keyword match priority."""
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    RECHARGE = "recharge"
    TRANSFERS = "transfers"
    OTHER = "other"


class Direction(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class ParseContext(BaseModel):
    """State carried from line to line during one statement scan."""
    current_date: Optional[datetime.date] = None
    line_index: int = 0


class TransactionCandidate(BaseModel):
    """Transaction parsed out of one statement line, not yet persisted."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: datetime.date = Field(..., description="Statement date the line belongs to")
    merchant: str = Field(..., min_length=1, max_length=MAX_MERCHANT_LENGTH)
    amount: Decimal = Field(..., gt=0, lt=MAX_AMOUNT, description="Amount in rupees")
    direction: Direction
    category: Category
    raw_text: str = Field(..., alias="rawText", max_length=MAX_RAW_TEXT_LENGTH)

    @field_validator('amount', mode='before')
    @classmethod
    def round_to_paise(cls, v):
        """Round to currency minor units before the bounds are checked."""
        try:
            return Decimal(str(v)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # Left for the field validation to report
            return v

    def to_record(self) -> dict:
        """Serialize to the external record shape handed to persistence."""
        return self.model_dump(by_alias=True, mode="json")


class ParseResult(BaseModel):
    """Candidates found in a statement plus line counts for diagnostics."""
    transactions: List[TransactionCandidate]
    line_count: int = Field(0, ge=0, description="Non-blank lines scanned")
    matched_count: int = Field(0, ge=0, description="Lines that produced a candidate")

    @model_validator(mode='after')
    def validate_counts(self):
        """Ensure matched_count matches the transaction list length."""
        if self.matched_count != len(self.transactions):
            self.matched_count = len(self.transactions)
        if self.line_count < self.matched_count:
            raise ValueError('line_count cannot be smaller than matched_count')
        return self

    @property
    def unmatched_count(self) -> int:
        return self.line_count - self.matched_count

    def to_records(self) -> List[dict]:
        return [t.to_record() for t in self.transactions]
