"""
Tabular summaries of parsed statement transactions.
"""
from decimal import Decimal
from typing import Dict, Sequence

import pandas as pd

from schema import Direction, TransactionCandidate

COLUMNS = ['date', 'merchant', 'amount', 'direction', 'category', 'rawText']


def to_dataframe(transactions: Sequence[TransactionCandidate]) -> pd.DataFrame:
    """One row per transaction, columns in the external record order."""
    rows = [
        {
            'date': t.date,
            'merchant': t.merchant,
            'amount': t.amount,
            'direction': t.direction.value,
            'category': t.category.value,
            'rawText': t.raw_text,
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def category_totals(transactions: Sequence[TransactionCandidate]) -> pd.DataFrame:
    """
    Debit spend per category, largest first.

    Returns:
        DataFrame indexed by category with 'total' (Decimal) and 'count'
    """
    df = to_dataframe(transactions)
    debits = df[df['direction'] == Direction.DEBIT.value]
    if debits.empty:
        return pd.DataFrame(
            {'total': pd.Series(dtype=object), 'count': pd.Series(dtype='int64')}
        ).rename_axis('category')

    grouped = debits.groupby('category')['amount']
    totals = pd.DataFrame({
        'total': grouped.agg(lambda amounts: sum(amounts, Decimal('0'))),
        'count': grouped.size(),
    })
    return totals.sort_values('total', ascending=False, kind='stable')


def cash_flow(transactions: Sequence[TransactionCandidate]) -> Dict[str, Decimal]:
    """Total spent, total received and the net of the two."""
    spent = sum(
        (t.amount for t in transactions if t.direction is Direction.DEBIT), Decimal('0')
    )
    received = sum(
        (t.amount for t in transactions if t.direction is Direction.CREDIT), Decimal('0')
    )
    return {
        'total_spent': spent,
        'total_received': received,
        'net': received - spent,
    }
