"""Monthly aggregation of recorded expenses."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, Sequence

import pandas as pd

from .models import ExpenseRecord, MonthBucket

logger = logging.getLogger(__name__)


def expenses_dataframe(expenses: Iterable[ExpenseRecord]) -> pd.DataFrame:
    """Tabulate the dated expenses with a ``Month`` period column.

    Expenses without a usable date are dropped here; they still count
    toward :attr:`Project.total_expenses`.
    """
    rows = []
    skipped = 0
    for expense in expenses:
        if expense.date is None:
            skipped += 1
            continue
        rows.append({'Date': pd.Timestamp(expense.date), 'Value': float(expense.value)})
    if skipped:
        logger.debug("Skipped %d expenses without a usable date", skipped)

    df = pd.DataFrame(rows, columns=['Date', 'Value'])
    df['Month'] = pd.to_datetime(df['Date']).dt.to_period('M')
    return df


def aggregate(expenses: Iterable[ExpenseRecord], months: Sequence[MonthBucket]) -> Dict[date, float]:
    """Sum expense values per month bucket.

    Args:
        expenses: Expense records of one or more projects
        months: Ordered month buckets

    Returns:
        Dictionary mapping every bucket start to the summed value of the
        expenses in that calendar month (0.0 when there are none).
        Expenses outside the bucket range are ignored, not clamped.
    """
    totals: Dict[date, float] = {month.start: 0.0 for month in months}
    if not totals:
        return totals

    df = expenses_dataframe(expenses)
    if df.empty:
        return totals

    monthly = df.groupby('Month')['Value'].sum()
    outside = 0
    for period, value in monthly.items():
        key = date(period.year, period.month, 1)
        if key in totals:
            totals[key] += float(value)
        else:
            outside += 1
    if outside:
        logger.debug("Ignored expenses in %d months outside the timeline", outside)
    return totals
