"""Domain models for budget timeline projections.

The persistence layer owns projects, budgets and expenses; the engine
only reads them.  Every model here is a frozen dataclass whose
collections are tuples, so a whole portfolio snapshot is hashable by
content and can key a memoization cache.

Dates are plain :class:`datetime.date` objects.  A date that was absent,
unparseable or equal to the epoch sentinel is stored as ``None`` and
each consumer decides explicitly what ``None`` means for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .config import EPOCH_SENTINEL


def parse_calendar_date(value: Any) -> Optional[date]:
    """Coerce ``value`` to a calendar date, or ``None`` when unusable.

    Accepts ``date``/``datetime``/``pandas.Timestamp`` objects and ISO
    strings.  Only the first ten characters of a string are read, so
    ``'2024-01-15T10:30:00Z'`` parses as ``2024-01-15``.  Empty, short or
    malformed strings and the epoch sentinel all map to ``None``.

    Example:
        >>> parse_calendar_date('2024-01-15')
        datetime.date(2024, 1, 15)
        >>> parse_calendar_date('1970-01-01') is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        # NaT is a datetime subclass
        if pd.isna(value):
            return None
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if len(text) < 10:
            return None
        try:
            parsed = date.fromisoformat(text[:10])
        except ValueError:
            return None
    else:
        return None
    if parsed == EPOCH_SENTINEL:
        return None
    return parsed


@dataclass(frozen=True)
class SubCategory:
    """Value-only breakdown of a budget category."""

    id: str
    name: str
    estimated_value: float = 0.0
    percentage: Optional[float] = None


@dataclass(frozen=True)
class BudgetCategory:
    """Top-level budget line item ("macro") with its planned date range."""

    id: str
    name: str
    estimated_value: float = 0.0
    planned_start_date: Optional[date] = None
    planned_end_date: Optional[date] = None
    display_order: int = 0
    percentage: Optional[float] = None
    spent_value: Optional[float] = None
    sub_categories: Tuple[SubCategory, ...] = ()

    @property
    def has_schedule(self) -> bool:
        return self.planned_start_date is not None and self.planned_end_date is not None

    @property
    def sub_category_total(self) -> float:
        """Sum of sub-category values, for reporting only."""
        return float(sum(sub.estimated_value for sub in self.sub_categories))


@dataclass(frozen=True)
class Budget:
    id: str = ''
    total_estimated: Optional[float] = None
    categories: Tuple[BudgetCategory, ...] = ()

    @property
    def categories_total(self) -> float:
        """Sum of every category value, scheduled or not."""
        return float(sum(category.estimated_value for category in self.categories))


@dataclass(frozen=True)
class ExpenseRecord:
    """A dated actual expenditure.  ``date`` is ``None`` when unusable."""

    date: Optional[date]
    value: float
    description: str = ''
    id: str = ''


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    expected_total_cost: float = 0.0
    expenses: Tuple[ExpenseRecord, ...] = ()
    budget: Optional[Budget] = None

    @property
    def categories(self) -> Tuple[BudgetCategory, ...]:
        """Budget categories, empty when the project has no budget yet."""
        if self.budget is None:
            return ()
        return self.budget.categories

    @property
    def total_expenses(self) -> float:
        return float(sum(expense.value for expense in self.expenses))


@dataclass(frozen=True)
class MonthBucket:
    """First calendar day of a month plus its display label."""

    start: date
    label: str


@dataclass(frozen=True)
class ProjectionPoint:
    """Cumulative planned and actual spend at the end of one month.

    ``actual_cumulative`` is ``None`` for months that start after "now".
    """

    month: MonthBucket
    planned_cumulative: float
    actual_cumulative: Optional[float]

    @property
    def label(self) -> str:
        return self.month.label

    def to_record(self) -> Dict[str, Any]:
        return {
            'label': self.month.label,
            'planned': self.planned_cumulative,
            'actual': self.actual_cumulative,
        }


@dataclass(frozen=True)
class ScheduleRow:
    category: BudgetCategory
    monthly_values: Tuple[float, ...]

    @property
    def total(self) -> float:
        return float(sum(self.monthly_values))


@dataclass(frozen=True)
class ProjectSchedule:
    """Per-category monthly planned values for one project.

    ``grand_total`` is the project's expected total cost as supplied by
    the data store.  It is shown next to ``total_per_month`` for
    reconciliation and is never recomputed.
    """

    project: Project
    months: Tuple[MonthBucket, ...] = ()
    rows: Tuple[ScheduleRow, ...] = ()
    total_per_month: Tuple[float, ...] = ()
    grand_total: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.months

    def to_dict(self) -> Dict[str, Any]:
        rows: List[Dict[str, Any]] = [
            {
                'category': {
                    'id': row.category.id,
                    'name': row.category.name,
                    'estimatedValue': row.category.estimated_value,
                },
                'monthlyValues': list(row.monthly_values),
            }
            for row in self.rows
        ]
        return {
            'months': [{'label': month.label} for month in self.months],
            'rows': rows,
            'totalPerMonth': list(self.total_per_month),
            'grandTotal': self.grand_total,
        }
