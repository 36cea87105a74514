"""Uniform distribution of budget category values across months.

A category's estimated value is spread evenly over every calendar month
its planned range touches, endpoints included.  No finer profile is
modelled; comparing the straight line against actuals is what reveals
front- or back-loaded spending.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Sequence

from .models import BudgetCategory, MonthBucket
from .timeline import month_start


def duration_in_months(start: date, end: date) -> int:
    """Number of calendar months touched by ``[start, end]``, at least 1.

    Example:
        >>> duration_in_months(date(2024, 1, 15), date(2024, 3, 10))
        3
    """
    duration = (end.year - start.year) * 12 - start.month + end.month
    duration += 1
    return duration if duration > 0 else 1


def monthly_allocation(category: BudgetCategory) -> float:
    """Amount attributed to each month of the category's planned range."""
    if not category.has_schedule or category.estimated_value <= 0:
        return 0.0
    duration = duration_in_months(category.planned_start_date, category.planned_end_date)
    return category.estimated_value / duration


def distribute(category: BudgetCategory, months: Sequence[MonthBucket]) -> Dict[date, float]:
    """Allocate ``category``'s value over ``months``.

    Args:
        category: Budget line item to spread
        months: Ordered month buckets from :func:`timeline.build_months`

    Returns:
        Dictionary mapping each bucket start to its allocated amount.
        Categories without both planned dates or with a non-positive
        value map every month to 0.

    Example:
        >>> cat = BudgetCategory('c1', 'Fundação', 1200.0, date(2024, 1, 15), date(2024, 3, 10))
        >>> values = distribute(cat, build_months([(cat.planned_start_date, cat.planned_end_date)], date(2024, 3, 1)))
        >>> list(values.values())
        [400.0, 400.0, 400.0]
    """
    amount = monthly_allocation(category)
    if amount == 0.0:
        return {month.start: 0.0 for month in months}

    window_start = month_start(category.planned_start_date)
    window_end = month_start(category.planned_end_date)
    return {
        month.start: amount if window_start <= month.start <= window_end else 0.0
        for month in months
    }
