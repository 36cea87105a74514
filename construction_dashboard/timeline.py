"""Calendar-month timeline generation.

The timeline is the shared set of month buckets that planned and actual
series are aligned to.  It runs from the month of the earliest planned
start to the month of the later of the latest planned end and "now".
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from . import config
from .models import MonthBucket
from .settings import get_labels_config

logger = logging.getLogger(__name__)

Interval = Tuple[Optional[date], Optional[date]]


def month_start(value: date) -> date:
    """Truncate a date to the first day of its month."""
    return value.replace(day=1)


def month_label(value: date) -> str:
    """Short localized month/year label, e.g. ``'jan. de 24'``."""
    months = get_labels_config()['months']
    return months['label_format'].format(
        month=months['abbreviations'][value.month - 1],
        year=f"{value.year % 100:02d}",
    )


def build_months(
    intervals: Iterable[Interval],
    now: date,
    max_months: Optional[int] = None,
) -> List[MonthBucket]:
    """Build the ordered month buckets covering ``intervals`` and ``now``.

    Parameters
    ----------
    intervals : iterable of (start, end) pairs
        Planned date ranges.  Pairs with a missing bound are ignored.
    now : datetime.date
        Reference date; the timeline always reaches the month of ``now``.
    max_months : int, optional
        Cap on the number of buckets.  Defaults to
        :data:`config.MAX_TIMELINE_MONTHS`.  Longer timelines are truncated.

    Returns
    -------
    list of MonthBucket
        Ascending buckets, or an empty list when no interval has both
        bounds (a timeline cannot be built).
    """
    valid = [(start, end) for start, end in intervals if start is not None and end is not None]
    if not valid:
        return []

    lower = min(start for start, _ in valid)
    upper = max(max(end for _, end in valid), now)
    periods = pd.period_range(
        start=pd.Period(year=lower.year, month=lower.month, freq='M'),
        end=pd.Period(year=upper.year, month=upper.month, freq='M'),
        freq='M',
    )

    cap = max_months if max_months is not None else config.get_max_timeline_months()
    if len(periods) > cap:
        logger.warning(
            "Timeline of %d months starting %s truncated to %d months",
            len(periods), month_start(lower), cap,
        )
        periods = periods[:cap]

    buckets: List[MonthBucket] = []
    for period in periods:
        start = date(period.year, period.month, 1)
        buckets.append(MonthBucket(start=start, label=month_label(start)))
    return buckets
