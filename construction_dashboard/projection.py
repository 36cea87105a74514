"""Cumulative planned vs actual projections.

Two views are built on the same timeline:

* :func:`project` - the portfolio curve.  Running planned and actual
  totals summed across every project, with actuals withheld for months
  that start after "now".
* :func:`project_detail` - the single-project schedule.  One row of
  monthly planned values per budget category plus the monthly totals.

Both are pure functions of their inputs.  :func:`cached_project` memoizes
the portfolio curve for repeated renders of an unchanged snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from . import config
from .actuals import aggregate
from .distribution import distribute
from .models import (
    BudgetCategory,
    Project,
    ProjectionPoint,
    ProjectSchedule,
    ScheduleRow,
)
from .settings import get_labels_config
from .timeline import build_months

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Portfolio mode
# ---------------------------------------------------------------------------


def scheduled_intervals(projects: Sequence[Project]) -> List[Tuple[date, date]]:
    """Planned ranges of every category that has both dates."""
    intervals: List[Tuple[date, date]] = []
    for item in projects:
        for category in item.categories:
            if category.has_schedule:
                intervals.append((category.planned_start_date, category.planned_end_date))
            else:
                logger.debug(
                    "Category %r of project %r has no planned range; left out of the curve",
                    category.name, item.name,
                )
    return intervals


def project(
    projects: Sequence[Project],
    now: date,
    max_months: Optional[int] = None,
) -> List[ProjectionPoint]:
    """Build the cumulative planned and actual curve for a portfolio.

    Parameters
    ----------
    projects : sequence of Project
        Portfolio snapshot.  A single project gives that project's curve.
    now : datetime.date
        Reference date.  Months starting after it carry no actual value.
    max_months : int, optional
        Timeline cap, see :func:`timeline.build_months`.

    Returns
    -------
    list of ProjectionPoint
        One point per month bucket, or an empty list when no category has
        a planned range ("not enough data").
    """
    months = build_months(scheduled_intervals(projects), now, max_months)
    if not months:
        return []

    planned = np.zeros(len(months))
    actual = np.zeros(len(months))
    for item in projects:
        for category in item.categories:
            allocation = distribute(category, months)
            planned += [allocation[month.start] for month in months]
        sums = aggregate(item.expenses, months)
        actual += [sums[month.start] for month in months]

    points: List[ProjectionPoint] = []
    planned_total = 0.0
    actual_total = 0.0
    for index, month in enumerate(months):
        planned_total += float(planned[index])
        actual_total += float(actual[index])
        points.append(ProjectionPoint(
            month=month,
            planned_cumulative=planned_total,
            actual_cumulative=actual_total if month.start <= now else None,
        ))
    return points


@lru_cache(maxsize=config.PROJECTION_CACHE_SIZE)
def _cached_projection(
    projects: Tuple[Project, ...],
    now: date,
    max_months: Optional[int],
) -> Tuple[ProjectionPoint, ...]:
    return tuple(project(projects, now, max_months))


def cached_project(
    projects: Sequence[Project],
    now: date,
    max_months: Optional[int] = None,
) -> List[ProjectionPoint]:
    """Memoized :func:`project`, keyed by the content of the snapshot."""
    return list(_cached_projection(tuple(projects), now, max_months))


def projection_records(points: Sequence[ProjectionPoint]) -> List[Dict[str, Any]]:
    """Chart-ready ``{label, planned, actual}`` records; ``actual`` may be ``None``."""
    return [point.to_record() for point in points]


def projection_dataframe(points: Sequence[ProjectionPoint]) -> pd.DataFrame:
    """Create DataFrame of the cumulative curve.

    Returns:
        DataFrame with columns: Month, Label, Planned, Actual (NaN for
        censored months)
    """
    rows = [
        {
            'Month': pd.Period(year=point.month.start.year, month=point.month.start.month, freq='M'),
            'Label': point.label,
            'Planned': point.planned_cumulative,
            'Actual': np.nan if point.actual_cumulative is None else point.actual_cumulative,
        }
        for point in points
    ]
    return pd.DataFrame(rows, columns=['Month', 'Label', 'Planned', 'Actual'])


# ---------------------------------------------------------------------------
# Single-project detail mode
# ---------------------------------------------------------------------------


def schedule_bounds(project: Project) -> Tuple[Optional[date], Optional[date]]:
    """Earliest planned start and latest planned end across the categories.

    Each bound is gathered independently, so a category with only a start
    date still widens the lower bound.
    """
    starts = [c.planned_start_date for c in project.categories if c.planned_start_date is not None]
    ends = [c.planned_end_date for c in project.categories if c.planned_end_date is not None]
    return (min(starts) if starts else None, max(ends) if ends else None)


def _with_fallback_dates(category: BudgetCategory, start: date, end: date) -> BudgetCategory:
    if category.has_schedule:
        return category
    return replace(
        category,
        planned_start_date=category.planned_start_date or start,
        planned_end_date=category.planned_end_date or end,
    )


def project_detail(
    project: Project,
    now: date,
    max_months: Optional[int] = None,
) -> ProjectSchedule:
    """Build the per-category monthly planned schedule of one project.

    Categories missing a planned date borrow the project's overall bound,
    so every category renders a row (possibly all zeros).  When the
    project has no planned start or no planned end anywhere, the schedule
    is empty and the caller shows the "schedule not generated" state.
    """
    start, end = schedule_bounds(project)
    if start is None or end is None:
        logger.debug("Project %r has no planned range; schedule not generated", project.name)
        return ProjectSchedule(project=project, grand_total=project.expected_total_cost)

    months = build_months([(start, end)], now, max_months)
    if not months:
        return ProjectSchedule(project=project, grand_total=project.expected_total_cost)

    rows: List[ScheduleRow] = []
    for category in project.categories:
        allocation = distribute(_with_fallback_dates(category, start, end), months)
        rows.append(ScheduleRow(
            category=category,
            monthly_values=tuple(allocation[month.start] for month in months),
        ))

    if rows:
        totals = np.sum([row.monthly_values for row in rows], axis=0)
        total_per_month = tuple(float(value) for value in totals)
    else:
        total_per_month = tuple(0.0 for _ in months)

    return ProjectSchedule(
        project=project,
        months=tuple(months),
        rows=tuple(rows),
        total_per_month=total_per_month,
        grand_total=project.expected_total_cost,
    )


def schedule_dataframe(schedule: ProjectSchedule) -> pd.DataFrame:
    """Create the monthly detail table for a project schedule.

    Returns:
        DataFrame with a category column, one column per month label and
        a total column.  The last row holds the monthly totals and the
        project's expected total cost.  Empty when the schedule is empty.
    """
    if schedule.is_empty:
        return pd.DataFrame()

    table = get_labels_config()['table']
    labels = [month.label for month in schedule.months]
    rows = []
    for row in schedule.rows:
        record: Dict[str, Any] = {table['category']: row.category.name}
        record.update(zip(labels, row.monthly_values))
        record[table['total']] = row.category.estimated_value
        rows.append(record)

    totals: Dict[str, Any] = {table['category']: table['monthly_total']}
    totals.update(zip(labels, schedule.total_per_month))
    totals[table['total']] = schedule.grand_total
    rows.append(totals)

    return pd.DataFrame(rows, columns=[table['category'], *labels, table['total']])
