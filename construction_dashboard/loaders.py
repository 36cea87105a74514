"""Conversion of data store records into projection models.

Records arrive either in the application's camelCase shape
(``expectedTotalCost``, ``budget.macros``, ``plannedStartDate``) or with
the storage column names (``expected_total_cost``, ``project_macros``,
``planned_start_date``).  Both are accepted.  Malformed values never
raise: dates become ``None``, category values become 0.0 and expenses
without a numeric value are skipped.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .models import (
    Budget,
    BudgetCategory,
    ExpenseRecord,
    Project,
    SubCategory,
    parse_calendar_date,
)

logger = logging.getLogger(__name__)


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _to_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _to_int(value: Any, default: int = 0) -> int:
    number = _to_float(value)
    return int(number) if number is not None else default


def sub_category_from_record(record: Mapping[str, Any]) -> SubCategory:
    return SubCategory(
        id=str(_pick(record, 'id', default='')),
        name=str(_pick(record, 'name', default='')),
        estimated_value=_to_float(_pick(record, 'estimatedValue', 'estimated_value')) or 0.0,
        percentage=_to_float(_pick(record, 'percentage')),
    )


def category_from_record(record: Mapping[str, Any]) -> BudgetCategory:
    """Build a :class:`BudgetCategory` from a ``macro`` record."""
    subs = _pick(record, 'subMacros', 'sub_macros', 'project_sub_macros', default=[])
    return BudgetCategory(
        id=str(_pick(record, 'id', default='')),
        name=str(_pick(record, 'name', default='')),
        estimated_value=_to_float(_pick(record, 'estimatedValue', 'estimated_value')) or 0.0,
        planned_start_date=parse_calendar_date(_pick(record, 'plannedStartDate', 'planned_start_date')),
        planned_end_date=parse_calendar_date(_pick(record, 'plannedEndDate', 'planned_end_date')),
        display_order=_to_int(_pick(record, 'displayOrder', 'display_order')),
        percentage=_to_float(_pick(record, 'percentage')),
        spent_value=_to_float(_pick(record, 'spentValue', 'spent_value')),
        sub_categories=tuple(
            sub_category_from_record(sub) for sub in subs if isinstance(sub, Mapping)
        ),
    )


def budget_from_record(record: Optional[Mapping[str, Any]]) -> Optional[Budget]:
    """Build a :class:`Budget`; ``None`` when the project has no budget."""
    if not isinstance(record, Mapping):
        return None
    macros = _pick(record, 'macros', 'project_macros', default=[])
    categories = [category_from_record(m) for m in macros if isinstance(m, Mapping)]
    # Stable sort keeps the stored order among equal display orders
    categories.sort(key=lambda category: category.display_order)
    return Budget(
        id=str(_pick(record, 'id', default='')),
        total_estimated=_to_float(_pick(record, 'totalEstimated', 'total_estimated')),
        categories=tuple(categories),
    )


def expense_from_record(record: Mapping[str, Any]) -> Optional[ExpenseRecord]:
    """Build an :class:`ExpenseRecord`, or ``None`` when the value is not numeric."""
    value = _to_float(record.get('value'))
    if value is None:
        logger.debug("Skipping expense %r with non-numeric value %r", record.get('id'), record.get('value'))
        return None
    return ExpenseRecord(
        date=parse_calendar_date(record.get('date')),
        value=value,
        description=str(record.get('description') or ''),
        id=str(record.get('id') or ''),
    )


def project_from_record(record: Mapping[str, Any]) -> Project:
    """Build a :class:`Project` with its budget and expenses.

    Example:
        >>> p = project_from_record({'id': 'p1', 'name': 'Residencial', 'expectedTotalCost': 1000,
        ...                          'expenses': [{'date': '2024-01-10', 'value': 50}]})
        >>> p.total_expenses
        50.0
    """
    expenses: List[ExpenseRecord] = []
    for raw in record.get('expenses') or []:
        if not isinstance(raw, Mapping):
            continue
        expense = expense_from_record(raw)
        if expense is not None:
            expenses.append(expense)

    return Project(
        id=str(_pick(record, 'id', default='')),
        name=str(_pick(record, 'name', default='')),
        expected_total_cost=_to_float(_pick(record, 'expectedTotalCost', 'expected_total_cost')) or 0.0,
        expenses=tuple(expenses),
        budget=budget_from_record(record.get('budget')),
    )


def projects_from_records(records: Iterable[Mapping[str, Any]]) -> List[Project]:
    return [project_from_record(record) for record in records if isinstance(record, Mapping)]


def load_projects(path: Path | str) -> List[Project]:
    """Load a portfolio from a JSON export.

    The file holds either a list of project records or an object with a
    ``projects`` list.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the payload is not a project list
    """
    target = Path(path)
    if not target.exists():
        raise FileNotFoundError(f"Projects file not found: {target}")

    with target.open('r', encoding='utf-8') as handle:
        data: Any = json.load(handle)

    if isinstance(data, dict):
        data = data.get('projects')
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of projects in {target}")
    return projects_from_records(data)
