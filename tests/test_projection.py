"""Unit tests for construction_dashboard.projection.

Covers the cumulative portfolio curve (planned totals, temporal
censoring of actuals) and the single-project monthly schedule.
"""

from __future__ import annotations

import math
import random
from datetime import date, timedelta

import pandas as pd
import pytest

from construction_dashboard.models import Budget, BudgetCategory, ExpenseRecord, Project
from construction_dashboard.projection import (
    _cached_projection,
    cached_project,
    project,
    project_detail,
    projection_dataframe,
    projection_records,
    schedule_bounds,
    schedule_dataframe,
)


def _category(cid, value, start=None, end=None, order=0) -> BudgetCategory:
    return BudgetCategory(id=cid, name=cid.title(), estimated_value=value,
                          planned_start_date=start, planned_end_date=end, display_order=order)


def _project(categories, expenses=(), pid="p1", expected_total_cost=0.0) -> Project:
    return Project(
        id=pid,
        name=f"Obra {pid}",
        expected_total_cost=expected_total_cost,
        expenses=tuple(expenses),
        budget=Budget(id=f"b-{pid}", categories=tuple(categories)),
    )


def test_project_single_category_example() -> None:
    item = _project([_category("fundacao", 1200.0, date(2024, 1, 15), date(2024, 3, 10))])
    points = project([item], now=date(2024, 3, 20))
    assert [p.label for p in points] == ["jan. de 24", "fev. de 24", "mar. de 24"]
    assert [p.planned_cumulative for p in points] == [400.0, 800.0, 1200.0]
    assert [p.actual_cumulative for p in points] == [0.0, 0.0, 0.0]


def test_project_overlapping_categories_example() -> None:
    item = _project([
        _category("alvenaria", 100.0, date(2024, 1, 1), date(2024, 2, 28)),
        _category("cobertura", 200.0, date(2024, 2, 1), date(2024, 3, 31)),
    ])
    points = project([item], now=date(2024, 1, 1))
    planned = [p.planned_cumulative for p in points]
    assert planned == [50.0, 200.0, 300.0]
    assert planned[1] - planned[0] == 150.0


def test_project_without_schedule_is_empty() -> None:
    item = _project([_category("pintura", 500.0), _category("acabamento", 300.0, start=date(2024, 1, 1))],
                    expenses=[ExpenseRecord(date=date(2024, 1, 5), value=10.0)])
    assert project([item], now=date(2024, 1, 1)) == []
    assert project([], now=date(2024, 1, 1)) == []
    assert project([Project(id="p2", name="Sem orçamento")], now=date(2024, 1, 1)) == []


def test_project_censors_future_actuals() -> None:
    item = _project(
        [_category("estrutura", 300.0, date(2024, 1, 1), date(2024, 3, 31))],
        expenses=[
            ExpenseRecord(date=date(2024, 1, 10), value=100.0),
            ExpenseRecord(date=date(2024, 2, 3), value=50.0),
            ExpenseRecord(date=date(2024, 3, 2), value=70.0),
        ],
    )
    points = project([item], now=date(2024, 2, 10))
    assert [p.actual_cumulative for p in points] == [100.0, 150.0, None]
    assert points[-1].planned_cumulative == 300.0


def test_project_next_month_expense_never_counts() -> None:
    item = _project(
        [_category("estrutura", 300.0, date(2024, 1, 1), date(2024, 3, 31))],
        expenses=[
            ExpenseRecord(date=date(2024, 1, 5), value=10.0),
            ExpenseRecord(date=date(2024, 2, 5), value=1000.0),
        ],
    )
    points = project([item], now=date(2024, 1, 20))
    assert [p.actual_cumulative for p in points] == [10.0, None, None]


def test_project_month_starting_today_is_known() -> None:
    item = _project(
        [_category("estrutura", 300.0, date(2024, 1, 1), date(2024, 3, 31))],
        expenses=[ExpenseRecord(date=date(2024, 2, 1), value=25.0)],
    )
    points = project([item], now=date(2024, 2, 1))
    assert [p.actual_cumulative for p in points] == [0.0, 25.0, None]


def test_project_aggregates_portfolio() -> None:
    first = _project(
        [_category("a", 200.0, date(2024, 1, 1), date(2024, 2, 1))],
        expenses=[ExpenseRecord(date=date(2024, 1, 15), value=30.0)],
        pid="p1",
    )
    second = _project(
        [_category("b", 90.0, date(2024, 2, 1), date(2024, 4, 30)), _category("c", 40.0)],
        expenses=[
            ExpenseRecord(date=date(2024, 2, 15), value=20.0),
            ExpenseRecord(date=None, value=999.0),
            ExpenseRecord(date=date(2023, 5, 1), value=999.0),
        ],
        pid="p2",
    )
    points = project([first, second], now=date(2024, 3, 5))
    assert [p.month.start for p in points] == [date(2024, m, 1) for m in (1, 2, 3, 4)]
    assert [p.planned_cumulative for p in points] == pytest.approx([100.0, 230.0, 260.0, 290.0])
    assert [p.actual_cumulative for p in points] == [30.0, 50.0, 50.0, None]


def test_project_timeline_reaches_now() -> None:
    item = _project([_category("a", 100.0, date(2024, 1, 1), date(2024, 1, 31))])
    points = project([item], now=date(2024, 4, 2))
    assert len(points) == 4
    assert [p.planned_cumulative for p in points] == [100.0] * 4


def test_project_invariants_hold_for_random_portfolios() -> None:
    rng = random.Random(7)
    now = date(2024, 6, 15)
    for _ in range(20):
        categories = []
        for index in range(rng.randint(1, 6)):
            start = date(2023, 1, 1) + timedelta(days=rng.randint(0, 500))
            end = start + timedelta(days=rng.randint(-40, 400))
            categories.append(_category(f"c{index}", rng.uniform(0, 5000), start, end))
        expenses = [
            ExpenseRecord(date=date(2023, 1, 1) + timedelta(days=rng.randint(0, 900)), value=rng.uniform(0, 300))
            for _ in range(rng.randint(0, 10))
        ]
        points = project([_project(categories, expenses)], now=now)
        assert points

        planned = [p.planned_cumulative for p in points]
        assert all(b >= a for a, b in zip(planned, planned[1:]))

        censored = False
        for point in points:
            if point.month.start > now:
                censored = True
                assert point.actual_cumulative is None
            else:
                assert not censored
                assert point.actual_cumulative is not None
                assert point.actual_cumulative >= 0


def test_cached_project_reuses_result() -> None:
    _cached_projection.cache_clear()
    item = _project([_category("a", 100.0, date(2024, 1, 1), date(2024, 2, 28))])
    first = cached_project([item], now=date(2024, 1, 10))
    second = cached_project([item], now=date(2024, 1, 10))
    assert first == second == project([item], now=date(2024, 1, 10))
    assert _cached_projection.cache_info().hits == 1

    cached_project([item], now=date(2024, 5, 10))
    assert _cached_projection.cache_info().misses == 2


def test_projection_records_and_dataframe() -> None:
    item = _project(
        [_category("a", 200.0, date(2024, 1, 1), date(2024, 2, 28))],
        expenses=[ExpenseRecord(date=date(2024, 1, 2), value=40.0)],
    )
    points = project([item], now=date(2024, 1, 31))
    assert projection_records(points) == [
        {"label": "jan. de 24", "planned": 100.0, "actual": 40.0},
        {"label": "fev. de 24", "planned": 200.0, "actual": None},
    ]

    df = projection_dataframe(points)
    assert list(df.columns) == ["Month", "Label", "Planned", "Actual"]
    assert df.loc[0, "Month"] == pd.Period("2024-01", freq="M")
    assert df.loc[0, "Actual"] == 40.0
    assert math.isnan(df.loc[1, "Actual"])


def test_projection_dataframe_empty() -> None:
    df = projection_dataframe([])
    assert df.empty
    assert list(df.columns) == ["Month", "Label", "Planned", "Actual"]


# ---------------------------------------------------------------------------
# Detail mode
# ---------------------------------------------------------------------------


def test_schedule_bounds_gathers_each_bound_independently() -> None:
    item = _project([
        _category("a", 10.0, start=date(2024, 3, 1), end=date(2024, 4, 1)),
        _category("b", 10.0, start=date(2024, 1, 20)),
        _category("c", 10.0, end=date(2024, 6, 30)),
    ])
    assert schedule_bounds(item) == (date(2024, 1, 20), date(2024, 6, 30))


def test_project_detail_rows_and_totals() -> None:
    item = _project(
        [
            _category("alvenaria", 100.0, date(2024, 1, 1), date(2024, 2, 28)),
            _category("cobertura", 200.0, date(2024, 2, 1), date(2024, 3, 31)),
        ],
        expected_total_cost=350.0,
    )
    schedule = project_detail(item, now=date(2024, 1, 1))
    assert [m.label for m in schedule.months] == ["jan. de 24", "fev. de 24", "mar. de 24"]
    assert [row.monthly_values for row in schedule.rows] == [(50.0, 50.0, 0.0), (0.0, 100.0, 100.0)]
    assert schedule.total_per_month == (50.0, 150.0, 100.0)
    assert schedule.grand_total == 350.0
    assert [row.total for row in schedule.rows] == [100.0, 200.0]


def test_project_detail_undated_category_uses_overall_bounds() -> None:
    item = _project([
        _category("alvenaria", 100.0, date(2024, 1, 1), date(2024, 2, 28)),
        _category("projetos", 300.0),
        _category("limpeza", 0.0),
    ])
    schedule = project_detail(item, now=date(2024, 4, 2))
    assert len(schedule.months) == 4
    assert [row.category.id for row in schedule.rows] == ["alvenaria", "projetos", "limpeza"]
    assert schedule.rows[1].monthly_values == (150.0, 150.0, 0.0, 0.0)
    assert schedule.rows[2].monthly_values == (0.0, 0.0, 0.0, 0.0)
    assert schedule.total_per_month == (200.0, 200.0, 0.0, 0.0)
    assert schedule.rows[1].category.planned_start_date is None


def test_project_detail_partial_dates_fall_back_per_bound() -> None:
    item = _project([
        _category("a", 60.0, date(2024, 1, 1), date(2024, 3, 31)),
        _category("b", 40.0, start=date(2024, 3, 1)),
    ])
    schedule = project_detail(item, now=date(2024, 1, 1))
    assert schedule.rows[1].monthly_values == (0.0, 0.0, 40.0)


def test_project_detail_without_dates_is_empty() -> None:
    item = _project([_category("a", 100.0), _category("b", 50.0, start=date(2024, 1, 1))], expected_total_cost=150.0)
    schedule = project_detail(item, now=date(2024, 1, 1))
    assert schedule.is_empty
    assert schedule.rows == ()
    assert schedule.grand_total == 150.0
    assert schedule.to_dict() == {"months": [], "rows": [], "totalPerMonth": [], "grandTotal": 150.0}
    assert schedule_dataframe(schedule).empty

    assert project_detail(Project(id="p", name="Sem orçamento"), now=date(2024, 1, 1)).is_empty


def test_project_detail_to_dict_shape() -> None:
    item = _project([_category("a", 100.0, date(2024, 1, 1), date(2024, 2, 1))], expected_total_cost=120.0)
    payload = project_detail(item, now=date(2024, 1, 1)).to_dict()
    assert payload["months"] == [{"label": "jan. de 24"}, {"label": "fev. de 24"}]
    assert payload["rows"][0]["category"]["id"] == "a"
    assert payload["rows"][0]["monthlyValues"] == [50.0, 50.0]
    assert payload["totalPerMonth"] == [50.0, 50.0]
    assert payload["grandTotal"] == 120.0


def test_schedule_dataframe_layout() -> None:
    item = _project(
        [_category("alvenaria", 100.0, date(2024, 1, 1), date(2024, 2, 28)), _category("projetos", 60.0)],
        expected_total_cost=500.0,
    )
    df = schedule_dataframe(project_detail(item, now=date(2024, 1, 1)))
    assert list(df.columns) == ["Categoria", "jan. de 24", "fev. de 24", "Total"]
    assert list(df["Categoria"]) == ["Alvenaria", "Projetos", "Investimento Mensal"]
    assert list(df["Total"]) == [100.0, 60.0, 500.0]
    assert list(df.iloc[-1][["jan. de 24", "fev. de 24"]]) == [80.0, 80.0]
