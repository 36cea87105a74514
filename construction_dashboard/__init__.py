"""Top-level package for the construction dashboard projection engine.

The engine turns project budgets and expense logs into aligned monthly
planned and actual spending series.  The primary modules are:

* ``timeline`` - calendar-month bucket generation
* ``distribution`` - uniform spread of category values over months
* ``actuals`` - monthly expense aggregation
* ``projection`` - cumulative portfolio curve and per-project schedule
* ``loaders`` - conversion of data store records into models
* ``visualization`` - Plotly figures for the projection outputs

Example:

```python
from datetime import date
from construction_dashboard import load_projects, project

points = project(load_projects("projects.json"), now=date.today())
```
"""

from .loaders import load_projects, project_from_record, projects_from_records
from .models import (
    Budget,
    BudgetCategory,
    ExpenseRecord,
    MonthBucket,
    Project,
    ProjectionPoint,
    ProjectSchedule,
    ScheduleRow,
    SubCategory,
)
from .projection import (
    cached_project,
    project,
    project_detail,
    projection_dataframe,
    projection_records,
    schedule_dataframe,
)
from .timeline import build_months
from .distribution import distribute
from .actuals import aggregate

__all__ = [
    'Budget',
    'BudgetCategory',
    'ExpenseRecord',
    'MonthBucket',
    'Project',
    'ProjectionPoint',
    'ProjectSchedule',
    'ScheduleRow',
    'SubCategory',
    'aggregate',
    'build_months',
    'cached_project',
    'distribute',
    'load_projects',
    'project',
    'project_detail',
    'project_from_record',
    'projection_dataframe',
    'projection_records',
    'projects_from_records',
    'schedule_dataframe',
]
