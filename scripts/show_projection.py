#!/usr/bin/env python3
"""Print the planned vs actual curve and per-project schedules of an export."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from construction_dashboard import config, load_projects, project, project_detail
from construction_dashboard.formatting import format_currency_abbrev
from construction_dashboard.projection import projection_dataframe, schedule_dataframe
from construction_dashboard.settings import get_labels_config


def main(path: str, now: Optional[date] = None, details: bool = False) -> int:
    labels = get_labels_config()
    now = now or date.today()
    projects = load_projects(path)
    print(f"Loaded {len(projects)} projects from {path}")

    points = project(projects, now)
    if not points:
        print(labels['chart']['no_data'])
        return 1

    curve = projection_dataframe(points)
    print(f"\n{labels['chart']['title']} ({len(curve)} months, now={now.isoformat()})")
    print(curve.drop(columns=['Month']).to_string(index=False))

    if details:
        for item in projects:
            schedule = project_detail(item, now)
            print(f"\n{item.name}")
            if schedule.is_empty:
                print(f"  {labels['table']['no_schedule']}")
                continue
            table = schedule_dataframe(schedule).set_index(labels['table']['category'])
            print(table.map(format_currency_abbrev).to_string())
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show cumulative planned vs actual spending.')
    parser.add_argument('path', help='JSON export with a list of projects')
    parser.add_argument('--now', type=date.fromisoformat, default=None,
                        help='Reference date (YYYY-MM-DD), defaults to today')
    parser.add_argument('--details', action='store_true', help='Print each project schedule')
    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')
    pd.set_option('display.width', 200)
    raise SystemExit(main(args.path, now=args.now, details=args.details))
