"""Configuration management for the construction dashboard engine.

This module centralizes the tunable values of the projection engine,
each with an environment variable override.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

# Base package root - assumes this file is in construction_dashboard/
_PACKAGE_ROOT = Path(__file__).parent.resolve()

# Safety cap for generated timelines (10 years)
MAX_TIMELINE_MONTHS = int(os.getenv("CONSTRUCTION_DASHBOARD_MAX_MONTHS", "120"))

# Number of distinct portfolio snapshots kept by the memoized projection
PROJECTION_CACHE_SIZE = int(os.getenv("CONSTRUCTION_DASHBOARD_CACHE_SIZE", "32"))

# Logging level used by the command line scripts
LOG_LEVEL = os.getenv("CONSTRUCTION_DASHBOARD_LOG_LEVEL", "WARNING").upper()

# JSON settings (labels, currency, chart names)
SETTINGS_DIR = Path(
    os.getenv("CONSTRUCTION_DASHBOARD_SETTINGS_DIR", _PACKAGE_ROOT / "settings")
).resolve()

# The data store writes this date when a planned date was cleared
EPOCH_SENTINEL = date(1970, 1, 1)


def get_max_timeline_months() -> int:
    """Get the timeline cap, never below one month."""
    return max(1, MAX_TIMELINE_MONTHS)
