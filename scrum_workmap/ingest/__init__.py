"""
Snapshot ingest module.

Includes:
- Weekly JSON files (schema v3 and legacy layouts)
- Spreadsheet tables (.xlsx / .csv)
- Week discovery under a data directory
"""

from .loader import (
    WeekKey,
    WeeklySnapshot,
    parse_weekly_data,
    load_week_file,
    week_file_path,
    discover_weeks,
    neighbor_weeks,
    load_week,
    parse_collaborators_cell,
    items_from_dataframe,
    load_items_table,
)

__all__ = [
    'WeekKey',
    'WeeklySnapshot',
    'parse_weekly_data',
    'load_week_file',
    'week_file_path',
    'discover_weeks',
    'neighbor_weeks',
    'load_week',
    'parse_collaborators_cell',
    'items_from_dataframe',
    'load_items_table',
]
