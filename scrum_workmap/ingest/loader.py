"""
Weekly Snapshot Loading & Normalisation
=======================================

Single entry point for getting snapshot items into the engine.  Two sources
are supported:

1. Weekly JSON files, stored as ``<data_dir>/<year>/<year>-W<nn>.json``.
   Two layouts exist in the wild:

   - **schema v3** (``"schemaVersion": 3``): each item carries
     ``pastWeek.tasks`` as ``[{"title", "progress"}]``, ``thisWeek.tasks`` as
     strings, and ``pastWeek.risk`` / ``riskLevel`` / ``collaborators``.
     Progress is the rounded mean of the task progresses and each past task
     becomes ``"title (N%)"`` -- which is also what the completed-task count
     looks for.
   - **legacy** items with ``topic`` / ``progress`` / ``next`` / ``risk``
     fields, where the text fields may be a single string or a list.
     ``"?"`` and ``"-"`` risk notes are placeholders and are dropped; a
     ``"?"`` risk level becomes None.

2. Tables (``.xlsx`` / ``.csv``) with one row per item, columns named by the
   ``COL_*`` constants in ``core.config``.  Multi-line cells become lists and
   the collaborators cell reads like ``"Kim (pair), Lee (pre)"``.

Validation failures raise ``ValueError`` with a message naming the problem.
"""

import re
import json
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Any

import numpy as np
import pandas as pd

from ..core.config import (
    DEFAULT_DATA_DIR,
    COL_NAME, COL_DOMAIN, COL_PROJECT, COL_MODULE, COL_FEATURE,
    COL_PROGRESS, COL_PLAN, COL_RISK_LEVEL, COL_RISK_NOTES,
    COL_PAST_TASKS, COL_NEXT_TASKS, COL_COLLABORATORS, REQUIRED_COLUMNS,
)
from ..core.utils import clean_text, validate_columns
from ..hierarchy.metrics import round_half_up
from ..models.data_models import (
    SnapshotItem, Collaborator, normalize_risk_level, normalize_task_list,
    normalize_risk_notes,
)

logger = logging.getLogger(__name__)

WEEK_FILE_PATTERN = re.compile(r'^(\d{4})-W(\d{2})\.json$')
COLLABORATOR_PATTERN = re.compile(r'([^,;()\n:]+?)\s*[(:]\s*(pair|pre|post)\s*\)?', re.IGNORECASE)


@dataclass(frozen=True, order=True)
class WeekKey:
    """ISO year + week number.  Sorts chronologically."""
    year: int
    week: int

    def __str__(self):
        return f"{self.year}-W{self.week:02d}"

    @classmethod
    def parse(cls, text: str) -> 'WeekKey':
        match = re.fullmatch(r'(\d{4})-?W(\d{1,2})', text.strip(), re.IGNORECASE)
        if not match:
            raise ValueError(f"Invalid week key {text!r}; expected YYYY-Wnn")
        key = cls(int(match.group(1)), int(match.group(2)))
        key.monday()  # validates the week number
        return key

    def monday(self) -> date:
        try:
            return date.fromisocalendar(self.year, self.week, 1)
        except ValueError:
            raise ValueError(f"Week {self.week} does not exist in ISO year {self.year}")

    def shift(self, weeks: int) -> 'WeekKey':
        iso = (self.monday() + timedelta(weeks=weeks)).isocalendar()
        return WeekKey(iso[0], iso[1])


@dataclass
class WeeklySnapshot:
    year: int
    week: str
    range: str = ""
    items: List[SnapshotItem] = field(default_factory=list)


# ============================================================================
# JSON ITEMS
# ============================================================================

def _collaborators(raw) -> List[Collaborator]:
    result = []
    for entry in raw or []:
        if not isinstance(entry, dict) or not entry.get('name'):
            continue
        try:
            result.append(Collaborator.from_dict(entry))
        except ValueError as e:
            logger.warning(f"[Loader] Skipping collaborator {entry!r}: {e}")
    return result


def _convert_v3_item(raw: Dict[str, Any]) -> SnapshotItem:
    past = raw.get('pastWeek') or {}
    this = raw.get('thisWeek') or {}
    tasks = past.get('tasks') or []

    progresses = [float(t.get('progress', 0) or 0) for t in tasks]
    progress = round_half_up(float(np.mean(progresses))) if progresses else 0

    return SnapshotItem(
        name=clean_text(raw.get('name')),
        domain=clean_text(raw.get('domain')),
        project=clean_text(raw.get('project')),
        module=clean_text(raw.get('module')) or None,
        feature=clean_text(raw.get('feature')),
        progress_percent=progress,
        plan_percent=progress,
        risk_level=past.get('riskLevel', raw.get('riskLevel')),
        risk_notes=normalize_risk_notes(past.get('risk')),
        past_week_tasks=[f"{t.get('title', '')} ({t.get('progress', 0)}%)" for t in tasks],
        next_week_tasks=normalize_task_list(this.get('tasks')),
        collaborators=_collaborators(past.get('collaborators')),
    )


def _convert_legacy_item(raw: Dict[str, Any]) -> SnapshotItem:
    plan = raw.get('planPercent')
    return SnapshotItem(
        name=clean_text(raw.get('name')),
        domain=clean_text(raw.get('domain')),
        project=clean_text(raw.get('project')),
        module=clean_text(raw.get('module')) or None,
        feature=clean_text(raw.get('feature') or raw.get('topic')),
        progress_percent=float(raw.get('progressPercent') or 0),
        plan_percent=float(plan) if plan is not None else None,
        risk_level=raw.get('riskLevel'),
        risk_notes=normalize_risk_notes(raw.get('riskNotes', raw.get('risk'))),
        past_week_tasks=normalize_task_list(raw.get('pastWeekTasks', raw.get('progress'))),
        next_week_tasks=normalize_task_list(raw.get('nextWeekTasks', raw.get('next'))),
        collaborators=_collaborators(raw.get('collaborators')),
    )


def parse_weekly_data(data: Dict[str, Any]) -> WeeklySnapshot:
    """Convert a decoded weekly JSON document into a WeeklySnapshot."""
    if not isinstance(data, dict) or not isinstance(data.get('items'), list):
        raise ValueError("Weekly data must be an object with an 'items' list")

    if data.get('schemaVersion') == 3:
        items = [_convert_v3_item(raw) for raw in data['items']]
        week_range = f"{data.get('weekStart', '')} ~ {data.get('weekEnd', '')}".strip(' ~')
    else:
        items = [_convert_legacy_item(raw) for raw in data['items']]
        week_range = data.get('range', '')

    return WeeklySnapshot(
        year=int(data.get('year') or 0),
        week=str(data.get('week', '')),
        range=week_range,
        items=items,
    )


def load_week_file(path) -> WeeklySnapshot:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read weekly file {path}: {e}")
    snapshot = parse_weekly_data(data)
    logger.info(f"[Loader] {path.name}: {len(snapshot.items)} items")
    return snapshot


# ============================================================================
# WEEK DISCOVERY
# ============================================================================

def week_file_path(data_dir, key: WeekKey) -> Path:
    return Path(data_dir) / str(key.year) / f"{key}.json"


def discover_weeks(data_dir=DEFAULT_DATA_DIR) -> List[WeekKey]:
    """Every week with a JSON file under ``data_dir``, oldest first."""
    data_dir = Path(data_dir)
    if not data_dir.exists():
        logger.warning(f"[Loader] Data directory not found: {data_dir}")
        return []

    weeks = []
    for path in data_dir.glob('*/*.json'):
        match = WEEK_FILE_PATTERN.match(path.name)
        if match:
            weeks.append(WeekKey(int(match.group(1)), int(match.group(2))))
    return sorted(weeks)


def neighbor_weeks(weeks: List[WeekKey], key: WeekKey) -> Tuple[Optional[WeekKey], Optional[WeekKey]]:
    """ISO weeks directly before and after ``key``, each None if not available."""
    available = set(weeks)
    prev_key = key.shift(-1)
    next_key = key.shift(1)
    return (prev_key if prev_key in available else None,
            next_key if next_key in available else None)


def load_week(data_dir, key: Optional[WeekKey]) -> Optional[WeeklySnapshot]:
    """Snapshot for ``key``, or None when the key is None or has no file."""
    if key is None:
        return None
    path = week_file_path(data_dir, key)
    if not path.exists():
        return None
    return load_week_file(path)


# ============================================================================
# TABLE ITEMS
# ============================================================================

def parse_collaborators_cell(value) -> List[Collaborator]:
    """Parse ``"Kim (pair), Lee (pre)"`` / ``"Kim:pair; Lee:pre"`` cells."""
    text = clean_text(value)
    if not text:
        return []
    return [
        Collaborator(name=clean_text(name), relation=relation.lower())
        for name, relation in COLLABORATOR_PATTERN.findall(text)
    ]


def _optional_number(value) -> Optional[float]:
    number = pd.to_numeric(value, errors='coerce')
    return None if pd.isna(number) else float(number)


def items_from_dataframe(df: pd.DataFrame) -> List[SnapshotItem]:
    """One SnapshotItem per row.

    Raises:
        ValueError: If a required column is missing.
    """
    if not validate_columns(df, REQUIRED_COLUMNS):
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        raise ValueError(f"Missing required columns: {missing}")

    def cell(row, col):
        return row[col] if col in row.index else None

    items = []
    for _, row in df.iterrows():
        name = clean_text(cell(row, COL_NAME))
        if not name:
            continue
        items.append(SnapshotItem(
            name=name,
            domain=clean_text(cell(row, COL_DOMAIN)),
            project=clean_text(cell(row, COL_PROJECT)),
            module=clean_text(cell(row, COL_MODULE)) or None,
            feature=clean_text(cell(row, COL_FEATURE)),
            progress_percent=_optional_number(cell(row, COL_PROGRESS)) or 0,
            plan_percent=_optional_number(cell(row, COL_PLAN)),
            risk_level=normalize_risk_level(cell(row, COL_RISK_LEVEL)),
            risk_notes=normalize_risk_notes(cell(row, COL_RISK_NOTES)),
            past_week_tasks=normalize_task_list(cell(row, COL_PAST_TASKS)),
            next_week_tasks=normalize_task_list(cell(row, COL_NEXT_TASKS)),
            collaborators=parse_collaborators_cell(cell(row, COL_COLLABORATORS)),
        ))

    skipped = len(df) - len(items)
    if skipped:
        logger.warning(f"[Loader] Skipped {skipped} rows without a name")
    return items


def load_items_table(path) -> List[SnapshotItem]:
    """Items from an ``.xlsx`` or ``.csv`` file."""
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix == '.xlsx':
            df = pd.read_excel(path, engine='openpyxl')
        elif suffix == '.csv':
            df = pd.read_csv(path)
        else:
            raise ValueError(f"Unsupported file type: {suffix}")
    except (OSError, pd.errors.ParserError) as e:
        raise ValueError(f"Cannot open file: {e}")
    return items_from_dataframe(df)
