"""
Metrics rollups over the work map tree.

Rollup rules
------------
Feature level (from items):
    progress             round(mean(item.progress_percent))
    risk_level           max of the recorded levels, None if none recorded
    task_count           number of past-week tasks
    completed_task_count past-week tasks whose text contains "100%"

Module level (from features) and project level (from modules):
    progress             round(mean(child.progress)) -- an unweighted mean of
                         the children's rounded percentages, regardless of how
                         many items each child holds
    risk_level           max of the children's levels, None-skipping
    counts               sums

``None`` risk means "no data" and is never turned into 0.

Completion detection is a text heuristic: a task counts as done when its
string contains the literal "100%".  It is kept exactly as the weekly
records are written today; a structured completed flag on tasks would
replace it.
"""

import math
import logging
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.config import COMPLETED_TASK_MARKER, RISK_LABELS
from ..models.data_models import (
    SnapshotItem, FeatureNode, ModuleNode, ProjectNode, Metrics, EMPTY_METRICS,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest int with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def max_risk_level(levels: Iterable[Optional[int]]) -> Optional[int]:
    """Highest non-None level, or None if every level is None."""
    recorded = [level for level in levels if level is not None]
    return max(recorded) if recorded else None


def count_completed_tasks(tasks: Sequence[str]) -> int:
    return sum(1 for task in tasks if COMPLETED_TASK_MARKER in task)


def compute_items_metrics(items: Sequence[SnapshotItem]) -> Metrics:
    """Metrics straight from a list of items."""
    if not items:
        return EMPTY_METRICS

    progress = round_half_up(float(np.mean([item.progress_percent for item in items])))
    return Metrics(
        progress=progress,
        risk_level=max_risk_level(item.risk_level for item in items),
        task_count=sum(len(item.past_week_tasks) for item in items),
        completed_task_count=sum(count_completed_tasks(item.past_week_tasks) for item in items),
    )


def _rollup(children: List[Metrics]) -> Metrics:
    if not children:
        return EMPTY_METRICS
    return Metrics(
        progress=round_half_up(float(np.mean([m.progress for m in children]))),
        risk_level=max_risk_level(m.risk_level for m in children),
        task_count=sum(m.task_count for m in children),
        completed_task_count=sum(m.completed_task_count for m in children),
    )


def compute_feature_metrics(feature: FeatureNode) -> Metrics:
    return compute_items_metrics(feature.items)


def compute_module_metrics(module: ModuleNode) -> Metrics:
    """Unweighted rollup over the module's features."""
    return _rollup([compute_feature_metrics(f) for f in module.features])


def compute_project_metrics(project: ProjectNode) -> Metrics:
    """Unweighted rollup over the project's modules."""
    return _rollup([compute_module_metrics(m) for m in project.modules])


class MetricsCache:
    """
    Memoises metrics per tree node.

    Entries are keyed by node identity.  The node itself is kept in the entry
    so its id cannot be reused while cached.  Rebuilding the tree produces new
    nodes and therefore fresh entries; call ``clear()`` to drop old ones.
    """

    def __init__(self):
        self._entries: Dict[int, tuple] = {}
        self.hits = 0
        self.misses = 0

    def _get(self, node, compute) -> Metrics:
        entry = self._entries.get(id(node))
        if entry is not None and entry[0] is node:
            self.hits += 1
            return entry[1]
        self.misses += 1
        metrics = compute(node)
        self._entries[id(node)] = (node, metrics)
        return metrics

    def feature(self, feature: FeatureNode) -> Metrics:
        return self._get(feature, compute_feature_metrics)

    def module(self, module: ModuleNode) -> Metrics:
        return self._get(module, lambda m: _rollup([self.feature(f) for f in m.features]))

    def project(self, project: ProjectNode) -> Metrics:
        return self._get(project, lambda p: _rollup([self.module(m) for m in p.modules]))

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)


def metrics_frame(projects: List[ProjectNode], cache: Optional[MetricsCache] = None) -> pd.DataFrame:
    """Flatten a tree with its metrics into one row per node.

    Columns: Level, Project, Module, Feature, Items, Progress, Risk_Level,
    Risk_Label, Task_Count, Completed_Tasks.  Rows follow tree order
    (project, then its modules, each followed by its features).
    """
    cache = cache or MetricsCache()
    rows = []

    def add_row(level, metrics, node_items, project, module=None, feature=None):
        rows.append({
            'Level': level,
            'Project': project,
            'Module': module,
            'Feature': feature,
            'Items': len(node_items),
            'Progress': metrics.progress,
            'Risk_Level': metrics.risk_level,
            'Risk_Label': RISK_LABELS.get(metrics.risk_level, 'No Data'),
            'Task_Count': metrics.task_count,
            'Completed_Tasks': metrics.completed_task_count,
        })

    for project in projects:
        add_row('project', cache.project(project), project.items, project.name)
        for module in project.modules:
            add_row('module', cache.module(module), module.items, project.name, module.name)
            for feature in module.features:
                add_row('feature', cache.feature(feature), feature.items,
                        project.name, module.name, feature.name)

    columns = ['Level', 'Project', 'Module', 'Feature', 'Items', 'Progress',
               'Risk_Level', 'Risk_Label', 'Task_Count', 'Completed_Tasks']
    df = pd.DataFrame(rows, columns=columns)
    # Keep None risk as missing data rather than letting pandas coerce it.
    df['Risk_Level'] = df['Risk_Level'].astype('Int64')
    return df
