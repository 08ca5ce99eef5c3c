"""
Pipeline Orchestrator - Main execution flow for the Scrum Work Map engine.

This module wires the core components into one sequential workflow, the way
a weekly review runs them:

  Phase 1 : Load        -- current week plus its ISO neighbours from the data
                           directory, or a ready-made list of items.
  Phase 2 : Work map    -- Project > Module > Feature tree with metrics.
  Phase 3 : Network     -- collaboration graph, layout and bottlenecks.
  Phase 4 : Continuity  -- prev -> current -> next task continuity.
  Phase 5 : Report      -- multi-sheet Excel workbook (pandas + openpyxl).

Data flow
---------
::

    [data/scrum/<year>/<year>-Wnn.json]  or  [items]
         |
         v
    load() --> self.items, self.prev_items, self.next_items
         |
         v
    build_workmap() --> self.projects, self.metrics_df
         |
         v
    build_network() --> self.layout (positioned graph), self.bottlenecks
         |
         v
    analyze_continuity() --> self.continuity
         |
         v
    export_report() --> Metrics / Network Nodes / Network Edges /
                        Continuity / Bottlenecks sheets

A missing neighbouring week is not an error: continuity for that side is
simply ``unknown``.  Unreadable input raises ``ValueError``.
"""

import sys
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..core.config import DEFAULT_DATA_DIR, DEFAULT_REPORT_FILE
from ..models.data_models import SnapshotItem
from ..hierarchy import build_workmap_hierarchy, MetricsCache, metrics_frame
from ..network import build_network, compute_layout, get_bottleneck_nodes, LayoutConfig
from ..analysis import analyze_weeks, continuity_frame, summarize_continuity
from ..ingest import WeekKey, discover_weeks, neighbor_weeks, load_week

logger = logging.getLogger(__name__)


# ============================================================================
# CONSOLE OUTPUT HELPERS
# ============================================================================

def print_banner(text, char="=", width=60):
    """Print a formatted banner to console."""
    print()
    print(char * width)
    print(f"  {text}")
    print(char * width)


def print_status(phase, message, icon="->"):
    """Print a status message and immediately flush stdout."""
    print(f"  {icon} [{phase}] {message}")
    sys.stdout.flush()


# ============================================================================
# PIPELINE
# ============================================================================

class WorkMapPipeline:
    """
    Coordinates the work map, network and continuity phases for one week.

    Typical usage
    -------------
    ::

        pipe = WorkMapPipeline(data_dir="data/scrum")
        pipe.load(WeekKey(2025, 3))
        pipe.run_all_phases()
        pipe.export_report("WorkMap_Report.xlsx")

    or, with items already in memory::

        pipe = WorkMapPipeline(items=items)
        pipe.run_all_phases()
    """

    def __init__(self, data_dir=None, items: Optional[List[SnapshotItem]] = None,
                 layout_config: Optional[LayoutConfig] = None, verbose: bool = False):
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.layout_config = layout_config
        self.verbose = verbose

        self.week: Optional[WeekKey] = None
        self.items: List[SnapshotItem] = list(items) if items is not None else []
        self.prev_items: List[SnapshotItem] = []
        self.next_items: List[SnapshotItem] = []

        self.cache = MetricsCache()
        self.projects = []
        self.metrics_df = None
        self.layout = None
        self.bottlenecks = []
        self.continuity = []

    def _status(self, phase, message, icon="->"):
        logger.info(f"[Pipeline] {phase}: {message}")
        if self.verbose:
            print_status(phase, message, icon)

    def load(self, week: Optional[WeekKey] = None):
        """Phase 1: read the requested week (latest when None) and its neighbours.

        Raises:
            ValueError: If no week file exists or a file cannot be parsed.
        """
        weeks = discover_weeks(self.data_dir)
        if not weeks:
            raise ValueError(f"No weekly files found under {self.data_dir}")

        week = week or weeks[-1]
        if week not in weeks:
            raise ValueError(f"Week {week} not found under {self.data_dir}")

        self.week = week
        current = load_week(self.data_dir, week)
        prev_key, next_key = neighbor_weeks(weeks, week)
        prev_snapshot = load_week(self.data_dir, prev_key)
        next_snapshot = load_week(self.data_dir, next_key)

        self.items = current.items
        self.prev_items = prev_snapshot.items if prev_snapshot else []
        self.next_items = next_snapshot.items if next_snapshot else []

        self._status("load", f"{week}: {len(self.items)} items "
                             f"(prev: {prev_key or '-'}, next: {next_key or '-'})")
        return self.items

    def build_workmap(self):
        """Phase 2: hierarchy and metrics."""
        self.cache.clear()
        self.projects = build_workmap_hierarchy(self.items)
        self.metrics_df = metrics_frame(self.projects, self.cache)
        self._status("workmap", f"{len(self.projects)} projects, {len(self.metrics_df)} rows")
        return self.projects

    def build_network(self):
        """Phase 3: collaboration graph, layout and bottleneck ranking."""
        graph = build_network(self.items)
        self.layout = compute_layout(graph, self.layout_config)
        self.bottlenecks = get_bottleneck_nodes(self.items)
        if not self.layout.converged:
            logger.warning(f"[Pipeline] Layout left overlapping nodes after "
                           f"{self.layout.iterations} passes")
        self._status("network", f"{len(graph.nodes)} members, {len(graph.edges)} relations")
        return self.layout

    def analyze_continuity(self):
        """Phase 4: week-to-week continuity."""
        self.continuity = analyze_weeks(self.items, self.prev_items, self.next_items)
        summary = summarize_continuity(self.continuity)
        self._status("continuity", f"{summary['connected']} connected, "
                                   f"{summary['partial']} partial, {summary['broken']} broken")
        return self.continuity

    def run_all_phases(self):
        """Phases 2-4.  Call ``load`` first unless items were given."""
        if self.verbose:
            print_banner(f"WORK MAP {self.week or ''} ({len(self.items)} items)")
        self.build_workmap()
        self.build_network()
        self.analyze_continuity()
        return self

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def network_frames(self):
        """(nodes, edges) DataFrames of the laid-out graph."""
        graph = self.layout.graph
        nodes = pd.DataFrame(
            [{'Member': n.id, 'Domain': n.domain, 'Pair': n.pair_count,
              'Pre': n.pre_count, 'X': round(n.x, 1), 'Y': round(n.y, 1)}
             for n in graph.nodes],
            columns=['Member', 'Domain', 'Pair', 'Pre', 'X', 'Y'],
        )
        edges = pd.DataFrame(
            [{'Author': e.source, 'Collaborator': e.target, 'Relation': e.relation.value}
             for e in graph.edges],
            columns=['Author', 'Collaborator', 'Relation'],
        )
        return nodes, edges

    def bottleneck_frame(self) -> pd.DataFrame:
        rows = []
        for node in self.bottlenecks:
            row = asdict(node)
            row['waiters'] = ", ".join(node.waiters)
            row['blocking'] = ", ".join(node.blocking)
            rows.append(row)
        return pd.DataFrame(rows, columns=['name', 'domain', 'inbound_count', 'outbound_count',
                                           'intensity', 'waiters', 'blocking'])

    def export_report(self, path=DEFAULT_REPORT_FILE) -> Path:
        """Write every phase's tables into one workbook.

        Raises:
            ValueError: If the phases have not run or the file cannot be written.
        """
        if self.metrics_df is None or self.layout is None:
            raise ValueError("Run the pipeline phases before exporting a report")

        path = Path(path)
        nodes, edges = self.network_frames()
        sheets = {
            'Metrics': self.metrics_df,
            'Network Nodes': nodes,
            'Network Edges': edges,
            'Continuity': continuity_frame(self.continuity),
            'Bottlenecks': self.bottleneck_frame(),
        }
        try:
            with pd.ExcelWriter(path, engine='openpyxl') as writer:
                for name, df in sheets.items():
                    df.to_excel(writer, sheet_name=name, index=False)
        except OSError as e:
            raise ValueError(f"Cannot write report {path}: {e}")

        self._status("report", f"Saved to {path}", "[ok]")
        return path


def run_workmap(data_dir=None, week: Optional[WeekKey] = None,
                items: Optional[List[SnapshotItem]] = None,
                output_path=None, verbose: bool = False) -> WorkMapPipeline:
    """Load, run every phase and optionally export.  Returns the finished pipeline."""
    pipeline = WorkMapPipeline(data_dir=data_dir, items=items, verbose=verbose)
    if items is None:
        pipeline.load(week)
    pipeline.run_all_phases()
    if output_path:
        pipeline.export_report(output_path)
    return pipeline
