"""
Scrum Work Map - weekly status records turned into a work map, a
collaboration network and a task continuity report.

This package provides:
- Project > Module > Feature hierarchy with progress/risk rollups
- Person-centric hierarchy
- Collaboration graph with deterministic domain-column layout
- Edge geometry with relation-specific drawing direction
- Week-to-week task continuity classification
- Excel report and Plotly charts
"""

__version__ = "1.0.0"
__author__ = "Scrum Work Map Team"

# Core imports
from .core.config import *
from .core.utils import clean_text, validate_columns

# Models
from .models import (
    Relation,
    ContinuityStatus,
    Collaborator,
    SnapshotItem,
    ProjectNode,
    PersonNode,
    Metrics,
    NetworkGraph,
    ContinuityResult,
)

# Hierarchy
from .hierarchy import (
    build_workmap_hierarchy,
    build_person_hierarchy,
    MetricsCache,
    metrics_frame,
)

# Network
from .network import build_network, compute_layout, compute_edge_paths, LayoutConfig

# Analysis
from .analysis import analyze_continuity, analyze_weeks

# Ingest, pipeline
from .ingest import WeekKey, load_week_file, load_items_table, discover_weeks
from .pipeline import WorkMapPipeline, run_workmap

__all__ = [
    # Core
    'clean_text',
    'validate_columns',

    # Models
    'Relation',
    'ContinuityStatus',
    'Collaborator',
    'SnapshotItem',
    'ProjectNode',
    'PersonNode',
    'Metrics',
    'NetworkGraph',
    'ContinuityResult',

    # Hierarchy
    'build_workmap_hierarchy',
    'build_person_hierarchy',
    'MetricsCache',
    'metrics_frame',

    # Network
    'build_network',
    'compute_layout',
    'compute_edge_paths',
    'LayoutConfig',

    # Analysis
    'analyze_continuity',
    'analyze_weeks',

    # Ingest / pipeline
    'WeekKey',
    'load_week_file',
    'load_items_table',
    'discover_weeks',
    'WorkMapPipeline',
    'run_workmap',
]
