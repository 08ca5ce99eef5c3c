"""
Central Configuration Module for the Scrum Work Map engine.

=== PURPOSE ===
This module is the single source of truth for every tunable constant,
threshold, palette, and column mapping used by the work map, the
collaboration network, and the continuity analysis.  Every other module
imports from here rather than defining its own magic numbers.

=== DATA FLOW ===
  1. UNSPECIFIED_MODULE / RISK_LEVELS drive the hierarchy builder and the
     metrics rollups (scrum_workmap.hierarchy).
  2. LAYOUT_* / NODE_RADIUS_* / EDGE_* drive the deterministic graph layout
     and the edge path geometry (scrum_workmap.network).
  3. CONTINUITY_* thresholds drive the week-to-week task continuity
     classifier (scrum_workmap.analysis).
  4. COL_* constants abstract away spreadsheet column names for tabular
     snapshot input (scrum_workmap.ingest).
"""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# ==========================================
# PATHS
# ==========================================
# Weekly snapshot JSON files are stored as <data_dir>/<year>/<year>-W<nn>.json
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_DATA_DIR = Path(os.environ.get('SCRUM_WORKMAP_DATA_DIR', PROJECT_ROOT / 'data' / 'scrum'))
LOG_DIR = Path(os.environ.get('SCRUM_WORKMAP_LOG_DIR', PROJECT_ROOT / 'logs'))
DEFAULT_REPORT_FILE = 'WorkMap_Report.xlsx'

# ==========================================
# HIERARCHY
# ==========================================
# Items without a module are grouped under this name.  It is a real module
# name from the tree's point of view, distinct from "no module at all".
UNSPECIFIED_MODULE = "(unspecified)"

# Risk levels: 0 = none, 1 = minor, 2 = moderate, 3 = severe.
# None (no assessment recorded) is never coerced to 0.
RISK_LEVELS = (0, 1, 2, 3)
RISK_LABELS = {0: 'None', 1: 'Minor', 2: 'Moderate', 3: 'Severe'}

# Marker that flags a past-week task as completed.
COMPLETED_TASK_MARKER = "100%"

# Risk note placeholders that mean "nothing recorded"
EMPTY_RISK_MARKERS = {'', '?', '-'}

# ==========================================
# CONTINUITY
# ==========================================
CONTINUITY_CONNECTED_RATIO = 0.4
CONTINUITY_PARTIAL_RATIO = 0.2
# Tokens of this length or shorter are ignored
CONTINUITY_MIN_TOKEN_LENGTH = 2

# Sort weight per status: problems first, missing data last.
CONTINUITY_STATUS_SCORES = {
    'broken': 0,
    'partial': 1,
    'connected': 2,
    'unknown': 3,
}

# ==========================================
# NETWORK LAYOUT
# ==========================================
LAYOUT_WIDTH = 800.0
LAYOUT_HEIGHT = 500.0
LAYOUT_PADDING = 60.0
# Vertical gap between members of one domain column
LAYOUT_MAX_ROW_SPACING = 90.0
LAYOUT_MAX_ITERATIONS = 50
# Upper bound for the pairwise minimum separation
LAYOUT_MIN_DISTANCE_CAP = 90.0
# Displacement below this is treated as "nothing moved"
LAYOUT_EPSILON = 1e-6

NODE_RADIUS_MIN = 18.0
NODE_RADIUS_MAX = 32.0

# Edge geometry: gap between a node boundary and the curve end, and the
# perpendicular control-point offset for directed relations.
EDGE_GAP = 6.0
EDGE_CURVE_OFFSET = 28.0
EDGE_CURVE_SAMPLES = 24
# Share of the centre distance the two trims may use together
EDGE_MAX_TRIM_SHARE = 0.8

# ==========================================
# COLORS
# ==========================================
RELATION_COLORS = {
    'pair': '#3b82f6',
    'pre': '#f59e0b',
    'post': '#22c55e',
}

CONTINUITY_COLORS = {
    'connected': '#22c55e',
    'partial': '#f59e0b',
    'broken': '#ef4444',
    'unknown': '#9ca3af',
}

RISK_COLORS = {
    None: '#9ca3af',
    0: '#22c55e',
    1: '#84cc16',
    2: '#f59e0b',
    3: '#ef4444',
}

# Domains get a color in alphabetical order; the palette wraps around.
DOMAIN_PALETTE = [
    '#3b82f6', '#8b5cf6', '#ec4899', '#14b8a6',
    '#f97316', '#06b6d4', '#a855f7', '#64748b',
]

# ==========================================
# COLUMN MAPPINGS (tabular snapshot input)
# ==========================================
COL_NAME = 'Name'
COL_DOMAIN = 'Domain'
COL_PROJECT = 'Project'
COL_MODULE = 'Module'
COL_FEATURE = 'Feature'
COL_PROGRESS = 'Progress %'
COL_PLAN = 'Plan %'
COL_RISK_LEVEL = 'Risk Level'
COL_RISK_NOTES = 'Risk'
COL_PAST_TASKS = 'Past Week Tasks'
COL_NEXT_TASKS = 'Next Week Tasks'
COL_COLLABORATORS = 'Collaborators'

REQUIRED_COLUMNS = [COL_NAME, COL_DOMAIN, COL_PROJECT, COL_FEATURE, COL_PROGRESS]
