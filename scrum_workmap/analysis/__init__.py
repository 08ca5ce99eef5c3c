"""
Analysis modules for the Scrum Work Map engine.

Includes:
- Week-to-week task continuity classification
"""

from .continuity import (
    tokenize_tasks,
    match_ratio,
    classify_ratio,
    analyze_continuity,
    create_snapshot_key,
    index_by_key,
    analyze_weeks,
    summarize_continuity,
    continuity_frame,
)

__all__ = [
    'tokenize_tasks',
    'match_ratio',
    'classify_ratio',
    'analyze_continuity',
    'create_snapshot_key',
    'index_by_key',
    'analyze_weeks',
    'summarize_continuity',
    'continuity_frame',
]
