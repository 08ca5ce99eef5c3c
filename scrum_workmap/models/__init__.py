"""
Models module for the Scrum Work Map engine.

Contains the snapshot input records, tree nodes, metrics, graph and
continuity result types.
"""

from .data_models import (
    Relation,
    ContinuityStatus,
    Collaborator,
    SnapshotItem,
    FeatureNode,
    ModuleNode,
    ProjectNode,
    PersonDomainNode,
    PersonNode,
    Metrics,
    EMPTY_METRICS,
    NetworkNode,
    NetworkEdge,
    NetworkGraph,
    ContinuityResult,
    normalize_risk_level,
    normalize_relation,
    normalize_task_list,
    normalize_risk_notes,
)

__all__ = [
    'Relation',
    'ContinuityStatus',
    'Collaborator',
    'SnapshotItem',
    'FeatureNode',
    'ModuleNode',
    'ProjectNode',
    'PersonDomainNode',
    'PersonNode',
    'Metrics',
    'EMPTY_METRICS',
    'NetworkNode',
    'NetworkEdge',
    'NetworkGraph',
    'ContinuityResult',
    'normalize_risk_level',
    'normalize_relation',
    'normalize_task_list',
    'normalize_risk_notes',
]
