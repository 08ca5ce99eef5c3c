"""
Hierarchy module: Project -> Module -> Feature trees and their metric rollups.
"""

from .builder import (
    build_workmap_hierarchy,
    build_person_hierarchy,
    module_name_of,
    find_project,
    find_module,
    find_feature,
    person_feature_items,
    iter_features,
)
from .metrics import (
    compute_items_metrics,
    compute_feature_metrics,
    compute_module_metrics,
    compute_project_metrics,
    MetricsCache,
    metrics_frame,
    round_half_up,
)

__all__ = [
    'build_workmap_hierarchy',
    'build_person_hierarchy',
    'module_name_of',
    'find_project',
    'find_module',
    'find_feature',
    'person_feature_items',
    'iter_features',
    'compute_items_metrics',
    'compute_feature_metrics',
    'compute_module_metrics',
    'compute_project_metrics',
    'MetricsCache',
    'metrics_frame',
    'round_half_up',
]
