"""
Collaboration network module.

Includes:
- Graph construction from declared collaborators
- Deterministic domain-column layout with collision relaxation
- Edge path geometry with relation-specific direction rules
- Collaboration analytics (load, bottlenecks, domain matrix)
- Rule-based collaboration insights
"""

from .graph_builder import build_network, author_domains
from .layout import (
    LayoutConfig,
    LayoutResult,
    compute_layout,
    initial_positions,
    relax_positions,
    apply_position_overrides,
    node_radius,
    node_radii,
)
from .edge_paths import (
    EdgePath,
    draw_direction,
    compute_edge_path,
    compute_edge_paths,
    sample_quadratic,
)
from .collaboration_metrics import (
    get_member_domains,
    get_pair_count_per_member,
    get_pre_count,
    get_post_count,
    get_pre_inbound,
    get_collaboration_edges,
    get_collaboration_nodes,
    get_cross_domain_score,
    get_cross_module_score,
    get_collaboration_matrix,
    get_member_summary,
    get_collaboration_load,
    get_bottleneck_nodes,
)
from .insights import (
    InsightType,
    CollaborationInsight,
    generate_personal_insights,
    generate_team_insights,
)

__all__ = [
    # Graph
    'build_network',
    'author_domains',
    # Layout
    'LayoutConfig',
    'LayoutResult',
    'compute_layout',
    'initial_positions',
    'relax_positions',
    'apply_position_overrides',
    'node_radius',
    'node_radii',
    # Edges
    'EdgePath',
    'draw_direction',
    'compute_edge_path',
    'compute_edge_paths',
    'sample_quadratic',
    # Analytics
    'get_member_domains',
    'get_pair_count_per_member',
    'get_pre_count',
    'get_post_count',
    'get_pre_inbound',
    'get_collaboration_edges',
    'get_collaboration_nodes',
    'get_cross_domain_score',
    'get_cross_module_score',
    'get_collaboration_matrix',
    'get_member_summary',
    'get_collaboration_load',
    'get_bottleneck_nodes',
    # Insights
    'InsightType',
    'CollaborationInsight',
    'generate_personal_insights',
    'generate_team_insights',
]
