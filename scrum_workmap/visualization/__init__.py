"""
Visualization module.

Includes:
- Collaboration network figure (curved, directed edges)
- Work map treemap
- Continuity status summary
"""

from .charts import (
    chart_collaboration_network,
    chart_workmap_treemap,
    chart_continuity_summary,
    domain_colors,
)

__all__ = [
    'chart_collaboration_network',
    'chart_workmap_treemap',
    'chart_continuity_summary',
    'domain_colors',
]
