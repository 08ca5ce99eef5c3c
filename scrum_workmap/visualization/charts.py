"""
Plotly figures for the work map, the collaboration network and continuity.

Rendering only: every number shown here comes from the hierarchy, network
and analysis modules.  Each function is stateless and returns a
``go.Figure``; empty input gives a figure with a centred message instead of
raising.

Charts:

    1. chart_collaboration_network() - Curved edges from ``edge_paths`` with
       arrowheads for ``pre`` / ``post``, node size by pair + pre badges,
       domain colours.  Position overrides (dragged nodes) are merged in
       before drawing.

    2. chart_workmap_treemap() - Project -> Module -> Feature treemap sized
       by item count and coloured by rolled-up progress; risk in the hover.

    3. chart_continuity_summary() - Stacked bar of continuity statuses for
       the prev -> current and current -> next comparisons.
"""

import logging
from typing import Dict, List, Optional, Tuple

import plotly.graph_objects as go

from ..core.config import (
    LAYOUT_WIDTH, LAYOUT_HEIGHT, RELATION_COLORS, CONTINUITY_COLORS,
    DOMAIN_PALETTE, RISK_LABELS,
)
from ..hierarchy.metrics import MetricsCache
from ..models.data_models import (
    NetworkGraph, ProjectNode, ContinuityResult, ContinuityStatus, Relation,
)
from ..network.edge_paths import compute_edge_paths, sample_quadratic
from ..network.layout import apply_position_overrides, node_radii

logger = logging.getLogger(__name__)

FONT_FAMILY = "Inter, Segoe UI, sans-serif"


def _apply_theme(fig: go.Figure, title: str, height: int = 500) -> go.Figure:
    """Shared template, font and margins."""
    fig.update_layout(
        title=title,
        height=height,
        template="plotly_white",
        font=dict(family=FONT_FAMILY, size=12),
        margin=dict(l=40, r=40, t=60, b=40),
    )
    return fig


def _empty_figure(title: str, message: str = "No data available") -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(size=16, color="gray")
    )
    return _apply_theme(fig, title)


def domain_colors(domains) -> Dict[str, str]:
    """Domain -> colour, assigned in alphabetical order; the palette wraps."""
    return {
        domain: DOMAIN_PALETTE[i % len(DOMAIN_PALETTE)]
        for i, domain in enumerate(sorted(set(domains)))
    }


# ============================================================================
# COLLABORATION NETWORK
# ============================================================================

def chart_collaboration_network(graph: NetworkGraph,
                                overrides: Optional[Dict[str, Tuple[float, float]]] = None,
                                width: float = LAYOUT_WIDTH,
                                height: float = LAYOUT_HEIGHT) -> go.Figure:
    """
    Draw a laid-out collaboration graph.

    ``graph`` must already carry coordinates (``compute_layout(...).graph``).
    Each relation gets one line trace, with curves separated by ``None`` so
    the legend toggles a whole relation at once.  Arrowheads are annotations
    placed at the curve end, pointing along the last control-point segment.

    Args:
        graph: Positioned graph.
        overrides: Node id -> (x, y) from interactive dragging.
        width, height: Canvas size used for the layout.

    Returns:
        go.Figure with y growing downwards, like the layout canvas.
    """
    title = "Collaboration Network"
    if graph.is_empty:
        return _empty_figure(title, "No collaboration declared")

    graph = apply_position_overrides(graph, overrides)
    radii = node_radii(graph)
    paths = compute_edge_paths(graph, radii)

    fig = go.Figure()

    for relation in Relation:
        xs, ys = [], []
        for path in paths:
            if path.relation is not relation:
                continue
            points = sample_quadratic(path)
            xs.extend(points[:, 0].tolist() + [None])
            ys.extend(points[:, 1].tolist() + [None])
        if not xs:
            continue
        fig.add_trace(go.Scatter(
            x=xs, y=ys,
            mode='lines',
            name=relation.value,
            line=dict(color=RELATION_COLORS[relation.value], width=2),
            hoverinfo='skip',
        ))

    for path in paths:
        if not path.directed:
            continue
        fig.add_annotation(
            x=path.end[0], y=path.end[1],
            ax=path.control[0], ay=path.control[1],
            xref='x', yref='y', axref='x', ayref='y',
            showarrow=True,
            arrowhead=2,
            arrowsize=1.2,
            arrowwidth=2,
            arrowcolor=RELATION_COLORS[path.relation.value],
            text='',
            standoff=0,
        )

    colors = domain_colors(node.domain for node in graph.nodes)
    fig.add_trace(go.Scatter(
        x=[node.x for node in graph.nodes],
        y=[node.y for node in graph.nodes],
        mode='markers+text',
        name='members',
        text=[node.id for node in graph.nodes],
        textposition='middle center',
        marker=dict(
            size=[2 * radii[node.id] for node in graph.nodes],
            color=[colors[node.domain] for node in graph.nodes],
            line=dict(color='white', width=2),
        ),
        customdata=[[node.domain, node.pair_count, node.pre_count] for node in graph.nodes],
        hovertemplate=('<b>%{text}</b><br>Domain: %{customdata[0]}'
                       '<br>Pair: %{customdata[1]}<br>Pre: %{customdata[2]}<extra></extra>'),
        showlegend=False,
    ))

    _apply_theme(fig, title, height=int(height) + 100)
    fig.update_xaxes(range=[0, width], visible=False)
    fig.update_yaxes(range=[height, 0], visible=False, scaleanchor='x', scaleratio=1)
    logger.debug(f"[Charts] Network: {len(graph.nodes)} nodes, {len(paths)} edges drawn")
    return fig


# ============================================================================
# WORK MAP
# ============================================================================

def chart_workmap_treemap(projects: List[ProjectNode],
                          cache: Optional[MetricsCache] = None) -> go.Figure:
    """
    Project -> Module -> Feature treemap.

    IDs use "project/module/feature" so the same module or feature name in
    two projects never collides.  Sizes are item counts (``branchvalues``
    total), colours are rolled-up progress on a red-to-green scale.
    """
    title = "Work Map"
    if not projects:
        return _empty_figure(title)

    cache = cache or MetricsCache()
    ids, labels, parents, values, progress, risks = [], [], [], [], [], []

    def add(node_id, label, parent, count, metrics):
        ids.append(node_id)
        labels.append(label)
        parents.append(parent)
        values.append(count)
        progress.append(metrics.progress)
        risks.append(RISK_LABELS.get(metrics.risk_level, 'No Data'))

    for project in projects:
        add(project.name, project.name, '', len(project.items), cache.project(project))
        for module in project.modules:
            module_id = f"{project.name}/{module.name}"
            add(module_id, module.name, project.name, len(module.items), cache.module(module))
            for feature in module.features:
                add(f"{module_id}/{feature.name}", feature.name, module_id,
                    len(feature.items), cache.feature(feature))

    fig = go.Figure(go.Treemap(
        ids=ids,
        labels=labels,
        parents=parents,
        values=values,
        branchvalues='total',
        customdata=list(zip(progress, risks)),
        textinfo='label',
        marker=dict(
            colors=progress,
            colorscale='RdYlGn',
            cmin=0,
            cmax=100,
            showscale=True,
            colorbar=dict(title='Progress %')
        ),
        hovertemplate=('<b>%{label}</b><br>Progress: %{customdata[0]}%'
                       '<br>Risk: %{customdata[1]}<br>Items: %{value}<extra></extra>'),
        pathbar=dict(visible=True)
    ))
    return _apply_theme(fig, title, height=600)


# ============================================================================
# CONTINUITY
# ============================================================================

def chart_continuity_summary(results: List[ContinuityResult]) -> go.Figure:
    """Stacked bar: one bar per comparison, one segment per status."""
    title = "Task Continuity"
    if not results:
        return _empty_figure(title)

    comparisons = {
        'Prev → Current': [r.prev_to_current for r in results],
        'Current → Next': [r.current_to_next for r in results],
    }

    fig = go.Figure()
    for status in (ContinuityStatus.BROKEN, ContinuityStatus.PARTIAL,
                   ContinuityStatus.CONNECTED, ContinuityStatus.UNKNOWN):
        fig.add_trace(go.Bar(
            x=list(comparisons),
            y=[statuses.count(status) for statuses in comparisons.values()],
            name=status.value,
            marker_color=CONTINUITY_COLORS[status.value],
            hovertemplate='%{x}<br>' + status.value + ': %{y}<extra></extra>',
        ))

    fig.update_layout(barmode='stack', yaxis_title='Items')
    return _apply_theme(fig, title, height=400)
