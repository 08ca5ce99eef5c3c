"""
Edge geometry for drawing the collaboration graph.

Every edge is a quadratic Bezier curve from the boundary of one node to the
boundary of the other (node radius plus a small gap, never the centres).
When two nodes sit closer than their trims allow, both trims shrink so the
curve keeps its direction.
The control point sits off the chord's midpoint along its perpendicular:

    pre   offset to one side
    pair  no offset (straight)
    post  offset to the other side

The side is measured in the stored author -> collaborator frame, so a
``pre`` and a ``post`` declared between the same two people never coincide.

Drawing direction
-----------------
Edges are stored as declared (``source`` = author, ``target`` = collaborator).
For drawing:

    pre   reversed: collaborator -> author, because the collaborator's work
          came first and fed the author's
    post  as stored: author -> collaborator
    pair  undirected, no arrowhead
"""

import math
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..core.config import (
    EDGE_GAP, EDGE_CURVE_OFFSET, EDGE_CURVE_SAMPLES, EDGE_MAX_TRIM_SHARE, NODE_RADIUS_MIN,
)
from ..models.data_models import NetworkEdge, NetworkGraph, Relation

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# Perpendicular offset sign per relation
CURVE_SIDE = {
    Relation.PRE: 1,
    Relation.PAIR: 0,
    Relation.POST: -1,
}


@dataclass(frozen=True)
class EdgePath:
    """
    Attributes:
        relation: Relation of the underlying edge.
        draw_from: Node the curve starts at (after direction rules).
        draw_to: Node the curve ends at; the arrowhead goes here when directed.
        start, control, end: Quadratic Bezier points.
        directed: False for ``pair``.
    """
    relation: Relation
    draw_from: str
    draw_to: str
    start: Point
    control: Point
    end: Point
    directed: bool

    @property
    def arrow_angle(self) -> float:
        """Direction of travel at the end point, in degrees."""
        dx = self.end[0] - self.control[0]
        dy = self.end[1] - self.control[1]
        return math.degrees(math.atan2(dy, dx))


def draw_direction(edge: NetworkEdge) -> Tuple[str, str, bool]:
    """(from, to, directed) for drawing a stored edge."""
    if edge.relation is Relation.PRE:
        return edge.target, edge.source, True
    if edge.relation is Relation.POST:
        return edge.source, edge.target, True
    return edge.source, edge.target, False


def compute_edge_path(edge: NetworkEdge,
                      positions: Dict[str, Point],
                      radii: Optional[Dict[str, float]] = None,
                      gap: float = EDGE_GAP,
                      curve_offset: float = EDGE_CURVE_OFFSET) -> Optional[EdgePath]:
    """Curve for one edge, or None when an endpoint is missing or both share a spot."""
    if edge.source not in positions or edge.target not in positions:
        return None

    radii = radii or {}
    sx, sy = positions[edge.source]
    tx, ty = positions[edge.target]
    dx, dy = tx - sx, ty - sy
    distance = math.hypot(dx, dy)
    if distance == 0:
        return None

    # Unit vector and left-hand normal in the stored frame
    ux, uy = dx / distance, dy / distance
    nx, ny = -uy, ux

    source_trim = radii.get(edge.source, NODE_RADIUS_MIN) + gap
    target_trim = radii.get(edge.target, NODE_RADIUS_MIN) + gap
    # Close nodes: shrink both trims so the ends never cross over
    total_trim = source_trim + target_trim
    if total_trim > 0:
        scale = min(1.0, EDGE_MAX_TRIM_SHARE * distance / total_trim)
        source_trim *= scale
        target_trim *= scale
    source_point = (sx + ux * source_trim, sy + uy * source_trim)
    target_point = (tx - ux * target_trim, ty - uy * target_trim)

    side = CURVE_SIDE[edge.relation]
    mid_x = (source_point[0] + target_point[0]) / 2
    mid_y = (source_point[1] + target_point[1]) / 2
    control = (mid_x + nx * curve_offset * side, mid_y + ny * curve_offset * side)

    draw_from, draw_to, directed = draw_direction(edge)
    if draw_from == edge.source:
        start, end = source_point, target_point
    else:
        start, end = target_point, source_point

    return EdgePath(
        relation=edge.relation,
        draw_from=draw_from,
        draw_to=draw_to,
        start=start,
        control=control,
        end=end,
        directed=directed,
    )


def compute_edge_paths(graph: NetworkGraph,
                       radii: Optional[Dict[str, float]] = None) -> List[EdgePath]:
    """Paths for every drawable edge, in edge order.  Parallel edges each get one."""
    positions = graph.positions()
    paths = []
    for edge in graph.edges:
        path = compute_edge_path(edge, positions, radii)
        if path is None:
            logger.debug(f"[Edges] Skipping {edge.source}->{edge.target}: endpoints coincide")
            continue
        paths.append(path)
    return paths


def sample_quadratic(path: EdgePath, steps: int = EDGE_CURVE_SAMPLES) -> np.ndarray:
    """(steps + 1, 2) array of points along the curve, start to end."""
    t = np.linspace(0.0, 1.0, steps + 1)[:, None]
    p0 = np.asarray(path.start)
    p1 = np.asarray(path.control)
    p2 = np.asarray(path.end)
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2
