"""
Deterministic collaboration graph layout.

Two phases, no physics simulation and no attraction forces:

Phase 1 -- initial placement
    Nodes are grouped by domain.  Domains are ordered alphabetically and each
    gets a column, evenly spaced across the usable width (a single domain sits
    on the horizontal midpoint).  Inside a column the members are evenly
    spaced vertically around the vertical midpoint.  Row spacing is capped at
    ``max_row_spacing`` and shrinks when the tallest column would not fit the
    usable height.

Phase 2 -- collision relaxation
    Up to ``max_iterations`` passes.  Each pass visits every unordered node
    pair; when two nodes are closer than the minimum separation
    ``min(usable_width / max(n, 2), min_distance_cap)``, both are pushed apart
    along the line joining them by half the overlap each.  After every pass
    all nodes are clamped back inside the padded bounds.  A pass that moves
    nothing ends the loop early.

    Separation is best effort: many nodes in a small area can still overlap
    after the last pass.  That is reported through ``LayoutResult.converged``
    and is not an error.

The same input graph always yields the same coordinates.  The input graph is
never modified; a positioned copy is returned.
"""

import math
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..core.config import (
    LAYOUT_WIDTH, LAYOUT_HEIGHT, LAYOUT_PADDING, LAYOUT_MAX_ROW_SPACING,
    LAYOUT_MAX_ITERATIONS, LAYOUT_MIN_DISTANCE_CAP, LAYOUT_EPSILON,
    NODE_RADIUS_MIN, NODE_RADIUS_MAX,
)
from ..models.data_models import NetworkGraph, NetworkNode

logger = logging.getLogger(__name__)

# Golden angle, used to pick a push direction for nodes on the same spot
_GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass(frozen=True)
class LayoutConfig:
    width: float = LAYOUT_WIDTH
    height: float = LAYOUT_HEIGHT
    padding: float = LAYOUT_PADDING
    max_row_spacing: float = LAYOUT_MAX_ROW_SPACING
    max_iterations: int = LAYOUT_MAX_ITERATIONS
    min_distance_cap: float = LAYOUT_MIN_DISTANCE_CAP

    def __post_init__(self):
        if self.usable_width <= 0 or self.usable_height <= 0:
            raise ValueError(
                f"Padding {self.padding} leaves no room in a {self.width}x{self.height} canvas"
            )

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.padding

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.padding

    def min_distance(self, node_count: int) -> float:
        """Target separation between any two node centres."""
        return min(self.usable_width / max(node_count, 2), self.min_distance_cap)


@dataclass
class LayoutResult:
    """
    Attributes:
        graph: Copy of the input graph with coordinates set.
        iterations: Relaxation passes actually run.
        converged: True when a pass found no pair to separate.
        min_distance: Separation the relaxation aimed for.
    """
    graph: NetworkGraph
    iterations: int
    converged: bool
    min_distance: float


def group_by_domain(nodes: List[NetworkNode]) -> Dict[str, List[NetworkNode]]:
    """Domain -> member nodes, domains alphabetical, members in graph order."""
    groups: Dict[str, List[NetworkNode]] = {}
    for node in nodes:
        groups.setdefault(node.domain, []).append(node)
    return {domain: groups[domain] for domain in sorted(groups)}


def initial_positions(nodes: List[NetworkNode], config: LayoutConfig) -> np.ndarray:
    """Phase 1: domain columns.  Returns an (n, 2) array aligned with ``nodes``."""
    positions = np.zeros((len(nodes), 2), dtype=float)
    if not nodes:
        return positions

    index_of = {id(node): i for i, node in enumerate(nodes)}
    groups = group_by_domain(nodes)
    column_count = len(groups)
    tallest = max(len(members) for members in groups.values())

    row_spacing = min(config.max_row_spacing, config.usable_height / max(tallest - 1, 1))
    center_x = config.width / 2
    center_y = config.height / 2

    for column, members in enumerate(groups.values()):
        if column_count == 1:
            x = center_x
        else:
            x = config.padding + config.usable_width * column / (column_count - 1)
        offset = (len(members) - 1) / 2
        for row, node in enumerate(members):
            positions[index_of[id(node)]] = (x, center_y + (row - offset) * row_spacing)

    return positions


def _push_direction(i: int, j: int) -> Tuple[float, float]:
    """Fixed unit vector for two nodes sitting on the same point."""
    angle = _GOLDEN_ANGLE * (i + j + 1)
    return math.cos(angle), math.sin(angle)


def relax_positions(positions: np.ndarray, config: LayoutConfig) -> Tuple[np.ndarray, int, bool]:
    """Phase 2: pairwise separation.

    Returns:
        (positions, passes run, converged)
    """
    positions = positions.copy()
    count = len(positions)
    if count < 2:
        return positions, 0, True

    min_dist = config.min_distance(count)
    lower = (config.padding, config.padding)
    upper = (config.width - config.padding, config.height - config.padding)

    for iteration in range(1, config.max_iterations + 1):
        moved = 0.0
        for i in range(count - 1):
            for j in range(i + 1, count):
                dx, dy = positions[j] - positions[i]
                distance = math.hypot(dx, dy)
                if distance >= min_dist - LAYOUT_EPSILON:
                    continue
                if distance < LAYOUT_EPSILON:
                    ux, uy = _push_direction(i, j)
                else:
                    ux, uy = dx / distance, dy / distance
                shift = (min_dist - distance) / 2
                positions[i] -= (ux * shift, uy * shift)
                positions[j] += (ux * shift, uy * shift)
                moved += 2 * shift

        np.clip(positions, lower, upper, out=positions)

        if moved <= LAYOUT_EPSILON:
            return positions, iteration, True

    logger.debug(f"[Layout] Residual overlap after {config.max_iterations} passes ({count} nodes)")
    return positions, config.max_iterations, False


def compute_layout(graph: NetworkGraph, config: Optional[LayoutConfig] = None) -> LayoutResult:
    """Assign coordinates to every node of ``graph``.

    Args:
        graph: Output of ``build_network``; left untouched.
        config: Canvas size and tuning; defaults from ``core.config``.

    Returns:
        LayoutResult with a positioned copy of the graph.
    """
    config = config or LayoutConfig()
    positions = initial_positions(graph.nodes, config)
    positions, iterations, converged = relax_positions(positions, config)

    nodes = [
        replace(node, x=float(positions[i][0]), y=float(positions[i][1]))
        for i, node in enumerate(graph.nodes)
    ]
    logger.info(f"[Layout] Placed {len(nodes)} nodes in {iterations} passes "
                f"(converged: {converged})")
    return LayoutResult(
        graph=NetworkGraph(nodes=nodes, edges=list(graph.edges)),
        iterations=iterations,
        converged=converged,
        min_distance=config.min_distance(len(nodes)),
    )


def apply_position_overrides(graph: NetworkGraph,
                             overrides: Optional[Dict[str, Tuple[float, float]]]) -> NetworkGraph:
    """Merge interactive drag positions over computed ones for rendering.

    Overrides win per node id; ids not in the graph are ignored.  The result is
    a new graph and nothing is fed back into the layout.
    """
    if not overrides:
        return graph
    nodes = []
    for node in graph.nodes:
        if node.id in overrides:
            x, y = overrides[node.id]
            nodes.append(replace(node, x=float(x), y=float(y)))
        else:
            nodes.append(node)
    return NetworkGraph(nodes=nodes, edges=list(graph.edges))


def node_radius(node: NetworkNode, max_degree: int,
                min_radius: float = NODE_RADIUS_MIN, max_radius: float = NODE_RADIUS_MAX) -> float:
    """Radius grows linearly with pair + pre badges, relative to the busiest node."""
    return min_radius + (max_radius - min_radius) * node.degree / max(max_degree, 1)


def node_radii(graph: NetworkGraph) -> Dict[str, float]:
    max_degree = max((node.degree for node in graph.nodes), default=0)
    return {node.id: node_radius(node, max_degree) for node in graph.nodes}
