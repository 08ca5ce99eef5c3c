"""
Collaboration graph construction.

Turns the collaborators declared on snapshot items into a person graph:

* one node per author and per named collaborator, deduplicated by name and
  kept in first-seen order;
* one edge per declared collaborator, stored as (author -> collaborator,
  relation).  Parallel edges between the same two people are kept, one per
  declaration.

Badge counters:
    pair_count  +1 on the author for every ``pair`` they declare
    pre_count   +1 on the collaborator for every ``pre`` naming them, since
                ``pre`` credits the collaborator with supplying the input the
                author's work started from
"""

import logging
from typing import Dict, Iterable, List

from ..models.data_models import SnapshotItem, NetworkNode, NetworkEdge, NetworkGraph, Relation

logger = logging.getLogger(__name__)


def author_domains(items: Iterable[SnapshotItem]) -> Dict[str, str]:
    """Domain of each author, taken from the first item they wrote."""
    domains = {}
    for item in items:
        domains.setdefault(item.name, item.domain)
    return domains


def build_network(items: List[SnapshotItem]) -> NetworkGraph:
    """Build the collaboration graph of an item subset (usually one feature).

    Coordinates are left at (0, 0); see ``network.layout.compute_layout``.
    """
    items = list(items)
    own_domains = author_domains(items)
    nodes: Dict[str, NetworkNode] = {}
    edges: List[NetworkEdge] = []

    def ensure_node(name: str, fallback_domain: str) -> NetworkNode:
        node = nodes.get(name)
        if node is None:
            node = NetworkNode(id=name, domain=own_domains.get(name, fallback_domain))
            nodes[name] = node
        return node

    for item in items:
        author = ensure_node(item.name, item.domain)
        for collab in item.collaborators:
            target = ensure_node(collab.name, item.domain)
            edges.append(NetworkEdge(source=item.name, target=collab.name,
                                     relation=collab.relation))
            if collab.relation is Relation.PAIR:
                author.pair_count += 1
            elif collab.relation is Relation.PRE:
                target.pre_count += 1

    logger.debug(f"[Network] {len(nodes)} nodes, {len(edges)} edges from {len(items)} items")
    return NetworkGraph(nodes=list(nodes.values()), edges=edges)
