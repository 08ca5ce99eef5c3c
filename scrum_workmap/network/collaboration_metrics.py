"""
Collaboration analytics over one week's snapshot items.

Where ``graph_builder`` produces the drawable graph, this module produces the
tabular views the dashboard shows next to it: per-member counters, a
domain x domain matrix, a load ranking and the bottleneck ranking.

Vocabulary
----------
* pair        -- concurrent joint work the member declared.
* pre         -- the member declared someone else as the source of their input,
                 i.e. the member is waiting on that person.
* pre inbound -- someone else declared the member as their ``pre``; these are
                 the people waiting on the member.  A high inbound count marks a
                 bottleneck.
* post        -- the member's output feeds someone else's next step.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..hierarchy.metrics import round_half_up
from ..models.data_models import SnapshotItem, Relation, normalize_relation

logger = logging.getLogger(__name__)

UNKNOWN_DOMAIN = "Unknown"


@dataclass
class CollaborationEdge:
    """Aggregated author -> collaborator relation with its declaration count."""
    source: str
    target: str
    relation: Relation
    count: int = 1


@dataclass
class CollaborationNode:
    id: str
    domain: str
    degree: int = 0
    pair_count: int = 0
    pre_inbound: int = 0
    post_count: int = 0


@dataclass
class DomainMatrixCell:
    source_domain: str
    target_domain: str
    pair_count: int = 0
    pre_count: int = 0
    post_count: int = 0
    total_count: int = 0


@dataclass
class MemberSummary:
    name: str
    domain: str
    pair_count: int = 0
    pre_count: int = 0
    post_count: int = 0
    pre_inbound: int = 0
    cross_domain_score: int = 0
    cross_module_score: int = 0
    total_collaborations: int = 0
    collaborators: List[Dict] = field(default_factory=list)


@dataclass
class CollaborationLoadRow:
    name: str
    domain: str
    pair_count: int = 0
    pre_count: int = 0
    post_count: int = 0
    pre_inbound: int = 0
    total_load: int = 0


@dataclass
class BottleneckNode:
    """
    Attributes:
        inbound_count: People waiting on this member (pre inbound).
        outbound_count: People this member is waiting on.
        intensity: inbound_count scaled to 0-100 against the team maximum.
        waiters: Authors who named this member as ``pre``.
        blocking: People this member named as ``pre``.
    """
    name: str
    domain: str
    inbound_count: int = 0
    outbound_count: int = 0
    intensity: int = 0
    waiters: List[str] = field(default_factory=list)
    blocking: List[str] = field(default_factory=list)


def _percent(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


def _declared_count(items: List[SnapshotItem], relation: Relation) -> Dict[str, int]:
    """Per author: how many collaborators of ``relation`` they declared."""
    counts: Dict[str, int] = {}
    for item in items:
        declared = sum(1 for c in item.collaborators if c.relation is relation)
        counts[item.name] = counts.get(item.name, 0) + declared
    return counts


def get_member_domains(items: List[SnapshotItem]) -> Dict[str, str]:
    """Domain of each author, from their first item."""
    domains = {}
    for item in items:
        domains.setdefault(item.name, item.domain)
    return domains


def get_pair_count_per_member(items: List[SnapshotItem]) -> Dict[str, int]:
    return _declared_count(items, Relation.PAIR)


def get_pre_count(items: List[SnapshotItem]) -> Dict[str, int]:
    return _declared_count(items, Relation.PRE)


def get_post_count(items: List[SnapshotItem]) -> Dict[str, int]:
    return _declared_count(items, Relation.POST)


def get_pre_inbound(items: List[SnapshotItem]) -> Dict[str, int]:
    """Per person: how many times others named them as ``pre``."""
    counts = Counter()
    for item in items:
        for collab in item.collaborators:
            if collab.relation is Relation.PRE:
                counts[collab.name] += 1
    return dict(counts)


def _all_members(items: List[SnapshotItem]) -> List[str]:
    members = {}
    for item in items:
        members.setdefault(item.name, None)
        for collab in item.collaborators:
            members.setdefault(collab.name, None)
    return list(members)


def get_collaboration_edges(items: List[SnapshotItem]) -> List[CollaborationEdge]:
    """Edges aggregated per (author, collaborator, relation) with a count."""
    edges: Dict[Tuple[str, str, Relation], CollaborationEdge] = {}
    for item in items:
        for collab in item.collaborators:
            key = (item.name, collab.name, collab.relation)
            if key in edges:
                edges[key].count += 1
            else:
                edges[key] = CollaborationEdge(item.name, collab.name, collab.relation)
    return list(edges.values())


def get_collaboration_nodes(items: List[SnapshotItem]) -> List[CollaborationNode]:
    domains = get_member_domains(items)
    pair_counts = get_pair_count_per_member(items)
    post_counts = get_post_count(items)
    inbound = get_pre_inbound(items)

    degree = Counter()
    for edge in get_collaboration_edges(items):
        degree[edge.source] += edge.count
        degree[edge.target] += edge.count

    return [
        CollaborationNode(
            id=name,
            domain=domains.get(name, UNKNOWN_DOMAIN),
            degree=degree.get(name, 0),
            pair_count=pair_counts.get(name, 0),
            pre_inbound=inbound.get(name, 0),
            post_count=post_counts.get(name, 0),
        )
        for name in _all_members(items)
    ]


def get_cross_domain_score(items: List[SnapshotItem], member: str) -> int:
    """Share (0-100) of the member's declared collaborations that leave their domain.

    Collaborators with no authored item of their own have no known domain and
    count only towards the total.
    """
    domains = get_member_domains(items)
    own_domain = domains.get(member)
    if own_domain is None:
        return 0

    total = 0
    cross = 0
    for item in items:
        if item.name != member:
            continue
        for collab in item.collaborators:
            total += 1
            other = domains.get(collab.name)
            if other and other != own_domain:
                cross += 1
    return _percent(cross, total)


def get_cross_module_score(items: List[SnapshotItem], member: str) -> int:
    """Share (0-100) of collaborators' modules that the member does not work in."""
    member_items = [i for i in items if i.name == member]
    own_modules = {i.module for i in member_items if i.module}
    if not own_modules:
        return 0

    collab_names = {c.name for i in member_items for c in i.collaborators}
    collab_modules = {i.module for i in items if i.name in collab_names and i.module}
    cross = sum(1 for m in collab_modules if m not in own_modules)
    return _percent(cross, len(collab_modules))


def get_collaboration_matrix(items: List[SnapshotItem],
                             relation_filter: Optional[str] = None) -> List[DomainMatrixCell]:
    """Domain x domain collaboration counts.

    Args:
        relation_filter: None / "both" counts every relation; "pair", "pre" or
            "post" makes ``total_count`` that relation's count only.
    """
    domains = get_member_domains(items)
    all_domains = list(dict.fromkeys(item.domain for item in items))
    cells = {
        (src, dst): DomainMatrixCell(src, dst)
        for src in all_domains for dst in all_domains
    }

    for item in items:
        for collab in item.collaborators:
            target_domain = domains.get(collab.name)
            cell = cells.get((item.domain, target_domain))
            if cell is None:
                continue
            if collab.relation is Relation.PAIR:
                cell.pair_count += 1
            elif collab.relation is Relation.PRE:
                cell.pre_count += 1
            else:
                cell.post_count += 1
            cell.total_count += 1

    result = list(cells.values())
    if relation_filter and relation_filter != "both":
        relation = normalize_relation(relation_filter)
        attr = f"{relation.value}_count"
        for cell in result:
            cell.total_count = getattr(cell, attr)
    return result


def get_member_summary(items: List[SnapshotItem], member: str) -> MemberSummary:
    domains = get_member_domains(items)
    member_items = [i for i in items if i.name == member]

    relation_counts = Counter()
    per_collaborator: Dict[str, Dict] = {}
    for item in member_items:
        for collab in item.collaborators:
            relation_counts[collab.relation] += 1
            entry = per_collaborator.get(collab.name)
            if entry is None:
                # First relation seen for this person is the one reported
                per_collaborator[collab.name] = {
                    'name': collab.name, 'relation': collab.relation.value, 'count': 1,
                }
            else:
                entry['count'] += 1

    pre_inbound = sum(
        1
        for item in items if item.name != member
        for c in item.collaborators
        if c.name == member and c.relation is Relation.PRE
    )

    pair = relation_counts[Relation.PAIR]
    pre = relation_counts[Relation.PRE]
    post = relation_counts[Relation.POST]
    return MemberSummary(
        name=member,
        domain=domains.get(member, UNKNOWN_DOMAIN),
        pair_count=pair,
        pre_count=pre,
        post_count=post,
        pre_inbound=pre_inbound,
        cross_domain_score=get_cross_domain_score(items, member),
        cross_module_score=get_cross_module_score(items, member),
        total_collaborations=pair + pre + post + pre_inbound,
        collaborators=sorted(per_collaborator.values(), key=lambda c: -c['count']),
    )


def get_collaboration_load(items: List[SnapshotItem]) -> List[CollaborationLoadRow]:
    """Per author load (declared relations + pre inbound), heaviest first."""
    domains = get_member_domains(items)
    inbound = get_pre_inbound(items)
    pair_counts = get_pair_count_per_member(items)
    pre_counts = get_pre_count(items)
    post_counts = get_post_count(items)

    rows = []
    for name in dict.fromkeys(item.name for item in items):
        row = CollaborationLoadRow(
            name=name,
            domain=domains.get(name, UNKNOWN_DOMAIN),
            pair_count=pair_counts.get(name, 0),
            pre_count=pre_counts.get(name, 0),
            post_count=post_counts.get(name, 0),
            pre_inbound=inbound.get(name, 0),
        )
        row.total_load = row.pair_count + row.pre_count + row.post_count + row.pre_inbound
        rows.append(row)

    return sorted(rows, key=lambda r: -r.total_load)


def get_bottleneck_nodes(items: List[SnapshotItem]) -> List[BottleneckNode]:
    """Everyone in the graph ranked by how many people are waiting on them."""
    domains = get_member_domains(items)
    inbound = get_pre_inbound(items)
    outbound = get_pre_count(items)

    waiters = defaultdict(list)
    blocking = defaultdict(list)
    for item in items:
        for collab in item.collaborators:
            if collab.relation is Relation.PRE:
                waiters[collab.name].append(item.name)
                blocking[item.name].append(collab.name)

    max_inbound = max(list(inbound.values()) + [1])
    nodes = []
    for name in _all_members(items):
        count = inbound.get(name, 0)
        nodes.append(BottleneckNode(
            name=name,
            domain=domains.get(name, UNKNOWN_DOMAIN),
            inbound_count=count,
            outbound_count=outbound.get(name, 0),
            intensity=_percent(count, max_inbound),
            waiters=list(waiters.get(name, [])),
            blocking=list(blocking.get(name, [])),
        ))
    return sorted(nodes, key=lambda n: -n.inbound_count)
