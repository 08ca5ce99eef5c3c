"""
Data models and normalisation for the work map engine.

This module defines the **schema layer** shared by every component.  The
engine's inputs are weekly snapshot records; its outputs are trees with
attached metrics, a positioned collaboration graph, and continuity results.
All of them are described here as dataclasses.

Dataclass hierarchy
-------------------
::

    SnapshotItem            one person's weekly record for one feature
        Collaborator        declared relation to another person

    ProjectNode             Project -> Module -> Feature tree, each level
        ModuleNode          holding the flat list of its descendant items
            FeatureNode

    PersonNode              Person -> Domain -> Project -> Module -> Feature
        PersonDomainNode

    Metrics                 progress / risk / task rollup of one tree node

    NetworkGraph            collaboration graph
        NetworkNode         one person, with badge counts and coordinates
        NetworkEdge         one declared relation (author -> collaborator)

    ContinuityResult        week-to-week task continuity for one key

Normalisation conventions
-------------------------
- **Risk level** is an int in 0..3 or ``None``.  ``None`` means no
  assessment was recorded and is kept distinct from ``0`` everywhere.
- **Relation** is one of ``pair`` / ``pre`` / ``post``.
- Task and risk-note lists are tuples of cleaned, non-empty strings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any

import pandas as pd

from ..core.config import RISK_LEVELS, EMPTY_RISK_MARKERS, CONTINUITY_STATUS_SCORES
from ..core.utils import clean_text, split_lines


class Relation(Enum):
    """
    Collaboration relation declared by an item's author.

    Values:
        PAIR: Concurrent joint work (undirected).
        PRE: The collaborator supplied input that preceded the author's work.
        POST: The author's output feeds the collaborator's subsequent work.
    """
    PAIR = "pair"
    PRE = "pre"
    POST = "post"


class ContinuityStatus(Enum):
    """
    Whether one week's planned tasks reappear as the next week's done tasks.
    """
    CONNECTED = "connected"
    PARTIAL = "partial"
    BROKEN = "broken"
    UNKNOWN = "unknown"

    @property
    def score(self) -> int:
        """Sort weight: broken 0, partial 1, connected 2, unknown 3."""
        return CONTINUITY_STATUS_SCORES[self.value]


# ============================================================================
# NORMALISATION HELPERS
# ============================================================================

def normalize_risk_level(value) -> Optional[int]:
    """Map a raw risk value to 0..3, or None when nothing usable was recorded.

    Strings are parsed as integers ("2" -> 2); "?" and out-of-range values
    become None.  Booleans are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = int(float(value))
        except ValueError:
            return None
    else:
        try:
            if pd.isna(value):
                return None
        except (TypeError, ValueError):
            return None
        value = int(value)
    return value if value in RISK_LEVELS else None


def normalize_relation(value) -> Relation:
    """Parse a relation string (case-insensitive)."""
    if isinstance(value, Relation):
        return value
    try:
        return Relation(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown collaboration relation: {value!r}")


def normalize_task_list(value) -> Tuple[str, ...]:
    """Turn a string / list / NaN into a tuple of non-empty task strings."""
    return tuple(split_lines(value))


def normalize_risk_notes(value) -> Tuple[str, ...]:
    """Like ``normalize_task_list`` but also drops "?" and "-" placeholders."""
    return tuple(note for note in split_lines(value) if note not in EMPTY_RISK_MARKERS)


# ============================================================================
# SNAPSHOT INPUT
# ============================================================================

@dataclass(frozen=True)
class Collaborator:
    """A person named on an item, with the relation the author declared."""
    name: str
    relation: Relation

    def __post_init__(self):
        object.__setattr__(self, 'relation', normalize_relation(self.relation))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Collaborator':
        return cls(name=clean_text(data.get('name')), relation=data.get('relation'))

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'relation': self.relation.value}


@dataclass(frozen=True, eq=False)
class SnapshotItem:
    """One person's weekly status record for one feature.

    Items are immutable once loaded.  Equality is identity: two records with
    identical text are still two records, and trees built from them hold the
    very same objects.
    """
    name: str
    domain: str
    project: str
    feature: str
    module: Optional[str] = None
    progress_percent: float = 0
    plan_percent: Optional[float] = None
    risk_level: Optional[int] = None
    risk_notes: Tuple[str, ...] = ()
    past_week_tasks: Tuple[str, ...] = ()
    next_week_tasks: Tuple[str, ...] = ()
    collaborators: Tuple[Collaborator, ...] = ()

    def __post_init__(self):
        # Accept strings or lists from callers; store tuples.
        object.__setattr__(self, 'risk_notes', normalize_risk_notes(self.risk_notes))
        object.__setattr__(self, 'past_week_tasks', normalize_task_list(self.past_week_tasks))
        object.__setattr__(self, 'next_week_tasks', normalize_task_list(self.next_week_tasks))
        object.__setattr__(self, 'collaborators', tuple(
            c if isinstance(c, Collaborator) else Collaborator.from_dict(c)
            for c in (self.collaborators or ())
        ))
        object.__setattr__(self, 'risk_level', normalize_risk_level(self.risk_level))
        if self.module is not None and not str(self.module).strip():
            object.__setattr__(self, 'module', None)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON-friendly dict."""
        return {
            'name': self.name,
            'domain': self.domain,
            'project': self.project,
            'module': self.module,
            'feature': self.feature,
            'progress_percent': self.progress_percent,
            'plan_percent': self.plan_percent,
            'risk_level': self.risk_level,
            'risk_notes': list(self.risk_notes),
            'past_week_tasks': list(self.past_week_tasks),
            'next_week_tasks': list(self.next_week_tasks),
            'collaborators': [c.to_dict() for c in self.collaborators],
        }


# ============================================================================
# TREE NODES
# ============================================================================

@dataclass(eq=False)
class FeatureNode:
    name: str
    items: List[SnapshotItem] = field(default_factory=list)


@dataclass(eq=False)
class ModuleNode:
    name: str
    features: List[FeatureNode] = field(default_factory=list)
    items: List[SnapshotItem] = field(default_factory=list)


@dataclass(eq=False)
class ProjectNode:
    """Root of one project subtree.

    ``items`` holds every item of every module, in encounter order.
    """
    name: str
    modules: List[ModuleNode] = field(default_factory=list)
    items: List[SnapshotItem] = field(default_factory=list)


@dataclass(eq=False)
class PersonDomainNode:
    name: str
    projects: List[ProjectNode] = field(default_factory=list)
    items: List[SnapshotItem] = field(default_factory=list)


@dataclass(eq=False)
class PersonNode:
    name: str
    domains: List[PersonDomainNode] = field(default_factory=list)
    items: List[SnapshotItem] = field(default_factory=list)


# ============================================================================
# METRICS
# ============================================================================

@dataclass(frozen=True)
class Metrics:
    """Progress / risk / task rollup of a tree node.

    Attributes:
        progress: Rounded percentage 0-100.
        risk_level: Highest recorded risk level, or None when no item in the
            subtree has a recorded level.
        task_count: Number of past-week tasks.
        completed_task_count: Past-week tasks whose text contains "100%".
    """
    progress: int = 0
    risk_level: Optional[int] = None
    task_count: int = 0
    completed_task_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'progress': self.progress,
            'risk_level': self.risk_level,
            'task_count': self.task_count,
            'completed_task_count': self.completed_task_count,
        }


EMPTY_METRICS = Metrics()


# ============================================================================
# COLLABORATION GRAPH
# ============================================================================

@dataclass
class NetworkNode:
    """One person in the collaboration graph.

    ``pair_count`` counts ``pair`` edges this person authored; ``pre_count``
    counts ``pre`` edges naming this person as the collaborator.
    """
    id: str
    domain: str
    pair_count: int = 0
    pre_count: int = 0
    x: float = 0.0
    y: float = 0.0

    @property
    def degree(self) -> int:
        return self.pair_count + self.pre_count


@dataclass(frozen=True)
class NetworkEdge:
    """A declared relation, stored exactly as the author wrote it.

    ``source`` is always the author and ``target`` the named collaborator;
    any reversal for drawing happens in the edge path layer.
    """
    source: str
    target: str
    relation: Relation


@dataclass
class NetworkGraph:
    nodes: List[NetworkNode] = field(default_factory=list)
    edges: List[NetworkEdge] = field(default_factory=list)

    def node_map(self) -> Dict[str, NetworkNode]:
        return {node.id: node for node in self.nodes}

    def get_node(self, node_id: str) -> Optional[NetworkNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {node.id: (node.x, node.y) for node in self.nodes}

    @property
    def is_empty(self) -> bool:
        return not self.nodes


# ============================================================================
# CONTINUITY
# ============================================================================

@dataclass(frozen=True)
class ContinuityResult:
    """Continuity of one domain/project/module/feature key across three weeks.

    ``prev_to_current`` compares the previous week's next-week tasks with the
    current week's past-week tasks; ``current_to_next`` does the same one
    week later.
    """
    key: str
    person: str
    domain: str
    project: str
    module: Optional[str]
    feature: str
    current_week: SnapshotItem
    prev_week: Optional[SnapshotItem] = None
    next_week: Optional[SnapshotItem] = None
    prev_to_current: ContinuityStatus = ContinuityStatus.UNKNOWN
    current_to_next: ContinuityStatus = ContinuityStatus.UNKNOWN

    @property
    def risk_score(self) -> int:
        """Lower means more continuity problems."""
        return self.prev_to_current.score + self.current_to_next.score

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'person': self.person,
            'domain': self.domain,
            'project': self.project,
            'module': self.module,
            'feature': self.feature,
            'has_prev_week': self.prev_week is not None,
            'has_next_week': self.next_week is not None,
            'prev_to_current': self.prev_to_current.value,
            'current_to_next': self.current_to_next.value,
            'risk_score': self.risk_score,
        }
