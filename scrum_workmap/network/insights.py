"""
Rule-based collaboration insights.

Turns the counters from ``collaboration_metrics`` into short messages for a
member's personal view and for the team view.  Every rule is a fixed
threshold; there is no learning involved.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..models.data_models import SnapshotItem, Relation
from .collaboration_metrics import (
    get_member_summary, get_pre_inbound, get_pair_count_per_member,
)

logger = logging.getLogger(__name__)

# Personal rules
BOTTLENECK_WAITERS = 2
HIGH_CROSS_DOMAIN = 50
LOW_CROSS_DOMAIN = 20
ACTIVE_PAIR_FACTOR = 1.5
PENDING_PRE = 3
COLLABORATION_GROWTH = 2
REPEATED_PRE = 2
# Team rules
TEAM_BOTTLENECK = 3
TEAM_ACTIVE_PAIR = 3
TEAM_PRE_FACTOR = 1.5


class InsightType(Enum):
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class CollaborationInsight:
    type: InsightType
    icon: str
    message: str
    detail: Optional[str] = None


def generate_personal_insights(items: List[SnapshotItem], member: str,
                               previous_items: Optional[List[SnapshotItem]] = None
                               ) -> List[CollaborationInsight]:
    """Insights for one member, optionally compared with the previous week."""
    insights = []
    summary = get_member_summary(items, member)
    pair_counts = get_pair_count_per_member(items)

    if summary.pre_inbound >= BOTTLENECK_WAITERS:
        insights.append(CollaborationInsight(
            InsightType.WARNING, "🚧",
            f"{summary.pre_inbound} people are waiting on your work",
            "Raise the priority of the work others depend on.",
        ))

    if summary.pre_inbound == 0 and summary.total_collaborations > 0:
        insights.append(CollaborationInsight(
            InsightType.SUCCESS, "✅", "No bottleneck: nobody is waiting on you",
        ))

    if summary.cross_domain_score >= HIGH_CROSS_DOMAIN:
        insights.append(CollaborationInsight(
            InsightType.SUCCESS, "🌐",
            f"High cross-domain collaboration ({summary.cross_domain_score}%)",
            "Collaboration across teams is going well.",
        ))
    elif 0 < summary.cross_domain_score < LOW_CROSS_DOMAIN:
        insights.append(CollaborationInsight(
            InsightType.NEUTRAL, "💡",
            f"Mostly same-domain collaboration ({100 - summary.cross_domain_score}%)",
            "Consider reaching out to other domains where it helps.",
        ))

    if summary.collaborators:
        top = summary.collaborators[0]
        insights.append(CollaborationInsight(
            InsightType.INFO, "👥",
            f"Most frequent collaborator: {top['name']} ({top['count']} times)",
        ))

    avg_pair = sum(pair_counts.values()) / max(len(pair_counts), 1)
    if summary.pair_count > avg_pair * ACTIVE_PAIR_FACTOR:
        insights.append(CollaborationInsight(
            InsightType.SUCCESS, "🤝",
            f"Pair work above team average ({summary.pair_count} vs avg {round(avg_pair)})",
        ))

    if summary.pre_count >= PENDING_PRE:
        insights.append(CollaborationInsight(
            InsightType.WARNING, "⏳",
            f"{summary.pre_count} tasks are waiting on upstream collaborators",
            "Check on the progress of the work you are waiting for.",
        ))

    if previous_items is not None:
        previous = get_member_summary(previous_items, member)
        inbound_diff = summary.pre_inbound - previous.pre_inbound
        if inbound_diff > 0:
            insights.append(CollaborationInsight(
                InsightType.WARNING, "📈",
                f"Bottleneck up by {inbound_diff} since last week",
            ))
        elif inbound_diff < 0:
            insights.append(CollaborationInsight(
                InsightType.SUCCESS, "📉",
                f"Bottleneck down by {abs(inbound_diff)} since last week",
            ))

        collab_diff = summary.total_collaborations - previous.total_collaborations
        if collab_diff > COLLABORATION_GROWTH:
            insights.append(CollaborationInsight(
                InsightType.INFO, "📊",
                f"Collaboration up by {collab_diff} since last week",
            ))

    pre_targets = Counter(
        collab.name
        for item in items if item.name == member
        for collab in item.collaborators if collab.relation is Relation.PRE
    )
    for target, count in pre_targets.items():
        if count >= REPEATED_PRE:
            insights.append(CollaborationInsight(
                InsightType.NEUTRAL, "🔄",
                f"Repeatedly waiting on {target} ({count} times)",
                "Review this collaboration pattern.",
            ))

    if summary.total_collaborations == 0:
        insights.append(CollaborationInsight(
            InsightType.NEUTRAL, "📝",
            "No collaboration recorded this week",
            "Record collaborators in the weekly snapshot if there were any.",
        ))

    return insights


def _top_entry(counts):
    """(name, count) with the highest count; first one wins ties."""
    best_name, best_count = "", 0
    for name, count in counts.items():
        if count > best_count:
            best_name, best_count = name, count
    return best_name, best_count


def generate_team_insights(items: List[SnapshotItem]) -> List[CollaborationInsight]:
    insights = []
    inbound = get_pre_inbound(items)
    pair_counts = get_pair_count_per_member(items)

    bottleneck, max_inbound = _top_entry(inbound)
    if max_inbound >= TEAM_BOTTLENECK:
        insights.append(CollaborationInsight(
            InsightType.WARNING, "🚨",
            f"{bottleneck} is the biggest bottleneck ({max_inbound} waiting)",
            "Review this member's workload.",
        ))

    active, max_pair = _top_entry(pair_counts)
    if max_pair >= TEAM_ACTIVE_PAIR:
        insights.append(CollaborationInsight(
            InsightType.INFO, "⭐",
            f"{active} is the most active pair collaborator ({max_pair})",
        ))

    total_pre = sum(inbound.values())
    total_pair = sum(pair_counts.values())
    if total_pre > total_pair * TEAM_PRE_FACTOR:
        insights.append(CollaborationInsight(
            InsightType.WARNING, "⚠️",
            "The team has many waiting relations",
            f"pre {total_pre} vs pair {total_pair}",
        ))

    return insights
