"""
Week-to-week task continuity.

Checks whether what someone said they would do next week shows up as what
they did, one snapshot later.

Classifier
----------
Both task lists are joined, lowercased and split on whitespace; tokens of
two characters or fewer are dropped.  With A the token set of the earlier
snapshot's next-week tasks and B the token set of the later snapshot's
past-week tasks:

    ratio = |A & B| / |A|

The denominator is always A, so the ratio is not symmetric (this is not a
Jaccard index).  Classification:

    either list empty   -> unknown
    ratio >= 0.4        -> connected
    0.2 <= ratio < 0.4  -> partial
    otherwise           -> broken

Cross-week orchestration
------------------------
Items of three consecutive weeks are keyed by domain/project[/module]/feature.
Every key present in the current week yields one ContinuityResult:

    prev_to_current  prev.next_week_tasks    vs current.past_week_tasks
    current_to_next  current.next_week_tasks vs next.past_week_tasks

A neighbouring week without the key gives ``unknown``.  Results are sorted so
that continuity problems come first (broken 0, partial 1, connected 2,
unknown 3, summed over both comparisons), then by person name.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from ..core.config import CONTINUITY_CONNECTED_RATIO, CONTINUITY_PARTIAL_RATIO
from ..core.utils import extract_tokens, calculate_token_overlap, locale_sort_key
from ..models.data_models import SnapshotItem, ContinuityStatus, ContinuityResult

logger = logging.getLogger(__name__)


def tokenize_tasks(tasks: Sequence[str]) -> set:
    return extract_tokens(tasks)


def match_ratio(later_week_prior_tasks: Sequence[str],
                earlier_week_current_tasks: Sequence[str]) -> float:
    """Fraction of the first list's tokens found in the second list.

    Args:
        later_week_prior_tasks: Next-week tasks stated in the earlier snapshot.
        earlier_week_current_tasks: Past-week tasks stated in the later snapshot.

    Returns:
        A value in [0, 1]; 0 when the first list has no tokens.
    """
    return calculate_token_overlap(later_week_prior_tasks, earlier_week_current_tasks)


def classify_ratio(ratio: float) -> ContinuityStatus:
    if ratio >= CONTINUITY_CONNECTED_RATIO:
        return ContinuityStatus.CONNECTED
    if ratio >= CONTINUITY_PARTIAL_RATIO:
        return ContinuityStatus.PARTIAL
    return ContinuityStatus.BROKEN


def analyze_continuity(later_week_prior_tasks: Sequence[str],
                       earlier_week_current_tasks: Sequence[str]) -> ContinuityStatus:
    """Classify one adjacent-week comparison."""
    if not later_week_prior_tasks or not earlier_week_current_tasks:
        return ContinuityStatus.UNKNOWN
    return classify_ratio(match_ratio(later_week_prior_tasks, earlier_week_current_tasks))


def create_snapshot_key(item: SnapshotItem) -> str:
    """domain/project[/module]/feature -- the module part is left out when absent."""
    parts = [item.domain, item.project]
    if item.module:
        parts.append(item.module)
    parts.append(item.feature)
    return "/".join(parts)


def index_by_key(items: Optional[Iterable[SnapshotItem]]) -> Dict[str, SnapshotItem]:
    """Key -> item.  With duplicate keys the last item wins."""
    index = {}
    for item in items or ():
        index[create_snapshot_key(item)] = item
    return index


def analyze_weeks(current_items: Iterable[SnapshotItem],
                  prev_items: Optional[Iterable[SnapshotItem]] = None,
                  next_items: Optional[Iterable[SnapshotItem]] = None) -> List[ContinuityResult]:
    """Continuity results for every key of the current week.

    Missing neighbouring weeks (None or empty) are valid input and produce
    ``unknown`` comparisons.
    """
    current_by_key = index_by_key(current_items)
    prev_by_key = index_by_key(prev_items)
    next_by_key = index_by_key(next_items)

    all_keys = list(dict.fromkeys([*current_by_key, *prev_by_key, *next_by_key]))

    results = []
    for key in all_keys:
        current = current_by_key.get(key)
        if current is None:
            continue
        prev = prev_by_key.get(key)
        nxt = next_by_key.get(key)

        prev_to_current = ContinuityStatus.UNKNOWN
        if prev is not None:
            prev_to_current = analyze_continuity(prev.next_week_tasks, current.past_week_tasks)

        current_to_next = ContinuityStatus.UNKNOWN
        if nxt is not None:
            current_to_next = analyze_continuity(current.next_week_tasks, nxt.past_week_tasks)

        results.append(ContinuityResult(
            key=key,
            person=current.name,
            domain=current.domain,
            project=current.project,
            module=current.module,
            feature=current.feature,
            current_week=current,
            prev_week=prev,
            next_week=nxt,
            prev_to_current=prev_to_current,
            current_to_next=current_to_next,
        ))

    results.sort(key=lambda r: (r.risk_score, locale_sort_key(r.person)))
    logger.info(f"[Continuity] {len(results)} keys analysed "
                f"({len(prev_by_key)} prev / {len(next_by_key)} next)")
    return results


def summarize_continuity(results: Iterable[ContinuityResult]) -> Dict[str, int]:
    """Counts of connected / partial / broken over both comparisons of every result."""
    counts = Counter()
    for result in results:
        for status in (result.prev_to_current, result.current_to_next):
            if status is not ContinuityStatus.UNKNOWN:
                counts[status.value] += 1
    return {
        'connected': counts['connected'],
        'partial': counts['partial'],
        'broken': counts['broken'],
    }


def continuity_frame(results: Iterable[ContinuityResult]) -> pd.DataFrame:
    """One row per result, in result order."""
    columns = ['key', 'person', 'domain', 'project', 'module', 'feature',
               'has_prev_week', 'has_next_week', 'prev_to_current',
               'current_to_next', 'risk_score']
    return pd.DataFrame([r.to_dict() for r in results], columns=columns)
