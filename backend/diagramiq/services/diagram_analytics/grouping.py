"""
Grouping and bucketing helpers shared by the analytics components.

Dicts preserve insertion order, so "first encountered" tie-breaking in the
components falls out of iterating these groupings.
"""

from datetime import datetime
from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

from diagramiq.services.diagram_analytics.records import ResultRecord

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], key_fn: Callable[[T], K]) -> Dict[K, List[T]]:
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def count_by(values: Iterable[K]) -> Dict[K, int]:
    counts: Dict[K, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def day_key(moment: datetime) -> str:
    """Calendar day (YYYY-MM-DD) of a timestamp, in the timestamp's own timezone."""
    return moment.date().isoformat()


def results_by_question(results: Iterable[ResultRecord]) -> Dict[str, List[ResultRecord]]:
    """Group results by question id, skipping results whose question was deleted."""
    return group_by(
        (r for r in results if r.question_id is not None),
        lambda r: r.question_id,
    )


def question_title(question_id: str, results: Iterable[ResultRecord]) -> str:
    """Live prompt if the question still has one, else the snapshot taken at test time."""
    snapshot = None
    for r in results:
        if r.question is not None and r.question.prompt:
            return r.question.prompt
        if snapshot is None and r.prompt_snapshot:
            snapshot = r.prompt_snapshot
    return snapshot or f"Question {question_id}"
