"""
Learning curves and internal-consistency reliability.

attempts_to_mastery_p50: median number of exam attempts a student needs to
first reach the mastery score (students who never get there are excluded).

kr20: Kuder-Richardson 20 over the k most-attempted questions, where k is the
most common exam length. Exams of mixed length make this an approximation;
it is clamped to [0, 1] and None whenever it is undefined.
"""

import math
from typing import Any, Dict, List, Optional

from diagramiq.services.diagram_analytics.grouping import count_by, group_by, results_by_question
from diagramiq.services.diagram_analytics.kpis import MASTERY_SCORE
from diagramiq.services.diagram_analytics.numeric import (
    as_number, quantile, round2, round_half_up, variance
)
from diagramiq.services.diagram_analytics.records import SessionRecord


def attempts_to_mastery_p50(exam_sessions: List[SessionRecord]) -> Optional[int]:
    attempts_until_mastery = []
    for exams in group_by(exam_sessions, lambda s: s.student.id).values():
        for attempt, s in enumerate(sorted(exams, key=lambda s: s.created_at), start=1):
            if as_number(s.score) >= MASTERY_SCORE:
                attempts_until_mastery.append(attempt)
                break

    if not attempts_until_mastery:
        return None
    return int(round_half_up(quantile(attempts_until_mastery, 0.5)))


def modal_exam_length(exam_sessions: List[SessionRecord]) -> int:
    """Most common exam length; ties go to the length seen first."""
    counts = count_by(s.total_questions or len(s.results) for s in exam_sessions)
    if not counts:
        return 0
    return max(counts.items(), key=lambda item: item[1])[0]


def kr20(exam_sessions: List[SessionRecord]) -> Optional[float]:
    k = modal_exam_length(exam_sessions)
    if k <= 1:
        return None

    exam_results = [r for s in exam_sessions for r in s.results]
    by_question = results_by_question(exam_results)

    # k most-attempted items, first-seen order on ties
    top_questions = sorted(by_question, key=lambda qid: len(by_question[qid]), reverse=True)[:k]
    top_set = set(top_questions)

    sum_pq = 0.0
    for qid in top_questions:
        rs = by_question[qid]
        p = sum(1 for r in rs if r.is_correct is True) / len(rs)
        sum_pq += p * (1 - p)

    raw_scores = [
        sum(1 for r in s.results if r.question_id in top_set and r.is_correct)
        for s in exam_sessions
    ]
    total_variance = variance(raw_scores)
    if total_variance <= 0:
        return None

    value = (k / (k - 1)) * (1 - sum_pq / total_variance)
    if not math.isfinite(value):
        return None
    return round2(max(0.0, min(1.0, value)))


def build_learning_curves(exam_sessions: List[SessionRecord], practice_delta: float) -> Dict[str, Any]:
    return {
        "attemptsToMasteryP50": attempts_to_mastery_p50(exam_sessions),
        "deltaPracticeToExamAvgPts": practice_delta,
    }


def build_reliability(exam_sessions: List[SessionRecord]) -> Dict[str, Any]:
    return {"kr20": kr20(exam_sessions)}
