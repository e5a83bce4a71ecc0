"""
Exam score histogram and per-student speed vs accuracy scatter.
"""

import math
from typing import Any, Dict, List

from diagramiq.services.diagram_analytics.grouping import group_by
from diagramiq.services.diagram_analytics.kpis import session_accuracy_pct
from diagramiq.services.diagram_analytics.numeric import (
    as_number, is_finite_number, mean, median, round1, round2
)
from diagramiq.services.diagram_analytics.records import SessionRecord

HISTOGRAM_BUCKETS = 10


def build_exam_histogram(exam_sessions: List[SessionRecord]) -> List[Dict[str, Any]]:
    """
    Ten fixed-width buckets "0-1" .. "9-10".

    Scores are floored and clamped to [0, 9], so a perfect 10 lands in "9-10".
    """
    histogram = [
        {"label": f"{i}-{i + 1}", "count": 0}
        for i in range(HISTOGRAM_BUCKETS)
    ]
    for s in exam_sessions:
        bucket = max(0, min(HISTOGRAM_BUCKETS - 1, math.floor(as_number(s.score))))
        histogram[bucket]["count"] += 1
    return histogram


def build_speed_accuracy_scatter(
    sessions: List[SessionRecord],
    exam_sessions: List[SessionRecord],
    learning_sessions: List[SessionRecord],
) -> List[Dict[str, Any]]:
    """
    One point per student with a learning accuracy or an exam timing signal.

    Exam timing is the median over all of the student's exam results pooled
    together, not a median of per-session medians.
    """
    accuracy_by_user = {
        user_id: mean([session_accuracy_pct(s) for s in user_sessions])
        for user_id, user_sessions in group_by(learning_sessions, lambda s: s.student.id).items()
    }

    time_pool_by_user: Dict[str, List[float]] = {}
    for s in exam_sessions:
        pool = time_pool_by_user.setdefault(s.student.id, [])
        pool.extend(r.time_spent_seconds for r in s.results if is_finite_number(r.time_spent_seconds))
    exam_time_by_user = {
        user_id: median(times) or 0
        for user_id, times in time_pool_by_user.items()
    }

    names = {s.student.id: s.student.name for s in sessions}

    user_ids = list(accuracy_by_user)
    user_ids.extend(uid for uid in exam_time_by_user if uid not in accuracy_by_user)

    return [
        {
            "studentId": user_id,
            "name": names.get(user_id),
            "accuracyPct": round1(accuracy_by_user.get(user_id, 0)),
            "timeSecPerQuestion": round2(exam_time_by_user.get(user_id, 0)),
        }
        for user_id in user_ids
    ]
