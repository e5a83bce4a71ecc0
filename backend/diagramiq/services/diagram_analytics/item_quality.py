"""
Item quality analysis over exam attempts.

For every question answered in at least one exam session:
- pCorrectPct: proportion correct (higher = easier)
- discrPointBiserial: point-biserial correlation between correctness on the
  item and the rest-of-test score of the same session
- median response time, claim rate, claim approval rate, average rating

Items are returned hardest first.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from diagramiq.services.diagram_analytics.grouping import question_title
from diagramiq.services.diagram_analytics.numeric import (
    as_number, mean, median, pct_num, round2, stdev
)
from diagramiq.services.diagram_analytics.records import (
    ClaimStats, ResultRecord, SessionRecord
)


@dataclass
class ItemObservation:
    """One exam attempt on an item, paired with the session's ability proxy"""
    result: ResultRecord
    correct01: int
    rest_score: int  # correct answers in the session excluding this item


def point_biserial(y01: Sequence[int], x: Sequence[float]) -> Optional[float]:
    """
    Point-biserial correlation between a 0/1 variable and a continuous one.

        r = (mean(x | y=1) - mean(x | y=0)) / stdev(x) * sqrt(p * (1 - p))

    Returns None when either group is empty or x has no spread.
    """
    n = min(len(y01), len(x))
    if n == 0:
        return None
    ys, xs = list(y01[:n]), list(x[:n])

    sd = stdev(xs)
    if sd == 0:
        return None

    ones = [xi for xi, yi in zip(xs, ys) if yi == 1]
    zeros = [xi for xi, yi in zip(xs, ys) if yi == 0]
    if not ones or not zeros:
        return None

    p = len(ones) / n
    return (mean(ones) - mean(zeros)) / sd * math.sqrt(p * (1 - p))


def collect_item_observations(
    exam_sessions: List[SessionRecord],
) -> Dict[str, List[ItemObservation]]:
    """Exam observations per question id, in first-seen question order."""
    observations: Dict[str, List[ItemObservation]] = {}
    for s in exam_sessions:
        results = [r for r in s.results if r.question_id is not None]
        total_correct = sum(1 for r in results if r.is_correct)
        for r in results:
            correct01 = 1 if r.is_correct else 0
            observations.setdefault(r.question_id, []).append(ItemObservation(
                result=r,
                correct01=correct01,
                rest_score=total_correct - correct01,
            ))
    return observations


def build_item_quality(
    exam_sessions: List[SessionRecord],
    claims_by_question: Dict[str, ClaimStats],
    rating_by_question: Dict[str, float],
) -> List[Dict[str, Any]]:
    items = []
    for question_id, obs in collect_item_observations(exam_sessions).items():
        results = [o.result for o in obs]
        attempts = len(obs)
        correct = sum(o.correct01 for o in obs)

        rpb = point_biserial([o.correct01 for o in obs], [o.rest_score for o in obs])
        median_time = median(as_number(r.time_spent_seconds) for r in results)

        claims = claims_by_question.get(question_id, ClaimStats())
        avg_rating = rating_by_question.get(question_id)

        items.append({
            "questionId": question_id,
            "title": question_title(question_id, results),
            "pCorrectPct": pct_num(correct, max(1, attempts)),
            "discrPointBiserial": round2(rpb) if rpb is not None else None,
            "medianTimeSec": round2(median_time) if median_time is not None else None,
            "attempts": attempts,
            "claimRatePct": pct_num(claims.total, max(1, attempts)),
            "claimApprovalRatePct": (
                pct_num(claims.approved, claims.total) if claims.total else None
            ),
            "avgRating": round2(avg_rating) if avg_rating is not None else None,
        })

    return sorted(items, key=lambda item: item["pCorrectPct"])
