"""Difficulty and pacing drift per question: second half of history vs first half."""

from typing import Any, Dict, List, Optional

from diagramiq.services.diagram_analytics.grouping import question_title, results_by_question
from diagramiq.services.diagram_analytics.numeric import as_number, median, pct_num, round1, round2
from diagramiq.services.diagram_analytics.records import ResultRecord, SessionRecord


def _p_correct_pct(results: List[ResultRecord]) -> float:
    if not results:
        return 0
    return pct_num(sum(1 for r in results if r.is_correct is True), len(results))


def _delta_median_time(first: Optional[float], second: Optional[float]) -> Optional[float]:
    if first is not None and second is not None:
        return round2(second - first)
    # Only one half has timings: report that half as-is
    fallback = second if second is not None else first
    return round2(fallback) if fallback is not None else None


def build_drift(sessions: List[SessionRecord]) -> List[Dict[str, Any]]:
    """Sessions must be in chronological order; they are split at floor(n / 2)."""
    mid = len(sessions) // 2
    first_half = results_by_question(r for s in sessions[:mid] for r in s.results)
    second_half = results_by_question(r for s in sessions[mid:] for r in s.results)

    question_ids = list(first_half)
    question_ids.extend(qid for qid in second_half if qid not in first_half)

    drift = []
    for qid in question_ids:
        r1 = first_half.get(qid, [])
        r2 = second_half.get(qid, [])
        t1 = median(as_number(r.time_spent_seconds) for r in r1)
        t2 = median(as_number(r.time_spent_seconds) for r in r2)
        drift.append({
            "questionId": qid,
            "title": question_title(qid, r1 + r2),
            "deltaPCorrectPct": round1(_p_correct_pct(r2) - _p_correct_pct(r1)),
            "deltaMedianTimeSec": _delta_median_time(t1, t2),
        })

    return sorted(drift, key=lambda d: abs(d["deltaPCorrectPct"]), reverse=True)
