"""
Distractor analysis: how often each option text is chosen per question,
overall and within the low and high performance quartiles.

Quartiles partition users (not results) by their mean exam score on the
diagram. Users without exam sessions fall in neither quartile.
"""

from typing import Any, Dict, List, Tuple

from diagramiq.services.diagram_analytics.grouping import group_by, results_by_question
from diagramiq.services.diagram_analytics.numeric import (
    as_number, is_finite_number, mean, pct_num, quantile
)
from diagramiq.services.diagram_analytics.records import SessionRecord


def user_mean_exam_scores(exam_sessions: List[SessionRecord]) -> Dict[str, float]:
    return {
        user_id: mean([as_number(s.score) for s in exams])
        for user_id, exams in group_by(exam_sessions, lambda s: s.student.id).items()
    }


def quartile_cutoffs(scores: Dict[str, float]) -> Tuple[float, float]:
    values = sorted(v for v in scores.values() if is_finite_number(v))
    if not values:
        return 0, 0
    return quantile(values, 0.25), quantile(values, 0.75)


def _share(counts: Dict[str, int], text: str) -> float:
    return pct_num(counts[text], max(1, sum(counts.values())))


def build_distractors(
    sessions: List[SessionRecord],
    exam_sessions: List[SessionRecord],
) -> List[Dict[str, Any]]:
    user_by_result = {r.id: s.student.id for s in sessions for r in s.results}
    user_scores = user_mean_exam_scores(exam_sessions)
    q25, q75 = quartile_cutoffs(user_scores)

    all_results = [r for s in sessions for r in s.results]
    rows = []
    for question_id, rs in results_by_question(all_results).items():
        selected = [
            r for r in rs
            if r.selected_index is not None and isinstance(r.options_snapshot, list)
        ]
        total_selected = len(selected) or 1

        global_counts: Dict[str, int] = {}
        low_counts: Dict[str, int] = {}
        high_counts: Dict[str, int] = {}

        for r in selected:
            text = r.selected_option_text()
            if not text:
                continue
            global_counts[text] = global_counts.get(text, 0) + 1

            score = user_scores.get(user_by_result.get(r.id))
            if score is None:
                continue
            if score <= q25:
                low_counts[text] = low_counts.get(text, 0) + 1
            if score >= q75:
                high_counts[text] = high_counts.get(text, 0) + 1

        for text, count in global_counts.items():
            row = {
                "questionId": question_id,
                "optionText": text,
                "chosenPct": pct_num(count, total_selected),
            }
            if text in low_counts:
                row["chosenPctLowQuartile"] = _share(low_counts, text)
            if text in high_counts:
                row["chosenPctHighQuartile"] = _share(high_counts, text)
            rows.append(row)

    return rows
