"""
Hotspot detection: questions with the highest error rates across all modes.

The same per-question grouping feeds the error-concentration KPI.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from diagramiq.services.diagram_analytics.grouping import question_title, results_by_question
from diagramiq.services.diagram_analytics.numeric import as_number, median, pct_num, round1, round2
from diagramiq.services.diagram_analytics.records import ResultRecord

HOTSPOT_LIMIT = 5


@dataclass
class QuestionErrorStats:
    question_id: str
    title: str
    attempts: int
    errors: int
    error_rate_pct: float
    median_time_sec: Optional[float]
    common_wrong_text: Optional[str]


def most_common_wrong(results: Iterable[ResultRecord]) -> Optional[str]:
    """Option text chosen most often among incorrect answers; ties go to the first seen."""
    counts: Dict[str, int] = {}
    for r in results:
        if r.is_correct is not False:
            continue
        text = r.selected_option_text()
        if text:
            counts[text] = counts.get(text, 0) + 1

    best, best_count = None, 0
    for text, count in counts.items():
        if count > best_count:
            best, best_count = text, count
    return best


def question_error_stats(results: Iterable[ResultRecord]) -> List[QuestionErrorStats]:
    """Error stats per question, in first-seen question order."""
    stats = []
    for question_id, rs in results_by_question(results).items():
        errors = sum(1 for r in rs if r.is_correct is False)
        stats.append(QuestionErrorStats(
            question_id=question_id,
            title=question_title(question_id, rs),
            attempts=len(rs),
            errors=errors,
            error_rate_pct=pct_num(errors, max(1, len(rs))),
            median_time_sec=median(as_number(r.time_spent_seconds) for r in rs),
            common_wrong_text=most_common_wrong(rs),
        ))
    return stats


def top_error_questions(
    stats: List[QuestionErrorStats],
    limit: int = HOTSPOT_LIMIT,
) -> List[QuestionErrorStats]:
    # sorted() is stable, so equal rates keep first-seen order
    return sorted(stats, key=lambda s: s.error_rate_pct, reverse=True)[:limit]


def error_concentration_pct(
    stats: List[QuestionErrorStats],
    limit: int = HOTSPOT_LIMIT,
) -> float:
    """Share of all incorrect answers that fall on the top-N error-rate questions."""
    total_errors = sum(s.errors for s in stats)
    if not total_errors:
        return 0
    top_errors = sum(s.errors for s in top_error_questions(stats, limit))
    return pct_num(top_errors, total_errors)


def build_hotspots(stats: List[QuestionErrorStats]) -> List[Dict[str, Any]]:
    return [
        {
            "questionId": s.question_id,
            "title": s.title,
            "errorRatePct": round1(s.error_rate_pct),
            "medianTimeSec": round2(s.median_time_sec) if s.median_time_sec is not None else None,
            "commonWrongText": s.common_wrong_text,
            "attempts": s.attempts,
        }
        for s in top_error_questions(stats)
    ]
