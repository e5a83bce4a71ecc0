"""
Top-line KPIs for a diagram: exam average, learning accuracy, mastery and
at-risk rates, practice-to-exam delta, exam pacing, hint usage and error
concentration.
"""

from typing import Any, Dict, List

from diagramiq.services.diagram_analytics.grouping import group_by
from diagramiq.services.diagram_analytics.hotspots import QuestionErrorStats, error_concentration_pct
from diagramiq.services.diagram_analytics.numeric import (
    as_number, mean, median, pct_num, ratio_pct, round1, round2
)
from diagramiq.services.diagram_analytics.records import SessionRecord

# Exam score thresholds on the 0-10 scale
MASTERY_SCORE = 8
AT_RISK_SCORE = 5


def session_accuracy_pct(session: SessionRecord) -> float:
    return ratio_pct(session.correct_count, session.total_questions)


def practice_to_exam_delta(
    exam_sessions: List[SessionRecord],
    learning_sessions: List[SessionRecord],
) -> float:
    """
    Mean over users with both exam and learning sessions of
    (exam average) - (learning accuracy on the 0-10 scale).
    """
    exams_by_user = group_by(exam_sessions, lambda s: s.student.id)
    learning_by_user = group_by(learning_sessions, lambda s: s.student.id)

    deltas = []
    for user_id, exams in exams_by_user.items():
        practice = learning_by_user.get(user_id)
        if not practice:
            continue
        exam_avg = mean([as_number(s.score) for s in exams])
        practice_avg10 = mean([session_accuracy_pct(s) / 10 for s in practice])
        deltas.append(exam_avg - practice_avg10)

    return round2(mean(deltas)) if deltas else 0


def compute_kpis(
    exam_sessions: List[SessionRecord],
    learning_sessions: List[SessionRecord],
    error_stats: List[QuestionErrorStats],
) -> Dict[str, Any]:
    exam_scores = [as_number(s.score) for s in exam_sessions]
    exam_results = [r for s in exam_sessions for r in s.results]
    learning_results = [r for s in learning_sessions for r in s.results]

    mastered = sum(1 for score in exam_scores if score >= MASTERY_SCORE)
    at_risk = sum(1 for score in exam_scores if score <= AT_RISK_SCORE)
    hints = sum(1 for r in learning_results if r.used_hint)
    median_time = median(as_number(r.time_spent_seconds) for r in exam_results)

    return {
        "examScoreAvg10": round2(mean(exam_scores)),
        "learningAccuracyPct": round1(mean([session_accuracy_pct(s) for s in learning_sessions])),
        "masteryRatePct": pct_num(mastered, len(exam_sessions)),
        "atRiskRatePct": pct_num(at_risk, len(exam_sessions)),
        "practiceToExamDeltaPts": practice_to_exam_delta(exam_sessions, learning_sessions),
        "medianTimePerQuestionExamSec": round2(median_time) if median_time is not None else 0,
        "hintUsagePct": pct_num(hints, max(1, len(learning_results))),
        "errorConcentrationTop5Pct": round1(error_concentration_pct(error_stats)),
    }
