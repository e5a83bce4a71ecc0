"""Per-day exam score and learning accuracy series."""

from typing import Any, Dict, List

from diagramiq.services.diagram_analytics.grouping import day_key, group_by
from diagramiq.services.diagram_analytics.kpis import session_accuracy_pct
from diagramiq.services.diagram_analytics.numeric import as_number, mean, round1
from diagramiq.services.diagram_analytics.records import SessionRecord


def build_trends(sessions: List[SessionRecord]) -> List[Dict[str, Any]]:
    trends = []
    for day, day_sessions in group_by(sessions, lambda s: day_key(s.created_at)).items():
        exams = [s for s in day_sessions if s.is_exam]
        learns = [s for s in day_sessions if s.is_learning]
        trends.append({
            "date": day,
            "examScorePct": round1(mean([as_number(s.score) * 10 for s in exams])) if exams else None,
            "learningAccuracyPct": round1(mean([session_accuracy_pct(s) for s in learns])) if learns else None,
        })
    return sorted(trends, key=lambda t: t["date"])
