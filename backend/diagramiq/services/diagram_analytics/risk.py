"""Students whose most recent exam on the diagram is at or below the at-risk threshold."""

from datetime import datetime, timezone
from typing import Any, Dict, List

from diagramiq.services.diagram_analytics.grouping import group_by
from diagramiq.services.diagram_analytics.kpis import AT_RISK_SCORE
from diagramiq.services.diagram_analytics.numeric import as_number, round2
from diagramiq.services.diagram_analytics.records import SessionRecord


def utc_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-03-01T09:00:00.000Z"""
    # Naive timestamps are stored as UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def build_risk_students(exam_sessions: List[SessionRecord]) -> List[Dict[str, Any]]:
    students = []
    for user_id, exams in group_by(exam_sessions, lambda s: s.student.id).items():
        last = sorted(exams, key=lambda s: s.created_at, reverse=True)[0]
        last_score = as_number(last.score)
        if last_score > AT_RISK_SCORE:
            continue
        students.append({
            "studentId": user_id,
            "name": last.student.name,
            "lastName": last.student.last_name,
            "lastExamScore10": round2(last_score),
            "attempts": len(exams),
            "lastAttemptAt": utc_timestamp(last.created_at),
        })

    # Worst first
    return sorted(students, key=lambda s: s["lastExamScore10"])
