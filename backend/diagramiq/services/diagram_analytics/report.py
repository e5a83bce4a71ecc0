"""
Diagram report assembler.

Runs every analytics component over one diagram's dataset and returns the
dashboard payload (camelCase keys, JSON-serialisable values only).
"""

import logging
import time
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from diagramiq.services.diagram_analytics.distractors import build_distractors
from diagramiq.services.diagram_analytics.distributions import (
    build_exam_histogram, build_speed_accuracy_scatter
)
from diagramiq.services.diagram_analytics.drift import build_drift
from diagramiq.services.diagram_analytics.hotspots import build_hotspots, question_error_stats
from diagramiq.services.diagram_analytics.item_quality import build_item_quality
from diagramiq.services.diagram_analytics.kpis import compute_kpis
from diagramiq.services.diagram_analytics.learning_curves import (
    build_learning_curves, build_reliability
)
from diagramiq.services.diagram_analytics.loader import load_diagram_dataset
from diagramiq.services.diagram_analytics.records import DateRange, DiagramDataset
from diagramiq.services.diagram_analytics.risk import build_risk_students
from diagramiq.services.diagram_analytics.trends import build_trends

logger = logging.getLogger(__name__)


def build_diagram_report(dataset: DiagramDataset) -> Dict[str, Any]:
    """Pure computation: no I/O, deterministic for a given dataset."""
    # In-progress sessions carry partial counts and no final score
    sessions = [s for s in dataset.sessions if s.is_completed]
    exam_sessions = [s for s in sessions if s.is_exam]
    learning_sessions = [s for s in sessions if s.is_learning]

    error_stats = question_error_stats(r for s in sessions for r in s.results)
    kpis = compute_kpis(exam_sessions, learning_sessions, error_stats)

    return {
        "kpis": kpis,
        "trends": build_trends(sessions),
        "histogramExam10": build_exam_histogram(exam_sessions),
        "scatterSpeedVsAccuracy": build_speed_accuracy_scatter(
            sessions, exam_sessions, learning_sessions
        ),
        "hotspots": build_hotspots(error_stats),
        "riskStudents": build_risk_students(exam_sessions),
        "itemQuality": build_item_quality(
            exam_sessions, dataset.claims_by_question, dataset.rating_by_question
        ),
        "distractors": build_distractors(sessions, exam_sessions),
        "learningCurves": build_learning_curves(exam_sessions, kpis["practiceToExamDeltaPts"]),
        "reliability": build_reliability(exam_sessions),
        "drift": build_drift(sessions),
    }


def get_diagram_stats(
    db: Session,
    diagram_id: str,
    date_range: Optional[DateRange] = None,
) -> Dict[str, Any]:
    """Load a diagram's history (optionally limited to a day range) and build its report."""
    started = time.perf_counter()

    dataset = load_diagram_dataset(db, diagram_id, date_range)
    report = build_diagram_report(dataset)

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Diagram stats for %s: %d sessions in %.1fms",
        diagram_id, len(dataset.sessions), elapsed_ms
    )
    return report
