"""
Dataset loader: the only I/O boundary of the diagram analytics engine.

Fetches, for one diagram and an optional calendar-day range, every test
session with its nested results, plus per-question claim counts and average
ratings, and converts them into typed records.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Dict, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload, selectinload

from diagramiq.models.models import (
    CLAIM_APPROVED, Claim, Question, Rating, TestResult, TestSession
)
from diagramiq.services.diagram_analytics.records import (
    ClaimStats,
    DateRange,
    DiagramDataset,
    QuestionRef,
    ResultRecord,
    SessionMode,
    SessionRecord,
    StudentRef,
)

logger = logging.getLogger(__name__)


def _range_bounds(date_range: Optional[DateRange]):
    """Turn inclusive calendar days into a half-open [start, end) datetime window."""
    if date_range is None:
        return None, None
    start = datetime.combine(date_range.start, time.min) if date_range.start else None
    end = (
        datetime.combine(date_range.end + timedelta(days=1), time.min)
        if date_range.end else None
    )
    return start, end


def _to_result_record(result: TestResult) -> ResultRecord:
    question = None
    if result.question is not None:
        question = QuestionRef(id=result.question.id, prompt=result.question.prompt)
    return ResultRecord(
        id=result.id,
        order_index=result.order_index,
        prompt_snapshot=result.prompt_snapshot,
        options_snapshot=list(result.options_snapshot or []),
        correct_index_at_test=result.correct_index_at_test,
        selected_index=result.selected_index,
        used_hint=bool(result.used_hint),
        time_spent_seconds=result.time_spent_seconds,
        is_correct=result.is_correct,
        question=question,
    )


def _to_session_record(session: TestSession) -> SessionRecord:
    user = session.user
    return SessionRecord(
        id=session.id,
        mode=SessionMode(session.mode),
        student=StudentRef(id=user.id, name=user.name, last_name=user.last_name),
        diagram_id=session.diagram_id,
        total_questions=session.total_questions or 0,
        correct_count=session.correct_count or 0,
        incorrect_count=session.incorrect_count or 0,
        score=session.score,
        created_at=session.created_at,
        completed_at=session.completed_at,
        results=[_to_result_record(r) for r in session.results],
    )


def _load_claim_stats(
    db: Session,
    diagram_id: str,
    start: Optional[datetime],
    end: Optional[datetime],
) -> Dict[str, ClaimStats]:
    query = db.query(
        Claim.question_id.label("question_id"),
        func.count(Claim.id).label("total"),
        func.sum(case((Claim.status == CLAIM_APPROVED, 1), else_=0)).label("approved"),
    ).join(
        Question, Claim.question_id == Question.id
    ).filter(
        Question.diagram_id == diagram_id
    )
    if start is not None:
        query = query.filter(Claim.created_at >= start)
    if end is not None:
        query = query.filter(Claim.created_at < end)

    rows = query.group_by(Claim.question_id).all()
    return {
        str(row.question_id): ClaimStats(
            total=int(row.total or 0),
            approved=int(row.approved or 0),
        )
        for row in rows
    }


def _load_average_ratings(db: Session, diagram_id: str) -> Dict[str, float]:
    rows = db.query(
        Rating.question_id.label("question_id"),
        func.avg(Rating.rating).label("avg_rating"),
    ).join(
        Question, Rating.question_id == Question.id
    ).filter(
        Question.diagram_id == diagram_id
    ).group_by(Rating.question_id).all()

    return {
        str(row.question_id): float(row.avg_rating or 0)
        for row in rows
    }


def load_diagram_dataset(
    db: Session,
    diagram_id: str,
    date_range: Optional[DateRange] = None,
) -> DiagramDataset:
    """
    Load the full analytics snapshot for a diagram.

    Sessions (all modes, in-progress included) come back in ascending
    created_at order. Claims are limited to the same date range; ratings
    are averaged over all time.
    """
    start, end = _range_bounds(date_range)

    query = db.query(TestSession).options(
        joinedload(TestSession.user),
        selectinload(TestSession.results).joinedload(TestResult.question),
    ).filter(
        TestSession.diagram_id == diagram_id
    )
    if start is not None:
        query = query.filter(TestSession.created_at >= start)
    if end is not None:
        query = query.filter(TestSession.created_at < end)

    sessions = query.order_by(TestSession.created_at.asc()).all()

    dataset = DiagramDataset(
        diagram_id=diagram_id,
        sessions=[_to_session_record(s) for s in sessions],
        claims_by_question=_load_claim_stats(db, diagram_id, start, end),
        rating_by_question=_load_average_ratings(db, diagram_id),
    )

    logger.debug(
        "Loaded diagram %s: %d sessions, %d claim groups, %d rating groups",
        diagram_id, len(dataset.sessions),
        len(dataset.claims_by_question), len(dataset.rating_by_question)
    )
    return dataset
