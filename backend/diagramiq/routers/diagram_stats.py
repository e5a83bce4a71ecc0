"""
Diagram Statistics Router

Supervisor-only dashboard statistics for a single diagram.
All endpoints require supervisor authentication via get_supervisor_user.
"""

import logging
import re
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from diagramiq.database import get_db
from diagramiq.dependencies.auth import get_supervisor_user
from diagramiq.models.models import Diagram, User
from diagramiq.schemas.diagram_stats import DiagramStatsResponse
from diagramiq.services.diagram_analytics import DateRange, get_diagram_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagrams", tags=["diagram-stats"])

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None or value == "":
        return None
    if not DATE_PATTERN.match(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Expected date format YYYY-MM-DD"
        )
    try:
        return date.fromisoformat(value)
    except ValueError:
        # Well-formed but not a calendar date, e.g. 2024-02-30
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Expected date format YYYY-MM-DD"
        )


@router.get("/{diagram_id}/stats", response_model=DiagramStatsResponse)
def diagram_stats(
    diagram_id: str,
    date_from: Optional[str] = Query(None, alias="from", description="First day included (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, alias="to", description="Last day included (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    supervisor: User = Depends(get_supervisor_user)
):
    """
    Full statistics report for a diagram.

    Optional `from`/`to` restrict sessions and claims to whole calendar days;
    a reversed pair is swapped. Responses are never cached.
    """
    diagram = db.query(Diagram).filter(Diagram.id == diagram_id).first()
    if not diagram:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Diagram not found"
        )

    date_range = DateRange(start=_parse_date(date_from), end=_parse_date(date_to)).normalized()

    try:
        report = get_diagram_stats(db, diagram_id, date_range)
    except Exception:
        logger.exception("Failed to compute stats for diagram %s", diagram_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not compute diagram statistics"
        )

    return JSONResponse(content=report, headers={"Cache-Control": "no-store"})
