"""
Diagram Statistics Schemas

Pydantic models describing the supervisor dashboard payload returned by
GET /api/admin/diagrams/{diagram_id}/stats.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# COMPONENT SCHEMAS
# =============================================================================

class DiagramKpis(CamelModel):
    exam_score_avg10: float
    learning_accuracy_pct: float
    mastery_rate_pct: float
    at_risk_rate_pct: float
    practice_to_exam_delta_pts: float
    median_time_per_question_exam_sec: float
    hint_usage_pct: float
    error_concentration_top5_pct: float


class TrendPoint(CamelModel):
    date: str  # YYYY-MM-DD
    exam_score_pct: Optional[float] = None
    learning_accuracy_pct: Optional[float] = None


class HistogramBucket(CamelModel):
    label: str  # "0-1" .. "9-10"
    count: int


class ScatterPoint(CamelModel):
    student_id: str
    name: Optional[str] = None
    accuracy_pct: float
    time_sec_per_question: float


class HotspotItem(CamelModel):
    question_id: str
    title: str
    error_rate_pct: float
    median_time_sec: Optional[float] = None
    common_wrong_text: Optional[str] = None
    attempts: int


class RiskStudentItem(CamelModel):
    student_id: str
    name: Optional[str] = None
    last_name: Optional[str] = None
    last_exam_score10: float
    attempts: int
    last_attempt_at: str  # ISO-8601


class ItemQualityItem(CamelModel):
    question_id: str
    title: str
    p_correct_pct: float
    discr_point_biserial: Optional[float] = None
    median_time_sec: Optional[float] = None
    attempts: int
    claim_rate_pct: float
    claim_approval_rate_pct: Optional[float] = None
    avg_rating: Optional[float] = None


class DistractorBreakdown(CamelModel):
    """Absent quartile fields mean nobody in that quartile chose the option"""
    question_id: str
    option_text: str
    chosen_pct: float
    chosen_pct_low_quartile: Optional[float] = None
    chosen_pct_high_quartile: Optional[float] = None


class LearningCurves(CamelModel):
    attempts_to_mastery_p50: Optional[int] = None
    delta_practice_to_exam_avg_pts: float


class Reliability(CamelModel):
    kr20: Optional[float] = None


class DriftItem(CamelModel):
    question_id: str
    title: str
    delta_p_correct_pct: float
    delta_median_time_sec: Optional[float] = None


# =============================================================================
# RESPONSE
# =============================================================================

class DiagramStatsResponse(CamelModel):
    kpis: DiagramKpis
    trends: List[TrendPoint]
    histogram_exam10: List[HistogramBucket]
    scatter_speed_vs_accuracy: List[ScatterPoint]
    hotspots: List[HotspotItem]
    risk_students: List[RiskStudentItem]
    item_quality: List[ItemQualityItem]
    distractors: List[DistractorBreakdown]
    learning_curves: LearningCurves
    reliability: Reliability
    drift: List[DriftItem]
