"""
diagramiq Schemas Package

Pydantic models for response validation and OpenAPI documentation.
"""

from diagramiq.schemas.diagram_stats import (
    # Components
    DiagramKpis,
    TrendPoint,
    HistogramBucket,
    ScatterPoint,
    HotspotItem,
    RiskStudentItem,
    ItemQualityItem,
    DistractorBreakdown,
    LearningCurves,
    Reliability,
    DriftItem,

    # Response
    DiagramStatsResponse,
)
