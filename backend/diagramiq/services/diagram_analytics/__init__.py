"""
Diagram analytics engine.
Turns a diagram's raw test history into the supervisor dashboard report.
"""

from diagramiq.services.diagram_analytics.loader import load_diagram_dataset
from diagramiq.services.diagram_analytics.records import (
    DateRange,
    DiagramDataset,
    ResultRecord,
    SessionMode,
    SessionRecord,
)
from diagramiq.services.diagram_analytics.report import build_diagram_report, get_diagram_stats

__all__ = [
    "DateRange",
    "DiagramDataset",
    "ResultRecord",
    "SessionMode",
    "SessionRecord",
    "build_diagram_report",
    "get_diagram_stats",
    "load_diagram_dataset",
]
