# Services module

# Diagram statistics for the supervisor dashboard
from diagramiq.services.diagram_analytics import (
    DateRange,
    build_diagram_report,
    get_diagram_stats,
    load_diagram_dataset,
)
