"""
FastAPI Dependencies for diagramiq
"""

from diagramiq.dependencies.auth import (
    get_current_user,
    get_supervisor_user,
    verify_jwt,
)

__all__ = [
    "get_current_user",
    "get_supervisor_user",
    "verify_jwt",
]
