"""Template materialization."""

from .executor import (
    ActionExecutor,
    ConflictPolicy,
    MaterializationReport,
    MaterializedFile,
    PlannedAction,
)

__all__ = [
    "ActionExecutor",
    "ConflictPolicy",
    "MaterializationReport",
    "MaterializedFile",
    "PlannedAction",
]
