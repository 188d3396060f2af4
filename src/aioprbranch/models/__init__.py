"""Pydantic models for aioprbranch."""

from .branch import ReconciliationAction, ReconciliationConfig, ReconciliationResult
from .git import ChangeKind, CommandResult, Commit, FileChange, WorkingBase, WorkingBaseType

__all__ = [
    "ChangeKind",
    "CommandResult",
    "Commit",
    "FileChange",
    "ReconciliationAction",
    "ReconciliationConfig",
    "ReconciliationResult",
    "WorkingBase",
    "WorkingBaseType",
]
