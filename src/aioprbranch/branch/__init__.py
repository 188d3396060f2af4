"""Branch reconciliation."""

from .divergence import commits_ahead, commits_behind, is_ahead, is_behind
from .reconcile import commit_outstanding_changes, create_or_update_branch
from .refs import get_working_base_and_type, try_fetch

__all__ = [
    "commit_outstanding_changes",
    "commits_ahead",
    "commits_behind",
    "create_or_update_branch",
    "get_working_base_and_type",
    "is_ahead",
    "is_behind",
    "try_fetch",
]
