"""Git gateway and commit extraction."""

from .commits import build_branch_commits, parse_commit_output, parse_raw_change
from .manager import GitCommandManager

__all__ = [
    "GitCommandManager",
    "build_branch_commits",
    "parse_commit_output",
    "parse_raw_change",
]
