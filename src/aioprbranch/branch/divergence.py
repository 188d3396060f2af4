"""Ahead/behind counting between two refs."""

from __future__ import annotations

from ..git.manager import GitCommandManager


async def commits_ahead(git: GitCommandManager, branch1: str, branch2: str) -> int:
    """Return the number of commits *branch2* is ahead of *branch1*."""
    return await git.rev_list_count(branch1, branch2, side="right")


async def is_ahead(git: GitCommandManager, branch1: str, branch2: str) -> bool:
    return await commits_ahead(git, branch1, branch2) > 0


async def commits_behind(git: GitCommandManager, branch1: str, branch2: str) -> int:
    """Return the number of commits *branch2* is behind *branch1*."""
    return await git.rev_list_count(branch1, branch2, side="left")


async def is_behind(git: GitCommandManager, branch1: str, branch2: str) -> bool:
    return await commits_behind(git, branch1, branch2) > 0
