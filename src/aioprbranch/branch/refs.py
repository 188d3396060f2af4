"""Working-base detection and remote branch probing."""

from __future__ import annotations

import logging

from ..exceptions import GitCommandError
from ..git.manager import GitCommandManager
from ..models.git import WorkingBase, WorkingBaseType

logger = logging.getLogger(__name__)


async def get_working_base_and_type(git: GitCommandManager) -> WorkingBase:
    """Return the branch checked out in *git*, or the HEAD commit when detached."""
    branch = await git.symbolic_ref("HEAD")
    if branch is not None:
        return WorkingBase(ref=branch, type=WorkingBaseType.BRANCH)

    head_sha = await git.rev_parse("HEAD")
    return WorkingBase(ref=head_sha, type=WorkingBaseType.COMMIT)


async def try_fetch(
    git: GitCommandManager,
    remote: str,
    branch: str,
    depth: int = 0,
) -> bool:
    """Fetch *branch* from *remote* into its remote-tracking ref.

    Returns ``False`` when the fetch fails, which callers treat as "the branch
    does not exist upstream yet".  A *depth* of ``0`` fetches full history.
    """
    options = ["--force"]
    if depth > 0:
        options.append(f"--depth={depth}")
    try:
        await git.fetch([f"{branch}:refs/remotes/{remote}/{branch}"], remote, options)
    except GitCommandError as exc:
        logger.debug("Fetch of '%s/%s' failed: %s", remote, branch, exc.stderr.strip())
        return False
    return True
