"""Create or update the pull request branch in a checkout.

The steps run strictly in order against the same working tree: each one
reads the on-disk state left by the previous step.
"""

from __future__ import annotations

import logging

from ..exceptions import DetachedHeadError, GitCommandError
from ..git.commits import build_branch_commits
from ..git.manager import GitCommandManager
from ..models.branch import ReconciliationAction, ReconciliationConfig, ReconciliationResult
from ..models.git import Commit, WorkingBaseType
from .divergence import is_ahead, is_behind
from .refs import get_working_base_and_type, try_fetch

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT = "nothing to commit, working tree clean"


async def commit_outstanding_changes(
    git: GitCommandManager,
    config: ReconciliationConfig,
) -> bool:
    """Stage and commit uncommitted changes.  Returns ``True`` if a commit was made."""
    if not await git.is_dirty(True, config.add_paths):
        return False

    logger.info("Uncommitted changes found. Adding a commit.")
    await git.add(config.add_paths)
    if not await git.has_staged_changes():
        logger.info("Staged changes match HEAD, nothing to commit.")
        return False

    options = ["-m", config.commit_message]
    if config.signoff:
        options.append("--signoff")
    result = await git.commit(options, allow_failure=True)
    if result.ok:
        return True

    # Reported by git when core.autocrlf normalises every staged change away
    if NOTHING_TO_COMMIT in result.stdout:
        logger.info("Nothing to commit after line-ending normalisation.")
        return False

    raise GitCommandError(result.args, result.exit_code, result.stdout, result.stderr)


def _warn_unparsed(commits: list[Commit]) -> None:
    for commit in commits:
        for unparsed_change in commit.unparsed_changes:
            logger.warning("Skipping unexpected diff entry: %s", unparsed_change)


async def create_or_update_branch(
    git: GitCommandManager,
    config: ReconciliationConfig,
) -> ReconciliationResult:
    """Bring ``config.branch`` up to date with the working tree and ``config.base``.

    The branch is created from the base when it does not exist on
    ``config.branch_remote_name``.  When the branch is behind the base it is
    soft-reset onto the base for configuration-sync repositories, and rebased
    onto it otherwise.  Outstanding changes are committed in between.

    ``action`` reports only what this run did to the branch: a branch that was
    already ahead of its base and gained nothing new yields ``"none"`` with
    ``has_diff_with_base`` set, so callers deciding whether to push should
    check ``has_diff_with_base`` as well.

    Raises :class:`DetachedHeadError` when HEAD is detached and no base was
    given, and :class:`GitCommandError` when a mandatory git step fails.  No
    rollback is attempted on failure.
    """
    working_base = await get_working_base_and_type(git)
    logger.info("Working base is %s '%s'", working_base.type.value, working_base.ref)
    if working_base.type is WorkingBaseType.COMMIT and not config.base:
        raise DetachedHeadError("When in 'detached HEAD' state, 'base' must be supplied.")

    base = config.base or working_base.ref
    branch = config.branch
    action: ReconciliationAction = "none"

    if working_base.ref != branch:
        if not await try_fetch(git, config.branch_remote_name, branch, 0):
            logger.info("Pull request branch '%s' does not exist yet.", branch)
            await git.checkout(branch, base)
            action = "created"
            logger.info("Created branch '%s'", branch)
        else:
            logger.info(
                "Pull request branch '%s' already exists as remote branch '%s/%s'",
                branch,
                config.branch_remote_name,
                branch,
            )
            await git.checkout(branch)

    start_sha = await git.rev_parse(branch)

    try:
        await git.fetch([base], config.base_remote)
    except GitCommandError as exc:
        logger.warning(
            "Could not fetch base '%s' from '%s': %s",
            base,
            config.base_remote,
            exc.stderr.strip(),
        )

    was_reset_or_rebased = False

    # Config-sync output is regenerated from source, so prior branch commits
    # are dropped rather than replayed onto the newer base.
    if config.is_config_sync and await is_behind(git, base, branch):
        logger.info("Pull request branch '%s' is behind base branch '%s'.", branch, base)
        await git.exec(["reset", "--soft", f"{config.base_remote}/{base}"])
        logger.info("Reset '%s' to '%s'.", branch, base)
        was_reset_or_rebased = True

    if await commit_outstanding_changes(git, config):
        logger.info("Committed changes to '%s'", branch)

    # Must follow the commit above so the new commit is replayed too.
    if not config.is_config_sync and await is_behind(git, base, branch):
        logger.info("Pull request branch '%s' is behind base branch '%s'.", branch, base)
        await git.exec(["pull", "--rebase", config.base_remote, base])
        logger.info("Rebased '%s' commits onto '%s'.", branch, base)
        was_reset_or_rebased = True

    has_diff_with_base = await is_ahead(git, base, branch)

    base_commit = await git.get_commit(await git.rev_parse(base))
    head_sha = await git.rev_parse(branch)

    branch_commits: list[Commit] = []
    if has_diff_with_base:
        branch_commits = await build_branch_commits(git, base, branch)
        _warn_unparsed(branch_commits)
        if action != "created" and head_sha != start_sha:
            action = "updated"
            logger.info("Updated branch '%s'", branch)

    return ReconciliationResult(
        action=action,
        base=base,
        has_diff_with_base=has_diff_with_base,
        was_reset_or_rebased=was_reset_or_rebased,
        base_commit=base_commit,
        head_sha=head_sha,
        branch_commits=branch_commits,
    )
