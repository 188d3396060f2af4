"""Exception hierarchy for aioprbranch."""

from __future__ import annotations

from collections.abc import Sequence


class PRBranchError(Exception):
    """Base exception for all aioprbranch errors."""


class ConfigError(PRBranchError):
    """The reconciliation configuration is missing or invalid."""


class ConfigParseError(ConfigError):
    """Failed to parse a YAML configuration file."""


class DetachedHeadError(ConfigError):
    """HEAD is detached and no base branch was supplied."""


class GitError(PRBranchError):
    """Error during a git operation."""


class NotAGitRepositoryError(GitError):
    """The working directory is not a git checkout."""


class GitCommandError(GitError):
    """A git subprocess exited with a non-zero status."""

    def __init__(
        self,
        args: Sequence[str],
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.args_list = list(args)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or stdout.strip() or "no output"
        super().__init__(
            f"git {' '.join(self.args_list)} failed with exit code {exit_code}: {detail}"
        )
