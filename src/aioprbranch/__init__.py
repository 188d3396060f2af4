"""aioprbranch: async Python library for maintaining pull request branches."""

from ._version import __version__
from .branch import create_or_update_branch, get_working_base_and_type, try_fetch
from .config import async_load_config, load_config
from .exceptions import (
    ConfigError,
    ConfigParseError,
    DetachedHeadError,
    GitCommandError,
    GitError,
    NotAGitRepositoryError,
    PRBranchError,
)
from .git import GitCommandManager, build_branch_commits
from .models import (
    CommandResult,
    Commit,
    FileChange,
    ReconciliationConfig,
    ReconciliationResult,
    WorkingBase,
    WorkingBaseType,
)

__all__ = [
    "CommandResult",
    "Commit",
    "ConfigError",
    "ConfigParseError",
    "DetachedHeadError",
    "FileChange",
    "GitCommandError",
    "GitCommandManager",
    "GitError",
    "NotAGitRepositoryError",
    "PRBranchError",
    "ReconciliationConfig",
    "ReconciliationResult",
    "WorkingBase",
    "WorkingBaseType",
    "__version__",
    "async_load_config",
    "build_branch_commits",
    "create_or_update_branch",
    "get_working_base_and_type",
    "load_config",
    "try_fetch",
]
