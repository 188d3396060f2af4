"""Reconciliation input and output models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .git import Commit

ReconciliationAction = Literal["none", "created", "updated"]


class ReconciliationConfig(BaseModel):
    """Desired state of the pull request branch.

    ``base`` may be left empty, in which case the branch checked out in the
    working tree is used.  ``add_paths`` restricts staging to the given
    pathspecs; an empty tuple stages everything.
    """

    model_config = ConfigDict(frozen=True)

    base: str = ""
    branch: str
    branch_remote_name: str = "origin"
    base_remote: str = "origin"
    commit_message: str = "Automated changes"
    signoff: bool = False
    add_paths: tuple[str, ...] = ()
    is_config_sync: bool = False

    @field_validator("base", "branch_remote_name", "base_remote")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("branch")
    @classmethod
    def _branch_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("branch must not be empty")
        return value

    @field_validator("commit_message")
    @classmethod
    def _message_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("commit_message must not be empty")
        return value

    @field_validator("add_paths")
    @classmethod
    def _drop_blank_paths(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(path.strip() for path in value if path.strip())


class ReconciliationResult(BaseModel):
    """Outcome of a single ``create_or_update_branch`` run."""

    action: ReconciliationAction = "none"
    base: str
    has_diff_with_base: bool = False
    was_reset_or_rebased: bool = False
    base_commit: Commit
    head_sha: str
    branch_commits: list[Commit] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_consistency(self) -> ReconciliationResult:
        if not self.base:
            raise ValueError("base must be resolved")
        if self.action == "updated" and not self.has_diff_with_base:
            raise ValueError("an updated branch must differ from its base")
        if self.branch_commits and not self.has_diff_with_base:
            raise ValueError("branch commits require a diff with base")
        return self
