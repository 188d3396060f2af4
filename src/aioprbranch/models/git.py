"""Git-related models."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChangeKind = Literal["added", "modified", "deleted", "renamed", "copied", "unknown"]


class WorkingBaseType(str, Enum):
    """What is checked out before reconciliation begins."""

    BRANCH = "branch"
    COMMIT = "commit"


class WorkingBase(BaseModel):
    """The ref (or detached commit) checked out in the working tree."""

    model_config = ConfigDict(frozen=True)

    ref: str
    type: WorkingBaseType


class CommandResult(BaseModel):
    """Captured output of a single git invocation."""

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class FileChange(BaseModel):
    """A single file-level entry of a commit's raw diff."""

    path: str
    kind: ChangeKind
    mode: str
    dst_sha: str
    src_path: str | None = None
    similarity: int | None = None


class Commit(BaseModel):
    """A commit with its metadata and file changes."""

    sha: str
    tree: str
    parents: list[str] = Field(default_factory=list)
    author: str
    committer: str
    signed: bool = False
    subject: str
    body: str = ""
    changes: list[FileChange] = Field(default_factory=list)
    unparsed_changes: list[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        if self.body:
            return f"{self.subject}\n\n{self.body}"
        return self.subject
