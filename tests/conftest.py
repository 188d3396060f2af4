"""Shared fixtures for aioprbranch tests."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest


class GitSandbox:
    """A bare ``origin`` plus a seed clone that pushes to it."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.origin = root / "origin.git"
        self.seed = root / "seed"

    def git(self, cwd: Path, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit_files(self, cwd: Path, files: dict[str, str], message: str) -> str:
        """Write *files*, commit them and return the new HEAD SHA."""
        for name, content in files.items():
            target = cwd / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        self.git(cwd, "add", "-A")
        self.git(cwd, "commit", "-q", "-m", message)
        return self.git(cwd, "rev-parse", "HEAD")

    def clone(self, name: str = "work") -> Path:
        target = self.root / name
        self.git(self.root, "clone", "-q", str(self.origin), str(target))
        return target

    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        result = subprocess.run(
            ["git", "merge-base", "--is-ancestor", ancestor, descendant],
            cwd=str(cwd),
            capture_output=True,
        )
        return result.returncode == 0

    def init_repo(self, path: Path) -> Path:
        self.git(self.root, "init", "-q", str(path))
        self.git(path, "symbolic-ref", "HEAD", "refs/heads/main")
        return path


@pytest.fixture(autouse=True)
def git_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration and pin commit identities."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Committer")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "committer@example.com")
    for name in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sandbox(tmp_path: Path) -> GitSandbox:
    """Bare origin with a ``main`` branch holding a single commit."""
    box = GitSandbox(tmp_path)
    box.git(tmp_path, "init", "-q", "--bare", str(box.origin))
    box.git(box.origin, "symbolic-ref", "HEAD", "refs/heads/main")

    box.init_repo(box.seed)
    box.commit_files(box.seed, {"README.md": "# Project\n"}, "Initial commit")
    box.git(box.seed, "remote", "add", "origin", str(box.origin))
    box.git(box.seed, "push", "-q", "origin", "main")
    return box
