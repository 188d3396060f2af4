"""Version-control gateway for a single git checkout.

Ref and history queries (symbolic refs, revision parsing, ahead/behind
walks) are answered in-process with dulwich.  Porcelain that dulwich does not
cover, such as fetch, checkout, staging, commit, reset and rebase, runs
through the ``git`` binary.

All public async methods delegate to synchronous helpers via
``asyncio.to_thread`` so that git I/O never blocks the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Literal

from dulwich.errors import NotGitRepository
from dulwich.objectspec import parse_commit
from dulwich.refs import SYMREF
from dulwich.repo import Repo

from ..exceptions import GitCommandError, GitError, NotAGitRepositoryError
from ..models.git import CommandResult, Commit
from .commits import SHOW_FORMAT, parse_commit_output

logger = logging.getLogger(__name__)

_BRANCH_PREFIX = b"refs/heads/"


class GitCommandManager:
    """Runs git operations against the checkout at *working_dir*.

    The constructor takes plain values and reads no environment variables.
    *env*, when given, replaces the environment of every git subprocess.
    """

    def __init__(
        self,
        working_dir: Path,
        *,
        git_path: str = "git",
        timeout: float | None = 600,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.working_dir = working_dir.resolve()
        self.git_path = git_path
        self.timeout = timeout
        self.env = dict(env) if env is not None else None

    # ------------------------------------------------------------------
    # Process execution
    # ------------------------------------------------------------------

    def _run_sync(
        self, args: Sequence[str], *, text: bool = True
    ) -> subprocess.CompletedProcess:
        """Run ``git <args>``; with ``text=False`` stdout and stderr stay bytes."""
        argv = [self.git_path, *args]
        logger.debug("Running: %s", " ".join(argv))
        try:
            return subprocess.run(
                argv,
                cwd=str(self.working_dir),
                env=self.env,
                capture_output=True,
                encoding="utf-8" if text else None,
                errors="replace" if text else None,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            raise GitError(f"git executable not found: {self.git_path}") from None
        except subprocess.TimeoutExpired as exc:
            raise GitCommandError(
                args,
                124,
                stderr=f"timed out after {exc.timeout} seconds",
            ) from exc

    def _exec_sync(self, args: Sequence[str], allow_failure: bool = False) -> CommandResult:
        """Synchronous exec, called via ``asyncio.to_thread``."""
        completed = self._run_sync(args)
        result = CommandResult(
            args=list(args),
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.ok and not allow_failure:
            raise GitCommandError(args, result.exit_code, result.stdout, result.stderr)
        return result

    async def exec(self, args: Sequence[str], *, allow_failure: bool = False) -> CommandResult:
        """Run ``git <args>`` in the working directory.

        A non-zero exit raises :class:`GitCommandError` unless
        *allow_failure* is set, in which case the result is returned as-is.
        """
        return await asyncio.to_thread(self._exec_sync, list(args), allow_failure)

    # ------------------------------------------------------------------
    # In-process queries (dulwich)
    # ------------------------------------------------------------------

    def _open_repo(self) -> Repo:
        try:
            return Repo(str(self.working_dir))
        except NotGitRepository:
            raise NotAGitRepositoryError(f"Not a git repository: {self.working_dir}") from None

    def _symbolic_ref_sync(self, ref: str) -> str | None:
        with self._open_repo() as repo:
            contents = repo.refs.read_ref(ref.encode("utf-8"))
        if not contents or not contents.startswith(SYMREF):
            return None
        target = contents[len(SYMREF) :].strip()
        if target.startswith(_BRANCH_PREFIX):
            target = target[len(_BRANCH_PREFIX) :]
        return target.decode("utf-8")

    async def symbolic_ref(self, ref: str = "HEAD") -> str | None:
        """Return the short branch name *ref* points to, or ``None`` when detached."""
        return await asyncio.to_thread(self._symbolic_ref_sync, ref)

    def _resolve_sync(self, repo: Repo, ref: str) -> bytes:
        try:
            return parse_commit(repo, ref.encode("utf-8")).id
        except (KeyError, ValueError):
            raise GitError(f"Unknown revision: {ref}") from None

    def _rev_parse_sync(self, ref: str) -> str:
        with self._open_repo() as repo:
            return self._resolve_sync(repo, ref).decode("ascii")

    async def rev_parse(self, ref: str) -> str:
        """Resolve *ref* to a full commit SHA.  Raises :class:`GitError` if unknown."""
        return await asyncio.to_thread(self._rev_parse_sync, ref)

    def _rev_list_count_sync(self, left: str, right: str, side: str) -> int:
        with self._open_repo() as repo:
            left_sha = self._resolve_sync(repo, left)
            right_sha = self._resolve_sync(repo, right)
            if side == "left":
                include, exclude = left_sha, right_sha
            else:
                include, exclude = right_sha, left_sha
            walker = repo.get_walker(include=[include], exclude=[exclude])
            return sum(1 for _ in walker)

    async def rev_list_count(
        self,
        left: str,
        right: str,
        *,
        side: Literal["left", "right"],
    ) -> int:
        """Count one side of the symmetric difference ``left...right``.

        ``side="left"`` counts commits reachable from *left* only,
        ``side="right"`` those reachable from *right* only.
        """
        return await asyncio.to_thread(self._rev_list_count_sync, left, right, side)

    # ------------------------------------------------------------------
    # Porcelain (git binary)
    # ------------------------------------------------------------------

    async def fetch(
        self,
        refspecs: Sequence[str],
        remote: str = "origin",
        options: Sequence[str] = (),
    ) -> None:
        """Fetch *refspecs* from *remote*.  Failures raise :class:`GitCommandError`."""
        await self.exec(["fetch", *options, remote, *refspecs])

    async def checkout(self, ref: str, start_point: str | None = None) -> None:
        """Check out *ref*, (re)creating it at *start_point* when given."""
        args = ["checkout", "--progress"]
        if start_point:
            args.extend(["-B", ref, start_point])
        else:
            args.append(ref)
        args.append("--")
        await self.exec(args)

    async def is_dirty(self, untracked: bool = True, paths: Sequence[str] = ()) -> bool:
        """Return ``True`` if the working tree (limited to *paths*) has changes."""
        args = ["status", "--porcelain", "-unormal" if untracked else "-uno"]
        if paths:
            args.extend(["--", *paths])
        result = await self.exec(args)
        return bool(result.stdout.strip())

    async def add(self, paths: Sequence[str] = ()) -> CommandResult:
        """Stage *paths*, or every change when *paths* is empty."""
        args = ["add", "--", *paths] if paths else ["add", "-A"]
        result = await self.exec(args, allow_failure=True)
        if not result.ok:
            logger.warning("git add exited with %d: %s", result.exit_code, result.stderr.strip())
        return result

    async def has_staged_changes(self) -> bool:
        """Return ``True`` if the index differs from ``HEAD``."""
        result = await self.exec(["diff", "--cached", "--quiet"], allow_failure=True)
        if result.exit_code > 1:
            raise GitCommandError(result.args, result.exit_code, result.stdout, result.stderr)
        return result.exit_code == 1

    async def commit(
        self,
        options: Sequence[str] = (),
        *,
        allow_failure: bool = False,
    ) -> CommandResult:
        """Run ``git commit`` with *options*."""
        return await self.exec(["commit", *options], allow_failure=allow_failure)

    async def log(self, revision_range: str, *, fmt: str = "%H") -> str:
        """Return ``git log`` output for *revision_range* in format *fmt*."""
        result = await self.exec(["log", f"--format={fmt}", revision_range])
        return result.stdout

    # History is read through ``git show`` rather than a dulwich walk because
    # the raw diff status letters (including the ones reported as unparsed)
    # and git's own rename and copy detection are what callers replay.
    def _show_sync(self, ref: str) -> bytes:
        args = [
            "-c",
            "core.quotePath=false",
            "show",
            "--raw",
            "-z",
            "--no-color",
            "--no-show-signature",
            "--find-renames",
            "--find-copies",
            "--no-abbrev",
            f"--format={SHOW_FORMAT}",
            ref,
        ]
        # Paths are arbitrary bytes, so decoding is left to the parser.
        completed = self._run_sync(args, text=False)
        if completed.returncode != 0:
            raise GitCommandError(
                args,
                completed.returncode,
                completed.stdout.decode("utf-8", "replace"),
                completed.stderr.decode("utf-8", "replace"),
            )
        return completed.stdout

    async def get_commit(self, ref: str) -> Commit:
        """Return full metadata and file changes for the commit at *ref*."""
        output = await asyncio.to_thread(self._show_sync, ref)
        return parse_commit_output(output)
