"""Commit extraction: turn a revision range into structured commits.

``git show --raw`` output is parsed into :class:`~aioprbranch.models.Commit`
records.  Raw diff entries whose status cannot be classified are kept on the
commit as ``unparsed_changes``; reporting them is left to the caller.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from ..exceptions import GitError
from ..models.git import ChangeKind, Commit, FileChange

if TYPE_CHECKING:
    from .manager import GitCommandManager

END_OF_BODY = "###EOB###"

SHOW_FORMAT = f"%H%n%T%n%P%n%G?%n%an <%ae>%n%cn <%ce>%n%s%n%b%n{END_OF_BODY}"

_HEADER_LINES = 7

# ``git show -z`` terminates the formatted message with NUL; commit messages
# cannot contain NUL, so the first one ends the header.
_MARKER = b"\n" + END_OF_BODY.encode("ascii")

_RAW_META = re.compile(
    r"^:(?P<src_mode>\d{6}) (?P<dst_mode>\d{6}) "
    r"[0-9a-f]{40,64} (?P<dst_sha>[0-9a-f]{40,64}) "
    r"(?P<status>[A-Z])(?P<score>\d*)$"
)

_CHANGE_KINDS: dict[str, ChangeKind] = {
    "A": "added",
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
    "X": "unknown",
}

# Statuses that carry both a source and a destination path
_PAIRED = frozenset({"R", "C"})


def parse_raw_change(meta: str, paths: Sequence[str]) -> FileChange | None:
    """Classify one ``--raw -z`` entry.

    *meta* is the ``:mode mode sha sha STATUS`` field and *paths* the path
    fields that follow it.  Returns ``None`` for entries that cannot be
    classified, e.g. type changes (``T``), unmerged paths (``U``) or combined
    merge diffs (``::``).
    """
    match = _RAW_META.match(meta)
    if match is None:
        return None

    status = match.group("status")
    kind = _CHANGE_KINDS.get(status)
    if kind is None:
        return None

    if len(paths) != (2 if status in _PAIRED else 1):
        return None

    score = match.group("score")
    if status in _PAIRED:
        src_path, path = paths
    else:
        path, src_path = paths[0], None

    return FileChange(
        path=path,
        kind=kind,
        mode=match.group("src_mode") if status == "D" else match.group("dst_mode"),
        dst_sha=match.group("dst_sha"),
        src_path=src_path,
        similarity=int(score) if score else None,
    )


def _path_count(meta: str) -> int:
    if meta.startswith("::"):
        return 1
    if not meta.startswith(":"):
        return 0
    status = meta.rsplit(" ", 1)[-1][:1]
    return 2 if status in _PAIRED else 1


def _split_raw(raw: bytes) -> Iterator[tuple[str, list[bytes]]]:
    """Yield ``(meta, paths)`` pairs from NUL-separated raw diff output."""
    fields = raw.split(b"\0")
    i = 0
    while i < len(fields):
        meta = fields[i].strip().decode("ascii", "replace")
        i += 1
        if not meta:
            continue
        count = _path_count(meta)
        yield meta, fields[i : i + count]
        i += count


def _describe(meta: str, paths: list[bytes]) -> str:
    return "\t".join([meta, *(p.decode("utf-8", "backslashreplace") for p in paths)])


def parse_commit_output(output: bytes) -> Commit:
    """Parse the output of ``git show --raw -z --format=SHOW_FORMAT``.

    Entries whose paths are not valid UTF-8 go to ``unparsed_changes``.
    """
    head, _, raw = output.partition(b"\0")
    if not head.endswith(_MARKER):
        raise GitError("Unexpected commit output: end-of-body marker not found")

    lines = head[: -len(_MARKER)].decode("utf-8", "replace").split("\n")
    if len(lines) < _HEADER_LINES:
        raise GitError("Unexpected commit output: truncated header")

    header = lines[:_HEADER_LINES]
    body = "\n".join(lines[_HEADER_LINES:]).strip()

    changes: list[FileChange] = []
    unparsed: list[str] = []
    for meta, raw_paths in _split_raw(raw):
        try:
            paths = [p.decode("utf-8") for p in raw_paths]
        except UnicodeDecodeError:
            unparsed.append(_describe(meta, raw_paths))
            continue
        change = parse_raw_change(meta, paths)
        if change is None:
            unparsed.append(_describe(meta, raw_paths))
        else:
            changes.append(change)

    return Commit(
        sha=header[0],
        tree=header[1],
        parents=header[2].split(),
        signed=header[3] != "N",
        author=header[4],
        committer=header[5],
        subject=header[6],
        body=body,
        changes=changes,
        unparsed_changes=unparsed,
    )


async def build_branch_commits(
    git: GitCommandManager,
    base: str,
    branch: str,
) -> list[Commit]:
    """Return the commits on *branch* that are not on *base*, oldest first."""
    output = await git.log(f"{base}..{branch}", fmt="%H")
    shas = [line for line in output.split("\n") if line]
    shas.reverse()

    commits: list[Commit] = []
    for sha in shas:
        commits.append(await git.get_commit(sha))
    return commits
