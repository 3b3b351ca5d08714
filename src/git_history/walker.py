"""Topological ancestor walk from a single starting commit."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

import pygit2

from git_history.errors import CommitLookupError
from git_history.refs import RepositoryHandle

_LOGGER = logging.getLogger(__name__)

_OBJECT_ID_RE = re.compile(r"\b[0-9a-f]{40}\b")


def walk_sort_mode() -> int:
    """Return the revwalk sorting used for history scans.

    Descendants come before ancestors; commits unordered by ancestry are
    emitted newest commit time first.

    Returns
    -------
    int
        pygit2 sort flags.
    """
    enums = getattr(pygit2, "enums", None)
    sort_mode = getattr(enums, "SortMode", None)
    if sort_mode is not None:
        return int(sort_mode.TOPOLOGICAL | sort_mode.TIME)
    return int(pygit2.GIT_SORT_TOPOLOGICAL | pygit2.GIT_SORT_TIME)


class WalkCursor:
    """Lazy cursor over commit ids; exhaustion is terminal.

    libgit2 cannot resume a walk once it fails to read a commit, so a failed
    advance also exhausts the cursor.
    """

    def __init__(self, walker: pygit2.Walker) -> None:
        self._walker: pygit2.Walker | None = walker

    @property
    def exhausted(self) -> bool:
        """Return whether the walk has ended."""
        return self._walker is None

    def next(self) -> str | None:
        """Advance the walk.

        Returns
        -------
        str | None
            Next commit id, or ``None`` once the walk is exhausted.

        Raises
        ------
        CommitLookupError
            Raised when the walk cannot read the next commit.
        """
        walker = self._walker
        if walker is None:
            return None
        try:
            commit = next(walker)
        except StopIteration:
            self._walker = None
            return None
        except (pygit2.GitError, KeyError, ValueError) as exc:
            self._walker = None
            raise CommitLookupError(_object_id(exc), detail=str(exc)) from exc
        return str(commit.id)

    def close(self) -> None:
        """Drop the native walker; later calls report exhaustion."""
        self._walker = None

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        commit_id = self.next()
        if commit_id is None:
            raise StopIteration
        return commit_id


def start(handle: RepositoryHandle, start_id: str) -> WalkCursor:
    """Start a walk seeded only with ``start_id``.

    Returns
    -------
    WalkCursor
        Cursor positioned before the first commit.

    Raises
    ------
    CommitLookupError
        Raised when the starting commit cannot be read.
    """
    try:
        walker = handle.repo.walk(pygit2.Oid(hex=start_id), walk_sort_mode())
    except (pygit2.GitError, KeyError, ValueError) as exc:
        raise CommitLookupError(start_id, detail=str(exc)) from exc
    _LOGGER.debug("Started history walk at %s in %r", start_id, handle.path)
    return WalkCursor(walker)


def _object_id(exc: BaseException) -> str:
    match = _OBJECT_ID_RE.search(str(exc))
    return match.group(0) if match else ""


__all__ = ["WalkCursor", "start", "walk_sort_mode"]
