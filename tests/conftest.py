"""Shared fixtures: small on-disk repositories with known history."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, cast

import pytest

if TYPE_CHECKING:
    from pygit2 import Oid, Repository

type CommitFile = Callable[..., str]

_BASE_TIME = 1_700_000_000


@dataclass(frozen=True)
class HistoryRepo:
    """Linear ``root -> a -> b`` history on ``refs/heads/master``."""

    path: Path
    root: str
    a: str
    b: str


def _commit_file(
    repo: Repository,
    path: Path,
    content: str,
    *,
    message: str = "commit",
    tick: int = 0,
    ref: str = "HEAD",
    parents: list[Oid] | None = None,
) -> str:
    import pygit2

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    relative = path.relative_to(Path(repo.workdir)).as_posix()
    repo.index.add(relative)
    repo.index.write()
    author = pygit2.Signature("Test User", "test@example.com", _BASE_TIME + tick * 60, 120)
    committer = pygit2.Signature("Build Bot", "bot@example.com", _BASE_TIME + tick * 60, 0)
    tree_id = repo.index.write_tree()
    if parents is None:
        parents = [] if repo.head_is_unborn else [cast("Oid", repo.head.target)]
    commit_id = repo.create_commit(ref, author, committer, message, tree_id, parents)
    return str(commit_id)


@pytest.fixture
def commit_file() -> CommitFile:
    """Return a helper that writes a file and commits it.

    Returns
    -------
    CommitFile
        ``commit_file(repo, path, content, *, message, tick, ref, parents)``.
    """
    pytest.importorskip("pygit2")
    return _commit_file


@pytest.fixture
def empty_repo(tmp_path: Path) -> Repository:
    """Return a fresh non-bare repository whose HEAD is ``refs/heads/master``.

    Returns
    -------
    pygit2.Repository
        Repository without commits.
    """
    pygit2 = pytest.importorskip("pygit2")
    return pygit2.init_repository(tmp_path / "repo", bare=False, initial_head="master")


@pytest.fixture
def history_repo(empty_repo: Repository) -> HistoryRepo:
    """Return a repository with three linear commits on master.

    The root adds two lines, ``a`` adds a second file, and ``b`` rewrites one
    line of the first file.

    Returns
    -------
    HistoryRepo
        Repository path and commit ids.
    """
    workdir = Path(empty_repo.workdir)
    root = _commit_file(empty_repo, workdir / "a.txt", "one\ntwo\n", message="root", tick=0)
    a = _commit_file(empty_repo, workdir / "b.txt", "alpha\n", message="add b", tick=1)
    b = _commit_file(empty_repo, workdir / "a.txt", "one\nTWO\n", message="edit a", tick=2)
    return HistoryRepo(path=workdir, root=root, a=a, b=b)


@pytest.fixture
def drop_object() -> Callable[[Path, str], None]:
    """Return a helper that deletes one loose object from a working tree's repository.

    Returns
    -------
    Callable[[Path, str], None]
        ``drop_object(workdir, object_id)``.
    """

    def _drop(workdir: Path, object_id: str) -> None:
        loose = workdir / ".git" / "objects" / object_id[:2] / object_id[2:]
        loose.unlink()

    return _drop
