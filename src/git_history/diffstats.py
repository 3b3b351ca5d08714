"""First-parent diff statistics per commit."""

from __future__ import annotations

import pygit2

from git_history.errors import DiffComputationError
from git_history.records import DiffStats
from git_history.refs import RepositoryHandle

# Well-known id of the tree with no entries; the diff base for root commits.
EMPTY_TREE_ID = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def compute(handle: RepositoryHandle, commit_id: str) -> DiffStats:
    """Return diff statistics for ``commit_id`` against its first parent.

    Returns
    -------
    DiffStats
        Insertions, deletions and files changed.

    Raises
    ------
    DiffComputationError
        Raised when the commit cannot be looked up.
    """
    repo = handle.repo
    try:
        commit = repo[pygit2.Oid(hex=commit_id)].peel(pygit2.Commit)
    except (pygit2.GitError, KeyError, ValueError) as exc:
        raise DiffComputationError(commit_id, detail=str(exc)) from exc
    return commit_diff_stats(repo, commit)


def commit_diff_stats(repo: pygit2.Repository, commit: pygit2.Commit) -> DiffStats:
    """Diff a commit tree against its first parent tree, or the empty tree.

    Trees, the diff and its stats are local to this call and are dropped
    before it returns. Additional merge parents are ignored.

    Returns
    -------
    DiffStats
        Aggregated diff statistics.

    Raises
    ------
    DiffComputationError
        Raised when a tree lookup or the diff fails.
    """
    try:
        tree = commit.tree
        base = _base_tree(repo, commit)
        diff = base.diff_to_tree(tree) if base is not None else tree.diff_to_tree(swap=True)
        stats = diff.stats
        return DiffStats(
            insertions=stats.insertions,
            deletions=stats.deletions,
            files_changed=stats.files_changed,
        )
    except (pygit2.GitError, KeyError, ValueError) as exc:
        raise DiffComputationError(str(commit.id), detail=str(exc)) from exc


def empty_tree(repo: pygit2.Repository) -> pygit2.Tree | None:
    """Return the canonical empty tree when the object database serves it.

    Returns
    -------
    pygit2.Tree | None
        Empty tree, or ``None`` when it cannot be read.
    """
    obj = repo.get(pygit2.Oid(hex=EMPTY_TREE_ID))
    if isinstance(obj, pygit2.Tree):
        return obj
    return None


def _base_tree(repo: pygit2.Repository, commit: pygit2.Commit) -> pygit2.Tree | None:
    parent_ids = commit.parent_ids
    if parent_ids:
        parent = repo[parent_ids[0]].peel(pygit2.Commit)
        return parent.tree
    return empty_tree(repo)


__all__ = ["EMPTY_TREE_ID", "commit_diff_stats", "compute", "empty_tree"]
