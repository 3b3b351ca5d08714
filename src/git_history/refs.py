"""Repository handles and branch resolution via advertised references.

Branches are resolved by treating the repository as a fetch transport and
listing the references it advertises, rather than reading ref files. Packed
refs and non-default ref storage are handled the same way for local paths and
remote-style URLs.
"""

from __future__ import annotations

import logging
from types import TracebackType

import pygit2

from git_history.errors import (
    BranchNotFoundError,
    RemoteListError,
    RepositoryOpenError,
    SessionClosedError,
    native_code,
)
from git_history.git_settings import apply_config_search_path, apply_git_settings_once
from obs.otel import SCOPE_REFS, stage_span

_LOGGER = logging.getLogger(__name__)

ZERO_ID = "0" * 40


class RepositoryHandle:
    """Exclusive owner of one opened ``pygit2.Repository``.

    The handle is released exactly once; ``close`` on a released handle does
    nothing, and reading ``repo`` after release raises ``SessionClosedError``.
    """

    def __init__(self, repo: pygit2.Repository, *, path: str) -> None:
        self._repo: pygit2.Repository | None = repo
        self.path = path

    @property
    def repo(self) -> pygit2.Repository:
        """Return the open repository.

        Raises
        ------
        SessionClosedError
            Raised when the handle was already released.
        """
        if self._repo is None:
            msg = f"Repository handle for {self.path!r} is already released"
            raise SessionClosedError(msg)
        return self._repo

    @property
    def closed(self) -> bool:
        """Return whether the handle was released."""
        return self._repo is None

    def close(self) -> None:
        """Release the native repository handle."""
        repo = self._repo
        if repo is None:
            return
        self._repo = None
        repo.free()
        _LOGGER.debug("Released repository handle for %r", self.path)

    def __enter__(self) -> RepositoryHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def open_repository(path: str) -> RepositoryHandle:
    """Open the repository located exactly at ``path``.

    Parent directories are not searched.

    Returns
    -------
    RepositoryHandle
        Handle owning the opened repository.

    Raises
    ------
    RepositoryOpenError
        Raised when ``path`` is not a valid repository.
    """
    try:
        repo = pygit2.Repository(path, _no_search_flag())
    except (pygit2.GitError, KeyError, ValueError) as exc:
        raise RepositoryOpenError(path, code=native_code(exc), detail=str(exc)) from exc
    return RepositoryHandle(repo, path=path)


def advertised_refs(repo: pygit2.Repository, *, url: str) -> list[tuple[str, str]]:
    """Return ``(name, hex id)`` pairs advertised by the transport at ``url``.

    A remote named ``url`` is used when configured; otherwise an anonymous,
    unauthenticated remote pointing at ``url`` is created. The remote object
    does not outlive this call.

    Returns
    -------
    list[tuple[str, str]]
        Advertised references in transport order.

    Raises
    ------
    RemoteListError
        Raised when the remote cannot be created, connected or listed.
    """
    remote = _transport_remote(repo, url)
    try:
        heads = _list_heads(remote)
    except (pygit2.GitError, KeyError, ValueError, OSError) as exc:
        raise RemoteListError(url, stage="ls", code=native_code(exc), detail=str(exc)) from exc
    finally:
        del remote
    return heads


def find_branch(refs: list[tuple[str, str]], *, branch: str, path: str) -> str:
    """Return the id of the first advertised ref named exactly ``branch``.

    Returns
    -------
    str
        Lowercase hex commit id.

    Raises
    ------
    BranchNotFoundError
        Raised when no ref matches or the matching id is all zeros.
    """
    for name, commit_id in refs:
        if name == branch:
            if commit_id == ZERO_ID:
                break
            return commit_id
    raise BranchNotFoundError(branch, path=path)


def resolve(
    path: str,
    branch: str,
    config_search_path: str | None = None,
) -> tuple[RepositoryHandle, str]:
    """Open ``path`` and resolve ``branch`` to its starting commit id.

    The optional config search path is applied process-wide before anything
    is opened. On failure after open, the repository handle is released
    before the error propagates.

    Returns
    -------
    tuple[RepositoryHandle, str]
        Open repository handle and starting commit id.
    """
    if config_search_path:
        apply_config_search_path(config_search_path)
    apply_git_settings_once()
    with stage_span(
        "git_history.resolve",
        stage="resolve",
        scope_name=SCOPE_REFS,
        attributes={"git_history.path": path, "git_history.branch": branch},
    ):
        handle = open_repository(path)
        try:
            refs = advertised_refs(handle.repo, url=path)
            start_id = find_branch(refs, branch=branch, path=path)
        except BaseException:
            handle.close()
            raise
    _LOGGER.debug("Resolved %s in %r to %s", branch, path, start_id)
    return handle, start_id


def _transport_remote(repo: pygit2.Repository, url: str) -> pygit2.Remote:
    try:
        return repo.remotes[url]
    except (KeyError, ValueError, pygit2.GitError):
        pass
    try:
        return repo.remotes.create_anonymous(url)
    except (pygit2.GitError, ValueError) as exc:
        raise RemoteListError(url, stage="create", code=native_code(exc), detail=str(exc)) from exc


def _list_heads(remote: pygit2.Remote) -> list[tuple[str, str]]:
    list_heads = getattr(remote, "list_heads", None)
    if list_heads is not None:
        return [(head.name, str(head.oid)) for head in list_heads()]
    return [(entry["name"], str(entry["oid"])) for entry in remote.ls_remotes()]


def _no_search_flag() -> int:
    enums = getattr(pygit2, "enums", None)
    open_flag = getattr(enums, "RepositoryOpenFlag", None)
    if open_flag is not None:
        return int(open_flag.NO_SEARCH)
    return int(getattr(pygit2, "GIT_REPOSITORY_OPEN_NO_SEARCH", 1))


__all__ = [
    "ZERO_ID",
    "RepositoryHandle",
    "advertised_refs",
    "find_branch",
    "open_repository",
    "resolve",
]
