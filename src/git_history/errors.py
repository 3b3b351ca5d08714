"""Error types for commit history extraction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Categorize history extraction errors by subsystem."""

    GENERIC = "generic"
    REPOSITORY = "repository"
    REMOTE = "remote"
    BRANCH = "branch"
    LOOKUP = "lookup"
    DIFF = "diff"
    SESSION = "session"
    CONFIG = "config"


class GitHistoryError(Exception):
    """Base exception for history extraction failures."""

    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.GENERIC) -> None:
        super().__init__(message)
        self.kind = kind


class RepositoryOpenError(GitHistoryError):
    """Raised when a path cannot be opened as a git repository."""

    def __init__(self, path: str, *, code: str, detail: str) -> None:
        msg = f"Failed opening repository: {path!r} ({code}: {detail})"
        super().__init__(msg, kind=ErrorKind.REPOSITORY)
        self.path = path
        self.code = code
        self.detail = detail


class RemoteListError(GitHistoryError):
    """Raised when the repository transport cannot be connected or listed."""

    def __init__(self, path: str, *, stage: str, code: str, detail: str) -> None:
        msg = f"Remote {stage} failed for {path!r} ({code}: {detail})"
        super().__init__(msg, kind=ErrorKind.REMOTE)
        self.path = path
        self.stage = stage
        self.code = code
        self.detail = detail


class BranchNotFoundError(GitHistoryError):
    """Raised when no advertised reference matches the requested branch."""

    def __init__(self, branch: str, *, path: str) -> None:
        msg = f"Couldn't find branch {branch} in {path!r}"
        super().__init__(msg, kind=ErrorKind.BRANCH)
        self.branch = branch
        self.path = path


class DiffComputationError(GitHistoryError):
    """Raised when diff statistics cannot be computed for a commit."""

    def __init__(self, commit_id: str, *, detail: str) -> None:
        msg = f"Failed computing diff stats for {commit_id}: {detail}"
        super().__init__(msg, kind=ErrorKind.DIFF)
        self.commit_id = commit_id
        self.detail = detail


class CommitLookupError(GitHistoryError):
    """Raised when the walk cannot read a commit object.

    ``commit_id`` is empty when the native error does not name the object.
    """

    def __init__(self, commit_id: str, *, detail: str) -> None:
        msg = f"Failed looking up commit {commit_id or '<unknown>'}: {detail}"
        super().__init__(msg, kind=ErrorKind.LOOKUP)
        self.commit_id = commit_id
        self.detail = detail


class SessionStateError(GitHistoryError, RuntimeError):
    """Raised when a traversal session is driven out of order."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=ErrorKind.SESSION)


class SessionClosedError(SessionStateError):
    """Raised when a traversal session or its handle is used after teardown."""

    def __init__(self, message: str = "Traversal session is closed") -> None:
        super().__init__(message)


class OptionsError(GitHistoryError, ValueError):
    """Raised when scan options are missing or invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=ErrorKind.CONFIG)


@dataclass(frozen=True)
class CommitError:
    """Per-commit failure marker delivered to consumers instead of raising.

    ``skipped`` is true when no record was produced for the walk step
    (lookup failures). Diff failures still produce a zero-stat record.
    """

    commit_id: str
    kind: ErrorKind
    message: str
    skipped: bool = False


def native_code(exc: BaseException) -> str:
    """Return a short diagnostic code for a native pygit2 failure.

    Returns
    -------
    str
        Exception class name, e.g. ``GitError`` or ``KeyError``.
    """
    return type(exc).__name__


__all__ = [
    "BranchNotFoundError",
    "CommitError",
    "CommitLookupError",
    "DiffComputationError",
    "ErrorKind",
    "GitHistoryError",
    "OptionsError",
    "RemoteListError",
    "RepositoryOpenError",
    "SessionClosedError",
    "SessionStateError",
    "native_code",
]
