"""Exit code taxonomy for the git-history CLI."""

from __future__ import annotations

from enum import IntEnum

from git_history.errors import ErrorKind, GitHistoryError


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Exit codes follow Unix conventions with domain-specific extensions:
    - 0: Success
    - 1-9: General errors (parse, validation, config)
    - 10-19: Repository and traversal errors
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    PARSE_ERROR = 2
    VALIDATION_ERROR = 3
    CONFIG_ERROR = 4

    REPOSITORY_ERROR = 10
    REMOTE_ERROR = 11
    BRANCH_ERROR = 12
    TRAVERSAL_ERROR = 13

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExitCode:
        """Map an exception to an appropriate exit code.

        Parameters
        ----------
        exc
            Exception to classify.

        Returns
        -------
        ExitCode
            Exit code appropriate for the exception type.
        """
        if isinstance(exc, GitHistoryError):
            return _KIND_CODES.get(exc.kind, cls.TRAVERSAL_ERROR)
        if isinstance(exc, (ValueError, TypeError)):
            return cls.VALIDATION_ERROR
        if isinstance(exc, (FileNotFoundError, PermissionError)):
            return cls.CONFIG_ERROR
        return cls.GENERAL_ERROR


_KIND_CODES: dict[ErrorKind, ExitCode] = {
    ErrorKind.REPOSITORY: ExitCode.REPOSITORY_ERROR,
    ErrorKind.REMOTE: ExitCode.REMOTE_ERROR,
    ErrorKind.BRANCH: ExitCode.BRANCH_ERROR,
    ErrorKind.CONFIG: ExitCode.CONFIG_ERROR,
}


__all__ = ["ExitCode"]
