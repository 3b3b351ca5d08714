"""Scan options for commit history extraction."""

from __future__ import annotations

from collections.abc import Mapping

import msgspec

from core_types import NonEmptyStr, PathLike
from git_history.errors import OptionsError
from utils.env_utils import env_value

DEFAULT_BRANCH = "refs/heads/master"
VALID_OPTIONS: tuple[str, ...] = ("path", "branch", "git_search_path")

ENV_PATH = "GIT_HISTORY_PATH"
ENV_BRANCH = "GIT_HISTORY_BRANCH"
ENV_SEARCH_PATH = "GIT_HISTORY_SEARCH_PATH"


class HistoryScanOptions(msgspec.Struct, frozen=True, kw_only=True, forbid_unknown_fields=True):
    """Repository location and starting ref for one history scan.

    ``git_search_path`` overrides where global git configuration is
    discovered. It is applied process-wide, see ``git_history.git_settings``.
    """

    path: NonEmptyStr
    branch: NonEmptyStr = DEFAULT_BRANCH
    git_search_path: str | None = None


def scan_options(
    path: PathLike,
    *,
    branch: str | None = None,
    git_search_path: PathLike | None = None,
) -> HistoryScanOptions:
    """Build scan options from Python values.

    Returns
    -------
    HistoryScanOptions
        Validated scan options.
    """
    payload: dict[str, object] = {"path": str(path)}
    if branch:
        payload["branch"] = branch
    if git_search_path is not None:
        payload["git_search_path"] = str(git_search_path)
    return options_from_mapping(payload)


def options_from_mapping(options: Mapping[str, object]) -> HistoryScanOptions:
    """Validate a host option mapping into scan options.

    Empty ``git_search_path`` values are treated as unset.

    Returns
    -------
    HistoryScanOptions
        Validated scan options.

    Raises
    ------
    OptionsError
        Raised for unknown options, a missing ``path`` or wrongly typed values.
    """
    for name in options:
        if name not in VALID_OPTIONS:
            valid = ", ".join(VALID_OPTIONS)
            msg = f'invalid option "{name}"; valid options in this context are: {valid}'
            raise OptionsError(msg)
    if not options.get("path"):
        msg = "path is required for git history scans (path of the .git repo)"
        raise OptionsError(msg)
    payload = dict(options)
    if not payload.get("git_search_path"):
        payload.pop("git_search_path", None)
    if not payload.get("branch"):
        payload.pop("branch", None)
    try:
        return msgspec.convert(payload, type=HistoryScanOptions)
    except msgspec.ValidationError as exc:
        raise OptionsError(str(exc)) from exc


def options_from_env() -> HistoryScanOptions | None:
    """Build scan options from environment variables when a path is set.

    Returns
    -------
    HistoryScanOptions | None
        Scan options, or ``None`` when ``GIT_HISTORY_PATH`` is unset.
    """
    path = env_value(ENV_PATH)
    if path is None:
        return None
    return scan_options(
        path,
        branch=env_value(ENV_BRANCH),
        git_search_path=env_value(ENV_SEARCH_PATH),
    )


def describe_scan(options: HistoryScanOptions) -> dict[str, str | None]:
    """Return explain properties for a scan.

    Returns
    -------
    dict[str, str | None]
        Labelled repository, branch and search path values.
    """
    return {
        "Git Repository": options.path,
        "Git Branch": options.branch,
        "Git Search Path": options.git_search_path,
    }


__all__ = [
    "DEFAULT_BRANCH",
    "ENV_BRANCH",
    "ENV_PATH",
    "ENV_SEARCH_PATH",
    "VALID_OPTIONS",
    "HistoryScanOptions",
    "describe_scan",
    "options_from_env",
    "options_from_mapping",
    "scan_options",
]
