"""Process-wide pygit2 settings.

libgit2 options are global to the process, not to a repository handle. The
global config search path in particular persists after the scan that set it,
so concurrent scans that need different search paths are not supported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cache

import pygit2

from utils.env_utils import env_bool, env_int

_LOGGER = logging.getLogger(__name__)

ENV_OWNER_VALIDATION = "GIT_HISTORY_GIT_OWNER_VALIDATION"
ENV_SERVER_TIMEOUT_MS = "GIT_HISTORY_GIT_SERVER_TIMEOUT_MS"

_APPLIED: dict[str, str | None] = {"search_path": None}


@dataclass(frozen=True)
class GitSettingsSpec:
    """Optional pygit2 Settings overrides."""

    owner_validation: bool | None = None
    server_timeout_ms: int | None = None


def apply_git_settings(spec: GitSettingsSpec) -> None:
    """Apply pygit2 settings overrides when supported.

    ``server_timeout_ms`` bounds network I/O while listing remote refs.
    Disabling owner validation allows reading repositories owned by other
    users; only disable it for trusted locations.
    """
    settings = pygit2.Settings()
    if spec.owner_validation is not None and hasattr(settings, "owner_validation"):
        settings.owner_validation = spec.owner_validation
    if spec.server_timeout_ms is not None and hasattr(settings, "server_timeout"):
        settings.server_timeout = spec.server_timeout_ms


@cache
def apply_git_settings_once() -> None:
    """Apply settings once based on environment overrides."""
    spec = git_settings_from_env()
    if spec is not None:
        apply_git_settings(spec)


def git_settings_from_env() -> GitSettingsSpec | None:
    """Build GitSettingsSpec from environment variables when present.

    Returns
    -------
    GitSettingsSpec | None
        Settings derived from environment variables.
    """
    owner_validation = env_bool(ENV_OWNER_VALIDATION)
    server_timeout_ms = env_int(ENV_SERVER_TIMEOUT_MS)
    if owner_validation is None and server_timeout_ms is None:
        return None
    return GitSettingsSpec(
        owner_validation=owner_validation,
        server_timeout_ms=server_timeout_ms,
    )


def apply_config_search_path(path: str) -> None:
    """Set the global-level git config search path for the whole process.

    Must run before the repository is opened, since remote and credential
    configuration is read at open/connect time. Re-applying the current value
    is a no-op.
    """
    previous = _APPLIED["search_path"]
    if previous == path:
        return
    if previous is not None:
        _LOGGER.warning(
            "Overriding process-wide git config search path %r with %r",
            previous,
            path,
        )
    settings = pygit2.Settings()
    settings.search_path[_global_config_level()] = path
    _APPLIED["search_path"] = path
    _LOGGER.debug("Git global config search path set to %r", path)


def applied_config_search_path() -> str | None:
    """Return the search path applied by this process, if any.

    Returns
    -------
    str | None
        Last applied global config search path.
    """
    return _APPLIED["search_path"]


def _global_config_level() -> int:
    enums = getattr(pygit2, "enums", None)
    config_level = getattr(enums, "ConfigLevel", None)
    if config_level is not None:
        return int(config_level.GLOBAL)
    return int(pygit2.GIT_CONFIG_LEVEL_GLOBAL)


__all__ = [
    "ENV_OWNER_VALIDATION",
    "ENV_SERVER_TIMEOUT_MS",
    "GitSettingsSpec",
    "apply_config_search_path",
    "apply_git_settings",
    "apply_git_settings_once",
    "applied_config_search_path",
    "git_settings_from_env",
]
