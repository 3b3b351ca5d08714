"""Version reporting for the git-history CLI."""

from __future__ import annotations

import json
import platform
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version


def get_version() -> str:
    """Get the package version string.

    Returns:
    -------
    str
        Version string, or "0.0.0-dev" if not installed.
    """
    return _package_version("git-history-rows") or "0.0.0-dev"


def get_version_info() -> dict[str, object]:
    """Get detailed version information.

    Returns:
    -------
    dict[str, object]
        Structured version payload, including the linked libgit2 version.
    """
    return {
        "git-history-rows": get_version(),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "dependencies": {
            "pygit2": _package_version("pygit2"),
            "pyarrow": _package_version("pyarrow"),
            "libgit2": _libgit2_version(),
        },
    }


def version_command() -> int:
    """Show version and library information.

    Returns:
    -------
    int
        Exit status code.
    """
    payload = json.dumps(get_version_info(), indent=2, sort_keys=True)
    sys.stdout.write(payload + "\n")
    return 0


def _package_version(name: str) -> str | None:
    try:
        return pkg_version(name)
    except PackageNotFoundError:
        return None


def _libgit2_version() -> str | None:
    import pygit2

    return getattr(pygit2, "LIBGIT2_VERSION", None)


__all__ = ["get_version", "get_version_info", "version_command"]
