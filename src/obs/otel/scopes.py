"""Canonical OpenTelemetry instrumentation scopes for git-history-rows."""

from __future__ import annotations

from enum import StrEnum


class ScopeName(StrEnum):
    """Instrumentation scope names."""

    REFS = "git_history.refs"
    SCAN = "git_history.scan"
    CLI = "git_history.cli"


SCOPE_REFS = ScopeName.REFS
SCOPE_SCAN = ScopeName.SCAN
SCOPE_CLI = ScopeName.CLI

__all__ = ["SCOPE_CLI", "SCOPE_REFS", "SCOPE_SCAN", "ScopeName"]
