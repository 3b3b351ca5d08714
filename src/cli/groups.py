"""Shared help-panel groups for the git-history CLI."""

from __future__ import annotations

from cyclopts import Group

session_group = Group(
    "Session",
    help="Logging and run context options.",
    sort_key=0,
)

scan_group = Group(
    "Scan",
    help="Select the repository, branch and git configuration to read.",
    sort_key=1,
)

output_group = Group(
    "Output",
    help="Control row format and how many rows are printed.",
    sort_key=2,
)

admin_group = Group(
    "Admin",
    help="Administrative commands and help.",
    sort_key=99,
)

__all__ = ["admin_group", "output_group", "scan_group", "session_group"]
