"""Main application setup for the git-history CLI."""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from cyclopts import App, Parameter

from cli.commands.scan import count_command, explain_command, rows_command, sample_command
from cli.commands.version import get_version, version_command
from cli.groups import admin_group, session_group

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_HELP_EPILOGUE = """
Examples:
  git-history rows .                          Print every commit on master as JSON lines
  git-history rows . --branch refs/heads/main --format table --limit 20
  git-history count ./repo                    Count rows a full scan would produce
  git-history sample ./repo -n 10             Print the first 10 rows and the totals

Environment Variables:
  GIT_HISTORY_LOG_LEVEL      Default log level (DEBUG, INFO, WARNING, ERROR)
  GIT_HISTORY_BRANCH         Default branch reference
  GIT_HISTORY_SEARCH_PATH    Directory searched for global git configuration
"""

app = App(
    name="git-history",
    help="Expose the commit history of a git branch as rows.",
    help_format="rich",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(
        show_default=True,
        show_env_var=True,
    ),
)

app.meta.group_parameters = session_group


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        Parameter(
            name="--log-level",
            help="Logging verbosity level.",
            env_var="GIT_HISTORY_LOG_LEVEL",
            group=session_group,
        ),
    ] = "WARNING",
) -> int:
    """Configure logging, then dispatch to the selected command.

    Returns
    -------
    int
        Exit status code from command execution.

    Raises
    ------
    ValueError
        Raised when the log level is invalid.
    """
    if log_level not in LOG_LEVELS:
        msg = f"Unsupported log level {log_level!r}."
        raise ValueError(msg)
    logging.basicConfig(level=log_level)
    return app(list(tokens))


app.command(rows_command, name="rows", alias="r")
app.command(count_command, name="count", alias="c")
app.command(sample_command, name="sample", alias="s")
app.command(explain_command, name="explain")
app.command(version_command, name="version", alias="v", group=admin_group)


def main() -> None:
    """Run the git-history CLI."""
    raise SystemExit(app.meta())


__all__ = ["app", "main"]
