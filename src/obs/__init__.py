"""Observability helpers for git-history-rows."""
