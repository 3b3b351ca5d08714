"""Shared utilities for git-history-rows."""

from utils.env_utils import env_bool, env_int, env_value

__all__ = ["env_bool", "env_int", "env_value"]
