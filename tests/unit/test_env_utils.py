"""Tests for environment variable parsing helpers."""

from __future__ import annotations

import pytest

from utils.env_utils import env_bool, env_int, env_value

_NAME = "GIT_HISTORY_TEST_VALUE"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("Yes", True), ("false", False), ("n", False), ("maybe", None)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool | None) -> None:
    """Ensure boolean parsing accepts common spellings."""
    monkeypatch.setenv(_NAME, raw)
    assert env_bool(_NAME) is expected


def test_env_int(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure integers parse and invalid values fall back to the default."""
    monkeypatch.setenv(_NAME, " 42 ")
    assert env_int(_NAME) == 42
    monkeypatch.setenv(_NAME, "forty")
    assert env_int(_NAME, default=7) == 7


def test_env_value_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure blank values are treated as unset."""
    monkeypatch.setenv(_NAME, "   ")
    assert env_value(_NAME) is None
    assert env_bool(_NAME, default=True) is True
