"""Normalize OpenTelemetry attributes for git-history-rows telemetry."""

from __future__ import annotations

from collections.abc import Mapping

from opentelemetry.util.types import AttributeValue

_MAX_ATTRIBUTE_LENGTH = 512


def _truncate_str(value: str) -> str:
    if len(value) <= _MAX_ATTRIBUTE_LENGTH:
        return value
    return value[:_MAX_ATTRIBUTE_LENGTH]


def normalize_attributes(attrs: Mapping[str, object] | None) -> dict[str, AttributeValue]:
    """Return OpenTelemetry-safe attributes.

    ``None`` values are dropped, scalars pass through, and everything else is
    stringified.

    Returns
    -------
    dict[str, AttributeValue]
        Normalized attribute mapping.
    """
    if not attrs:
        return {}
    normalized: dict[str, AttributeValue] = {}
    for key, value in attrs.items():
        if value is None:
            continue
        if isinstance(value, str):
            normalized[key] = _truncate_str(value)
        elif isinstance(value, (bool, int, float)):
            normalized[key] = value
        else:
            normalized[key] = _truncate_str(str(value))
    return normalized


__all__ = ["normalize_attributes"]
