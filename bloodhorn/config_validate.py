"""Checks that configuration keys and values are printable ASCII."""

from __future__ import annotations


def _printable(text: str | None) -> bool:
    return bool(text) and all(32 <= ord(c) <= 126 for c in text)


def validate_key(key: str | None) -> bool:
    """True when ``key`` is non-empty printable ASCII."""
    return _printable(key)


def validate_value(value: str | None) -> bool:
    """True when ``value`` is non-empty printable ASCII."""
    return _printable(value)