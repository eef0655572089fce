"""Configuration lookups from process environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping


def config_env_get(
    key: str,
    environ: Mapping[str, str] | None = None,
    maxlen: int = 256,
) -> str | None:
    """Return the value of the first variable whose name prefixes ``key``.

    Entries are examined in order as ``NAME=value`` strings, split at the
    first ``=``. The value is cut to ``maxlen - 1`` characters. ``None`` is
    returned when nothing matches.
    """
    source = os.environ if environ is None else environ
    for name, value in source.items():
        entry_name, _, entry_value = f"{name}={value}".partition("=")
        if key.startswith(entry_name):
            return entry_value[:max(maxlen - 1, 0)]
    return None