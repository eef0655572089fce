"""Parser for the boot loader's INI configuration file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass

_LINE_CHUNK = 255
_SECTION_MAX = 63
_NAME_MAX = 63
_PATH_MAX = 127


@dataclass(frozen=True)
class IniEntry:
    """One ``key=value`` line together with the section it appeared in."""

    section: str
    name: str
    path: str


def _read_lines(text: str) -> Iterator[str]:
    """Yield lines the way a 256-byte line buffer would deliver them."""
    start = 0
    while start < len(text):
        newline = text.find("\n", start)
        end = len(text) if newline == -1 else newline + 1
        line = text[start:end]
        for offset in range(0, len(line), _LINE_CHUNK):
            yield line[offset:offset + _LINE_CHUNK]
        start = end


def parse_ini_text(text: str, max_entries: int = 16) -> list[IniEntry]:
    """Parse INI text into at most ``max_entries`` entries.

    Keys keep any trailing whitespace; values lose leading blanks and the
    line's newline. Section names of 1 to 63 characters are accepted.
    """
    entries: list[IniEntry] = []
    section = ""
    for line in _read_lines(text):
        if len(entries) >= max_entries:
            break
        stripped = line.lstrip(" \t")
        if stripped.startswith((";", "#")):
            continue
        if stripped.startswith("["):
            end = stripped.find("]")
            if end != -1 and 0 < end - 1 < 64:
                section = stripped[1:end]
            continue
        key, sep, value = stripped.partition("=")
        if not sep:
            continue
        value = value.lstrip(" \t").split("\n", 1)[0]
        entries.append(
            IniEntry(
                section=section[:_SECTION_MAX],
                name=key[:_NAME_MAX],
                path=value[:_PATH_MAX],
            )
        )
    return entries


def parse_ini(path: str | os.PathLike[str], max_entries: int = 16) -> list[IniEntry]:
    """Read and parse an INI file; raises ``OSError`` if it cannot be opened."""
    with open(path, encoding="utf-8", errors="replace", newline="") as handle:
        return parse_ini_text(handle.read(), max_entries)