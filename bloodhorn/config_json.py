"""Lenient parser for the boot loader's JSON configuration file.

Nested objects are flattened into dotted keys. The scanner is deliberately
forgiving: it skips a value's opening quote and reads up to the next comma,
closing brace or newline, so a quoted string value keeps its closing quote.
"""

from __future__ import annotations

from dataclasses import dataclass

_KEY_LIMIT = 32
_VALUE_LIMIT = 128
_FULLKEY_MAX = 31
_SECTION_MAX = 63


@dataclass(frozen=True)
class JsonEntry:
    """A flattened ``key``/``value`` pair."""

    key: str
    value: str


class _Scanner:
    def __init__(self, text: str, max_entries: int) -> None:
        self.text = text
        self.pos = 0
        self.max_entries = max_entries
        self.entries: list[JsonEntry] = []

    @property
    def char(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_while(self, predicate) -> None:
        while self.char and predicate(self.char):
            self.pos += 1

    def parse_object(self, section: str) -> None:
        prefix = f"{section}." if section else ""
        while self.char:
            self.skip_while(lambda c: c not in '"}')
            if self.char == "}":
                self.pos += 1
                return
            if self.char != '"':
                return
            self.pos += 1
            key_start = self.pos
            self.skip_while(lambda c: c != '"')
            key = self.text[key_start:self.pos]
            self.pos += 1
            self.skip_while(lambda c: c != ":")
            self.pos += 1
            self.skip_while(lambda c: c in " \n")
            if self.char == "{":
                self.pos += 1
                self.parse_object((prefix + key)[:_SECTION_MAX])
                continue
            self.skip_while(lambda c: c in ' "')
            value_start = self.pos
            self.skip_while(lambda c: c not in ",}\n")
            value = self.text[value_start:self.pos]
            if (
                len(key) < _KEY_LIMIT
                and len(value) < _VALUE_LIMIT
                and len(self.entries) < self.max_entries
            ):
                full_key = (prefix + key)[:_FULLKEY_MAX]
                self.entries.append(JsonEntry(full_key, value))
            self.skip_while(lambda c: c not in ",}")
            if self.char == ",":
                self.pos += 1


def parse_config_json(text: str, max_entries: int = 32) -> list[JsonEntry]:
    """Flatten the first JSON object in ``text`` into at most ``max_entries`` entries."""
    scanner = _Scanner(text, max_entries)
    start = text.find("{")
    if start == -1:
        return []
    scanner.pos = start + 1
    scanner.parse_object("")
    return scanner.entries