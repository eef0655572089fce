"""A tiny stack-based scripting machine plus its function table and environment."""

from __future__ import annotations

import os
import re
from collections.abc import Callable

STACK_SIZE = 256
MAX_FUNCTIONS = 64
FUNCTION_NAME_MAX = 31
API_SLOTS = 16
API_NAME_MAX = 31
ENV_SLOTS = 16
ENV_ENTRY_MAX = 63

_TOKEN_SEPARATORS = re.compile(r"[ \n]+")
_ATOI = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


class ScriptVM:
    """Integer stack machine understanding ``push``, ``add``, ``sub`` and ``call``."""

    def __init__(self) -> None:
        self._stack: list[int] = []
        self._functions: dict[str, Callable[[], int]] = {}

    def push(self, value: int) -> None:
        """Push ``value``; it is dropped when the stack is full."""
        if len(self._stack) < STACK_SIZE:
            self._stack.append(value)

    def pop(self) -> int:
        """Pop the top value, or return 0 when the stack is empty."""
        return self._stack.pop() if self._stack else 0

    def add_function(self, name: str, func: Callable[[], int]) -> None:
        """Register a callable under ``name``; ignored when the table is full."""
        if len(self._functions) >= MAX_FUNCTIONS:
            return
        self._functions.setdefault(name[:FUNCTION_NAME_MAX], func)

    def call_function(self, name: str) -> int:
        """Call the function registered as ``name``; 0 if there is none."""
        func = self._functions.get(name)
        return func() if func is not None else 0

    def execute(self, script: str) -> int:
        """Run ``script`` and return the value left on top of the stack."""
        tokens = iter(t for t in _TOKEN_SEPARATORS.split(script) if t)
        for token in tokens:
            if token == "push":
                operand = next(tokens, None)
                if operand is not None:
                    self.push(_atoi(operand))
            elif token == "add":
                b, a = self.pop(), self.pop()
                self.push(a + b)
            elif token == "sub":
                b, a = self.pop(), self.pop()
                self.push(a - b)
            elif token == "call":
                name = next(tokens, None)
                if name is not None:
                    self.call_function(name)
        return self.pop()


class ScriptApi:
    """Named host functions exposed to scripts."""

    def __init__(self) -> None:
        self._entries: list[tuple[str, Callable]] = []

    def register(self, name: str, func: Callable) -> None:
        """Add ``func`` under ``name``; raises ``OverflowError`` when full."""
        if len(self._entries) >= API_SLOTS:
            raise OverflowError("script API table is full")
        self._entries.append((name[:API_NAME_MAX], func))

    def lookup(self, name: str) -> Callable | None:
        """Return the first function registered as ``name``, or ``None``."""
        return next((f for n, f in self._entries if n == name), None)


class ScriptEnv:
    """Script variables stored as ``key=value`` entries of at most 63 characters."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def set(self, key: str, value: str) -> None:
        """Append an entry; raises ``OverflowError`` when all slots are used."""
        if len(self._entries) >= ENV_SLOTS:
            raise OverflowError("script environment is full")
        self._entries.append(f"{key}={value}"[:ENV_ENTRY_MAX])

    def get(self, key: str) -> str | None:
        """Value of the first entry whose name is a prefix of ``key``."""
        for entry in self._entries:
            name, sep, value = entry.partition("=")
            if sep and key.startswith(name):
                return value
        return None


def load_script(path: str | os.PathLike[str], maxlen: int) -> str:
    """Read a script file, keeping at most ``maxlen - 1`` bytes."""
    with open(path, "rb") as handle:
        data = handle.read()
    return data[:max(maxlen - 1, 0)].decode("utf-8", "replace")