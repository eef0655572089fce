"""The interactive rescue shell, its command history and built-in help."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

MAX_CMD_LEN = 256
MAX_ARGS = 16
HISTORY_SLOTS = 16
HISTORY_ENTRY_MAX = 127
PROMPT = "bloodhorn> "
BANNER = "BloodHorn Rescue Shell v1.0\nType 'help' for available commands\n"
CLEAR_SCREEN = "\033[2J\033[H"
_HELP = (
    "Available commands:\n"
    "  help     - Show this help\n"
    "  ls       - List files\n"
    "  cat <file> - Show file contents\n"
    "  reboot   - Reboot system\n"
    "  clear    - Clear screen\n"
)
_COMMAND_NAMES = "help clear reboot ls cat exit"


def help_text(maxlen: int) -> str:
    """The command names, cut to ``maxlen - 1`` characters."""
    return _COMMAND_NAMES[:max(maxlen - 1, 0)]


class ShellHistory:
    """The first 16 commands entered, each kept to 127 characters."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def add(self, command: str) -> None:
        """Record ``command``; ignored once the history is full."""
        if len(self._entries) < HISTORY_SLOTS:
            self._entries.append(command[:HISTORY_ENTRY_MAX])

    def get(self, index: int) -> str | None:
        """Return entry ``index``, or ``None`` when out of range."""
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def __len__(self) -> int:
        return len(self._entries)


class RescueShell:
    """A line-oriented shell reading commands from a text stream."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        on_reboot: Callable[[], None] | None = None,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self.on_reboot = on_reboot
        self.args: list[str] = []
        self.history = ShellHistory()

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def parse_command(self, line: str) -> list[str]:
        """Split ``line`` on spaces into at most 16 arguments."""
        tokens = (t for t in line[:MAX_CMD_LEN - 1].split(" ") if t)
        self.args = [t for _, t in zip(range(MAX_ARGS), tokens)]
        return self.args

    def _respond(self) -> str:
        if not self.args:
            return ""
        command = self.args[0]
        if command == "help":
            return _HELP
        if command == "ls":
            return "Filesystem not mounted\n"
        if command == "cat":
            if len(self.args) > 1:
                return f"File '{self.args[1]}' not found\n"
            return "Usage: cat <filename>\n"
        if command == "reboot":
            return "Rebooting...\n"
        if command == "clear":
            return CLEAR_SCREEN
        return f"Unknown command: {command}\n"

    def execute_command(self) -> str:
        """Run the parsed command, write its output and return it."""
        output = self._respond()
        self.stdout.write(output)
        if self.args and self.args[0] == "reboot" and self.on_reboot is not None:
            self.on_reboot()
        return output

    def run(self) -> None:
        """Prompt for and run commands until the input ends."""
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break
            line = line.rstrip("\n")
            if line:
                self.history.add(line)
                self.parse_command(line)
                self.execute_command()


def main(argv: list[str] | None = None) -> int:
    """Start the rescue shell on standard input and output."""
    shell = RescueShell()
    shell.stdout.write(BANNER)
    shell.run()
    return 0