"""The boot menu: entries, hotkeys, keyboard and mouse navigation, drawing."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .graphics import Framebuffer
from .mouse import Mouse, MouseState
from .theme import BootMenuTheme

MAX_BOOT_ENTRIES = 128
MAX_ENTRY_LENGTH = 64
VISIBLE_MENU_ENTRIES = 10

SCAN_UP = 0x01
SCAN_DOWN = 0x02
SCAN_ESC = 0x17
CARRIAGE_RETURN = "\r"

MENU_Y = 100
ROW_HEIGHT = 50
MENU_HEIGHT = VISIBLE_MENU_ENTRIES * ROW_HEIGHT + 40
HEADER_HEIGHT = 60
CHAR_WIDTH = 10
FALLBACK_ENTRY = "Exit to UEFI Firmware"

_DEFAULT_STRINGS = {
    "menu_title": "BloodHorn Boot Menu",
    "instructions": "Use arrow keys to select, Enter to boot, ESC to exit",
}
_LOCALIZATION_LINE = re.compile(r"([^=]{1,63})=\s*(\S+)")


class MenuAborted(Exception):
    """The user left the boot menu with Escape."""


@dataclass(frozen=True)
class Key:
    """A key press: a printable character, or a scan code when ``char`` is empty."""

    char: str = ""
    scan_code: int = 0


@dataclass
class BootEntry:
    """A menu entry and the action that boots it."""

    name: str
    action: Callable[[], Any] | None = None

    def __post_init__(self) -> None:
        self.name = self.name[:MAX_ENTRY_LENGTH - 1]

    def boot(self) -> Any:
        """Run the entry's action; ``None`` when it has none."""
        return self.action() if self.action is not None else None


def load_localization_file(path: str | os.PathLike[str]) -> dict[str, str]:
    """Read ``key=value`` lines; the value is its first whitespace-free word.

    A missing file yields an empty mapping.
    """
    strings: dict[str, str] = {}
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            for line in handle:
                match = _LOCALIZATION_LINE.match(line)
                if match:
                    strings[match.group(1)] = match.group(2)[:255]
    except FileNotFoundError:
        return {}
    return strings


class BootMenu:
    """Selectable boot entries with a scrolling window of ten rows."""

    def __init__(self, strings: dict[str, str] | None = None) -> None:
        self.entries: list[BootEntry] = []
        self.hotkeys: list[str] = []
        self.selected = 0
        self.scroll_offset = 0
        self.strings = dict(_DEFAULT_STRINGS)
        if strings:
            self.strings.update(strings)

    def add_entry(self, name: str, action: Callable[[], Any] | None = None) -> BootEntry:
        """Append an entry; raises ``OverflowError`` beyond 128 entries."""
        if len(self.entries) >= MAX_BOOT_ENTRIES:
            raise OverflowError("too many boot entries")
        entry = BootEntry(name, action)
        self.entries.append(entry)
        self.hotkeys.append("")
        return entry

    def assign_hotkeys(self) -> list[str]:
        """Give each entry the first letter of its name not taken by an earlier one."""
        used: set[str] = set()
        self.hotkeys = []
        for entry in self.entries:
            hotkey = ""
            for char in entry.name:
                lowered = char.lower()
                if len(lowered) == 1 and 32 <= ord(lowered) < 128 and lowered not in used:
                    hotkey = lowered
                    used.add(lowered)
                    break
            self.hotkeys.append(hotkey)
        return list(self.hotkeys)

    def select_hotkey(self, char: str) -> bool:
        """Select the entry whose hotkey is ``char``; True when one matched."""
        if not char:
            return False
        lowered = char.lower()
        for index, hotkey in enumerate(self.hotkeys):
            if hotkey and hotkey == lowered:
                self.selected = index
                return True
        return False

    def move_up(self) -> None:
        """Select the previous entry, wrapping to the last."""
        count = len(self.entries)
        if not count:
            return
        if self.selected > 0:
            self.selected -= 1
            if self.selected < self.scroll_offset:
                self.scroll_offset -= 1
        else:
            self.selected = count - 1
            self.scroll_offset = max(count - VISIBLE_MENU_ENTRIES, 0)

    def move_down(self) -> None:
        """Select the next entry, wrapping to the first."""
        count = len(self.entries)
        if not count:
            return
        if self.selected < count - 1:
            self.selected += 1
            if self.selected >= self.scroll_offset + VISIBLE_MENU_ENTRIES:
                self.scroll_offset += 1
        else:
            self.selected = 0
            self.scroll_offset = 0

    def handle_key(self, key: Key) -> BootEntry | None:
        """Apply a key press; returns the entry chosen with Enter.

        Raises ``MenuAborted`` on Escape.
        """
        if key.char:
            self.select_hotkey(key.char)
        if key.char == CARRIAGE_RETURN:
            if not self.entries:
                raise IndexError("boot menu is empty")
            return self.entries[self.selected]
        if not key.char:
            if key.scan_code == SCAN_UP:
                self.move_up()
            elif key.scan_code == SCAN_DOWN:
                self.move_down()
            elif key.scan_code == SCAN_ESC:
                raise MenuAborted()
        return None

    def handle_mouse(self, mouse: MouseState, screen_width: int) -> BootEntry | None:
        """Select the row under the pointer; returns it when the left button is down."""
        menu_x = screen_width // 4
        menu_width = screen_width // 2
        text_x = menu_x + 20
        text_y = MENU_Y + 20
        for row, (index, entry) in enumerate(self.visible_entries()):
            entry_y = text_y + row * ROW_HEIGHT
            if (
                text_x <= mouse.x < text_x + menu_width - 40
                and entry_y <= mouse.y < entry_y + 40
            ):
                self.selected = index
                if mouse.left_button:
                    return entry
        return None

    def visible_entries(self) -> list[tuple[int, BootEntry]]:
        """Index and entry of each row inside the scroll window."""
        end = min(len(self.entries), self.scroll_offset + VISIBLE_MENU_ENTRIES)
        return [(i, self.entries[i]) for i in range(self.scroll_offset, end)]

    def render_text(self) -> str:
        """The menu as plain console text, with ``>`` marking the selection."""
        lines = [f"  {'>' if i == self.selected else ' '} {e.name}\r\n" for i, e in enumerate(self.entries)]
        return (
            "\r\n  BloodHorn Boot Menu\r\n\r\n"
            + "".join(lines)
            + "\r\n  Use arrow keys to select, Enter to boot, ESC to exit"
        )

    def _label(self, index: int, entry: BootEntry) -> str:
        hotkey = self.hotkeys[index] if index < len(self.hotkeys) else ""
        return f"({hotkey}) {entry.name}" if hotkey else entry.name

    def draw(
        self, framebuffer: Framebuffer, theme: BootMenuTheme
    ) -> list[tuple[int, int, int, str]]:
        """Paint the menu onto ``framebuffer``.

        Returns the text to print as ``(x, y, colour, text)`` tuples.
        """
        width = framebuffer.width

        def rect(x: int, y: int, w: int, h: int, color: int) -> None:
            try:
                framebuffer.draw_rect(x, y, w, h, color)
            except ValueError:
                pass

        framebuffer.clear_screen(theme.background_color)
        rect(0, 0, width, HEADER_HEIGHT, theme.header_color)
        menu_x = width // 4
        menu_width = width // 2
        rect(menu_x, MENU_Y, menu_width, MENU_HEIGHT, theme.header_color)

        labels: list[tuple[int, int, int, str]] = []
        title = self.strings["menu_title"]
        labels.append(((width - len(title) * CHAR_WIDTH) // 2, 30, theme.selected_text_color, title))
        text_x = menu_x + 20
        text_y = MENU_Y + 20
        for index, entry in self.visible_entries():
            selected = index == self.selected
            if selected:
                rect(menu_x + 10, text_y - 5, menu_width - 20, 40, theme.highlight_color)
            color = theme.selected_text_color if selected else theme.text_color
            labels.append((text_x, text_y, color, self._label(index, entry)))
            text_y += ROW_HEIGHT
        if self.scroll_offset > 0:
            labels.append((menu_x + menu_width - 40, MENU_Y + 10, theme.footer_color, "↑"))
        if self.scroll_offset + VISIBLE_MENU_ENTRIES < len(self.entries):
            labels.append(
                (menu_x + menu_width - 40, MENU_Y + MENU_HEIGHT - 30, theme.footer_color, "↓")
            )
        instructions = self.strings["instructions"]
        labels.append(
            (
                (width - len(instructions) * CHAR_WIDTH) // 2,
                MENU_Y + MENU_HEIGHT + 20,
                theme.footer_color,
                instructions,
            )
        )
        return labels

    def run(
        self,
        keys: Iterable[Key],
        mouse: Mouse | None = None,
        screen_width: int = 0,
    ) -> Any:
        """Process input until an entry is chosen, then boot it.

        Raises ``MenuAborted`` on Escape and ``EOFError`` when input runs out.
        """
        self.assign_hotkeys()
        if not self.entries:
            self.add_entry(FALLBACK_ENTRY, None)
        state = MouseState()
        for key in keys:
            if mouse is not None:
                mouse.update(state)
                clicked = self.handle_mouse(state, screen_width)
                if clicked is not None:
                    return clicked.boot()
            chosen = self.handle_key(key)
            if chosen is not None:
                return chosen.boot()
        raise EOFError("input ended before an entry was chosen")