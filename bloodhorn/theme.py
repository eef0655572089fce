"""Colours and background image of the boot menu."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BootMenuTheme:
    """Colours in ``0xRRGGBB`` form and an optional background image."""

    background_color: int = 0x1A1A2E
    header_color: int = 0x2D2D4F
    highlight_color: int = 0x4A4A8A
    text_color: int = 0xCCCCCC
    selected_text_color: int = 0xFFFFFF
    footer_color: int = 0x8888AA
    background_image: Any = None


_current_theme = BootMenuTheme()


def set_boot_menu_theme(theme: BootMenuTheme) -> None:
    """Make a copy of ``theme`` the current boot menu theme."""
    global _current_theme
    _current_theme = dataclasses.replace(theme)


def get_boot_menu_theme() -> BootMenuTheme:
    """Return the current boot menu theme."""
    return _current_theme