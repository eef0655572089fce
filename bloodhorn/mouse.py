"""Pointer state accumulated from relative pointer movements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass
class MouseState:
    """Absolute pointer position and button state."""

    x: int = 0
    y: int = 0
    left_button: bool = False
    right_button: bool = False


@dataclass(frozen=True)
class PointerReading:
    """One reading from a relative pointing device."""

    relative_x: int = 0
    relative_y: int = 0
    left_button: bool = False
    right_button: bool = False


class PointerDevice(Protocol):
    """A relative pointing device; ``get_state`` raises ``OSError`` on failure."""

    def get_state(self) -> PointerReading: ...


class Mouse:
    """Applies readings from a pointing device to a ``MouseState``."""

    def __init__(self, device: PointerDevice | None = None) -> None:
        self.device = device

    def update(self, state: MouseState | None) -> MouseState | None:
        """Add the device's movement to ``state`` and copy its buttons.

        Without a device, or when the device cannot be read, ``state`` is
        left as it was.
        """
        if self.device is None or state is None:
            return state
        try:
            reading = self.device.get_state()
        except OSError:
            return state
        state.x += int(reading.relative_x)
        state.y += int(reading.relative_y)
        state.left_button = bool(reading.left_button)
        state.right_button = bool(reading.right_button)
        return state