"""An in-memory linear framebuffer with video mode selection and rectangle fills."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class VideoMode:
    """A display mode; ``pixels_per_scanline`` defaults to the width."""

    width: int
    height: int
    pixels_per_scanline: int = 0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("mode dimensions must not be negative")
        if self.pixels_per_scanline == 0:
            object.__setattr__(self, "pixels_per_scanline", self.width)
        if self.pixels_per_scanline < self.width:
            raise ValueError("scanline is shorter than the mode width")

    @property
    def area(self) -> int:
        return self.width * self.height


class Framebuffer:
    """Pixels in ``0xRRGGBB`` form laid out scanline by scanline."""

    def __init__(self, modes: Sequence[VideoMode], mode: int = 0) -> None:
        self.modes = list(modes)
        self.mode = mode
        self._pixels: list[int] | None = None

    @property
    def info(self) -> VideoMode:
        """The current video mode."""
        if not 0 <= self.mode < len(self.modes):
            raise RuntimeError(f"video mode {self.mode} is not available")
        return self.modes[self.mode]

    @property
    def width(self) -> int:
        return self.info.width

    @property
    def height(self) -> int:
        return self.info.height

    @property
    def ready(self) -> bool:
        return self._pixels is not None

    def initialize(self) -> VideoMode:
        """Switch to the mode with the largest area and allocate its pixels.

        Among modes of equal area the first one listed wins.
        """
        current = self.info
        best_index, best_area = 0, 0
        for index, mode in enumerate(self.modes):
            if mode.area > best_area:
                best_index, best_area = index, mode.area
        if best_index != self.mode or self._pixels is None:
            self.mode = best_index
            current = self.info
            self._pixels = [0] * (current.pixels_per_scanline * current.height)
        return current

    def _require_ready(self) -> list[int]:
        if self._pixels is None:
            raise RuntimeError("graphics output is not initialized")
        return self._pixels

    def draw_rect(self, x: int, y: int, width: int, height: int, color: int) -> None:
        """Fill a rectangle, clamped to the screen.

        Raises ``ValueError`` when the top-left corner lies off the screen.
        """
        pixels = self._require_ready()
        info = self.info
        if not (0 <= x < info.width and 0 <= y < info.height):
            raise ValueError(f"rectangle origin ({x}, {y}) is off the screen")
        width = max(0, min(width, info.width - x))
        height = max(0, min(height, info.height - y))
        stride = info.pixels_per_scanline
        color &= 0xFFFFFFFF
        for row in range(y, y + height):
            start = row * stride + x
            pixels[start:start + width] = [color] * width

    def clear_screen(self, color: int) -> None:
        """Fill the whole screen with ``color``."""
        self._require_ready()
        self.draw_rect(0, 0, self.width, self.height, color)

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at ``(x, y)``."""
        pixels = self._require_ready()
        info = self.info
        if not (0 <= x < info.width and 0 <= y < info.height):
            raise IndexError(f"pixel ({x}, {y}) is off the screen")
        return pixels[y * info.pixels_per_scanline + x]