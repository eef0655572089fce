"""Shared pieces for the file system readers: sector access and path helpers."""

from __future__ import annotations

SECTOR_SIZE = 512


class SectorDevice:
    """Read-only access to a disk image in 512-byte sectors."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def read_sector(self, lba: int) -> bytes:
        """Return sector ``lba``; a short final sector is padded with zeros."""
        start = lba * SECTOR_SIZE
        if lba < 0 or start >= len(self._data):
            raise OSError(f"sector {lba} is outside the device")
        return self._data[start:start + SECTOR_SIZE].ljust(SECTOR_SIZE, b"\0")

    def read_sectors(self, lba: int, count: int) -> bytes:
        """Return ``count`` consecutive sectors starting at ``lba``."""
        return b"".join(self.read_sector(lba + i) for i in range(count))


def filename_cmp(a: str, b: str) -> int:
    """Compare two names ignoring case; negative, zero or positive."""
    for ca, cb in zip(a + "\0", b + "\0"):
        la, lb = ord(ca.lower()[0]), ord(cb.lower()[0])
        if la != lb:
            return la - lb
    return 0


def path_split(path: str) -> tuple[str, str]:
    """Split ``path`` at its last ``/`` into directory and file name."""
    head, _, tail = path.rpartition("/")
    return head, tail