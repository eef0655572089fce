"""Network boot over a PXE stack: DHCP, TFTP downloads and ICMP echo."""

from __future__ import annotations

import struct
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from ipaddress import IPv4Address
from typing import Protocol

UNKNOWN_SIZE = 0xFFFF
DEFAULT_KERNEL_SIZE = 1024 * 1024
ECHO_PORT = 33434
ECHO_TIMEOUT_MS = 1000
_ECHO_ID = 0x1234
_ECHO_SEQ = 1
_ECHO_PAYLOAD = b"\xaa" * 32
_ECHO_SIZE = 8 + len(_ECHO_PAYLOAD)


class PxeError(OSError):
    """A PXE operation failed."""


class PxeStack(Protocol):
    """The firmware network stack; methods raise ``OSError`` on failure."""

    def init(self) -> None: ...

    def dhcp_discover(self) -> None: ...

    def get_file_size(self, path: str) -> int: ...

    def tftp_read(self, path: str, size: int) -> bytes: ...

    def cleanup(self) -> None: ...

    def udp_send(self, host: str, port: int, data: bytes) -> None: ...

    def udp_recv(self, maxlen: int, timeout_ms: int) -> bytes: ...


_ZERO_IP = IPv4Address(0)


@dataclass
class NetworkInfo:
    """Addresses and names learned from the network."""

    client_ip: IPv4Address = _ZERO_IP
    server_ip: IPv4Address = _ZERO_IP
    subnet_mask: IPv4Address = _ZERO_IP
    router_ip: IPv4Address = _ZERO_IP
    dns_server: IPv4Address = _ZERO_IP
    tftp_server: str = ""
    boot_file: str = ""
    domain_name: str = ""
    broadcast_ip: IPv4Address = _ZERO_IP
    ntp_server: IPv4Address = _ZERO_IP
    time_offset: int = 0


class KernelFormat(IntEnum):
    """Kernel image formats, keyed by the magic in their first four bytes."""

    LINUX = 0x53726448
    MULTIBOOT1 = 0x1BADB002
    MULTIBOOT2 = 0xE85250D6
    LIMINE = 0x67CF3D9D


@dataclass(frozen=True)
class BootImage:
    """A downloaded kernel ready to be handed to its boot protocol."""

    format: KernelFormat
    kernel: bytes
    initrd: bytes
    cmdline: str


def icmp_checksum(data: bytes) -> int:
    """Internet checksum over little-endian 16-bit words, as stored in memory."""
    data = bytes(data)
    total = sum(word for (word,) in struct.iter_unpack("<H", data[: len(data) & ~1]))
    if len(data) % 2:
        total += data[-1]
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    return ~total & 0xFFFF


def detect_kernel_format(data: bytes) -> KernelFormat:
    """Identify a kernel image by its leading magic number."""
    if len(data) < 4:
        raise ValueError("kernel image too short")
    (magic,) = struct.unpack_from("<I", data, 0)
    try:
        return KernelFormat(magic)
    except ValueError:
        raise ValueError(f"unknown kernel magic {magic:#010x}") from None


def _echo_request() -> bytes:
    body = struct.pack(">HH", _ECHO_ID, _ECHO_SEQ) + _ECHO_PAYLOAD
    checksum = icmp_checksum(struct.pack("<BBH", 8, 0, 0) + body)
    return struct.pack("<BBH", 8, 0, checksum) + body


class PxeClient:
    """Boots kernels fetched through a PXE stack."""

    def __init__(
        self,
        stack: PxeStack,
        info: NetworkInfo | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stack = stack
        self.network_info = info if info is not None else NetworkInfo()
        self.clock = clock
        self.initialized = False

    def network_init(self) -> None:
        """Start the stack and run DHCP; does nothing if already done."""
        if self.initialized:
            return
        self.stack.init()
        try:
            self.stack.dhcp_discover()
        except Exception:
            self.stack.cleanup()
            raise
        self.initialized = True

    def _require_init(self) -> None:
        if not self.initialized:
            raise PxeError("network is not initialized")

    def load_kernel(self, path: str) -> bytes:
        """Download a kernel; an unknown size is taken as 1 MiB."""
        self._require_init()
        size = self.stack.get_file_size(path)
        if size == UNKNOWN_SIZE:
            size = DEFAULT_KERNEL_SIZE
        return self.stack.tftp_read(path, size)

    def load_initrd(self, path: str) -> bytes:
        """Download an initial ramdisk, whose size must be known."""
        self._require_init()
        size = self.stack.get_file_size(path)
        if size == UNKNOWN_SIZE:
            raise PxeError(f"size of {path} is unknown")
        return self.stack.tftp_read(path, size)

    def boot_kernel(self, kernel_path: str, initrd_path: str | None, cmdline: str) -> BootImage:
        """Fetch a kernel (and initrd) and identify how to boot it.

        Only Linux kernels receive the initrd.
        """
        self.network_init()
        kernel = self.load_kernel(kernel_path)
        initrd = self.load_initrd(initrd_path) if initrd_path else b""
        kind = detect_kernel_format(kernel)
        return BootImage(
            format=kind,
            kernel=kernel,
            initrd=initrd if kind is KernelFormat.LINUX else b"",
            cmdline=cmdline,
        )

    def cleanup(self) -> None:
        """Shut the stack down if it was started."""
        if self.initialized:
            self.stack.cleanup()
            self.initialized = False

    def icmp_echo(self, host: str) -> int:
        """Ping ``host`` and return the round trip time in milliseconds."""
        request = _echo_request()
        start = self.clock()
        self.stack.udp_send(host, ECHO_PORT, request)
        reply = self.stack.udp_recv(_ECHO_SIZE, ECHO_TIMEOUT_MS)
        if len(reply) < _ECHO_SIZE:
            raise PxeError(f"no echo reply from {host}")
        if reply[0] != 0 or reply[4:8] != request[4:8]:
            raise PxeError(f"unexpected reply from {host}")
        end = self.clock()
        return int((end - start) * 1000)