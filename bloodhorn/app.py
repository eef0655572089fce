"""The boot manager's entry point: configuration, theme and the boot menu."""

from __future__ import annotations

import argparse
import enum
import os
import re
import sys
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .config_env import config_env_get
from .config_ini import parse_ini
from .config_json import parse_config_json
from .menu import SCAN_DOWN, SCAN_ESC, SCAN_UP, BootMenu, Key, MenuAborted, load_localization_file
from .secure import SecurityViolation, load_and_verify_kernel
from .shell import BANNER, RescueShell
from .theme import BootMenuTheme, set_boot_menu_theme

INI_NAME = "bloodhorn.ini"
JSON_NAME = "bloodhorn.json"
KERNEL_IMAGE = "kernel.efi"
_JSON_READ_MAX = 4095
_DEFAULT_CMDLINE = "root=/dev/sda1 ro"
_ATOI = re.compile(r"\s*([+-]?\d+)")
_HEX = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_WORD = re.compile(r"\s*(\S+)")

_THEME_KEYS = (
    "background_color",
    "header_color",
    "highlight_color",
    "text_color",
    "selected_text_color",
    "footer_color",
)


@dataclass
class BootConfig:
    """Default entry, menu timeout and Linux boot parameters."""

    default_entry: str = ""
    menu_timeout: int = 0
    kernel: str = ""
    initrd: str = ""
    cmdline: str = ""

    def apply(self, field: str, value: str) -> None:
        limits = {"default_entry": 63, "kernel": 127, "initrd": 127, "cmdline": 255}
        if field == "menu_timeout":
            self.menu_timeout = _atoi(value)
        else:
            setattr(self, field, value[:limits[field]])


class BootKind(enum.Enum):
    """What a boot menu entry starts."""

    LINUX = "linux"
    MULTIBOOT2 = "multiboot2"
    LIMINE = "limine"
    CHAINLOAD = "chainload"
    PXE = "pxe"
    IA32 = "ia32"
    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    RISCV64 = "riscv64"
    LOONGARCH64 = "loongarch64"
    RECOVERY_SHELL = "recovery_shell"
    UEFI_SHELL = "uefi_shell"
    FIRMWARE = "firmware"


@dataclass(frozen=True)
class BootAction:
    """A boot target and the files and command line it uses."""

    kind: BootKind
    kernel: str = ""
    initrd: str = ""
    cmdline: str = ""


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _hex(text: str) -> int | None:
    match = _HEX.match(text)
    if not match:
        return None
    value = int(match.group(2), 16)
    if match.group(1) == "-":
        value = -value
    return value & 0xFFFFFFFF


def _word(text: str, limit: int) -> str | None:
    match = _WORD.match(text)
    return match.group(1)[:limit] if match else None


_INI_FIELDS = {
    ("boot", "default"): "default_entry",
    ("boot", "menu_timeout"): "menu_timeout",
    ("linux", "kernel"): "kernel",
    ("linux", "initrd"): "initrd",
    ("linux", "cmdline"): "cmdline",
}
_JSON_FIELDS = {f"{section}.{name}": field for (section, name), field in _INI_FIELDS.items()}
_ENV_FIELDS = {
    "BLOODHORN_DEFAULT": "default_entry",
    "BLOODHORN_MENU_TIMEOUT": "menu_timeout",
    "BLOODHORN_LINUX_KERNEL": "kernel",
    "BLOODHORN_LINUX_INITRD": "initrd",
    "BLOODHORN_LINUX_CMDLINE": "cmdline",
}


def _read_json(path: Path) -> str | None:
    try:
        with open(path, "rb") as handle:
            data = handle.read(_JSON_READ_MAX)
    except OSError:
        return None
    return data.decode("utf-8", "replace")


def load_boot_config(
    directory: str | os.PathLike[str] = ".",
    environ: Mapping[str, str] | None = None,
) -> BootConfig:
    """Read the boot configuration from INI, else JSON, else the environment."""
    base = Path(directory)
    config = BootConfig()
    try:
        entries = parse_ini(base / INI_NAME, 16)
    except OSError:
        entries = []
    if entries:
        for entry in entries:
            field = _INI_FIELDS.get((entry.section, entry.name))
            if field:
                config.apply(field, entry.path)
        return config

    text = _read_json(base / JSON_NAME)
    if text is not None:
        for item in parse_config_json(text, 32):
            field = _JSON_FIELDS.get(item.key)
            if field:
                config.apply(field, item.value)
        return config

    for variable, field in _ENV_FIELDS.items():
        value = config_env_get(variable, environ, 256)
        if value is not None:
            config.apply(field, value)
    return config


def _after_equals(line: str) -> str | None:
    head, sep, tail = line.partition("=")
    if not sep or not head:
        return None
    return tail


def load_theme_config(directory: str | os.PathLike[str] = ".") -> tuple[BootMenuTheme, str]:
    """Read theme colours and language from INI or JSON.

    Colours not given are 0; the language defaults to ``en``. The background
    image is kept as its file name.
    """
    base = Path(directory)
    values: dict[str, object] = {key: 0 for key in _THEME_KEYS}
    values["background_image"] = None
    language = "en"
    try:
        with open(base / INI_NAME, encoding="utf-8", errors="replace") as handle:
            lines = handle.readlines()
    except OSError:
        lines = None

    if lines is not None:
        for line in lines:
            rest = _after_equals(line)
            for key in _THEME_KEYS:
                if f"theme_{key}" in line and rest is not None:
                    color = _hex(rest)
                    if color is not None:
                        values[key] = color
            if "theme_background_image" in line and rest is not None:
                image = _word(rest, 127)
                if image is not None:
                    values["background_image"] = image
            if "language" in line and rest is not None:
                word = _word(rest, 7)
                if word is not None:
                    language = word
    else:
        text = _read_json(base / JSON_NAME)
        if text is not None:
            for item in parse_config_json(text, 64):
                name = item.key.removeprefix("theme.") if item.key.startswith("theme.") else None
                if name in _THEME_KEYS:
                    values[name] = _hex(item.value) or 0
                elif name == "background_image":
                    values["background_image"] = item.value
                elif item.key == "language":
                    language = item.value[:7]

    return BootMenuTheme(**values), language


def default_boot_entries() -> list[tuple[str, BootAction]]:
    """The boot menu entries offered by default, in menu order."""
    return [
        ("Linux Kernel", BootAction(BootKind.LINUX, "/boot/vmlinuz", "/boot/initrd.img", _DEFAULT_CMDLINE)),
        ("Multiboot2 Kernel", BootAction(BootKind.MULTIBOOT2, "/boot/vmlinuz-mb2", "", _DEFAULT_CMDLINE)),
        ("Limine Kernel", BootAction(BootKind.LIMINE, "/boot/vmlinuz-limine", "", _DEFAULT_CMDLINE)),
        ("Chainload Bootloader", BootAction(BootKind.CHAINLOAD, "/boot/grub2.bin")),
        ("PXE Network Boot", BootAction(BootKind.PXE, "/boot/vmlinuz", "/boot/initrd.img", _DEFAULT_CMDLINE)),
        ("IA-32 (32-bit x86)", BootAction(BootKind.IA32, "/boot/vmlinuz-ia32", "/boot/initrd-ia32.img", _DEFAULT_CMDLINE)),
        ("x86-64 (64-bit x86)", BootAction(BootKind.X86_64, "/boot/vmlinuz-x86_64", "/boot/initrd-x86_64.img", _DEFAULT_CMDLINE)),
        ("ARM64 (aarch64)", BootAction(BootKind.AARCH64, "/boot/Image-aarch64", "/boot/initrd-aarch64.img", _DEFAULT_CMDLINE)),
        ("RISC-V 64", BootAction(BootKind.RISCV64, "/boot/Image-riscv64", "/boot/initrd-riscv64.img", _DEFAULT_CMDLINE)),
        ("LoongArch 64", BootAction(BootKind.LOONGARCH64, "/boot/Image-loongarch64", "/boot/initrd-loongarch64.img", _DEFAULT_CMDLINE)),
        ("Recovery Shell", BootAction(BootKind.RECOVERY_SHELL)),
        ("UEFI Shell", BootAction(BootKind.UEFI_SHELL)),
        ("Exit to UEFI Firmware", BootAction(BootKind.FIRMWARE)),
    ]


def _parse_key(text: str) -> Key:
    command = text.strip().lower()
    if not command:
        return Key(char="\r")
    if command == "up":
        return Key(scan_code=SCAN_UP)
    if command == "down":
        return Key(scan_code=SCAN_DOWN)
    if command == "esc":
        return Key(scan_code=SCAN_ESC)
    return Key(char=text.strip()[0])


def _read_keys(menu: BootMenu, stdin: TextIO, stdout: TextIO) -> Iterator[Key]:
    while True:
        stdout.write(menu.render_text() + "\r\n> ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            return
        yield _parse_key(line.rstrip("\r\n"))


def main(argv: list[str] | None = None) -> int:
    """Show the boot menu on the console and load the selected kernel."""
    parser = argparse.ArgumentParser(prog="bloodhorn", description="Text-mode boot menu.")
    parser.add_argument("--directory", default=".", help="boot volume root")
    args = parser.parse_args(argv)
    directory = Path(args.directory)
    stdin, stdout = sys.stdin, sys.stdout

    theme, _language = load_theme_config(directory)
    set_boot_menu_theme(theme)
    menu = BootMenu(load_localization_file(directory / "lang_en.txt"))
    for name, action in default_boot_entries():
        menu.add_entry(name, lambda n=name, a=action: (n, a))

    try:
        chosen = menu.run(_read_keys(menu, stdin, stdout))
    except MenuAborted:
        stdout.write("\r\n  Boot menu aborted.\r\n")
        return 1
    except EOFError:
        chosen = None

    if chosen is not None:
        name, action = chosen
        stdout.write(f"\r\n  Selected {name}\r\n")
        if action.kind is BootKind.RECOVERY_SHELL:
            shell = RescueShell(stdin, stdout)
            stdout.write(BANNER)
            shell.run()
            return 0
        try:
            image = load_and_verify_kernel(directory, KERNEL_IMAGE, {})
        except (OSError, SecurityViolation, KeyError):
            pass
        else:
            stdout.write(f"  Loaded {KERNEL_IMAGE} ({len(image)} bytes)\r\n")
            return 0

    stdout.write("\r\n  No bootable device found or kernel failed.\r\n")
    return 1