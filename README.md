# bloodhorn

A boot manager toolkit in pure Python. It reads a boot manager's
configuration, models the boot menu and draws it onto an in-memory
framebuffer, reads files from FAT32, ext2 and ISO 9660 disk images, builds
and parses DHCP, TFTP and ARP packets, checks RSA signatures on kernel
images, runs tiny stack scripts, and offers a small rescue shell.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `bloodhorn`

```
bloodhorn [--directory DIR]
```

Reads the theme and language from `bloodhorn.ini` or `bloodhorn.json` in
`DIR` (default: the current directory), loads menu strings from
`DIR/lang_en.txt` if present, and shows the boot menu as text on the
console. After each prompt, type one line:

- `up` or `down` to move the selection (wrapping at either end),
- `esc` to leave the menu (exit status 1),
- a single character to select the entry with that hotkey,
- an empty line to choose the selected entry.

Choosing "Recovery Shell" starts the rescue shell. Choosing any other entry
reads `kernel.efi` from `DIR` and reports its size; if it cannot be read,
the command prints "No bootable device found or kernel failed." and exits
with status 1.

### `bloodhorn-shell`

```
bloodhorn-shell
```

Starts the rescue shell on standard input and output until input ends. It
understands `help`, `ls`, `cat <file>`, `reboot` and `clear`. No file
system is attached to it: `ls` answers "Filesystem not mounted", `cat`
reports the file as not found, and `reboot` only prints "Rebooting..."
(a callback can be passed as `RescueShell(on_reboot=...)`).

## Using the library

### Configuration

`bloodhorn.app.load_boot_config(directory, environ)` returns a
`BootConfig` (default entry, menu timeout, kernel, initrd, command line)
from `bloodhorn.ini`, else `bloodhorn.json`, else the `BLOODHORN_DEFAULT`,
`BLOODHORN_MENU_TIMEOUT`, `BLOODHORN_LINUX_KERNEL`,
`BLOODHORN_LINUX_INITRD` and `BLOODHORN_LINUX_CMDLINE` variables.
`load_theme_config(directory)` returns a `BootMenuTheme` and a language
code, and `default_boot_entries()` lists the menu entries offered by
default.

The parsers can be used directly:

```python
from bloodhorn.config_ini import parse_ini_text
from bloodhorn.config_json import parse_config_json

ini_entries = parse_ini_text("[boot]\ndefault=linux\n", 16)
json_entries = parse_config_json('{"boot": {"menu_timeout": 5}}', 32)
# json_entries == [JsonEntry(key="boot.menu_timeout", value="5")]
```

The JSON parser is deliberately lenient: nested objects become dotted keys,
and a quoted string value keeps its closing quote.
`bloodhorn.config_env.config_env_get` looks up environment variables, and
`bloodhorn.config_validate.validate_key` / `validate_value` check for
non-empty printable ASCII.

### Boot menu

`bloodhorn.menu.BootMenu` holds entries (at most 128), the selection, a
ten-row scroll window and hotkeys (`assign_hotkeys`, `select_hotkey`). It
handles `Key` presses (`handle_key`, raising `MenuAborted` on Escape) and
pointer clicks (`handle_mouse`), renders itself as console text
(`render_text`) or paints onto a `bloodhorn.graphics.Framebuffer` with a
`bloodhorn.theme.BootMenuTheme` (`draw`, which returns the text labels to
print). `bloodhorn.mouse.Mouse` turns readings from a pointing device into
a `MouseState`. `Framebuffer.initialize` picks the video mode with the
largest area.

### File systems

`bloodhorn.fs_common.SectorDevice` reads 512-byte sectors from an image in
memory. On top of it:

- `bloodhorn.fat32`: `read_bootsector`, `find_file` (11-character 8.3 names
  in the root directory), `read_file`;
- `bloodhorn.ext2`: `read_superblock`, `find_file_in_root`, `list_root`,
  `read_file` (direct blocks only);
- `bloodhorn.iso9660`: `read_file` by `/`-separated path;
- `bloodhorn.fs_mount`: `mount_fat32`, `mount_ext2`, `mount_iso9660`;
- `bloodhorn.shell_fs`: `ls_*` and `cat_*` output for FAT32 and ext2.

Missing files raise `FileNotFoundError`.

### Network boot

`bloodhorn.dhcp` builds discover, renew and release packets and parses
offers into a `DhcpOffer`; `bloodhorn.tftp` builds read requests and parses
DATA and OACK packets; `bloodhorn.arp` builds requests and resolves
addresses over a link object with `send`/`recv`. `bloodhorn.pxe.PxeClient`
drives a caller-supplied PXE stack object to download a kernel and initrd
and returns a `BootImage` whose format `detect_kernel_format` recognises
(Linux, Multiboot 1 and 2, Limine); `icmp_echo` measures a round trip.
`bloodhorn.shell_net` formats `ping` and `ifconfig` output.

### Security

`bloodhorn.crypto` provides `sha256_hash`, `hmac_sha256`,
`xor_encrypt_block` (a plain 16-byte XOR, not a cipher) and
`verify_signature` / `secure_boot_verify` for 2048-bit RSA PKCS#1 v1.5
SHA-256 signatures with a raw key (4 header bytes, 256-byte exponent,
256-byte modulus). `bloodhorn.secure.verify_image_signature` checks a
signature appended to an image against a PEM or DER RSA key, and
`load_and_verify_kernel` reads an image and verifies it with the `PK`
variable when the `SecureBoot` variable is 1, raising `SecurityViolation`
on failure.

### Scripting and plugins

`bloodhorn.scripting.ScriptVM` runs small stack scripts with `push`, `add`,
`sub` and `call`:

```python
from bloodhorn.scripting import ScriptVM

vm = ScriptVM()
print(vm.execute("push 2 push 3 add"))  # 5
```

`ScriptApi` and `ScriptEnv` hold named host functions and script variables;
`load_script` reads a script file. `bloodhorn.plugins.PluginManager` keeps
`Plugin` objects and runs their init and cleanup hooks;
`PluginRegistry` and `load_plugin_file` store raw plugin images.

## What it does not do

This package runs as an ordinary Python program. It does not run from
firmware, drive real disks, network cards or pointing devices, or hand
control to a kernel: the `bloodhorn` command only loads `kernel.efi` and
reports it. Sector devices, Ethernet links, PXE stacks and pointing devices
are objects the caller supplies, and plugins are Python objects or raw
bytes, not code loaded from shared libraries.