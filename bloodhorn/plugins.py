"""Plugin management and a registry of raw plugin images."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass

MAX_PLUGINS = 32
REGISTRY_SLOTS = 16
NAME_MAX = 63
VERSION_MAX = 15


@dataclass
class Plugin:
    """A plugin's name, version and lifecycle hooks."""

    name: str
    version: str = ""
    init: Callable[[], None] | None = None
    cleanup: Callable[[], None] | None = None
    loaded: bool = False

    def __post_init__(self) -> None:
        self.name = self.name[:NAME_MAX]
        self.version = self.version[:VERSION_MAX]


class PluginManager:
    """Keeps registered plugins and runs their hooks."""

    def __init__(self) -> None:
        self._plugins: list[Plugin] = []

    def _find(self, name: str) -> Plugin:
        for plugin in self._plugins:
            if plugin.name == name:
                return plugin
        raise KeyError(name)

    def register(self, plugin: Plugin) -> None:
        """Add ``plugin`` and run its init hook; raises ``OverflowError`` when full."""
        if len(self._plugins) >= MAX_PLUGINS:
            raise OverflowError("too many plugins")
        if plugin.init is not None:
            plugin.init()
        plugin.loaded = True
        self._plugins.append(plugin)

    def load(self, name: str) -> None:
        """Run the init hook of the plugin called ``name`` again."""
        plugin = self._find(name)
        if plugin.init is not None:
            plugin.init()
        plugin.loaded = True

    def unload(self, name: str) -> None:
        """Run the cleanup hook of ``name`` and remove it."""
        plugin = self._find(name)
        if plugin.cleanup is not None:
            plugin.cleanup()
        plugin.loaded = False
        self._plugins.remove(plugin)

    def list_plugins(self) -> str:
        """A listing of the registered plugins."""
        lines = ["Loaded plugins:\n"]
        lines.extend(f"  {p.name} v{p.version} [LOADED]\n" for p in self._plugins)
        return "".join(lines)


class PluginRegistry:
    """Raw plugin images keyed by name."""

    def __init__(self) -> None:
        self._entries: list[tuple[str, bytes]] = []

    def register(self, name: str, data: bytes) -> str:
        """Store ``data`` and return the (possibly shortened) name it is kept under."""
        if len(self._entries) >= REGISTRY_SLOTS:
            raise OverflowError("plugin registry is full")
        key = name[:NAME_MAX]
        self._entries.append((key, bytes(data)))
        return key

    def find(self, name: str) -> bytes | None:
        """Return the first image registered as ``name``, or ``None``."""
        return next((data for key, data in self._entries if key == name), None)


def load_plugin_file(registry: PluginRegistry, path: str | os.PathLike[str]) -> str:
    """Read a plugin file into ``registry`` under its path; returns the key used."""
    with open(path, "rb") as handle:
        data = handle.read()
    return registry.register(os.fspath(path), data)