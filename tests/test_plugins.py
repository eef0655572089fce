import pytest

from bloodhorn.plugins import Plugin, PluginManager, PluginRegistry, load_plugin_file


def _tracked(name, version="1.0"):
    events = []
    plugin = Plugin(
        name,
        version,
        init=lambda: events.append("init"),
        cleanup=lambda: events.append("cleanup"),
    )
    return plugin, events


def test_register_runs_init_and_marks_loaded():
    manager = PluginManager()
    plugin, events = _tracked("demo")
    manager.register(plugin)
    assert events == ["init"]
    assert plugin.loaded is True


def test_load_runs_init_again():
    manager = PluginManager()
    plugin, events = _tracked("demo")
    manager.register(plugin)
    manager.load("demo")
    assert events == ["init", "init"]


def test_unload_runs_cleanup_and_removes():
    manager = PluginManager()
    plugin, events = _tracked("demo")
    manager.register(plugin)
    manager.unload("demo")
    assert events == ["init", "cleanup"]
    with pytest.raises(KeyError):
        manager.load("demo")


def test_unknown_plugin_raises():
    manager = PluginManager()
    with pytest.raises(KeyError):
        manager.unload("nothing")


def test_list_plugins():
    manager = PluginManager()
    manager.register(Plugin("demo", "1.0"))
    manager.register(Plugin("net", "2.3"))
    assert manager.list_plugins() == (
        "Loaded plugins:\n  demo v1.0 [LOADED]\n  net v2.3 [LOADED]\n"
    )


def test_list_plugins_empty():
    assert PluginManager().list_plugins() == "Loaded plugins:\n"


def test_manager_capacity():
    manager = PluginManager()
    for i in range(32):
        manager.register(Plugin(f"p{i}"))
    with pytest.raises(OverflowError):
        manager.register(Plugin("extra"))


def test_plugin_fields_truncated():
    plugin = Plugin("x" * 70, "v" * 20)
    assert plugin.name == "x" * 63
    assert plugin.version == "v" * 15


def test_registry_register_and_find():
    registry = PluginRegistry()
    registry.register("one", b"\x01\x02")
    assert registry.find("one") == b"\x01\x02"
    assert registry.find("two") is None


def test_registry_truncates_name():
    registry = PluginRegistry()
    key = registry.register("n" * 80, b"data")
    assert key == "n" * 63
    assert registry.find(key) == b"data"


def test_registry_capacity():
    registry = PluginRegistry()
    for i in range(16):
        registry.register(f"p{i}", b"")
    with pytest.raises(OverflowError):
        registry.register("extra", b"")


def test_load_plugin_file(tmp_path):
    path = tmp_path / "plugin.bin"
    payload = b"\x7fELF plugin"
    path.write_bytes(payload)
    registry = PluginRegistry()
    key = load_plugin_file(registry, path)
    assert str(path).startswith(key)
    assert registry.find(key) == payload


def test_load_plugin_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_plugin_file(PluginRegistry(), tmp_path / "absent.bin")