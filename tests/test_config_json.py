from bloodhorn.config_json import JsonEntry, parse_config_json


def test_nested_objects_flatten_to_dotted_keys():
    text = '{"boot": {"menu_timeout": 5}, "linux": {"kernel": 7}}'
    assert parse_config_json(text) == [
        JsonEntry("boot.menu_timeout", "5"),
        JsonEntry("linux.kernel", "7"),
    ]


def test_quoted_value_keeps_closing_quote():
    entries = parse_config_json('{"boot": {"default": "linux", "x": 1}}')
    assert entries[0] == JsonEntry("boot.default", 'linux"')


def test_newline_terminates_value():
    entries = parse_config_json('{\n"a": 1\n}')
    assert entries == [JsonEntry("a", "1")]


def test_no_object_gives_nothing():
    assert parse_config_json("no braces here") == []


def test_max_entries_limit():
    text = "{" + ", ".join(f'"k{i}": {i}' for i in range(6)) + "}"
    entries = parse_config_json(text, 2)
    assert [e.key for e in entries] == ["k0", "k1"]


def test_long_key_is_skipped():
    long_key = "k" * 32
    entries = parse_config_json('{"' + long_key + '": 1, "ok": 2}')
    assert entries == [JsonEntry("ok", "2")]


def test_long_value_is_skipped():
    entries = parse_config_json('{"a": ' + "9" * 128 + ', "b": 3}')
    assert entries == [JsonEntry("b", "3")]


def test_full_key_is_truncated():
    section = "s" * 20
    key = "k" * 20
    entries = parse_config_json('{"' + section + '": {"' + key + '": 1}}')
    assert len(entries[0].key) == 31
    assert entries[0].key.startswith(section + ".")