from bloodhorn.config_env import config_env_get


def test_exact_match():
    env = {"OTHER": "1", "BLOODHORN_DEFAULT": "linux"}
    assert config_env_get("BLOODHORN_DEFAULT", env) == "linux"


def test_missing_key_returns_none():
    assert config_env_get("BLOODHORN_DEFAULT", {"PATH": "/bin"}) is None


def test_name_that_prefixes_key_matches():
    env = {"BLOODHORN": "short", "BLOODHORN_DEFAULT": "long"}
    assert config_env_get("BLOODHORN_DEFAULT", env) == "short"


def test_longer_name_does_not_match_shorter_key():
    assert config_env_get("BLOOD", {"BLOODHORN": "x"}) is None


def test_value_truncated_to_maxlen():
    env = {"BLOODHORN_LINUX_CMDLINE": "root=/dev/sda1 ro"}
    assert config_env_get("BLOODHORN_LINUX_CMDLINE", env, 5) == "root"


def test_uses_process_environment(monkeypatch):
    monkeypatch.setenv("BLOODHORN_TEST_VALUE_QZX", "abc")
    assert config_env_get("BLOODHORN_TEST_VALUE_QZX") == "abc"