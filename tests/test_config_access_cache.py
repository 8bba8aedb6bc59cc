from walletrpc.config import access
from walletrpc.config.schema import Config


def test_get_config_uses_cache_and_force_reload(monkeypatch):
    calls = {"n": 0}

    def _fake_load_config(_path=None):
        calls["n"] += 1
        cfg = Config()
        cfg.sync_period_seconds = 5.0 + calls["n"]
        return cfg

    monkeypatch.setattr(access, "load_config", _fake_load_config)
    access.clear_config_cache()

    first = access.get_config()
    second = access.get_config()
    third = access.get_config(force_reload=True)

    assert first is second
    assert third.sync_period_seconds != second.sync_period_seconds
    assert calls["n"] == 2


def test_clear_config_cache_for_one_path(monkeypatch, tmp_path):
    calls = {"n": 0}

    def _fake_load_config(_path=None):
        calls["n"] += 1
        return Config()

    monkeypatch.setattr(access, "load_config", _fake_load_config)
    access.clear_config_cache()

    path = tmp_path / "config.json"
    access.get_config(config_path=path)
    access.clear_config_cache(config_path=path)
    access.get_config(config_path=path)

    assert calls["n"] == 2
