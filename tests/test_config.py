from sync_failures.config import Settings


def test_settings_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "ORIGIN_TABLE_PATH", "METRICS_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.log_level == "INFO"
    assert settings.origin_table_path == ""
    assert settings.metrics_enabled is True


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    monkeypatch.setenv("ORIGIN_TABLE_PATH", "config/origin_table.yaml")
    monkeypatch.setenv("METRICS_ENABLED", "false")
    settings = Settings(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.origin_table_path == "config/origin_table.yaml"
    assert settings.metrics_enabled is False
