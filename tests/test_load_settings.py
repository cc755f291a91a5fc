from array_heist.load_settings import HeistSettings, load_settings


def test_defaults_without_environment(monkeypatch):
    for name in (
        "HEIST_SLOT_COUNT",
        "HEIST_TIME_LIMIT",
        "HEIST_DEFAULT_LEVEL",
        "HEIST_SCAN_DELAY_MS",
        "HEIST_SCAN_STALE_MS",
        "HEIST_AUTO_CHECK_WIN",
        "HEIST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    loaded = load_settings()
    assert loaded.slot_count == 10
    assert loaded.time_limit == 60
    assert loaded.default_level == 2
    assert loaded.scan_delay_ms == 420
    assert loaded.scan_stale_ms == 5000
    assert loaded.auto_check_win is False
    assert loaded.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HEIST_TIME_LIMIT", "30")
    monkeypatch.setenv("HEIST_AUTO_CHECK_WIN", "yes")
    monkeypatch.setenv("HEIST_LOG_LEVEL", "debug")
    loaded = load_settings()
    assert loaded.time_limit == 30
    assert loaded.auto_check_win is True
    assert loaded.log_level == "DEBUG"


def test_bad_integer_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("HEIST_SCAN_DELAY_MS", "fast")
    assert load_settings().scan_delay_ms == HeistSettings().scan_delay_ms
