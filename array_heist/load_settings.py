import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logging.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class HeistSettings:
    slot_count: int = 10
    time_limit: int = 60
    default_level: int = 2
    scan_delay_ms: int = 420
    scan_stale_ms: int = 5000
    highlight_ms: int = 350
    tick_interval_ms: int = 250
    session_ttl_minutes: int = 120
    auto_check_win: bool = False
    log_level: str = "INFO"


def load_settings() -> HeistSettings:
    defaults = HeistSettings()
    return HeistSettings(
        slot_count=_int_env("HEIST_SLOT_COUNT", defaults.slot_count),
        time_limit=_int_env("HEIST_TIME_LIMIT", defaults.time_limit),
        default_level=_int_env("HEIST_DEFAULT_LEVEL", defaults.default_level),
        scan_delay_ms=_int_env("HEIST_SCAN_DELAY_MS", defaults.scan_delay_ms),
        scan_stale_ms=_int_env("HEIST_SCAN_STALE_MS", defaults.scan_stale_ms),
        highlight_ms=_int_env("HEIST_HIGHLIGHT_MS", defaults.highlight_ms),
        tick_interval_ms=_int_env("HEIST_TICK_INTERVAL_MS", defaults.tick_interval_ms),
        session_ttl_minutes=_int_env("HEIST_SESSION_TTL_MINUTES", defaults.session_ttl_minutes),
        auto_check_win=_bool_env("HEIST_AUTO_CHECK_WIN", defaults.auto_check_win),
        log_level=os.getenv("HEIST_LOG_LEVEL", defaults.log_level).upper(),
    )


settings = load_settings()

if __name__ == "__main__":
    print(settings)
