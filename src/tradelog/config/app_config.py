from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

from tradelog.entries import DEFAULT_INSTRUMENT, POLICIES, POLICY_RAW
from tradelog.metrics.calendar import WEEK_START_MONDAY, WEEK_START_SUNDAY
from tradelog.metrics.ranges import PRESET_ALL_TIME, normalize_preset

CONFIG_ENV_VAR = "TRADELOG_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/app.toml")


@dataclass(frozen=True)
class AppSettings:
    db_path: Path
    host: str
    port: int
    reload: bool


@dataclass(frozen=True)
class JournalSettings:
    normalization: str
    default_instrument: str
    default_range: str


@dataclass(frozen=True)
class CalendarSettings:
    week_start: str


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    journal: JournalSettings
    calendar: CalendarSettings


def load_app_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    environ = os.environ if env is None else env
    config_path = path or Path(environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    journal_raw = _section(raw, "journal")
    calendar_raw = _section(raw, "calendar")

    app = AppSettings(
        db_path=Path(app_raw.get("db_path", "data/tradelog.sqlite")),
        host=str(app_raw.get("host", "127.0.0.1")),
        port=int(app_raw.get("port", 8000)),
        reload=bool(app_raw.get("reload", False)),
    )

    journal = JournalSettings(
        normalization=_choice(journal_raw.get("normalization"), POLICIES, POLICY_RAW),
        default_instrument=str(journal_raw.get("default_instrument") or DEFAULT_INSTRUMENT),
        default_range=_preset_or_default(journal_raw.get("default_range")),
    )

    calendar = CalendarSettings(
        week_start=_choice(
            calendar_raw.get("week_start"),
            (WEEK_START_SUNDAY, WEEK_START_MONDAY),
            WEEK_START_SUNDAY,
        ),
    )

    return AppConfig(app=app, journal=journal, calendar=calendar)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _choice(value: Any, allowed: tuple[str, ...], default: str) -> str:
    if value is None:
        return default
    cleaned = str(value).strip().lower()
    return cleaned if cleaned in allowed else default


def _preset_or_default(value: Any) -> str:
    if not value:
        return PRESET_ALL_TIME
    try:
        return normalize_preset(str(value))
    except ValueError:
        return PRESET_ALL_TIME
