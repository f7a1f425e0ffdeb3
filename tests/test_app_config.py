from pathlib import Path

from tradelog.config.app_config import CONFIG_ENV_VAR, load_app_config


def test_defaults_when_file_missing(tmp_path):
    config = load_app_config(tmp_path / "missing.toml")
    assert config.app.db_path == Path("data/tradelog.sqlite")
    assert (config.app.host, config.app.port, config.app.reload) == ("127.0.0.1", 8000, False)
    assert config.journal.normalization == "raw"
    assert config.journal.default_instrument == "NQ!"
    assert config.journal.default_range == "all-time"
    assert config.calendar.week_start == "sunday"


def test_values_from_toml(tmp_path):
    path = tmp_path / "app.toml"
    path.write_text(
        """
[app]
db_path = "journal.sqlite"
port = 9001
reload = true

[journal]
normalization = "SIGNED"
default_instrument = "ES!"
default_range = "mtd"

[calendar]
week_start = "monday"
""",
        encoding="utf-8",
    )
    config = load_app_config(path)
    assert config.app.db_path == Path("journal.sqlite")
    assert config.app.port == 9001
    assert config.app.reload is True
    assert config.journal.normalization == "signed"
    assert config.journal.default_instrument == "ES!"
    assert config.journal.default_range == "month-to-date"
    assert config.calendar.week_start == "monday"


def test_invalid_choices_fall_back(tmp_path):
    path = tmp_path / "app.toml"
    path.write_text(
        '[journal]\nnormalization = "clamp"\ndefault_range = "forever"\n\n[calendar]\nweek_start = "friday"\n',
        encoding="utf-8",
    )
    config = load_app_config(path)
    assert config.journal.normalization == "raw"
    assert config.journal.default_range == "all-time"
    assert config.calendar.week_start == "sunday"


def test_env_var_selects_file(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text('[app]\nhost = "0.0.0.0"\n', encoding="utf-8")
    config = load_app_config(env={CONFIG_ENV_VAR: str(path)})
    assert config.app.host == "0.0.0.0"
