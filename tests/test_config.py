"""Tests for the config module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from doable.config import (
    complete_onboarding,
    get_db_path,
    load_config,
    reset_db_path,
    save_config,
    set_db_path,
    set_default_timer_minutes,
    set_notifications,
    set_theme,
)
from doable.models import AppConfig, Theme


@pytest.fixture(autouse=True)
def _tmp_config(tmp_path: Path):
    """Redirect config and default DB locations to tmp_path."""
    cfg_dir = tmp_path / "config"
    with patch("doable.config._CONFIG_DIR", cfg_dir), patch(
        "doable.config._CONFIG_FILE", cfg_dir / "config.json"
    ), patch("doable.config._DB_DIR", tmp_path / "data"):
        yield


class TestLoadSaveConfig:
    def test_load_default_when_missing(self) -> None:
        config = load_config()
        assert config.db_path is None
        assert config.theme == Theme.SYSTEM

    def test_save_and_load_roundtrip(self) -> None:
        cfg = AppConfig(db_path="/tmp/test.db", theme=Theme.DARK, default_timer_minutes=10)
        path = save_config(cfg)
        assert path.exists()

        loaded = load_config()
        assert loaded.db_path == "/tmp/test.db"
        assert loaded.theme == Theme.DARK
        assert loaded.default_timer_minutes == 10

    def test_load_handles_corrupt_file(self, tmp_path: Path) -> None:
        cfg_dir = tmp_path / "config"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text("not valid json{{{")
        config = load_config()
        assert config.db_path is None  # falls back to default

    def test_load_handles_invalid_values(self, tmp_path: Path) -> None:
        cfg_dir = tmp_path / "config"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text('{"default_timer_minutes": 99}')
        assert load_config().default_timer_minutes == 5


class TestDbPath:
    def test_default_path(self, tmp_path: Path) -> None:
        path = get_db_path()
        assert path.name == "doable.db"
        assert path.parent == tmp_path / "data"

    def test_set_db_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.db"
        cfg = set_db_path(str(custom))
        assert cfg.db_path == str(custom)
        assert get_db_path() == custom

    def test_set_db_path_directory(self, tmp_path: Path) -> None:
        d = tmp_path / "somedir"
        d.mkdir()
        cfg = set_db_path(str(d))
        assert cfg.db_path is not None
        assert cfg.db_path.endswith("doable.db")

    def test_reset_db_path(self, tmp_path: Path) -> None:
        set_db_path(str(tmp_path / "custom.db"))
        cfg = reset_db_path()
        assert cfg.db_path is None


class TestSettings:
    def test_default_timer_minutes(self) -> None:
        set_default_timer_minutes(25)
        assert load_config().default_timer_minutes == 25

    def test_default_timer_minutes_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            set_default_timer_minutes(60)
        assert load_config().default_timer_minutes == 5

    def test_theme(self) -> None:
        set_theme(Theme.LIGHT)
        assert load_config().theme == Theme.LIGHT

    def test_notifications(self) -> None:
        set_notifications(True)
        assert load_config().notifications_enabled is True
        set_notifications(False)
        assert load_config().notifications_enabled is False

    def test_onboarding(self) -> None:
        complete_onboarding()
        assert load_config().onboarding_completed is True

    def test_settings_do_not_clobber_each_other(self, tmp_path: Path) -> None:
        set_db_path(str(tmp_path / "x.db"))
        set_theme(Theme.DARK)
        set_default_timer_minutes(3)
        cfg = load_config()
        assert cfg.db_path is not None
        assert cfg.theme == Theme.DARK
        assert cfg.default_timer_minutes == 3
