import sys

import pytest
from loguru import logger

from folder_player import Settings, debug_enabled


def test_defaults_when_env_is_empty():
    settings = Settings.from_env({})

    assert settings.music_dir == "musics"
    assert settings.fps == 60
    assert settings.loop_duration_minutes == 5.0
    assert settings.interval_seconds == 10.0


def test_values_from_env():
    settings = Settings.from_env({
        "MUSIC_DIR": "/srv/previews",
        "FPS": "30",
        "LOOP_DURATION_MINUTES": "2.5",
        "INTERVAL_SECONDS": "4",
        "DEBUG": "Yes",
    })

    assert settings.music_dir == "/srv/previews"
    assert settings.fps == 30
    assert settings.loop_duration_minutes == 2.5
    assert settings.interval_seconds == 4.0


def test_invalid_values_fall_back_to_defaults():
    settings = Settings.from_env({
        "FPS": "fast",
        "LOOP_DURATION_MINUTES": "",
        "INTERVAL_SECONDS": "ten",
    })

    assert settings.fps == 60
    assert settings.loop_duration_minutes == 5.0
    assert settings.interval_seconds == 10.0


def test_out_of_range_durations_are_clamped():
    settings = Settings.from_env({
        "LOOP_DURATION_MINUTES": "120",
        "INTERVAL_SECONDS": "0.1",
    })

    assert settings.loop_duration_minutes == 60.0
    assert settings.interval_seconds == 1.0


def test_non_positive_fps_uses_default():
    assert Settings.from_env({"FPS": "0"}).fps == 60


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("MUSIC_DIR", "samples")
    monkeypatch.delenv("FPS", raising=False)

    assert Settings.from_env().music_dir == "samples"


@pytest.mark.parametrize("raw", ["inf", "-inf", "nan", "Infinity"])
def test_non_finite_values_fall_back_to_defaults(raw):
    settings = Settings.from_env({
        "FPS": raw,
        "LOOP_DURATION_MINUTES": raw,
        "INTERVAL_SECONDS": raw,
    })

    assert settings.fps == 60
    assert settings.loop_duration_minutes == 5.0
    assert settings.interval_seconds == 10.0


@pytest.mark.parametrize("raw, expected", [
    ("true", True),
    ("1", True),
    ("YES", True),
    ("false", False),
    ("", False),
])
def test_debug_enabled(raw, expected):
    assert debug_enabled({"DEBUG": raw}) is expected


def test_debug_enabled_reads_os_environ(monkeypatch):
    monkeypatch.setenv("DEBUG", "1")

    assert debug_enabled() is True


def test_settings_warnings_reach_log_file(tmp_path, monkeypatch):
    import main

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEBUG", raising=False)

    main.set_logger()
    try:
        Settings.from_env({"FPS": "inf"})
    finally:
        logger.remove()
        logger.add(sys.stderr)

    log_text = (tmp_path / "logs" / "system.log").read_text(encoding="utf-8")
    assert "FPS='inf'" in log_text
