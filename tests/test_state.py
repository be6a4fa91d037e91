import pytest

from folder_player import PlaybackClock, PlayerState


def test_frame_conversions():
    clock = PlaybackClock(fps=60, loop_duration_minutes=5, interval_seconds=10)

    assert clock.loop_frames == 18000
    assert clock.fade_frames == 120
    assert clock.interval_frames == 600


def test_fade_volume_is_linear():
    clock = PlaybackClock(fps=60)

    assert clock.fade_volume(0) == 1.0
    assert clock.fade_volume(60) == pytest.approx(0.5)
    assert clock.fade_volume(30) == pytest.approx(0.75)
    assert clock.fade_volume(120) == 0.0
    assert clock.fade_volume(500) == 0.0


def test_fade_volume_uses_counter_by_default():
    clock = PlaybackClock(fps=60)
    for _ in range(90):
        clock.advance()

    assert clock.fade_volume() == pytest.approx(0.25)


def test_reset():
    clock = PlaybackClock()
    clock.advance()
    clock.advance()

    clock.reset()

    assert clock.counter == 0


def test_format_time():
    assert PlaybackClock.format_time(0) == "0:00"
    assert PlaybackClock.format_time(75) == "1:15"
    assert PlaybackClock.format_time(3600) == "1:00:00"
    assert PlaybackClock.format_time(3725) == "1:02:05"


def test_remaining_seconds():
    clock = PlaybackClock(fps=60, loop_duration_minutes=1, interval_seconds=10)
    clock.counter = 60 * 20

    assert clock.remaining_seconds(PlayerState.PLAYING) == 40
    assert clock.remaining_seconds(PlayerState.FADING_OUT) == 0
    assert clock.remaining_seconds(PlayerState.STOPPED) == 0

    clock.counter = 60 * 3
    assert clock.remaining_seconds(PlayerState.INTERVAL) == 7


def test_progress():
    clock = PlaybackClock(fps=60, loop_duration_minutes=1)
    clock.counter = 900

    assert clock.progress(PlayerState.PLAYING) == pytest.approx(0.25)
    assert clock.progress(PlayerState.FADING_OUT) == 1.0
    assert clock.progress(PlayerState.INTERVAL) == 0.0
    assert clock.progress(PlayerState.STOPPED) == 0.0


def test_progress_bar():
    clock = PlaybackClock(fps=60, loop_duration_minutes=1)
    clock.counter = 1800

    bar = clock.progress_bar(PlayerState.PLAYING, length=10)

    assert bar == "▓" * 5 + "░" * 5


def test_time_display():
    clock = PlaybackClock(fps=60, loop_duration_minutes=5, interval_seconds=10)
    clock.counter = 60 * 83

    assert clock.time_display(PlayerState.PLAYING) == "1:23 / 5:00"
    assert clock.time_display(PlayerState.FADING_OUT) == "淡出中..."
    assert clock.time_display(PlayerState.STOPPED) == ""

    clock.counter = 60 * 2
    assert clock.time_display(PlayerState.INTERVAL) == "下一首倒數: 8 秒"
