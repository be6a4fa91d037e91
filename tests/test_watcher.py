import os
import threading
import time

import pytest

from folder_player import WATCH_DEBOUNCE_INTERVAL, DirectoryWatcher, MusicDirectory


class Recorder:
    """收集處理函式的呼叫"""

    def __init__(self):
        self.calls = []
        self.event = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, files):
        with self._lock:
            self.calls.append(files)
        self.event.set()

    def wait(self, timeout=5.0):
        fired = self.event.wait(timeout)
        self.event.clear()
        return fired


@pytest.fixture
def watcher(tmp_path):
    w = DirectoryWatcher.watch(tmp_path, debounce_interval=0.2)
    yield w
    w.close()


def test_rapid_events_for_same_path_trigger_one_rescan(tmp_path, watcher):
    recorder = Recorder()
    watcher.add_handler(recorder)
    path = str(tmp_path / "song.wav")

    watcher._enqueue(path)
    watcher._enqueue(path)

    assert recorder.wait()
    time.sleep(0.6)
    assert len(recorder.calls) == 1


def test_default_window_merges_save_burst_into_one_rescan(tmp_path):
    recorder = Recorder()
    path = tmp_path / "song.wav"

    with DirectoryWatcher.watch(tmp_path) as watcher:
        assert watcher.debounce_interval == WATCH_DEBOUNCE_INTERVAL == 0.5
        watcher.add_handler(recorder)

        path.write_bytes(b"")
        time.sleep(0.1)
        path.unlink()
        time.sleep(0.1)
        path.write_bytes(b"")
        last_event = time.monotonic()

        assert recorder.wait()
        assert time.monotonic() - last_event >= 0.4
        time.sleep(1.0)

    assert len(recorder.calls) == 1
    assert recorder.calls[0] == [str(path)]


def test_events_after_window_trigger_again(tmp_path, watcher):
    recorder = Recorder()
    watcher.add_handler(recorder)
    path = str(tmp_path / "song.wav")

    watcher._enqueue(path)
    assert recorder.wait()
    watcher._enqueue(path)
    assert recorder.wait()

    assert len(recorder.calls) == 2


def test_hidden_paths_are_ignored(tmp_path, watcher):
    recorder = Recorder()
    watcher.add_handler(recorder)

    watcher._enqueue(str(tmp_path / ".song.wav.swp"))
    watcher._enqueue(str(tmp_path / ".cache"))

    assert not recorder.wait(timeout=0.8)
    assert recorder.calls == []


def test_handlers_receive_rescan_in_registration_order(tmp_path):
    (tmp_path / "a.wav").write_bytes(b"")
    (tmp_path / "readme.txt").write_bytes(b"")
    order = []
    done = threading.Event()

    def first(files):
        order.append(("first", files))

    def second(files):
        order.append(("second", files))
        done.set()

    with DirectoryWatcher.watch(tmp_path, debounce_interval=0.1) as watcher:
        watcher.add_handler(first)
        watcher.add_handler(second)
        watcher._enqueue(str(tmp_path / "a.wav"))
        assert done.wait(5.0)

    expected = [os.path.join(str(tmp_path), "a.wav")]
    assert order == [("first", expected), ("second", expected)]


def test_failing_handler_does_not_block_others(tmp_path, watcher):
    recorder = Recorder()

    def broken(files):
        raise RuntimeError("boom")

    watcher.add_handler(broken)
    watcher.add_handler(recorder)
    watcher._enqueue(str(tmp_path / "x.wav"))

    assert recorder.wait()
    assert watcher.is_running


def test_detects_new_file_on_disk(tmp_path, watcher):
    recorder = Recorder()
    watcher.add_handler(recorder)

    (tmp_path / "new.ogg").write_bytes(b"")

    expected = os.path.join(str(tmp_path), "new.ogg")
    deadline = time.monotonic() + 5.0
    while time.monotonic() < deadline:
        recorder.wait(timeout=0.5)
        if any(expected in files for files in recorder.calls):
            break
    assert any(expected in files for files in recorder.calls)


def test_detects_file_in_new_subdirectory(tmp_path, watcher):
    recorder = Recorder()
    watcher.add_handler(recorder)

    album = tmp_path / "album"
    album.mkdir()
    time.sleep(0.3)
    (album / "track.mp3").write_bytes(b"")

    expected = os.path.join(str(tmp_path), "album", "track.mp3")
    deadline = time.monotonic() + 5.0
    while time.monotonic() < deadline:
        recorder.wait(timeout=0.5)
        if recorder.calls and expected in recorder.calls[-1]:
            break
    assert expected in recorder.calls[-1]


def test_watch_creates_missing_directory(tmp_path):
    root = tmp_path / "musics"

    watcher = DirectoryWatcher.watch(MusicDirectory(root))
    try:
        assert root.is_dir()
        assert watcher.is_running
    finally:
        watcher.close()


def test_close_is_idempotent(tmp_path):
    recorder = Recorder()
    watcher = DirectoryWatcher.watch(tmp_path, debounce_interval=0.1)
    watcher.add_handler(recorder)

    watcher.close()
    watcher.close()

    assert watcher.closed
    assert not watcher.is_running
    watcher._enqueue(str(tmp_path / "late.wav"))
    assert not recorder.wait(timeout=0.3)
