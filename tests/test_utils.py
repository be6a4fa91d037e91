import threading
import time

import pytest

from folder_player.utils import (
    DecodeError,
    MusicError,
    OutOfRangeError,
    ReadWriteLock,
    handle_errors,
    log_operation,
)


def test_errors_carry_user_message():
    err = OutOfRangeError(5, 2)

    assert isinstance(err, MusicError)
    assert "5" in err.message
    assert err.user_message != err.message
    assert str(err) == err.message


def test_decode_error_keeps_path_and_reason():
    err = DecodeError("musics/a.wav", "bad header")

    assert err.path == "musics/a.wav"
    assert err.reason == "bad header"
    assert "musics/a.wav" in str(err)


def test_handle_errors_reraises():
    @handle_errors
    def fails():
        raise OutOfRangeError(1, 0)

    with pytest.raises(OutOfRangeError):
        fails()


def test_log_operation_passes_result_through():
    @log_operation("加總")
    def add(a, b):
        return a + b

    assert add(1, 2) == 3
    assert add.__name__ == "add"


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=2.0)

    def reader():
        with lock.read_lock():
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=3.0)

    assert not any(t.is_alive() for t in threads)


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []

    def writer():
        with lock.write_lock():
            events.append("write-start")
            time.sleep(0.1)
            events.append("write-end")

    def reader():
        with lock.read_lock():
            events.append("read")

    w = threading.Thread(target=writer)
    w.start()
    time.sleep(0.02)
    r = threading.Thread(target=reader)
    r.start()
    w.join()
    r.join()

    assert events == ["write-start", "write-end", "read"]
