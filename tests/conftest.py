import numpy as np
import pytest

from folder_player import DecodeError, MusicPlayer


class FakeStream:
    """記憶體中的假串流"""

    def __init__(self, path, frames=100, channels=2, sample_rate=8000):
        self.path = path
        self.frames = frames
        self.channels = channels
        self.sample_rate = sample_rate
        self.closed = False
        self._pos = 0

    def length(self):
        return self.frames

    def read(self, frames):
        n = max(0, min(frames, self.frames - self._pos))
        self._pos += n
        return np.zeros((n, self.channels), dtype="float32")

    def seek(self, frame, whence=0):
        self._pos = frame
        return frame

    def close(self):
        self.closed = True


class FakeAudioPlayer:
    """記錄所有呼叫的假播放器"""

    def __init__(self, stream):
        self.stream = stream
        self.playing = False
        self.closed = False
        self.volume = None
        self.volume_history = []
        self.play_calls = 0

    def play(self):
        self.playing = True
        self.play_calls += 1

    def pause(self):
        self.playing = False

    def close(self):
        self.playing = False
        self.closed = True

    def set_volume(self, volume):
        self.volume = volume
        self.volume_history.append(volume)


class FakeBackend:
    def __init__(self):
        self.players = []
        self.fail = False

    def new_player(self, stream):
        if self.fail:
            raise RuntimeError("no audio device")
        player = FakeAudioPlayer(stream)
        self.players.append(player)
        return player

    @property
    def last(self):
        return self.players[-1] if self.players else None


class FakeLoader:
    def __init__(self):
        self.broken = set()
        self.streams = []

    def load_stream(self, path):
        if path in self.broken:
            raise DecodeError(path, "invalid header")
        stream = FakeStream(path)
        self.streams.append(stream)
        return stream


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def loader():
    return FakeLoader()


@pytest.fixture
def make_player(backend, loader):
    def factory(files=("a.wav", "b.wav"), **kwargs):
        return MusicPlayer(backend, initial_files=list(files), loader=loader, **kwargs)
    return factory


@pytest.fixture
def run_ticks():
    def run(player, count):
        for _ in range(count):
            player.tick()
    return run
