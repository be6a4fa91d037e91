"""
sounddevice 音訊後端

以 PortAudio 輸出串流播放，回調中由循環串流取出 float32 幀並乘上音量。
只由宿主程式匯入，核心與測試不需要 PortAudio。
"""

import threading
from typing import Optional

import numpy as np
import sounddevice as sd
from loguru import logger

from .base import Player


class SoundDevicePlayer(Player):
    """
    單一曲目的輸出串流

    使用方式：
        player = backend.new_player(loop_stream)
        player.set_volume(1.0)
        player.play()
        player.pause()
        player.close()
    """

    def __init__(self, source, blocksize: int = 1024, device: Optional[int] = None):
        self._source = source
        self._volume = 1.0
        self._lock = threading.Lock()
        self._closed = False
        self._stream = sd.OutputStream(
            samplerate=source.sample_rate,
            channels=source.channels,
            dtype="float32",
            blocksize=blocksize,
            device=device,
            callback=self._callback,
        )

    @property
    def volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        with self._lock:
            self._volume = max(0.0, min(1.0, float(volume)))

    def play(self) -> None:
        if not self._closed and not self._stream.active:
            self._stream.start()

    def pause(self) -> None:
        if not self._closed and self._stream.active:
            self._stream.stop()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._stream.close()

    def _callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        # 回調中不記錄 log，避免阻塞音訊執行緒
        with self._lock:
            volume = self._volume
            block = self._source.read(frames)
        outdata[:] = block * volume


class SoundDeviceBackend:
    """
    建立 SoundDevicePlayer 的後端

    Args:
        blocksize: 每次回調的幀數
        device: 輸出裝置編號，None 為系統預設
    """

    def __init__(self, blocksize: int = 1024, device: Optional[int] = None):
        self.blocksize = blocksize
        self.device = device
        logger.debug(f"SoundDeviceBackend 初始化: blocksize={blocksize}, device={device}")

    def new_player(self, stream) -> SoundDevicePlayer:
        return SoundDevicePlayer(stream, blocksize=self.blocksize, device=self.device)
