"""
音訊後端介面

播放器核心只透過這兩個介面操作音訊裝置，任何實作相同方法的
物件都可替換使用（測試時用假後端）。
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Player(Protocol):
    """可播放的音訊控制代碼"""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def close(self) -> None: ...

    def set_volume(self, volume: float) -> None: ...


@runtime_checkable
class AudioBackend(Protocol):
    """由串流建立 Player 的工廠"""

    def new_player(self, stream) -> Player:
        """
        Args:
            stream: 提供 read(frames)、sample_rate、channels 的串流

        Raises:
            Exception: 後端無法建立播放器時（由播放器轉為 PlaybackError）
        """
        ...
