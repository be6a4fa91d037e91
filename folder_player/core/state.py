"""
播放狀態與計時

時間以固定幀率的幀數計算，而非時間戳。暫停時計數器不前進，
恢復後的進度完全由幀數決定，不受實際經過時間影響。
"""

from dataclasses import dataclass
from enum import Enum

from ..constants import (
    DEFAULT_FPS,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_LOOP_DURATION_MINUTES,
    FADE_OUT_SECONDS,
    PROGRESS_BAR_EMPTY,
    PROGRESS_BAR_FILLED,
    PROGRESS_BAR_LENGTH,
)


class PlayerState(Enum):
    """播放器狀態（同一時間只會有一個）"""

    STOPPED = "stopped"
    PLAYING = "playing"
    FADING_OUT = "fading_out"
    INTERVAL = "interval"


@dataclass
class PlaybackClock:
    """
    幀計數器與時間長度設定

    counter 在每次進入新狀態時歸零，意義依狀態而定：
    播放中為已播放幀數、淡出中為淡出幀數、間隔中為靜音幀數。

    使用方式：
        clock = PlaybackClock(fps=60)
        clock.loop_frames          # 5 分鐘 = 18000 幀
        clock.advance()            # 每次更新 +1
        clock.fade_volume(60)      # 0.5
        clock.time_display(PlayerState.PLAYING)  # "0:01 / 5:00"
    """

    fps: int = DEFAULT_FPS
    loop_duration_minutes: float = DEFAULT_LOOP_DURATION_MINUTES
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    fade_out_seconds: float = FADE_OUT_SECONDS
    counter: int = 0

    def reset(self) -> None:
        """計數器歸零（進入新狀態時呼叫）"""
        self.counter = 0

    def advance(self) -> int:
        """前進一幀，返回新的計數值"""
        self.counter += 1
        return self.counter

    # === 幀數換算 ===

    @property
    def loop_frames(self) -> int:
        """播放多少幀後開始淡出"""
        return int(self.loop_duration_minutes * 60 * self.fps)

    @property
    def fade_frames(self) -> int:
        """淡出持續幀數"""
        return int(self.fade_out_seconds * self.fps)

    @property
    def interval_frames(self) -> int:
        """曲目間隔幀數"""
        return int(self.interval_seconds * self.fps)

    def fade_volume(self, counter: int = None) -> float:
        """
        淡出音量（線性，由 1.0 降到 0.0）

        Args:
            counter: 淡出已進行的幀數，None 則使用目前計數
        """
        if counter is None:
            counter = self.counter
        frames = self.fade_frames
        if frames <= 0:
            return 0.0
        return max(0.0, min(1.0, 1.0 - counter / frames))

    # === 顯示用 ===

    @property
    def elapsed_seconds(self) -> int:
        """目前狀態已經過的秒數"""
        return self.counter // self.fps if self.fps > 0 else 0

    def remaining_seconds(self, state: PlayerState) -> int:
        """
        剩餘秒數

        播放中為淡出前的剩餘時間，間隔中為下一首開始前的倒數，
        其他狀態為 0。
        """
        if state == PlayerState.PLAYING:
            total = int(self.loop_duration_minutes * 60)
        elif state == PlayerState.INTERVAL:
            total = int(self.interval_seconds)
        else:
            return 0
        return max(0, total - self.elapsed_seconds)

    def progress(self, state: PlayerState) -> float:
        """
        播放進度

        Returns:
            0.0 - 1.0（播放中依幀數計算，淡出中固定為 1.0）
        """
        if state == PlayerState.PLAYING:
            frames = self.loop_frames
            if frames <= 0:
                return 1.0
            return min(1.0, self.counter / frames)
        if state == PlayerState.FADING_OUT:
            return 1.0
        return 0.0

    @staticmethod
    def format_time(seconds: int) -> str:
        """格式化時間為 M:SS 或 H:MM:SS"""
        seconds = max(0, int(seconds))
        if seconds >= 3600:
            hours = seconds // 3600
            minutes = (seconds % 3600) // 60
            secs = seconds % 60
            return f"{hours}:{minutes:02d}:{secs:02d}"
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes}:{secs:02d}"

    def progress_bar(self, state: PlayerState, length: int = PROGRESS_BAR_LENGTH) -> str:
        """
        生成進度條字串

        Returns:
            例如：「▓▓▓▓▓▓░░░░░░░░░」
        """
        filled = int(self.progress(state) * length)
        return PROGRESS_BAR_FILLED * filled + PROGRESS_BAR_EMPTY * (length - filled)

    def time_display(self, state: PlayerState) -> str:
        """
        生成時間顯示文字

        Returns:
            播放中：「1:23 / 5:00」
            淡出中：「淡出中...」
            間隔中：「下一首倒數: 8 秒」
            停止：空字串
        """
        if state == PlayerState.PLAYING:
            total = int(self.loop_duration_minutes * 60)
            return f"{self.format_time(self.elapsed_seconds)} / {self.format_time(total)}"
        if state == PlayerState.FADING_OUT:
            return "淡出中..."
        if state == PlayerState.INTERVAL:
            return f"下一首倒數: {self.remaining_seconds(state)} 秒"
        return ""
