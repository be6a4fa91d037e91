"""
播放器核心

整合所有播放相關功能：
- 選曲（使用 MusicSelector）
- 串流載入（使用 MusicLoader）
- 播放 / 淡出 / 間隔狀態機（由宿主每幀呼叫 tick()）
- 資料夾變更時更新曲庫（update_music_files，可由監看執行緒呼叫）
"""

import threading
from dataclasses import dataclass
from typing import Optional, Sequence, List
from loguru import logger

from .state import PlayerState, PlaybackClock
from .selector import MusicSelector
from .loader import MusicLoader, LoopStream
from ..backend.base import AudioBackend, Player
from ..constants import (
    DEFAULT_FPS,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_LOOP_DURATION_MINUTES,
    INTERVAL_RANGE,
    LOOP_DURATION_RANGE,
)
from ..utils.decorators import log_operation
from ..utils.errors import MusicError, NoMusicAvailableError, PlaybackError


@dataclass
class Track:
    """目前開啟的曲目（串流 + 播放控制代碼），同一時間最多一個"""

    path: str
    stream: object
    player: Player

    def close(self) -> None:
        """先關閉播放控制代碼，再關閉串流"""
        try:
            self.player.close()
        finally:
            closer = getattr(self.stream, "close", None)
            if closer is not None:
                closer()


def _clamp(value: float, bounds) -> float:
    low, high = bounds
    return max(low, min(high, float(value)))


class MusicPlayer:
    """
    播放器核心類別

    狀態轉移（每次 tick，暫停時不做任何事）：
        STOPPED    → 載入成功 → PLAYING
        PLAYING    → 播放滿 loop_frames → FADING_OUT
        FADING_OUT → 音量線性遞減，滿 fade_frames → 暫停並進入 INTERVAL
        INTERVAL   → 滿 interval_frames → 下一首並載入 → PLAYING

    除 update_music_files() 外，所有方法只應由宿主的更新迴圈呼叫。

    使用方式：
        player = MusicPlayer(backend, initial_files=files, fps=60)
        watcher.add_handler(player.update_music_files)

        # 宿主每幀呼叫
        player.tick()

        player.toggle_pause()
        player.skip_to_next()
        player.set_current_index(2)
    """

    def __init__(
        self,
        backend: AudioBackend,
        initial_files: Optional[Sequence[str]] = None,
        loader: Optional[MusicLoader] = None,
        fps: int = DEFAULT_FPS,
        loop_duration_minutes: float = DEFAULT_LOOP_DURATION_MINUTES,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        """
        初始化播放器，若初始清單有曲目則立即載入第一首

        Args:
            backend: 音訊後端
            initial_files: 初始掃描得到的檔案清單
            loader: 串流載入器（可選，預設 MusicLoader）
            fps: 宿主更新迴圈的幀率
            loop_duration_minutes: 每首播放時間（分）
            interval_seconds: 曲目間隔（秒）
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive: {fps}")

        self.backend = backend
        self.loader = loader or MusicLoader()
        self.selector = MusicSelector()
        self.clock = PlaybackClock(
            fps=fps,
            loop_duration_minutes=_clamp(loop_duration_minutes, LOOP_DURATION_RANGE),
            interval_seconds=_clamp(interval_seconds, INTERVAL_RANGE),
        )

        self._track: Optional[Track] = None
        self._state = PlayerState.STOPPED
        self._paused = False
        self._volume = 1.0
        self.last_error: Optional[MusicError] = None
        self._closed = False

        # 監看執行緒與更新迴圈共用
        self._lock = threading.RLock()

        logger.info(
            f"MusicPlayer 初始化: fps={fps}, "
            f"loop={self.clock.loop_duration_minutes} 分, "
            f"interval={self.clock.interval_seconds} 秒"
        )

        if self.selector.update(initial_files or []):
            if self._load_current() is None:
                logger.warning("初始曲目載入失敗，等待資料夾變更後重試")

    # === 屬性 ===

    @property
    def state(self) -> PlayerState:
        """目前狀態"""
        return self._state

    @property
    def is_paused(self) -> bool:
        """是否已暫停"""
        return self._paused

    @property
    def counter(self) -> int:
        """目前狀態的幀計數"""
        return self.clock.counter

    @property
    def volume(self) -> float:
        """目前音量（0.0 - 1.0）"""
        return self._volume

    @property
    def fps(self) -> int:
        return self.clock.fps

    @property
    def has_track(self) -> bool:
        """是否有開啟中的曲目"""
        return self._track is not None

    @property
    def current_path(self) -> Optional[str]:
        """目前選中的路徑"""
        return self.selector.current_file

    @property
    def current_index(self) -> int:
        """目前的索引，未選曲時為 -1"""
        return self.selector.current_index

    @property
    def music_files(self) -> List[str]:
        """曲庫清單（複本）"""
        return self.selector.files

    @property
    def loop_duration_minutes(self) -> float:
        return self.clock.loop_duration_minutes

    @property
    def interval_seconds(self) -> float:
        return self.clock.interval_seconds

    # === 設定 ===

    def set_loop_duration_minutes(self, minutes: float) -> float:
        """
        設定每首播放時間，超出 [1, 60] 時取邊界值

        Returns:
            實際套用的分鐘數
        """
        with self._lock:
            self.clock.loop_duration_minutes = _clamp(minutes, LOOP_DURATION_RANGE)
            logger.debug(f"播放時間: {self.clock.loop_duration_minutes} 分")
            return self.clock.loop_duration_minutes

    def set_interval_seconds(self, seconds: float) -> float:
        """
        設定曲目間隔，超出 [1, 60] 時取邊界值

        Returns:
            實際套用的秒數
        """
        with self._lock:
            self.clock.interval_seconds = _clamp(seconds, INTERVAL_RANGE)
            logger.debug(f"間隔時間: {self.clock.interval_seconds} 秒")
            return self.clock.interval_seconds

    # === 播放控制 ===

    def tick(self) -> None:
        """
        前進一幀並處理狀態轉移

        暫停或沒有開啟的曲目時不做任何事（計數器與狀態都不變）。
        """
        with self._lock:
            if self._closed or self._track is None or self._paused:
                return

            counter = self.clock.advance()

            match self._state:
                case PlayerState.PLAYING:
                    if counter >= self.clock.loop_frames:
                        self._enter(PlayerState.FADING_OUT)

                case PlayerState.FADING_OUT:
                    if counter >= self.clock.fade_frames:
                        self._track.player.pause()
                        self._enter(PlayerState.INTERVAL)
                    else:
                        self._volume = self.clock.fade_volume(counter)
                        self._track.player.set_volume(self._volume)

                case PlayerState.INTERVAL:
                    if counter >= self.clock.interval_frames:
                        self.skip_to_next()

    @log_operation("切換暫停")
    def toggle_pause(self) -> bool:
        """
        切換暫停/播放狀態

        間隔中恢復時不重新發聲，只讓計時繼續。

        Returns:
            切換後是否為暫停狀態（沒有開啟的曲目時為 False）
        """
        with self._lock:
            if self._track is None:
                return False

            if self._paused:
                self._paused = False
                if self._state in (PlayerState.PLAYING, PlayerState.FADING_OUT):
                    self._track.player.play()
                logger.debug("已恢復")
            else:
                self._paused = True
                self._track.player.pause()
                logger.debug("已暫停")
            return self._paused

    @log_operation("下一首")
    def skip_to_next(self) -> Optional[str]:
        """
        立即切換到下一首並載入（不論目前狀態與計時）

        只有一首時重新播放同一首。

        Returns:
            載入的路徑，失敗或曲庫為空時返回 None
        """
        with self._lock:
            if self._closed:
                return None
            self._volume = 1.0
            self.selector.select_next()
            if self.selector.current_file is None:
                logger.debug("沒有下一首了")
                return self._stop_with(NoMusicAvailableError())
            return self._load_current()

    @log_operation("選擇曲目")
    def set_current_index(self, index: int) -> Optional[str]:
        """
        選擇並載入指定索引的曲目

        Args:
            index: 0-based 索引

        Returns:
            載入的路徑，載入失敗時返回 None

        Raises:
            OutOfRangeError: 索引無效（狀態與選曲都不變）
        """
        with self._lock:
            if self._closed:
                return None
            self.selector.select_index(index)
            return self._load_current()

    def update_music_files(self, new_files: Sequence[str]) -> None:
        """
        資料夾變更時更新曲庫（可由監看執行緒呼叫）

        選曲索引改變時重新載入；曲庫變空時關閉曲目並停止。
        索引未變但該位置換成別的檔案，或先前載入失敗（沒有開啟的曲目）時也會重新載入。
        """
        with self._lock:
            if self._closed:
                logger.debug("播放器已關閉，忽略曲庫更新")
                return
            index_changed = self.selector.update(new_files)
            current = self.selector.current_file
            has_current = current is not None
            track_stale = has_current and (self._track is None or self._track.path != current)

            if index_changed or track_stale:
                if has_current:
                    if self._load_current() is None:
                        logger.warning("資料夾變更後載入失敗")
                else:
                    logger.info("曲庫已清空")
                    self._stop_with(NoMusicAvailableError())

    # === 狀態查詢 ===

    def get_status(self) -> dict:
        """
        取得播放器完整狀態（給宿主 UI 顯示）
        """
        with self._lock:
            return {
                "state": self._state,
                "is_paused": self._paused,
                "current_path": self.current_path,
                "current_index": self.current_index,
                "file_count": len(self.selector),
                "counter": self.clock.counter,
                "volume": self._volume,
                "loop_duration_minutes": self.clock.loop_duration_minutes,
                "interval_seconds": self.clock.interval_seconds,
                "progress": self.clock.progress(self._state),
                "remaining_seconds": self.clock.remaining_seconds(self._state),
                "time_display": self.clock.time_display(self._state),
                "progress_bar": self.clock.progress_bar(self._state),
                "error": self.last_error.user_message if self.last_error else None,
            }

    # === 內部方法 ===

    def _enter(self, state: PlayerState) -> None:
        logger.debug(f"狀態: {self._state.value} -> {state.value}")
        self._state = state
        self.clock.reset()

    def _load_current(self) -> Optional[str]:
        """
        載入選擇器目前的曲目並開始播放

        任何單一曲目的錯誤都不會拋出：記錄後停止並返回 None，
        之後資料夾變更或使用者選曲時可再恢復。

        Returns:
            載入的路徑，失敗返回 None
        """
        self._close_track()

        path = self.selector.current_file
        if path is None:
            return self._stop_with(NoMusicAvailableError())

        try:
            stream = self.loader.load_stream(path)
        except MusicError as e:
            return self._stop_with(e)

        try:
            loop_stream = LoopStream(stream, stream.length())
            audio_player = self.backend.new_player(loop_stream)
        except Exception as e:
            stream.close()
            return self._stop_with(PlaybackError(f"failed to create audio player for {path}: {e}"))

        self._track = Track(path=path, stream=stream, player=audio_player)
        self._volume = 1.0
        audio_player.set_volume(self._volume)

        self._paused = False
        self.last_error = None
        self._enter(PlayerState.PLAYING)
        audio_player.play()

        logger.info(f"開始播放: {path}")
        return path

    def _stop_with(self, error: MusicError) -> Optional[str]:
        """記錄錯誤並回到停止狀態，一律返回 None"""
        logger.warning(f"停止播放: {error.message}")
        self._close_track()
        self.last_error = error
        self._state = PlayerState.STOPPED
        self._paused = False
        self.clock.reset()
        return None

    def _close_track(self) -> None:
        """關閉目前曲目；即使關閉失敗也會放掉參照"""
        track = self._track
        if track is None:
            return
        try:
            track.close()
        except Exception as e:
            logger.warning(f"關閉曲目失敗 {track.path}: {e}")
        finally:
            self._track = None

    # === 清理 ===

    def close(self) -> None:
        """
        清理資源（程式結束時呼叫），可重複呼叫

        關閉後所有播放操作與曲庫更新都不再開啟新的曲目。
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._close_track()
            self._state = PlayerState.STOPPED
            self._paused = False
            self.clock.reset()
            logger.info("MusicPlayer 已清理")
