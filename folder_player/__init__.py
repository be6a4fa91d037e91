"""
資料夾試聽播放器模組

提供:
- 遞迴掃描音樂資料夾
- 依序播放，定時淡出並自動切換下一首
- 資料夾即時監看，新增 / 刪除檔案時更新曲庫
- 可替換的音訊後端
"""

# Core
from .core.selector import MusicSelector
from .core.loader import AudioFormat, AudioStream, LoopStream, MusicLoader, SUPPORTED_EXTENSIONS
from .core.state import PlayerState, PlaybackClock
from .core.player import MusicPlayer, Track

# Library
from .library.directory import MusicDirectory
from .library.watcher import DirectoryWatcher

# Backend
from .backend.base import AudioBackend, Player

# Config
from .config import Settings, debug_enabled

# Utils
from .utils.errors import (
    MusicError,
    NoMusicAvailableError,
    SelectionError,
    OutOfRangeError,
    TrackLoadError,
    UnsupportedFormatError,
    DecodeError,
    PlaybackError,
    WatcherInitError,
)
from .utils.decorators import handle_errors, log_operation

# Constants
from .constants import (
    # 資料夾
    DEFAULT_MUSIC_DIR,
    # 計時
    DEFAULT_FPS,
    FADE_OUT_SECONDS,
    DEFAULT_LOOP_DURATION_MINUTES,
    LOOP_DURATION_RANGE,
    DEFAULT_INTERVAL_SECONDS,
    INTERVAL_RANGE,
    # 監看
    WATCH_DEBOUNCE_INTERVAL,
)

__all__ = [
    # Core
    "MusicSelector",
    "AudioFormat",
    "AudioStream",
    "LoopStream",
    "MusicLoader",
    "SUPPORTED_EXTENSIONS",
    "PlayerState",
    "PlaybackClock",
    "MusicPlayer",
    "Track",
    # Library
    "MusicDirectory",
    "DirectoryWatcher",
    # Backend
    "AudioBackend",
    "Player",
    # Config
    "Settings",
    "debug_enabled",
    # Utils
    "MusicError",
    "NoMusicAvailableError",
    "SelectionError",
    "OutOfRangeError",
    "TrackLoadError",
    "UnsupportedFormatError",
    "DecodeError",
    "PlaybackError",
    "WatcherInitError",
    "handle_errors",
    "log_operation",
    # Constants
    "DEFAULT_MUSIC_DIR",
    "DEFAULT_FPS",
    "FADE_OUT_SECONDS",
    "DEFAULT_LOOP_DURATION_MINUTES",
    "LOOP_DURATION_RANGE",
    "DEFAULT_INTERVAL_SECONDS",
    "INTERVAL_RANGE",
    "WATCH_DEBOUNCE_INTERVAL",
]
