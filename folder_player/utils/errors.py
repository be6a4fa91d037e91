"""
資料夾播放器統一錯誤系統

所有錯誤都繼承自 MusicError，包含：
- message: 技術性錯誤訊息（給開發者 / log）
- user_message: 使用者友善的訊息（給宿主 UI 顯示）
"""

from typing import Optional


class MusicError(Exception):
    """播放器錯誤基類"""
    
    def __init__(self, message: str, user_message: Optional[str] = None):
        self.message = message
        self.user_message = user_message or message
        super().__init__(self.message)
    
    def __str__(self) -> str:
        return self.message


class NoMusicAvailableError(MusicError):
    """曲庫為空或尚未選曲"""
    
    def __init__(self):
        super().__init__(
            message="No music file selected",
            user_message="資料夾內沒有可播放的音樂"
        )


class SelectionError(MusicError):
    """選曲操作錯誤"""
    pass


class OutOfRangeError(SelectionError):
    """指定的索引超出曲庫範圍"""
    
    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(
            message=f"selector index out of range: {index} (count: {count})",
            user_message=f"沒有第 {index} 首（共 {count} 首）"
        )


class TrackLoadError(MusicError):
    """單一曲目載入失敗（不影響其他曲目）"""
    
    def __init__(self, message: str, path: Optional[str] = None, user_message: Optional[str] = None):
        self.path = path
        super().__init__(
            message=message,
            user_message=user_message or "無法載入音樂檔案"
        )


class UnsupportedFormatError(TrackLoadError):
    """不支援的副檔名"""
    
    def __init__(self, path: str):
        super().__init__(
            message=f"loader: unsupported audio format: {path}",
            path=path,
            user_message="不支援的音樂格式（僅支援 WAV / OGG / MP3）"
        )


class DecodeError(TrackLoadError):
    """解碼器拒絕檔案內容"""
    
    def __init__(self, path: str, reason: str):
        self.reason = reason
        super().__init__(
            message=f"loader: failed to decode audio {path}: {reason}",
            path=path,
            user_message="音樂檔案損毀或無法解碼"
        )


class PlaybackError(MusicError):
    """音訊後端錯誤"""
    
    def __init__(self, message: str):
        super().__init__(
            message=message,
            user_message="播放時發生錯誤"
        )


class WatcherInitError(MusicError):
    """無法建立目錄監看"""
    
    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(
            message=message,
            user_message="無法監看音樂資料夾，檔案變更需重新啟動才會生效"
        )
