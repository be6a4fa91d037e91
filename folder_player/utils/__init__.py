# Utils module
from .errors import (
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
from .decorators import handle_errors, log_operation
from .rwlock import ReadWriteLock

__all__ = [
    # Errors
    "MusicError",
    "NoMusicAvailableError",
    "SelectionError",
    "OutOfRangeError",
    "TrackLoadError",
    "UnsupportedFormatError",
    "DecodeError",
    "PlaybackError",
    "WatcherInitError",
    # Decorators
    "handle_errors",
    "log_operation",
    # Locks
    "ReadWriteLock",
]
