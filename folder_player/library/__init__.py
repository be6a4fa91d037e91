# Library module
from .directory import MusicDirectory
from .watcher import DirectoryWatcher, FileChangeHandler

__all__ = ["MusicDirectory", "DirectoryWatcher", "FileChangeHandler"]
