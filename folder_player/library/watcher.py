"""
資料夾監看

流程：
1. watchdog 觀察者遞迴監看根目錄（含之後新建的子資料夾）
2. 建立 / 刪除 / 移動事件放入佇列
3. 事件迴圈依路徑防抖：同一路徑 500ms 內沒有新事件才觸發
4. 觸發時重新掃描整個資料夾，於分派執行緒依序呼叫所有處理函式

關閉時設定關閉訊號，事件迴圈每次迭代都會檢查，不依賴佇列關閉。
"""

import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Union

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .directory import MusicDirectory
from ..constants import WATCH_DEBOUNCE_INTERVAL, WATCH_POLL_INTERVAL
from ..utils.errors import WatcherInitError

FileChangeHandler = Callable[[List[str]], None]


def _is_hidden(path: str) -> bool:
    return os.path.basename(os.path.normpath(path)).startswith(".")


class _ForwardingEventHandler(FileSystemEventHandler):
    """把 watchdog 事件轉交給 DirectoryWatcher（在觀察者執行緒中執行）"""

    def __init__(self, watcher: "DirectoryWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            logger.debug(f"偵測到新子資料夾，加入監看: {os.fsdecode(event.src_path)}")
        self._watcher._enqueue(os.fsdecode(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._watcher._enqueue(os.fsdecode(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        # 移動視為舊路徑刪除 + 新路徑建立
        self._watcher._enqueue(os.fsdecode(event.src_path))
        self._watcher._enqueue(os.fsdecode(event.dest_path))


class DirectoryWatcher:
    """
    音樂資料夾監看器

    使用方式：
        watcher = DirectoryWatcher.watch("musics")
        watcher.add_handler(player.update_music_files)
        ...
        watcher.close()
    """

    def __init__(
        self,
        directory: Union[MusicDirectory, str, os.PathLike],
        debounce_interval: float = WATCH_DEBOUNCE_INTERVAL,
    ):
        """
        Args:
            directory: 要監看的音樂資料夾
            debounce_interval: 同一路徑事件的合併時間（秒）
        """
        if not isinstance(directory, MusicDirectory):
            directory = MusicDirectory(directory)
        self.directory = directory
        self.debounce_interval = debounce_interval

        self._handlers: List[FileChangeHandler] = []
        self._handlers_lock = threading.Lock()

        self._events: "queue.Queue[str]" = queue.Queue()
        self._pending: Dict[str, float] = {}

        self._shutdown = threading.Event()
        self._observer: Optional[Observer] = None
        self._worker: Optional[threading.Thread] = None
        self._dispatcher = ThreadPoolExecutor(max_workers=1, thread_name_prefix="watcher-dispatch")

        self._close_lock = threading.Lock()
        self._closed = False

    @classmethod
    def watch(
        cls,
        directory: Union[MusicDirectory, str, os.PathLike],
        debounce_interval: float = WATCH_DEBOUNCE_INTERVAL,
    ) -> "DirectoryWatcher":
        """
        建立並啟動監看器

        Raises:
            WatcherInitError: 無法建立監看（已釋放部分建立的資源）
        """
        watcher = cls(directory, debounce_interval=debounce_interval)
        watcher.start()
        return watcher

    # === 屬性 ===

    @property
    def is_running(self) -> bool:
        return self._worker is not None and self._worker.is_alive() and not self._shutdown.is_set()

    @property
    def closed(self) -> bool:
        return self._closed

    # === 控制 ===

    def add_handler(self, handler: FileChangeHandler) -> None:
        """
        註冊變更處理函式

        每次重新掃描後依註冊順序呼叫，參數為新的檔案清單。
        """
        with self._handlers_lock:
            self._handlers.append(handler)

    def start(self) -> None:
        """
        開始監看

        Raises:
            WatcherInitError: 資料夾無法建立或 OS 監看失敗
        """
        if self._closed:
            raise WatcherInitError("watcher is closed", path=str(self.directory))
        if self._worker is not None:
            return

        try:
            root = self.directory.ensure()
            observer = Observer()
            observer.schedule(_ForwardingEventHandler(self), str(root), recursive=True)
            observer.start()
        except OSError as e:
            self._dispatcher.shutdown(wait=False)
            self._closed = True
            logger.error(f"無法監看資料夾 {self.directory}: {e}")
            raise WatcherInitError(f"failed to watch directory {self.directory}: {e}", path=str(self.directory))

        self._observer = observer
        self._worker = threading.Thread(target=self._loop, name="DirectoryWatcher", daemon=True)
        self._worker.start()
        logger.info(f"開始監看資料夾: {root}")

    def close(self) -> None:
        """
        停止監看並釋放 OS 監看資源，可重複呼叫
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        self._shutdown.set()

        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

        if self._worker is not None:
            self._worker.join()
            self._worker = None

        self._dispatcher.shutdown(wait=True)
        logger.info(f"已停止監看資料夾: {self.directory}")

    def __enter__(self) -> "DirectoryWatcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # === 內部方法 ===

    def _enqueue(self, path: str) -> None:
        """接收一個變更路徑（隱藏檔 / 資料夾忽略）"""
        if self._shutdown.is_set() or _is_hidden(path):
            return
        self._events.put(path)

    def _next_timeout(self, now: float) -> float:
        if not self._pending:
            return WATCH_POLL_INTERVAL
        nearest = min(self._pending.values())
        return max(0.0, min(WATCH_POLL_INTERVAL, nearest - now))

    def _loop(self) -> None:
        """事件迴圈（背景執行緒）"""
        while not self._shutdown.is_set():
            try:
                path = self._events.get(timeout=self._next_timeout(time.monotonic()))
            except queue.Empty:
                path = None

            now = time.monotonic()
            if path is not None:
                if path not in self._pending:
                    logger.debug(f"檔案變更: {path}")
                self._pending[path] = now + self.debounce_interval

            expired = [p for p, deadline in self._pending.items() if deadline <= now]
            if not expired or self._shutdown.is_set():
                continue

            for p in expired:
                del self._pending[p]
            self._dispatcher.submit(self._rescan_and_notify, expired)

    def _rescan_and_notify(self, changed: Sequence[str]) -> None:
        """重新掃描並通知所有處理函式（分派執行緒）"""
        try:
            files = self.directory.find_music_files()
        except OSError as e:
            logger.error(f"重新掃描資料夾失敗: {e}")
            return

        logger.debug(f"{len(changed)} 個路徑變更，重新掃描後共 {len(files)} 首")

        with self._handlers_lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(list(files))
            except Exception as e:
                logger.exception(f"變更處理函式執行失敗: {e}")
