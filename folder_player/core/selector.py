"""
曲目選擇器

特性：
- 持有有序的檔案清單與目前選曲索引
- 清單整批替換時，盡量保留使用者正在聽的曲目
- 下一首到底後循環回第一首
- 線程安全（使用讀寫鎖，監看執行緒寫入、更新迴圈讀取）
"""

from typing import Optional, List, Sequence
from loguru import logger

from ..utils.errors import OutOfRangeError
from ..utils.rwlock import ReadWriteLock


class MusicSelector:
    """
    曲目選擇器

    索引為 -1 代表尚未選曲（曲庫為空）。

    使用方式：
        selector = MusicSelector()
        selector.update(["musics/a.wav", "musics/b.ogg"])

        selector.current_file    # "musics/a.wav"
        selector.select_next()   # 下一首
        selector.select_index(0) # 跳到第 1 首
    """

    def __init__(self):
        self._files: List[str] = []
        self._current_index: int = -1
        self._lock = ReadWriteLock()

    # === 寫入操作 ===

    def update(self, new_files: Sequence[str]) -> bool:
        """
        替換整個曲庫，並嘗試保留目前曲目

        若原本選中的路徑仍在新清單中，索引移到它的新位置；
        否則有曲目時回到第一首，清單為空時取消選曲。

        Args:
            new_files: 新的檔案清單（依掃描順序）

        Returns:
            索引是否改變（呼叫者據此決定是否重新載入）
        """
        with self._lock.write_lock():
            current_path = None
            if 0 <= self._current_index < len(self._files):
                current_path = self._files[self._current_index]

            old_index = self._current_index
            self._files = list(new_files)

            new_index = -1
            if current_path is not None:
                try:
                    new_index = self._files.index(current_path)
                except ValueError:
                    new_index = -1

            if new_index == -1 and self._files:
                new_index = 0

            self._current_index = new_index

            logger.debug(
                f"曲庫已更新: 共 {len(self._files)} 首，"
                f"索引 {old_index} -> {new_index}"
            )
            return old_index != new_index

    def select_next(self) -> bool:
        """
        切換到下一首，最後一首之後回到第一首

        Returns:
            索引是否改變（曲庫為空時為 False）
        """
        with self._lock.write_lock():
            if not self._files:
                self._current_index = -1
                return False

            old_index = self._current_index
            self._current_index = (self._current_index + 1) % len(self._files)

            logger.debug(f"下一首: 索引 {old_index} -> {self._current_index}")
            return old_index != self._current_index

    def select_index(self, index: int) -> None:
        """
        選擇指定索引的曲目

        Args:
            index: 0-based 索引

        Raises:
            OutOfRangeError: 索引不在目前曲庫範圍內（選曲不變）
        """
        with self._lock.write_lock():
            if index < 0 or index >= len(self._files):
                raise OutOfRangeError(index, len(self._files))
            self._current_index = index
            logger.debug(f"選擇第 {index + 1} 首: {self._files[index]}")

    # === 查詢操作 ===

    @property
    def current_file(self) -> Optional[str]:
        """目前選中的路徑，未選曲時為 None"""
        with self._lock.read_lock():
            if 0 <= self._current_index < len(self._files):
                return self._files[self._current_index]
            return None

    @property
    def current_index(self) -> int:
        """目前的索引（0-based），未選曲時為 -1"""
        with self._lock.read_lock():
            return self._current_index

    @property
    def files(self) -> List[str]:
        """取得曲庫清單（複本，修改不影響內部狀態）"""
        with self._lock.read_lock():
            return self._files.copy()

    def __len__(self) -> int:
        with self._lock.read_lock():
            return len(self._files)
