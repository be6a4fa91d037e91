"""
音樂資料夾

負責建立資料夾與遞迴掃描支援的音訊檔案。
"""

import os
from pathlib import Path
from typing import List, Union
from loguru import logger

from ..constants import DEFAULT_MUSIC_DIR
from ..core.loader import AudioFormat


class MusicDirectory:
    """
    音樂資料夾

    使用方式：
        music_dir = MusicDirectory("musics")
        music_dir.ensure()              # 不存在時建立
        files = music_dir.find_music_files()
    """

    def __init__(self, path: Union[str, os.PathLike] = DEFAULT_MUSIC_DIR):
        self.path = Path(path)

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"MusicDirectory({str(self.path)!r})"

    def __fspath__(self) -> str:
        return str(self.path)

    @property
    def absolute(self) -> Path:
        """絕對路徑"""
        return self.path.absolute()

    @staticmethod
    def is_supported(path: Union[str, os.PathLike]) -> bool:
        """是否為支援的音訊檔（.wav / .ogg / .mp3，不分大小寫）"""
        return AudioFormat.from_path(str(path)) is not None

    def ensure(self) -> Path:
        """
        確保資料夾存在

        Returns:
            資料夾的絕對路徑
        """
        directory = self.absolute
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"已建立音樂資料夾: {directory}")
        return directory

    def find_music_files(self) -> List[str]:
        """
        遞迴掃描支援的音訊檔案

        依名稱字典順序走訪（子資料夾與檔案混合排序）。
        資料夾不存在時會建立並返回空清單。

        Returns:
            檔案路徑清單（以建構時的路徑為前綴）

        Raises:
            OSError: 無法建立或讀取資料夾
        """
        if not self.path.exists():
            self.path.mkdir(parents=True, exist_ok=True)
            logger.info(f"已建立音樂資料夾: {self.path}")
            return []

        music_files: List[str] = []
        self._walk(str(self.path), music_files)
        logger.debug(f"掃描完成: {self.path} 共 {len(music_files)} 首")
        return music_files

    def _walk(self, directory: str, found: List[str]) -> None:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            path = os.path.join(directory, entry.name)
            if entry.is_dir():
                self._walk(path, found)
            elif self.is_supported(path):
                found.append(path)
