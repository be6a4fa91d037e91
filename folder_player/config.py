"""
執行期設定

由環境變數（可放在 .env）讀取，無法解析的值使用預設值並記錄警告。
"""

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from loguru import logger

from .constants import (
    DEFAULT_FPS,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_LOOP_DURATION_MINUTES,
    DEFAULT_MUSIC_DIR,
    INTERVAL_RANGE,
    LOOP_DURATION_RANGE,
)


def _read_float(env: Mapping[str, str], key: str, default: float, bounds=None) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"{key}={raw!r} 不是數字，使用預設值 {default}")
        return default
    if not math.isfinite(value):
        logger.warning(f"{key}={raw!r} 不是有限數值，使用預設值 {default}")
        return default
    if bounds is not None:
        low, high = bounds
        if not low <= value <= high:
            clamped = max(low, min(high, value))
            logger.warning(f"{key}={value} 超出範圍 [{low}, {high}]，改用 {clamped}")
            return clamped
    return value



def debug_enabled(env: Optional[Mapping[str, str]] = None) -> bool:
    """DEBUG 為 true / 1 / yes 時開啟除錯輸出"""
    if env is None:
        env = os.environ
    return env.get("DEBUG", "").lower() in ("true", "1", "yes")

@dataclass
class Settings:
    """
    播放器設定

    環境變數：
        MUSIC_DIR              音樂資料夾（預設 musics）
        FPS                    更新迴圈幀率（預設 60）
        LOOP_DURATION_MINUTES  每首播放時間，1 - 60 分（預設 5）
        INTERVAL_SECONDS       曲目間隔，1 - 60 秒（預設 10）
    """

    music_dir: str = DEFAULT_MUSIC_DIR
    fps: int = DEFAULT_FPS
    loop_duration_minutes: float = DEFAULT_LOOP_DURATION_MINUTES
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """由環境變數建立設定（env 為 None 時使用 os.environ）"""
        if env is None:
            env = os.environ

        fps = int(_read_float(env, "FPS", DEFAULT_FPS))
        if fps <= 0:
            logger.warning(f"FPS={fps} 無效，使用預設值 {DEFAULT_FPS}")
            fps = DEFAULT_FPS

        return cls(
            music_dir=env.get("MUSIC_DIR") or DEFAULT_MUSIC_DIR,
            fps=fps,
            loop_duration_minutes=_read_float(
                env, "LOOP_DURATION_MINUTES", DEFAULT_LOOP_DURATION_MINUTES, LOOP_DURATION_RANGE
            ),
            interval_seconds=_read_float(
                env, "INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS, INTERVAL_RANGE
            ),
        )
