from loguru import logger

import asyncio
import sys
import time
from dotenv import load_dotenv

from folder_player import (
    DirectoryWatcher,
    MusicDirectory,
    MusicPlayer,
    SUPPORTED_EXTENSIONS,
    Settings,
    WatcherInitError,
    debug_enabled,
)

version = "v1.0"

# ─────────────────────────────────────────────────────────
#  更新迴圈：以固定幀率驅動播放器
# ─────────────────────────────────────────────────────────

async def run_player(player: MusicPlayer, fps: int):
    """每幀呼叫一次 player.tick()，落後時不補幀"""
    frame = 1.0 / fps
    last_state = None

    while True:
        started = time.perf_counter()
        player.tick()

        if player.state != last_state:
            status = player.get_status()
            logger.info(f"[播放器] {status['state'].value} | {status['current_path'] or '（無曲目）'}")
            last_state = player.state

        elapsed = time.perf_counter() - started
        await asyncio.sleep(max(0.0, frame - elapsed))


def start(settings: Settings):
    """建立播放器與監看器並開始播放"""
    from folder_player.backend.device import SoundDeviceBackend

    music_dir = MusicDirectory(settings.music_dir)
    music_dir.ensure()

    files = music_dir.find_music_files()
    if not files:
        logger.warning(f"[初始化] {music_dir} 內沒有音樂檔案，放入 {' / '.join(SUPPORTED_EXTENSIONS)} 檔案後會自動開始播放")
    else:
        logger.info(f"[初始化] 找到 {len(files)} 首音樂")

    player = MusicPlayer(
        SoundDeviceBackend(),
        initial_files=files,
        fps=settings.fps,
        loop_duration_minutes=settings.loop_duration_minutes,
        interval_seconds=settings.interval_seconds,
    )

    watcher = None
    try:
        watcher = DirectoryWatcher.watch(music_dir)
        watcher.add_handler(player.update_music_files)
    except WatcherInitError as e:
        logger.error(f"[初始化] {e.user_message}：{e.message}")

    try:
        asyncio.run(run_player(player, settings.fps))
    except KeyboardInterrupt:
        logger.info("[結束] 收到中斷訊號")
    finally:
        if watcher is not None:
            watcher.close()
        player.close()

# ─────────────────────────────────────────────────────────
#  Loguru 記錄器設定
# ─────────────────────────────────────────────────────────

def set_logger():
    """設定 Loguru 的輸出行為（終端機 & 檔案）"""
    logger.remove()

    debug_mode = debug_enabled()

    # 終端輸出
    logger.add(sys.stdout, level="DEBUG" if debug_mode else "INFO", colorize=True)

    # 檔案輸出（每 7 天輪替，保留 30 天，自動壓縮）
    logger.add(
        "./logs/system.log",
        rotation="7 days",
        retention="30 days",
        encoding="UTF-8",
        compression="zip",
        level="INFO",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"
    )

# ─────────────────────────────────────────────────────────
#  程式入口點
# ─────────────────────────────────────────────────────────

if __name__ == '__main__':
    load_dotenv()
    set_logger()
    settings = Settings.from_env()

    logger.info(f"[初始化] 資料夾試聽播放器 {version} | 資料夾: {settings.music_dir}")

    try:
        start(settings)
    except Exception as e:
        logger.critical(f"❗ 無法啟動播放器：{e}")
        sys.exit(1)
