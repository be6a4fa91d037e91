"""
播放器常數設定

時間長度皆以實際時間（分/秒）表示，由播放器依 FPS 換算為幀數。
"""

# === 資料夾 ===

# 預設音樂資料夾（相對於工作目錄）
DEFAULT_MUSIC_DIR = "musics"

# === 計時 ===

# 宿主更新迴圈的預設幀率
DEFAULT_FPS = 60

# 淡出長度（秒），固定不可調整
FADE_OUT_SECONDS = 2.0

# 每首播放時間（分）
DEFAULT_LOOP_DURATION_MINUTES = 5.0
LOOP_DURATION_RANGE = (1.0, 60.0)

# 曲目之間的靜音間隔（秒）
DEFAULT_INTERVAL_SECONDS = 10.0
INTERVAL_RANGE = (1.0, 60.0)

# === 監看 ===

# 同一路徑的事件在此時間內合併為一次重新掃描（秒）
WATCH_DEBOUNCE_INTERVAL = 0.5

# 事件迴圈檢查關閉訊號的間隔（秒）
WATCH_POLL_INTERVAL = 0.1

# === 顯示 ===

PROGRESS_BAR_LENGTH = 15
PROGRESS_BAR_FILLED = "▓"
PROGRESS_BAR_EMPTY = "░"
