"""設定モジュール — 定数定義."""

from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置 (PLAYWRIGHT_BROWSERS_PATH などブラウザ側の設定用)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- 取得元 ---
TARGET_URL = "https://lolm.qq.com/act/a20220818raider/index.html"

# --- ロール (出力キー -> タブ表示名) ---
ROLE_TABS = {
    "baron": "上单",
    "jungle": "打野",
    "mid": "中路",
    "dragon": "下路",
    "support": "辅助",
}

# --- ランク帯フィルタ ---
TIER_FILTER_LABEL = "钻石以上"
# 要求したフィルタを示す。適用されたかどうかは保証しない
SOURCE_TAG = "lolm.qq.com/a20220818raider:钻石以上"

# --- テーブル ---
ROW_SELECTOR = "table tbody tr"
MIN_READY_ROWS = 5
TOP_N = 5

# --- ブラウザ ---
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)
LOCALE = "zh-CN"
TIMEZONE_ID = "Asia/Shanghai"
VIEWPORT = {"width": 1280, "height": 800}
HEADLESS = True

# --- タイムアウト (ミリ秒) ---
NAVIGATION_TIMEOUT_MS = 60_000
FILTER_TIMEOUT_MS = 5_000
TAB_CLICK_TIMEOUT_MS = 10_000
ROW_WAIT_TIMEOUT_MS = 30_000

# --- リトライ ---
NAVIGATION_ATTEMPTS = 3
NAVIGATION_RETRY_PAUSE = 2.0  # 秒
ROLE_ATTEMPTS = 2
ROLE_RETRY_PAUSE = 3.0  # 秒

# --- 出力 ---
OUTPUT_PATH = _PROJECT_ROOT / "top5.json"

# --- ログ ---
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)
