"""Wild Rift ロール別 TOP5 取得 — メインエントリーポイント.

処理フロー:
  1. ブラウザを起動し、統計ページを読み込む
  2. ランク帯フィルタを適用（失敗しても続行）
  3. 各ロールのタブを順に開き、勝率上位5件を取得
  4. 全ロール成功した場合のみ JSON に書き出す
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from top5.config import LOG_DIR, OUTPUT_PATH, ROLE_TABS, SOURCE_TAG
from top5.models import ChampionStat, Snapshot
from top5.scraper import (
    apply_tier_filter,
    extract_category_with_retry,
    load_source,
    open_session,
)
from top5.store import write_snapshot

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"collector_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


async def collect_snapshot() -> Snapshot:
    """全ロールを取得してスナップショットを組み立てる.

    どれか1ロールでも失敗すれば例外をそのまま送出する。
    """
    roles: dict[str, list[ChampionStat]] = {}

    async with open_session() as session:
        await load_source(session)

        failure = await apply_tier_filter(session)
        if failure is not None:
            logger.warning("%s。既定のフィルタのまま続行", failure)

        for role, label in ROLE_TABS.items():
            logger.info("取得中: role=%s (%s)", role, label)
            stats = await extract_category_with_retry(session, label)
            roles[role] = stats
            logger.info(
                "  %s: %s", role,
                ", ".join(f"{s.champion} {s.winrate:.1%}" for s in stats),
            )

    return Snapshot(
        last_updated=datetime.now(timezone.utc).isoformat(),
        source=SOURCE_TAG,
        roles=roles,
    )


def run(output_path: Path = OUTPUT_PATH) -> None:
    """メイン処理."""
    logger.info("=== TOP5 取得 開始 ===")
    start_time = time.time()

    snapshot = asyncio.run(collect_snapshot())
    write_snapshot(snapshot, output_path)

    elapsed = time.time() - start_time
    logger.info("=== TOP5 取得 完了 ===")
    logger.info("出力: %s, 所要時間: %.1f 秒", output_path, elapsed)


def main() -> int:
    """コマンドライン実行用. 終了コードを返す."""
    setup_logging()
    try:
        run()
    except Exception as e:
        logger.exception("TOP5 取得に失敗しました")
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
