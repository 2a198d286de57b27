"""スナップショットの JSON 書き出しモジュール."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from top5.models import Snapshot

logger = logging.getLogger(__name__)


def dump_snapshot(snapshot: Snapshot) -> str:
    """スナップショットを JSON 文字列にする. 中国語名はエスケープしない."""
    return json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)


def write_snapshot(snapshot: Snapshot, path: Path) -> None:
    """スナップショットをファイルに書き出す.

    同じディレクトリの一時ファイルに書いてから置き換えるため、
    途中で失敗しても既存のファイルは壊れない。
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(dump_snapshot(snapshot))
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("%s に書き出し (%d ロール)", path, len(snapshot.roles))
