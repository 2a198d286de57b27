"""非同期処理のリトライ・待機ユーティリティ."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    pause: float,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    description: str = "",
) -> T:
    """func を最大 attempts 回実行する.

    retry_on に該当する例外のみ pause 秒待って再試行する。
    それ以外の例外は即座に送出する。

    Args:
        func: 引数なしで awaitable を返す関数
        attempts: 総試行回数 (1 以上)
        pause: 試行間の待機秒数
        retry_on: 再試行対象の例外
        description: ログ出力用の処理名

    Returns:
        func の戻り値

    Raises:
        最終試行で発生した例外をそのまま送出する。
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    for attempt in range(1, attempts + 1):
        try:
            result = await func()
        except retry_on as e:
            if attempt == attempts:
                logger.error("%s: %d 回試行して失敗", description, attempts)
                raise
            logger.warning(
                "%s: 試行 %d/%d 失敗 (%s)。%.1f 秒後に再試行",
                description, attempt, attempts, e, pause,
            )
            await asyncio.sleep(pause)
            continue

        if attempt > 1:
            logger.info("%s: 試行 %d/%d で成功", description, attempt, attempts)
        return result

    raise AssertionError("unreachable")


async def wait_for_any(*aws: Awaitable[T], timeout: float) -> T:
    """複数の待機処理のうち最初に成功したものの結果を返す.

    失敗した待機は無視して残りを待ち続ける。全体で timeout 秒を上限とし、
    戻る時点で未完了の待機はキャンセルする。

    Raises:
        全て失敗した場合は最後の例外、時間切れの場合は asyncio.TimeoutError。
    """
    loop = asyncio.get_running_loop()
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    deadline = loop.time() + timeout
    last_error: BaseException | None = None

    try:
        pending = set(tasks)
        while pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                error = task.exception()
                if error is None:
                    return task.result()
                last_error = error

        if last_error is not None and not pending:
            raise last_error
        raise asyncio.TimeoutError(f"{timeout} 秒以内にどの条件も満たされなかった")
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
