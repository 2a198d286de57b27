"""Wild Rift 公式統計ページのスクレイピングモジュール.

取得戦略:
  1. ロールのタブをクリックし、メインドキュメントの表から行を取得（主戦略）
  2. 表が見つからなければ iframe 内の表を順に探す（フォールバック）
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from playwright.async_api import (
    Browser,
    BrowserContext,
    Frame,
    Page,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError

from top5.config import (
    FILTER_TIMEOUT_MS,
    HEADLESS,
    LOCALE,
    MIN_READY_ROWS,
    NAVIGATION_ATTEMPTS,
    NAVIGATION_RETRY_PAUSE,
    NAVIGATION_TIMEOUT_MS,
    ROLE_ATTEMPTS,
    ROLE_RETRY_PAUSE,
    ROW_SELECTOR,
    ROW_WAIT_TIMEOUT_MS,
    TAB_CLICK_TIMEOUT_MS,
    TARGET_URL,
    TIER_FILTER_LABEL,
    TIMEZONE_ID,
    USER_AGENT,
    VIEWPORT,
)
from top5.errors import ExtractionError, FilterApplicationFailure, NavigationError
from top5.models import ChampionStat
from top5.parser import normalize, parse_rows
from top5.retry import retry_async, wait_for_any

logger = logging.getLogger(__name__)

_ROW_HTML_JS = "rows => rows.map(row => row.outerHTML)"
_ROW_COUNT_JS = "([selector, n]) => document.querySelectorAll(selector).length >= n"


@dataclass
class Session:
    """1回の実行で使うブラウザセッション."""

    browser: Browser
    context: BrowserContext
    page: Page

    def sub_frames(self) -> list[Frame]:
        """メインフレーム以外の全フレーム (iframe) を返す."""
        main = self.page.main_frame
        return [frame for frame in self.page.frames if frame is not main]


@asynccontextmanager
async def open_session(headless: bool = HEADLESS) -> AsyncIterator[Session]:
    """ブラウザを起動してセッションを返す. 終了時に必ずブラウザを閉じる."""
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(
                user_agent=USER_AGENT,
                locale=LOCALE,
                timezone_id=TIMEZONE_ID,
                viewport=VIEWPORT,
            )
            page = await context.new_page()
            yield Session(browser=browser, context=context, page=page)
        finally:
            await browser.close()
            logger.info("ブラウザを終了")


async def load_source(
    session: Session,
    url: str = TARGET_URL,
    attempts: int = NAVIGATION_ATTEMPTS,
    pause: float = NAVIGATION_RETRY_PAUSE,
) -> None:
    """対象ページを読み込む.

    networkidle には到達しないことがあるため domcontentloaded のみ待つ。

    Raises:
        NavigationError: 全試行で読み込みに失敗した場合
    """

    async def _goto() -> None:
        try:
            await session.page.goto(
                url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS
            )
        except PlaywrightError as e:
            raise NavigationError(f"ページ読み込み失敗: {url}: {e}") from e

    await retry_async(
        _goto,
        attempts=attempts,
        pause=pause,
        retry_on=(NavigationError,),
        description=f"ページ読み込み {url}",
    )
    logger.info("ページ読み込み完了: %s", url)


async def apply_tier_filter(
    session: Session, label: str = TIER_FILTER_LABEL
) -> FilterApplicationFailure | None:
    """ランク帯フィルタをクリックする（ベストエフォート）.

    Returns:
        成功時は None、失敗時は FilterApplicationFailure。例外は送出しない。
    """
    try:
        await session.page.get_by_text(label, exact=True).first.click(
            timeout=FILTER_TIMEOUT_MS
        )
    except PlaywrightError as e:
        return FilterApplicationFailure(f"フィルタ適用失敗: {label}: {e}")
    logger.info("フィルタ適用: %s", label)
    return None


async def _activate_tab(page: Page, label: str) -> None:
    """label と完全一致するタブをクリックする."""
    tab = page.get_by_role("tab", name=label, exact=True).or_(
        page.get_by_text(label, exact=True)
    )
    await tab.first.click(timeout=TAB_CLICK_TIMEOUT_MS)


async def _wait_for_rows(page: Page) -> None:
    """行が MIN_READY_ROWS 件揃う、または1行でも表示される、の早い方を待つ."""
    await wait_for_any(
        page.wait_for_function(
            _ROW_COUNT_JS,
            arg=[ROW_SELECTOR, MIN_READY_ROWS],
            timeout=ROW_WAIT_TIMEOUT_MS,
        ),
        page.wait_for_selector(
            ROW_SELECTOR, state="visible", timeout=ROW_WAIT_TIMEOUT_MS
        ),
        timeout=ROW_WAIT_TIMEOUT_MS / 1000,
    )


async def _collect_rows(target: Page | Frame) -> list[ChampionStat]:
    """ページまたはフレームの表から行を取得してパースする."""
    row_htmls = await target.eval_on_selector_all(ROW_SELECTOR, _ROW_HTML_JS)
    return parse_rows(row_htmls)


async def _collect_rows_from_frames(session: Session, label: str) -> list[ChampionStat]:
    """iframe を順に調べ、最初に行が取れたフレームの結果を返す."""
    for frame in session.sub_frames():
        try:
            stats = await _collect_rows(frame)
        except PlaywrightError as e:
            logger.debug("フレーム取得失敗: role=%s, frame=%s, error=%s", label, frame.url, e)
            continue
        if stats:
            logger.info("iframe から取得: role=%s, frame=%s", label, frame.url)
            return stats
    return []


async def extract_category(session: Session, label: str) -> list[ChampionStat]:
    """ロールのタブを開き、勝率上位のチャンピオンを返す.

    Raises:
        ExtractionError: 行を1件も取得できなかった場合
    """
    try:
        await _activate_tab(session.page, label)
    except PlaywrightError as e:
        raise ExtractionError(f"{label} のタブ選択失敗: {e}") from e

    # 表が iframe 内にしか無い場合はメインドキュメントの待機が必ず時間切れになる
    try:
        await _wait_for_rows(session.page)
    except (PlaywrightError, asyncio.TimeoutError) as e:
        logger.warning("行の表示待ちが時間切れ: role=%s, error=%s", label, e)

    try:
        stats = await _collect_rows(session.page)
    except PlaywrightError as e:
        raise ExtractionError(f"{label} の取得失敗: {e}") from e

    if not stats:
        logger.warning("メインドキュメントに行なし。iframe にフォールバック: role=%s", label)
        stats = await _collect_rows_from_frames(session, label)

    if not stats:
        raise ExtractionError(f"no rows found for {label}")

    return normalize(stats)


async def extract_category_with_retry(
    session: Session,
    label: str,
    attempts: int = ROLE_ATTEMPTS,
    pause: float = ROLE_RETRY_PAUSE,
) -> list[ChampionStat]:
    """extract_category を失敗時に再試行する. 最終試行の失敗はそのまま送出する."""
    return await retry_async(
        lambda: extract_category(session, label),
        attempts=attempts,
        pause=pause,
        retry_on=(ExtractionError,),
        description=f"ロール取得 {label}",
    )
