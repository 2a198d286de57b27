"""ランキング表の行パース・正規化モジュール.

列の並びは行の装飾によって変わるため、列番号ではなくセルの内容で判定する:
  - 名前: 英字・漢字を含み、先頭の英字が小文字でないセル (最初の1件)
  - 率: "%" を含むセル (出現順に勝率・ピック率・BAN 率)
"""

from __future__ import annotations

import logging
import math
import re

from bs4 import BeautifulSoup

from top5.config import TOP_N
from top5.models import ChampionStat

logger = logging.getLogger(__name__)

_PERCENT_MARKS = ("%", "％")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_WHITESPACE = re.compile(r"\s+")


def looks_like_name(text: str) -> bool:
    """チャンピオン名らしいセルかどうか.

    英字・漢字を1文字以上含み、最初の英字が小文字でないこと。
    "icon" のようなアイコン代替テキストを除外する。
    """
    for ch in text:
        if ch.isalpha():
            return not ch.islower()
    return False


def looks_like_percentage(text: str) -> bool:
    """パーセント表記のセルかどうか."""
    return any(mark in text for mark in _PERCENT_MARKS)


def parse_percentage(text: str) -> float:
    """"53.2%" -> 0.532. 数値にできなければ NaN."""
    cleaned = _NON_NUMERIC.sub("", text)
    try:
        return round(float(cleaned) / 100, 6)
    except ValueError:
        return math.nan


def parse_cells(cells: list[str]) -> ChampionStat | None:
    """1行分のセルテキストから ChampionStat を組み立てる.

    Returns:
        名前が無い、または勝率が [0, 1] の有限値でなければ None。
    """
    name = ""
    rates: list[float] = []
    for text in cells:
        if looks_like_percentage(text):
            rates.append(parse_percentage(text))
        elif not name and looks_like_name(text):
            name = text

    if not name or not rates:
        return None

    winrate = rates[0]
    if not math.isfinite(winrate) or not 0.0 <= winrate <= 1.0:
        return None

    pickrate = _finite_or_none(rates[1]) if len(rates) > 1 else None
    banrate = _finite_or_none(rates[2]) if len(rates) > 2 else None
    return ChampionStat(champion=name, winrate=winrate, pickrate=pickrate, banrate=banrate)


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


def extract_cells(row_html: str) -> list[str]:
    """<tr> の HTML から各 <td> のテキストを取り出す."""
    soup = BeautifulSoup(row_html, "html.parser")
    return [
        _WHITESPACE.sub(" ", td.get_text(" ", strip=True)).strip()
        for td in soup.find_all("td")
    ]


def parse_rows(row_htmls: list[str]) -> list[ChampionStat]:
    """行 HTML のリストをパースする. 不正な行 (ヘッダ・フッタ等) は黙って捨てる."""
    results: list[ChampionStat] = []
    for row_html in row_htmls:
        stat = parse_cells(extract_cells(row_html))
        if stat is not None:
            results.append(stat)

    dropped = len(row_htmls) - len(results)
    if dropped:
        logger.debug("不正な行を %d 件除外", dropped)
    return results


def normalize(stats: list[ChampionStat], limit: int = TOP_N) -> list[ChampionStat]:
    """勝率の降順 (同率は元の順) に並べ、上位 limit 件に絞る."""
    return sorted(stats, key=lambda s: s.winrate, reverse=True)[:limit]
