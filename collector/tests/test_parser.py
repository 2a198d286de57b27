"""parser モジュールのユニットテスト."""

import math
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from top5.models import ChampionStat
from top5.parser import (
    extract_cells,
    looks_like_name,
    looks_like_percentage,
    normalize,
    parse_cells,
    parse_percentage,
    parse_rows,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load_rows(name: str) -> list[str]:
    html = (FIXTURES_DIR / name).read_text(encoding="utf-8")
    soup = BeautifulSoup(html, "html.parser")
    return [str(tr) for tr in soup.select("table tbody tr")]


class TestLooksLikeName:
    """looks_like_name のテスト."""

    def test_latin(self):
        assert looks_like_name("Darius")

    def test_ideographs(self):
        assert looks_like_name("亚索")
        assert looks_like_name("劫")

    def test_apostrophe(self):
        assert looks_like_name("Kai'Sa")

    def test_numeric(self):
        assert not looks_like_name("1")
        assert not looks_like_name("53.2%")

    def test_empty(self):
        assert not looks_like_name("")

    def test_lowercase_placeholder(self):
        """アイコン代替テキストは名前として扱わないこと."""
        assert not looks_like_name("icon")


class TestLooksLikePercentage:
    """looks_like_percentage のテスト."""

    def test_ascii(self):
        assert looks_like_percentage("53.2%")

    def test_full_width(self):
        assert looks_like_percentage("53.2％")

    def test_plain_number(self):
        assert not looks_like_percentage("53.2")


class TestParsePercentage:
    """parse_percentage のテスト."""

    def test_decimal(self):
        assert parse_percentage("53.20%") == pytest.approx(0.532)

    def test_hundred(self):
        assert parse_percentage("100%") == pytest.approx(1.0)

    def test_zero(self):
        assert parse_percentage("0%") == 0.0

    def test_surrounding_text(self):
        assert parse_percentage(" 胜率 48.5 % ") == pytest.approx(0.485)

    def test_no_float_noise(self):
        """出力 JSON に浮動小数点誤差が出ないこと."""
        assert parse_percentage("4.4%") == 0.044
        assert parse_percentage("12.1%") == 0.121
        assert parse_percentage("53.2%") == 0.532

    def test_unparsable(self):
        assert math.isnan(parse_percentage("--%"))


class TestParseCells:
    """parse_cells のテスト."""

    def test_name_and_metrics(self):
        """列位置ではなく内容で名前と率を判定すること."""
        stat = parse_cells(["1", "icon", "Darius", "53.2%", "12.1%", "4.4%"])

        assert stat.champion == "Darius"
        assert stat.winrate == pytest.approx(0.532)
        assert stat.pickrate == pytest.approx(0.121)
        assert stat.banrate == pytest.approx(0.044)

    def test_missing_columns(self):
        stat = parse_cells(["Garen", "50.5%"])

        assert stat.winrate == pytest.approx(0.505)
        assert stat.pickrate is None
        assert stat.banrate is None

    def test_extra_percentages_ignored(self):
        stat = parse_cells(["Lux", "50%", "10%", "5%", "99%"])
        assert stat.banrate == pytest.approx(0.05)

    def test_first_name_wins(self):
        stat = parse_cells(["Ahri", "Mid", "51%"])
        assert stat.champion == "Ahri"

    def test_no_name_no_percentage(self):
        """名前も率も無い行は None になること."""
        assert parse_cells(["1", "2", "--"]) is None

    def test_header_row(self):
        assert parse_cells(["排名", "", "英雄", "胜率", "登场率", "禁用率"]) is None

    def test_no_name(self):
        assert parse_cells(["1", "53.2%"]) is None

    def test_unparsable_winrate(self):
        assert parse_cells(["Zed", "--%", "10%"]) is None

    def test_winrate_out_of_range(self):
        assert parse_cells(["Zed", "153%"]) is None

    def test_unparsable_pickrate_is_absent(self):
        stat = parse_cells(["Zed", "50%", "--%", "3%"])

        assert stat.pickrate is None
        assert stat.banrate == pytest.approx(0.03)


class TestExtractCells:
    """extract_cells のテスト."""

    def test_nested_markup(self):
        cells = extract_cells(
            '<tr><td>1</td><td><img alt="icon"></td>'
            '<td><span class="name"> 亚索 </span></td><td>51.20%</td></tr>'
        )
        assert cells == ["1", "", "亚索", "51.20%"]

    def test_no_cells(self):
        assert extract_cells("<tr></tr>") == []


class TestParseRows:
    """parse_rows のテスト."""

    def test_fixture(self):
        """ヘッダ・フッタ行を除外し、元の順序を保つこと."""
        stats = parse_rows(_load_rows("role_table.html"))

        assert [s.champion for s in stats] == [
            "亚索", "阿狸", "盖伦", "卡莎", "德莱厄斯", "劫", "拉克丝",
        ]
        assert stats[0].winrate == pytest.approx(0.512)
        assert stats[4].banrate is None

    def test_reordered_columns(self):
        stats = parse_rows(_load_rows("role_table_reordered.html"))

        assert [s.champion for s in stats] == ["Darius", "Garen"]
        assert stats[0].winrate == pytest.approx(0.532)
        assert stats[0].pickrate == pytest.approx(0.121)

    def test_empty(self):
        assert parse_rows([]) == []


class TestNormalize:
    """normalize のテスト."""

    def test_fixture_top5(self):
        stats = normalize(parse_rows(_load_rows("role_table.html")))

        assert [s.champion for s in stats] == ["劫", "阿狸", "卡莎", "盖伦", "亚索"]

    def test_descending(self):
        stats = normalize(parse_rows(_load_rows("role_table.html")))

        rates = [s.winrate for s in stats]
        assert all(a >= b for a, b in zip(rates, rates[1:]))

    def test_ties_keep_source_order(self):
        stats = [
            ChampionStat("A", 0.5),
            ChampionStat("B", 0.6),
            ChampionStat("C", 0.5),
        ]
        assert [s.champion for s in normalize(stats)] == ["B", "A", "C"]

    def test_fewer_than_limit(self):
        stats = [ChampionStat("A", 0.5), ChampionStat("B", 0.6)]
        assert len(normalize(stats)) == 2

    def test_limit(self):
        stats = [ChampionStat(f"Hero{i}", i / 100) for i in range(10)]
        result = normalize(stats)

        assert len(result) == 5
        assert result[0].champion == "Hero9"
