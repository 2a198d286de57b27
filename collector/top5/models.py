"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ChampionStat:
    """ロール別ランキングの1チャンピオンを表す."""

    champion: str  # チャンピオン名 (例: 亚索, Darius)
    winrate: float  # 勝率 0..1
    pickrate: float | None = None  # ピック率 0..1、列が無ければ None
    banrate: float | None = None  # BAN 率 0..1、列が無ければ None

    def to_dict(self) -> dict:
        """JSON 出力用の dict に変換する. 欠損した率はキーごと省略する."""
        data: dict = {"champion": self.champion, "winrate": self.winrate}
        if self.pickrate is not None:
            data["pickrate"] = self.pickrate
        if self.banrate is not None:
            data["banrate"] = self.banrate
        return data


@dataclass(frozen=True)
class Snapshot:
    """1回の実行で書き出すスナップショット."""

    last_updated: str  # ISO 8601
    source: str  # 取得元・要求したフィルタ
    roles: dict[str, list[ChampionStat]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """JSON 出力用の dict に変換する."""
        return {
            "last_updated": self.last_updated,
            "source": self.source,
            "roles": {
                role: [stat.to_dict() for stat in stats]
                for role, stats in self.roles.items()
            },
        }
