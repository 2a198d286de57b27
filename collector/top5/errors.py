"""例外定義."""


class CollectorError(Exception):
    """収集処理の基底例外."""


class NavigationError(CollectorError):
    """全試行でページが利用可能な状態にならなかった."""


class ExtractionError(CollectorError):
    """ロールの行をリトライ後も1件も取得できなかった."""


class FilterApplicationFailure(CollectorError):
    """ランク帯フィルタを適用できなかった.

    送出はせず、apply_tier_filter の戻り値として扱う。
    """
