"""
例外定義

巡回路探索で発生しうるエラーの分類:
- ColonyConfigError: 設定値の不正（構築時にのみ発生）
- TourConstructionError: アリが未訪問の隣接ノードを見つけられない（ロジック欠陥）
- NoBestTourError: 1ラウンドも完了していない状態で結果を要求した
"""


class ColonyConfigError(ValueError):
    """コロニー設定が不正な場合に送出される"""


class TourConstructionError(RuntimeError):
    """巡回路の構築中に不変条件が破られた場合に送出される"""


class NoBestTourError(RuntimeError):
    """最良巡回路が存在しない状態で統計・経路を要求した場合に送出される"""
