"""
経路探索インターフェース

描画ループやCLIなどの外部呼び出し側が依存してよいのはこの抽象インターフェースのみです。
具体的な探索戦略（アントコロニー等）はこれを実装します。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import List

from ..core.position import Position


@dataclass
class PathfinderStats:
    """探索の統計情報"""

    paths_generated: int  # 生成した巡回路の総数
    run_time: timedelta  # 直近のリセットからの経過時間
    shortest_path: float  # 最良巡回路の長さ


class PathFinder(ABC):
    """巡回路探索器の抽象基底クラス"""

    @abstractmethod
    def get_best_path(self) -> List[str]:
        """最良巡回路を位置名の順序付きリストで取得します。"""

    @abstractmethod
    def stats(self) -> PathfinderStats:
        """統計情報を取得します。"""

    @abstractmethod
    def run_round(self) -> None:
        """探索を1世代進めます。"""

    @abstractmethod
    def get_positions(self) -> List[Position]:
        """全位置を取得します。"""

    @abstractmethod
    def reset(self) -> None:
        """学習状態とカウンタをリセットします（位置は変更しない）。"""
