"""
フェロモン強化ロジック

【フェロモン強化】
ラウンド終了後（全アリの巡回完了後）に、これまでの最良巡回路に沿って一度だけ実行します。
1. 巡回路上の各ノードから出ていく全エッジのフェロモンを一定量揮発（0で下限）
2. 進行方向のエッジ(cur → next)にフェロモンを付加（上限付き）
3. 逆方向のエッジ(next → cur)にフェロモンを付加（上限付き）

【実行順序】
ノードtour[i]の揮発はi番目の処理の先頭で行われるため、
i-1番目で付加された逆方向エッジ(tour[i] → tour[i-1])もその直後に揮発します。

フェロモン状態を書き換えるのはこのモジュールのみで、
アリが巡回路を構築している間は実行されません。
"""

import logging
from typing import Sequence

from ..core.graph import PositionGraph

logger = logging.getLogger(__name__)


class PheromoneReinforcer:
    """
    最良巡回路に沿ったフェロモン更新を管理するクラス

    Attributes:
        max_pheromone (float): フェロモン上限値
        spread_forward (float): 進行方向エッジへの付加量
        spread_backward (float): 逆方向エッジへの付加量
        decay (float): ノードごとの揮発量
    """

    def __init__(
        self,
        max_pheromone: float,
        spread_forward: float,
        spread_backward: float,
        decay: float,
    ):
        self.max_pheromone = max_pheromone
        self.spread_forward = spread_forward
        self.spread_backward = spread_backward
        self.decay = decay

    def reinforce(self, graph: PositionGraph, tour: Sequence[int]) -> None:
        """
        巡回路に沿ってフェロモンを揮発・付加します。

        Args:
            graph: 位置グラフ
            tour: 巡回路（ノードIDの並び、最後のノードから先頭へ戻る）
        """
        count = len(tour)
        for i in range(count):
            current = tour[i]
            following = tour[(i + 1) % count]

            graph.decay_pheromones(current, self.decay)
            graph.deposit_pheromone(
                current, following, self.spread_forward, self.max_pheromone
            )
            graph.deposit_pheromone(
                following, current, self.spread_backward, self.max_pheromone
            )

        logger.debug("Reinforced %d edges along best tour", count)
