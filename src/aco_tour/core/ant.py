"""
アリ（Ant）クラス

巡回路を構築する探索エージェントを表現するモジュール。

【アリの役割】
ランダムな開始ノードから出発し、未訪問の隣接ノードのうち
「フェロモンで割り引いた距離」が最小のものへ貪欲に移動する。
全ノードを訪問した後、開始ノードへ戻って巡回路を閉じる。

【主要機能】
1. 経路記憶（タブーリスト）：訪問済みノードを記録し、再訪問を防止
2. 累積メトリクス：実距離と重み付き距離を追跡
3. グラフは読み取り専用で参照する（ラウンド中にフェロモンを書き換えない）
"""

from typing import List, Set

from ..exceptions import TourConstructionError
from .graph import PositionGraph


class Ant:
    """
    巡回路を構築するアリを表現するクラス

    Attributes:
        ant_id (int): アリの識別子
        visited (Set[int]): 訪問済みノードの集合
        tour (List[int]): 訪問順のノードIDリスト
        step (int): 現在位置を指すtour上のインデックス
        travelled (float): 実距離の累積
        weighted_travelled (float): 重み付き距離の累積

    Example:
        >>> ant = Ant(ant_id=0)
        >>> ant.reset(position_count=3, start_index=1)
        >>> ant.current_position()
        1
    """

    def __init__(self, ant_id: int = 0):
        self.ant_id = ant_id
        self.position_count = 0
        self.visited: Set[int] = set()
        self.tour: List[int] = []
        self.step = 0
        self.travelled = 0.0
        self.weighted_travelled = 0.0

    def reset(self, position_count: int, start_index: int) -> None:
        """
        アリを初期化し、指定ノードから開始させます。

        Args:
            position_count: 巡回対象のノード数
            start_index: 開始ノードID
        """
        self.position_count = position_count
        self.visited = {start_index}
        self.tour = [start_index]
        self.step = 0
        self.travelled = 0.0
        self.weighted_travelled = 0.0

    def current_position(self) -> int:
        return self.tour[self.step]

    def has_visited(self, node: int) -> bool:
        return node in self.visited

    def move_to_next_position(self, graph: PositionGraph) -> int:
        """
        未訪問の隣接ノードのうち、重み付き距離が最小のノードへ移動します。

        【選択ルール】
        - 重み付き距離 = (1 - フェロモン) * 距離
        - 隣接ノードは入力順に調べ、厳密に小さい場合のみ更新する
          （同値の場合は先に見つかった候補が残る）

        Args:
            graph: 位置グラフ（読み取り専用）

        Returns:
            移動先ノードID

        Raises:
            TourConstructionError: 未訪問の隣接ノードが存在しない場合
        """
        current = self.current_position()

        best_neighbour = None
        best_distance = 0.0
        best_weighted_distance = 0.0
        for neighbour, distance, pheromone in graph.iter_neighbours(current):
            if neighbour in self.visited:
                continue

            weighted_distance = (1 - pheromone) * distance
            if best_neighbour is None or weighted_distance < best_weighted_distance:
                best_neighbour = neighbour
                best_distance = distance
                best_weighted_distance = weighted_distance

        if best_neighbour is None:
            raise TourConstructionError(
                f"Ant {self.ant_id} found no unvisited neighbour from node {current} "
                f"after {self.step} steps"
            )

        self.step += 1
        self.tour.append(best_neighbour)
        self.visited.add(best_neighbour)
        self.travelled += best_distance
        self.weighted_travelled += best_weighted_distance

        return best_neighbour

    def close_tour(self, graph: PositionGraph) -> None:
        """
        最後のノードから開始ノードへ戻るエッジの距離を加算し、巡回路を閉じます。

        Note:
            ノード数が1の場合、戻りエッジが存在しないため KeyError になります。
        """
        last, start = self.tour[-1], self.tour[0]
        self.travelled += graph.distance(last, start)
        self.weighted_travelled += graph.weighted_distance(last, start)

    def is_complete(self) -> bool:
        """全ノードを訪問済みかチェックします。"""
        return len(self.tour) == self.position_count

    def __repr__(self) -> str:
        return (
            f"Ant(id={self.ant_id}, current={self.current_position() if self.tour else None}, "
            f"tour_len={len(self.tour)}, D={self.travelled:.1f}, W={self.weighted_travelled:.1f})"
        )
