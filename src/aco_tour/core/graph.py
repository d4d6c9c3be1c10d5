"""
グラフモジュール

NetworkXをベースとした位置グラフ（完全有向グラフ）の生成と管理を行います。

【主要機能】
1. グラフ生成：入力された全位置間に双方向の有向エッジを張る（完全グラフ）
2. エッジ属性管理：距離（構築時に固定）とフェロモン（可変）を保持
3. フェロモン管理：付加（上限付き）、揮発（0で下限）、全体リセット

【エッジの向き】
位置ペア(A, B)は A→B と B→A の2本のエッジを持ち、
それぞれのフェロモン量は独立に変化します。
"""

import logging
from typing import Dict, Iterator, List, Sequence, Tuple

import networkx as nx
import numpy as np

from .position import Position

logger = logging.getLogger(__name__)


class PositionGraph:
    """
    巡回路探索用のグラフクラス（NetworkXラッパー）

    ノードは入力順の整数インデックス、エッジは「あるノードから見た隣接ノード」として
    保持されます。隣接ノードの列挙順は「自分を除いた全位置の入力順」であり、
    アリの経路選択のタイブレークに影響するため変更してはいけません。

    Attributes:
        positions (List[Position]): 入力された位置のリスト
        graph (nx.DiGraph): NetworkXの有向グラフ

    Example:
        >>> graph = PositionGraph([Position("A", 0, 0), Position("B", 3, 4)])
        >>> graph.get_edge_attributes(0, 1)
        {'distance': 5.0, 'pheromone': 0.0}
    """

    def __init__(self, positions: Sequence[Position]):
        """
        グラフを初期化します。

        Args:
            positions: 巡回対象の位置のリスト

        Note:
            - 距離は構築時に一度だけ計算され、以後変更されません
            - フェロモンは0.0で初期化されます
        """
        self.positions: List[Position] = list(positions)
        self.graph = self._generate_graph()

    def _generate_graph(self) -> nx.DiGraph:
        """
        完全有向グラフを生成し、エッジ属性（距離、フェロモン）を初期化します。

        Returns:
            生成されたNetworkXのDiGraphオブジェクト
        """
        graph = nx.DiGraph()
        for idx, position in enumerate(self.positions):
            graph.add_node(idx, position=position)

        distances = self._distance_matrix()
        num_nodes = len(self.positions)
        for u in range(num_nodes):
            # 隣接順 = 入力順（自分自身はスキップ）
            for v in range(num_nodes):
                if u == v:
                    continue
                graph.add_edge(u, v, distance=float(distances[u, v]), pheromone=0.0)

        return graph

    def _distance_matrix(self) -> np.ndarray:
        """全位置間のユークリッド距離行列を計算します。"""
        coords = np.array([(p.x, p.y) for p in self.positions], dtype=float)
        coords = coords.reshape(-1, 2)
        diff = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
        return np.hypot(diff[..., 0], diff[..., 1])

    @property
    def num_nodes(self) -> int:
        return self.graph.number_of_nodes()

    def position(self, node: int) -> Position:
        return self.graph.nodes[node]["position"]

    def get_neighbors(self, node: int) -> List[int]:
        """
        指定されたノードの隣接ノードを取得します。

        Args:
            node: ノードID

        Returns:
            隣接ノードIDのリスト（入力順）
        """
        return list(self.graph.successors(node))

    def iter_neighbours(self, node: int) -> Iterator[Tuple[int, float, float]]:
        """
        隣接ノードを (ノードID, 距離, フェロモン) の形で入力順に列挙します。

        Note:
            アリの経路選択で使用されます。ラウンド中はフェロモンが書き換えられないため、
            複数スレッドからの同時読み出しが可能です。
        """
        for neighbour, attrs in self.graph.adj[node].items():
            yield neighbour, attrs["distance"], attrs["pheromone"]

    def get_edge_attributes(self, u: int, v: int) -> Dict[str, float]:
        """
        エッジの属性（距離、フェロモン）を取得します。

        Raises:
            KeyError: エッジ(u, v)が存在しない場合（不正なインデックス、u == v）
        """
        attrs = self.graph.edges[u, v]
        return {"distance": attrs["distance"], "pheromone": attrs["pheromone"]}

    def distance(self, u: int, v: int) -> float:
        return self.graph.edges[u, v]["distance"]

    def pheromone(self, u: int, v: int) -> float:
        return self.graph.edges[u, v]["pheromone"]

    def weighted_distance(self, u: int, v: int) -> float:
        """フェロモンで割り引いた知覚距離: (1 - pheromone) * distance"""
        attrs = self.graph.edges[u, v]
        return (1 - attrs["pheromone"]) * attrs["distance"]

    def deposit_pheromone(
        self, u: int, v: int, amount: float, max_pheromone: float
    ) -> None:
        """
        エッジ(u → v)にフェロモンを付加します（単方向）。

        Args:
            u: 始点ノードID
            v: 終点ノードID
            amount: 付加量
            max_pheromone: フェロモン上限値

        Note:
            フェロモン値は [0, max_pheromone] の範囲内に制限されます
        """
        attrs = self.graph.edges[u, v]
        attrs["pheromone"] = max(0.0, min(attrs["pheromone"] + amount, max_pheromone))

    def decay_pheromones(self, node: int, amount: float) -> None:
        """
        指定ノードから出ていく全エッジのフェロモンを一定量減少させます。

        Args:
            node: ノードID
            amount: 減少量（フェロモンは0を下回らない）
        """
        for attrs in self.graph.adj[node].values():
            attrs["pheromone"] = max(0.0, attrs["pheromone"] - amount)

    def reset_pheromones(self) -> None:
        """全エッジのフェロモンを0にリセットします。"""
        for _, _, attrs in self.graph.edges(data=True):
            attrs["pheromone"] = 0.0
        logger.debug("Pheromones reset on %d edges", self.graph.number_of_edges())

    def pheromone_levels(self) -> List[float]:
        """全エッジのフェロモン値を取得（検査・デバッグ用）"""
        return [attrs["pheromone"] for _, _, attrs in self.graph.edges(data=True)]

    def __repr__(self) -> str:
        return (
            f"PositionGraph(nodes={self.graph.number_of_nodes()}, "
            f"edges={self.graph.number_of_edges()})"
        )
