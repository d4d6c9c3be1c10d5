"""
フェロモン強化のテスト
"""

import pytest

from aco_tour.core.graph import PositionGraph
from aco_tour.core.position import Position
from aco_tour.modules.pheromone import PheromoneReinforcer


@pytest.fixture
def triangle_graph():
    return PositionGraph(
        [Position("A", 0, 0), Position("B", 10, 0), Position("C", 10, 10)]
    )


class TestPheromoneReinforcer:
    """PheromoneReinforcerクラスのテスト"""

    def test_single_reinforcement(self, triangle_graph):
        """揮発 → 前方付加 → 後方付加の順に巡回路を一周する"""
        reinforcer = PheromoneReinforcer(
            max_pheromone=1.0, spread_forward=0.1, spread_backward=0.05, decay=0.01
        )
        reinforcer.reinforce(triangle_graph, [0, 1, 2])

        # 後方付加の直後に、次ノードの揮発で0.01減る
        assert triangle_graph.pheromone(0, 1) == pytest.approx(0.1)
        assert triangle_graph.pheromone(1, 0) == pytest.approx(0.04)
        assert triangle_graph.pheromone(1, 2) == pytest.approx(0.1)
        assert triangle_graph.pheromone(2, 1) == pytest.approx(0.04)
        assert triangle_graph.pheromone(2, 0) == pytest.approx(0.1)
        # 最後のペア（2 → 0）の後方付加は揮発済みの0に対して行われる
        assert triangle_graph.pheromone(0, 2) == pytest.approx(0.05)

    def test_clamped_to_max(self, triangle_graph):
        """上限を超えない"""
        reinforcer = PheromoneReinforcer(
            max_pheromone=0.15, spread_forward=0.1, spread_backward=0.1, decay=0.01
        )
        for _ in range(5):
            reinforcer.reinforce(triangle_graph, [0, 1, 2])

        assert triangle_graph.pheromone(0, 1) == pytest.approx(0.15)
        assert max(triangle_graph.pheromone_levels()) <= 0.15

    def test_decay_without_spread(self, triangle_graph):
        """付加量0なら揮発のみで、0を下回らない"""
        triangle_graph.deposit_pheromone(0, 1, 0.02, max_pheromone=1.0)
        reinforcer = PheromoneReinforcer(
            max_pheromone=1.0, spread_forward=0.0, spread_backward=0.0, decay=0.05
        )
        reinforcer.reinforce(triangle_graph, [0, 1, 2])

        assert all(level == 0.0 for level in triangle_graph.pheromone_levels())

    def test_two_position_tour(self):
        """2点の巡回路では両エッジが前方・後方の両方で強化される"""
        graph = PositionGraph([Position("A", 0, 0), Position("B", 3, 4)])
        reinforcer = PheromoneReinforcer(
            max_pheromone=1.0, spread_forward=0.1, spread_backward=0.05, decay=0.01
        )
        reinforcer.reinforce(graph, [0, 1])

        # i=0: 0->1 +0.1, 1->0 +0.05
        # i=1: 揮発 1->0 = 0.04, 1->0 +0.1, 0->1 +0.05
        assert graph.pheromone(0, 1) == pytest.approx(0.15)
        assert graph.pheromone(1, 0) == pytest.approx(0.14)
