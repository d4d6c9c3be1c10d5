"""
アントコロニー Solverモジュール

全位置を一度ずつ訪問して戻る最短巡回路を近似するアントコロニー探索を実装します。

【アルゴリズム概要】
1. 各ラウンドで全アリをランダムな開始ノードに配置し、並行に巡回路を構築
2. 全アリの完了を待つ（バリア）。途中結果が外部から観測されることはない
3. 実距離の昇順でアリを順位付けし、これまでの最良を更新した場合は入れ替える
4. これまでの最良巡回路（今ラウンドの勝者とは限らない）に沿ってフェロモンを強化
5. 生成巡回路数をアリ数だけ加算

【並行性】
- ラウンド中、アリはグラフを読むだけで、フェロモンは書き換えない
- フェロモンの書き込みはバリア後のコーディネータスレッドのみが行う
- 開始ノードは配布前にコーディネータが乱数から順に引くため、
  シードを固定すればスレッドのスケジューリングに依らず結果が再現される
"""

import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from ..core.ant import Ant
from ..core.graph import PositionGraph
from ..core.position import Position
from ..exceptions import ColonyConfigError, NoBestTourError
from ..modules.pheromone import PheromoneReinforcer
from .pathfinder import PathFinder, PathfinderStats

logger = logging.getLogger(__name__)


@dataclass
class ColonyConfig:
    """
    アントコロニーの設定

    Attributes:
        ant_count: 1ラウンドあたりのアリ数
        max_pheromone_factor: フェロモン上限（距離に対する割引率の最大値）
        pheromone_spread_forward: 最良巡回路の進行方向エッジへの付加量
        pheromone_spread_backward: 最良巡回路の逆方向エッジへの付加量
        pheromone_decay: 最良巡回路上のノードから出る全エッジの揮発量
        positions: 巡回対象の位置
        seed: 開始ノード選択用の乱数シード（Noneで非決定的）
        max_workers: スレッドプールのサイズ（Noneでアリ数）
    """

    ant_count: int = 4
    max_pheromone_factor: float = 0.6
    pheromone_spread_forward: float = 0.01
    pheromone_spread_backward: float = 0.01
    pheromone_decay: float = 0.005
    positions: List[Position] = field(default_factory=list)
    seed: Optional[int] = None
    max_workers: Optional[int] = None

    @classmethod
    def from_dict(
        cls, section: Dict, positions: Sequence[Position], seed: Optional[int] = None
    ) -> "ColonyConfig":
        """
        設定ファイルの colony セクションから設定を生成します。

        Args:
            section: config.yaml の colony セクション
            positions: 巡回対象の位置
            seed: 乱数シード
        """
        defaults = cls()
        return cls(
            ant_count=section.get("ant_count", defaults.ant_count),
            max_pheromone_factor=section.get(
                "max_pheromone_factor", defaults.max_pheromone_factor
            ),
            pheromone_spread_forward=section.get(
                "pheromone_spread_forward", defaults.pheromone_spread_forward
            ),
            pheromone_spread_backward=section.get(
                "pheromone_spread_backward", defaults.pheromone_spread_backward
            ),
            pheromone_decay=section.get("pheromone_decay", defaults.pheromone_decay),
            positions=list(positions),
            seed=seed,
            max_workers=section.get("max_workers"),
        )

    def validate(self) -> None:
        """
        設定値を検証します。

        Raises:
            ColonyConfigError: 設定値が不正な場合
        """
        if self.ant_count <= 0:
            raise ColonyConfigError(f"ant_count must be positive, got {self.ant_count}")
        for name in (
            "max_pheromone_factor",
            "pheromone_spread_forward",
            "pheromone_spread_backward",
            "pheromone_decay",
        ):
            if getattr(self, name) < 0:
                raise ColonyConfigError(
                    f"{name} must be non-negative, got {getattr(self, name)}"
                )
        if len(self.positions) < 2:
            raise ColonyConfigError(
                f"at least 2 positions are required for a tour, got {len(self.positions)}"
            )
        if self.max_workers is not None and self.max_workers <= 0:
            raise ColonyConfigError(
                f"max_workers must be positive, got {self.max_workers}"
            )


class AntColonySolver(PathFinder):
    """
    アントコロニーによる巡回路探索器

    Attributes:
        config (ColonyConfig): 設定
        graph (PositionGraph): 位置グラフ
        ants (List[Ant]): アクティブなアリの集団
        best_ant (Optional[Ant]): リセット以降の最良アリ（以後のラウンドでは再利用しない）
        tours_generated (int): 生成した巡回路数
        rounds_run (int): 実行したラウンド数
        reinforcer (PheromoneReinforcer): フェロモン強化ロジック
    """

    def __init__(self, config: ColonyConfig):
        """
        Args:
            config: 設定（構築前に検証済みであること）
        """
        self.config = config
        self.graph = PositionGraph(config.positions)
        self.ants: List[Ant] = [Ant(ant_id=i) for i in range(config.ant_count)]
        self.best_ant: Optional[Ant] = None
        self.tours_generated = 0
        self.rounds_run = 0
        self.start_time = time.monotonic()

        self.rng = random.Random(config.seed)
        self.max_workers = config.max_workers or config.ant_count
        self.reinforcer = PheromoneReinforcer(
            config.max_pheromone_factor,
            config.pheromone_spread_forward,
            config.pheromone_spread_backward,
            config.pheromone_decay,
        )
        self._next_ant_id = config.ant_count

    def run_round(self) -> None:
        """
        1ラウンド（1世代）を実行します。

        Raises:
            TourConstructionError: いずれかのアリが巡回路を構築できなかった場合。
                失敗したラウンドは最良巡回路・フェロモン・カウンタを変更しない
        """
        position_count = self.graph.num_nodes

        # 【Step 1】開始ノードはコーディネータ側で順に決定（再現性のため）
        start_indices = [self.rng.randrange(position_count) for _ in self.ants]

        # 【Step 2】全アリを並行に走らせ、全員の完了を待つ（バリア）
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._construct_tour, ant, start, position_count)
                for ant, start in zip(self.ants, start_indices)
            ]
            # result()は各アリの例外を再送出する
            for future in futures:
                future.result()

        # 【Step 3】実距離の昇順で順位付け（安定ソート）
        self.ants.sort(key=lambda ant: ant.travelled)
        round_best = self.ants[0]

        # 【Step 4】最良を更新した場合、勝者を退避して新しいアリを補充
        if self.best_ant is None or round_best.travelled < self.best_ant.travelled:
            logger.debug(
                "New best tour %.3f (previous %s)",
                round_best.travelled,
                f"{self.best_ant.travelled:.3f}" if self.best_ant else None,
            )
            self.best_ant = round_best
            self.ants[0] = Ant(ant_id=self._next_ant_id)
            self._next_ant_id += 1

        # 【Step 5】これまでの最良巡回路に沿ってフェロモンを強化
        self.reinforcer.reinforce(self.graph, self.best_ant.tour)

        # 【Step 6】カウンタ更新
        self.tours_generated += self.config.ant_count
        self.rounds_run += 1

    def _construct_tour(self, ant: Ant, start_index: int, position_count: int) -> Ant:
        """
        1匹のアリに巡回路を構築させます（ワーカースレッドで実行）。

        Args:
            ant: 構築を行うアリ
            start_index: 開始ノードID
            position_count: ノード数
        """
        ant.reset(position_count, start_index)
        for _ in range(position_count - 1):
            ant.move_to_next_position(self.graph)
        ant.close_tour(self.graph)
        return ant

    def _require_best(self) -> Ant:
        if self.best_ant is None:
            raise NoBestTourError("no completed round since creation or last reset")
        return self.best_ant

    def get_best_path(self) -> List[str]:
        best_ant = self._require_best()
        return [self.graph.position(idx).name for idx in best_ant.tour]

    def get_best_tour(self) -> List[int]:
        """最良巡回路をノードIDのリストで取得します。"""
        return list(self._require_best().tour)

    def stats(self) -> PathfinderStats:
        best_ant = self._require_best()
        return PathfinderStats(
            paths_generated=self.tours_generated,
            run_time=timedelta(seconds=time.monotonic() - self.start_time),
            shortest_path=best_ant.travelled,
        )

    def get_positions(self) -> List[Position]:
        return list(self.config.positions)

    def reset(self) -> None:
        self.graph.reset_pheromones()
        self.best_ant = None
        self.tours_generated = 0
        self.rounds_run = 0
        self.start_time = time.monotonic()
        logger.info("Colony reset (%d positions)", self.graph.num_nodes)

    def __repr__(self) -> str:
        return (
            f"AntColonySolver(ants={self.config.ant_count}, "
            f"positions={self.graph.num_nodes}, rounds={self.rounds_run})"
        )


def create_colony(config: ColonyConfig) -> PathFinder:
    """
    設定を検証し、アントコロニー探索器を生成します。

    Raises:
        ColonyConfigError: 設定値が不正な場合
    """
    config.validate()
    return AntColonySolver(config)
