"""
評価指標モジュール

巡回路長の再計算、凸配置における参照解（外周長）との比較、
ラウンドごとの収束ログを扱います。
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from ..algorithms.pathfinder import PathfinderStats
from ..core.position import Position


def tour_length(positions: Sequence[Position], names: Sequence[str]) -> float:
    """
    位置名の訪問順から閉じた巡回路の長さを再計算します。

    Args:
        positions: 全位置
        names: 訪問順の位置名（最後から先頭へ戻る）

    Raises:
        KeyError: 未知の位置名が含まれる場合
    """
    by_name: Dict[str, Position] = {p.name: p for p in positions}
    coords = np.array([(by_name[n].x, by_name[n].y) for n in names], dtype=float)
    if len(coords) < 2:
        return 0.0
    diff = np.roll(coords, -1, axis=0) - coords
    return float(np.hypot(diff[:, 0], diff[:, 1]).sum())


def perimeter_by_angle(positions: Sequence[Position]) -> float:
    """
    重心まわりの偏角順に並べた閉路長を計算します。

    凸配置（円周上など）では、これが最短巡回路（外周）の長さになります。
    """
    coords = np.array([(p.x, p.y) for p in positions], dtype=float)
    if len(coords) < 2:
        return 0.0
    centered = coords - coords.mean(axis=0)
    order = np.argsort(np.arctan2(centered[:, 1], centered[:, 0]), kind="stable")
    ordered = coords[order]
    diff = np.roll(ordered, -1, axis=0) - ordered
    return float(np.hypot(diff[:, 0], diff[:, 1]).sum())


def relative_gap(value: float, reference: float) -> float:
    """参照値に対する相対誤差 (value - reference) / reference"""
    if reference == 0:
        return 0.0 if value == 0 else float("inf")
    return (value - reference) / reference


@dataclass
class ConvergenceRecord:
    """収束ログの1行"""

    batch: int
    round: int
    paths_generated: int
    shortest_path: float
    run_time_seconds: float


class ConvergenceLog:
    """ラウンドごとの最良巡回路長を記録するクラス"""

    FIELDS = ["batch", "round", "paths_generated", "shortest_path", "run_time_seconds"]

    def __init__(self):
        self.records: List[ConvergenceRecord] = []

    def record(self, batch: int, round_index: int, stats: PathfinderStats) -> None:
        self.records.append(
            ConvergenceRecord(
                batch=batch,
                round=round_index,
                paths_generated=stats.paths_generated,
                shortest_path=stats.shortest_path,
                run_time_seconds=stats.run_time.total_seconds(),
            )
        )

    def rows(self) -> List[List]:
        """CSV書き出し用の行リスト（ヘッダーなし）"""
        return [
            [r.batch, r.round, r.paths_generated, r.shortest_path, r.run_time_seconds]
            for r in self.records
        ]

    def series(self, batch: int) -> List[ConvergenceRecord]:
        return [r for r in self.records if r.batch == batch]

    def batches(self) -> List[int]:
        return sorted({r.batch for r in self.records})

    def __len__(self) -> int:
        return len(self.records)
