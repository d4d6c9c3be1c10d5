"""
可視化モジュール

最良巡回路と、バッチごとの最良巡回路長の推移を画像として保存します。
"""

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from ..core.position import Position  # noqa: E402
from .metrics import ConvergenceLog  # noqa: E402


class Visualizer:
    """可視化を行うクラス"""

    def __init__(self, output_dir: Path):
        """
        Args:
            output_dir: 出力ディレクトリ
        """
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def plot_tour(
        self,
        positions: Sequence[Position],
        best_path: Sequence[str],
        distance: float,
        filename: str = "best_tour.png",
    ) -> Path:
        """
        巡回路を描画（位置は点、巡回路は閉じた折れ線）

        Args:
            positions: 全位置
            best_path: 訪問順の位置名
            distance: 巡回路長（タイトルに表示）
            filename: 保存するファイル名
        """
        by_name = {p.name: p for p in positions}
        xs = [by_name[n].x for n in best_path] + [by_name[best_path[0]].x]
        ys = [by_name[n].y for n in best_path] + [by_name[best_path[0]].y]

        fig, ax = plt.subplots(figsize=(12, 7))
        ax.plot(xs, ys, c="red", linewidth=1.0, zorder=1)
        ax.scatter(
            [p.x for p in positions],
            [p.y for p in positions],
            c="black",
            s=12,
            zorder=2,
        )
        for p in positions:
            ax.annotate(p.name, (p.x, p.y), fontsize=7, xytext=(0, 6),
                        textcoords="offset points", ha="center")

        # スクリーン座標（y軸下向き）
        ax.invert_yaxis()
        ax.set_aspect("equal", adjustable="datalim")
        ax.set_title(f"Shortest: {distance:.3f}")

        output_path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(output_path, dpi=150)
        plt.close(fig)
        print(f"Saved: {output_path}")
        return output_path

    def plot_convergence(
        self, log: ConvergenceLog, filename: str = "convergence.png"
    ) -> Path:
        """
        バッチごとの最良巡回路長の推移を描画

        Args:
            log: 収束ログ
            filename: 保存するファイル名
        """
        fig, ax = plt.subplots(figsize=(10, 6))
        for batch in log.batches():
            series = log.series(batch)
            ax.plot(
                [r.round for r in series],
                [r.shortest_path for r in series],
                marker="o",
                markersize=3,
                label=f"Batch {batch + 1}",
            )

        ax.set_xlabel("Round", fontsize=12)
        ax.set_ylabel("Shortest tour length", fontsize=12)
        ax.legend()
        ax.grid(True, alpha=0.3)

        output_path = self.output_dir / filename
        plt.tight_layout()
        plt.savefig(output_path, dpi=150)
        plt.close(fig)
        print(f"Saved: {output_path}")
        return output_path
