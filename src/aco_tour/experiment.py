"""
実験実行スクリプト

config.yamlの設定に基づき、アントコロニー探索をバッチ単位で実行します。
各バッチの終了時に全体の最良を更新していればスナップショットを保存し、
探索器をリセットして次のバッチへ進みます。
"""

import argparse
import csv
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .algorithms.colony_solver import ColonyConfig, create_colony
from .algorithms.pathfinder import PathFinder
from .core.position import Position
from .exceptions import ColonyConfigError, NoBestTourError, TourConstructionError
from .utils.metrics import ConvergenceLog, perimeter_by_angle, relative_gap
from .utils.positions import (
    circle_positions,
    load_positions,
    random_positions,
    save_best_snapshot,
)
from .utils.visualization import Visualizer

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"


def load_config(config_path: Path) -> dict:
    """
    設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス

    Returns:
        設定辞書
    """
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)
    return config


def build_positions(config: dict) -> List[Position]:
    """
    設定の positions セクションから位置を用意する

    Raises:
        ValueError: 未知の source が指定された場合
    """
    section = config["positions"]
    source = section.get("source", "circle")

    if source in ("json", "csv"):
        return load_positions(Path(section["path"]))
    if source == "circle":
        return circle_positions(section["count"], section.get("radius", 300))
    if source == "random":
        return random_positions(
            section["count"],
            section.get("width", 1920),
            section.get("height", 1080),
            seed=config["experiment"].get("seed"),
        )
    raise ValueError(f"Unknown positions source: {source}")


def run_batch(
    pathfinder: PathFinder,
    batch: int,
    rounds: int,
    report_interval: int,
    convergence_log: ConvergenceLog,
) -> None:
    """
    1バッチ分のラウンドを実行し、一定間隔で進捗を記録する

    Args:
        pathfinder: 探索器
        batch: バッチ番号（0-indexed）
        rounds: ラウンド数
        report_interval: 進捗記録の間隔（ラウンド数）
        convergence_log: 収束ログ
    """
    for i in range(rounds):
        pathfinder.run_round()
        if i % report_interval == 0 or i == rounds - 1:
            stats = pathfinder.stats()
            convergence_log.record(batch, i + 1, stats)
            logger.info(
                "batch=%d round=%d shortest=%.3f generated=%d",
                batch + 1,
                i + 1,
                stats.shortest_path,
                stats.paths_generated,
            )


def run_experiment(
    config: dict, output_dir: Path, positions: Optional[List[Position]] = None
) -> Dict:
    """
    バッチループを実行し、結果を保存する

    Args:
        config: 設定辞書
        output_dir: 結果出力ディレクトリ
        positions: 位置（Noneの場合は設定から用意）

    Returns:
        {"best_distance", "best_path", "snapshots", "convergence"} の辞書
    """
    started_at = datetime.now()
    if positions is None:
        positions = build_positions(config)

    experiment = config["experiment"]
    output = config.get("output") or {}

    batches = experiment.get("batches", 1)
    rounds = experiment.get("rounds_per_batch", 100)
    report_interval = max(1, experiment.get("report_interval", 100))
    if batches < 1 or rounds < 1:
        raise ValueError(
            f"batches and rounds_per_batch must be at least 1, got {batches} and {rounds}"
        )

    colony_config = ColonyConfig.from_dict(
        config.get("colony") or {}, positions, seed=experiment.get("seed")
    )
    pathfinder = create_colony(colony_config)

    print("=" * 80)
    print(f"Experiment: {experiment.get('name', 'tour')}")
    print(f"Positions: {len(positions)}, Ants: {colony_config.ant_count}")
    print("=" * 80)

    output_dir.mkdir(parents=True, exist_ok=True)
    convergence_log = ConvergenceLog()
    snapshots: List[Path] = []
    best_distance = float("inf")
    best_path: Optional[List[str]] = None

    for batch in range(batches):
        print(f"\nBatch {batch + 1}/{batches}")
        run_batch(pathfinder, batch, rounds, report_interval, convergence_log)

        stats = pathfinder.stats()
        if stats.shortest_path < best_distance:
            best_distance = stats.shortest_path
            best_path = pathfinder.get_best_path()
            logger.info("Found new best: %f", best_distance)
            if output.get("save_snapshots", True):
                snapshots.append(
                    save_best_snapshot(
                        output_dir / "paths",
                        best_distance,
                        best_path,
                        started_at,
                        len(snapshots),
                    )
                )

        pathfinder.reset()

    # ===== 収束ログの保存 =====
    with open(output_dir / "convergence.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(ConvergenceLog.FIELDS)
        writer.writerows(convergence_log.rows())

    print(f"\n{'='*80}")
    print("Summary")
    print(f"{'='*80}")
    print(f"Best distance: {best_distance:.3f}")
    if config.get("positions", {}).get("source") == "circle":
        reference = perimeter_by_angle(positions)
        print(f"Perimeter reference: {reference:.3f}")
        print(f"Gap: {relative_gap(best_distance, reference):.3%}")

    if output.get("save_graphs", False) and best_path is not None:
        visualizer = Visualizer(output_dir)
        visualizer.plot_tour(positions, best_path, best_distance)
        visualizer.plot_convergence(convergence_log)

    return {
        "best_distance": best_distance,
        "best_path": best_path,
        "snapshots": snapshots,
        "convergence": convergence_log,
    }


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aco-tour",
        description="Ant colony search for the shortest closed tour over 2-D positions",
    )
    parser.add_argument(
        "--config", type=str, default=str(DEFAULT_CONFIG_PATH), help="config.yaml のパス"
    )
    parser.add_argument(
        "--positions", type=str, default=None, help="位置ファイル（.json / .csv）"
    )
    parser.add_argument("--batches", type=int, default=None, help="バッチ数")
    parser.add_argument("--rounds", type=int, default=None, help="1バッチのラウンド数")
    parser.add_argument("--seed", type=int, default=None, help="乱数シード")
    parser.add_argument("--output-dir", type=str, default=None, help="結果出力ディレクトリ")
    parser.add_argument("--no-graphs", action="store_true", help="図を保存しない")
    parser.add_argument("--verbose", action="store_true", help="デバッグログを出力")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """メイン実験ループ"""
    args = build_argparser().parse_args(argv)
    config = load_config(Path(args.config))

    # ===== コマンドライン引数で上書き =====
    if args.positions:
        suffix = Path(args.positions).suffix.lower().lstrip(".")
        config["positions"] = {"source": suffix, "path": args.positions}
    if args.batches is not None:
        config["experiment"]["batches"] = args.batches
    if args.rounds is not None:
        config["experiment"]["rounds_per_batch"] = args.rounds
    if args.seed is not None:
        config["experiment"]["seed"] = args.seed
    config["output"] = config.get("output") or {}
    if args.no_graphs:
        config["output"]["save_graphs"] = False

    level = "DEBUG" if args.verbose else config["output"].get("log_level", "INFO")
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # ===== 出力ディレクトリの作成 =====
    if args.output_dir:
        results_dir = Path(args.output_dir)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_dir = Path(config["output"].get("results_dir", "results")) / timestamp

    try:
        run_experiment(config, results_dir)
    except ColonyConfigError as e:
        logger.error("Invalid colony configuration: %s", e)
        return 2
    except ValueError as e:
        logger.error("Invalid experiment configuration: %s", e)
        return 2
    except (TourConstructionError, NoBestTourError) as e:
        logger.error("Aborting, round failed: %s", e)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
