"""
位置データの読み込み・生成・保存

- キャッシュされたスクリーン座標JSON（{"NAME": {"X": int, "Y": int}}）の読み込み
- CSV（name,x,y）の読み込み
- 実験用の合成配置（円周上、ランダム）
- 最良巡回路スナップショットの保存
"""

import csv
import json
import math
import random
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.position import Position


def load_positions_json(path: Path) -> List[Position]:
    """
    スクリーン座標JSONから位置を読み込みます。

    Args:
        path: JSONファイルのパス。キーは位置名、値は {"X": int, "Y": int}
              （小文字の "x", "y" も可）

    Returns:
        位置のリスト（ファイル内の出現順）
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    positions = []
    for name, point in data.items():
        x = point["X"] if "X" in point else point["x"]
        y = point["Y"] if "Y" in point else point["y"]
        positions.append(Position(name=str(name), x=int(x), y=int(y)))
    return positions


def load_positions_csv(path: Path) -> List[Position]:
    """
    CSV（name,x,y）から位置を読み込みます。ヘッダー行は任意です。
    """
    positions = []
    with open(path, "r", newline="", encoding="utf-8") as f:
        for row in csv.reader(f):
            if not row:
                continue
            if row[0].strip().lower() == "name":
                continue
            name, x, y = row[:3]
            positions.append(Position(name=name.strip(), x=int(x), y=int(y)))
    return positions


def load_positions(path: Path) -> List[Position]:
    """拡張子（.json / .csv）に応じて位置を読み込みます。"""
    path = Path(path)
    if path.suffix.lower() == ".csv":
        return load_positions_csv(path)
    if path.suffix.lower() == ".json":
        return load_positions_json(path)
    raise ValueError(f"Unknown positions file type: {path.suffix}")


def circle_positions(
    count: int, radius: int = 300, center: Sequence[int] = (960, 540)
) -> List[Position]:
    """円周上に等間隔で位置を配置します（凸配置、最適巡回路は外周順）。"""
    positions = []
    for i in range(count):
        angle = 2 * math.pi * i / count
        positions.append(
            Position(
                name=f"P{i:03d}",
                x=int(round(center[0] + radius * math.cos(angle))),
                y=int(round(center[1] + radius * math.sin(angle))),
            )
        )
    return positions


def random_positions(
    count: int, width: int = 1920, height: int = 1080, seed: Optional[int] = None
) -> List[Position]:
    """矩形領域内にランダムに位置を配置します。"""
    rng = random.Random(seed)
    return [
        Position(name=f"P{i:03d}", x=rng.randint(0, width), y=rng.randint(0, height))
        for i in range(count)
    ]


def save_best_snapshot(
    output_dir: Path,
    distance: float,
    stations: Sequence[str],
    started_at: datetime,
    index: int,
) -> Path:
    """
    最良巡回路のスナップショットをJSONで保存します。

    Args:
        output_dir: 保存先ディレクトリ
        distance: 巡回路長
        stations: 位置名の訪問順リスト
        started_at: 実行開始時刻（ファイル名に使用）
        index: 実行内での通し番号

    Returns:
        保存したファイルのパス
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    file_path = (
        output_dir / f"best_path.{started_at.strftime('%Y-%m-%d_%H%M')}.{index}.json"
    )
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump({"distance": distance, "stations": list(stations)}, f, indent=2)
    return file_path
