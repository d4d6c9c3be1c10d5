"""
位置（Position）モジュール

巡回対象となる2次元上の点を表現します。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """名前付きの2次元座標（スクリーン座標を想定した整数値）"""

    name: str  # 一意な識別子（重複時の動作は未定義）
    x: int
    y: int
