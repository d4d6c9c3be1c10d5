"""
ACO Tour Package

アントコロニー最適化による巡回路（全位置を一度ずつ訪問して戻る経路）探索パッケージ
"""

__version__ = "1.0.0"

from .algorithms.colony_solver import AntColonySolver, ColonyConfig, create_colony
from .algorithms.pathfinder import PathFinder, PathfinderStats
from .core.ant import Ant
from .core.graph import PositionGraph
from .core.position import Position
from .exceptions import ColonyConfigError, NoBestTourError, TourConstructionError
from .modules.pheromone import PheromoneReinforcer

__all__ = [
    "AntColonySolver",
    "ColonyConfig",
    "create_colony",
    "PathFinder",
    "PathfinderStats",
    "Ant",
    "PositionGraph",
    "Position",
    "PheromoneReinforcer",
    "ColonyConfigError",
    "NoBestTourError",
    "TourConstructionError",
]
