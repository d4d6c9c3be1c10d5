from .colony_solver import AntColonySolver, ColonyConfig, create_colony
from .pathfinder import PathFinder, PathfinderStats

__all__ = [
    "AntColonySolver",
    "ColonyConfig",
    "create_colony",
    "PathFinder",
    "PathfinderStats",
]
