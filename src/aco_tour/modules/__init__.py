from .pheromone import PheromoneReinforcer

__all__ = ["PheromoneReinforcer"]
