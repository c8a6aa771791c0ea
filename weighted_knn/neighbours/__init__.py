from .distance import DISTANCE_FUNCTIONS, EuclideanDistance, ManhattanDistance, NormalizableDistance
from .neighbour_set import NeighbourSet
from .search import (
    SEARCH_ALGORITHMS,
    BallTreeSearch,
    LinearNNSearch,
    NearestNeighbourSearch,
    search_for_name,
)
from .window import TrainingWindow

__all__ = [
    "DISTANCE_FUNCTIONS",
    "SEARCH_ALGORITHMS",
    "BallTreeSearch",
    "EuclideanDistance",
    "LinearNNSearch",
    "ManhattanDistance",
    "NearestNeighbourSearch",
    "NeighbourSet",
    "NormalizableDistance",
    "TrainingWindow",
    "search_for_name",
]
