# weighted_knn/neighbours/search.py
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np
from sklearn.neighbors import BallTree

from ..data.dataset import Dataset
from ..errors import ConfigurationError
from ..utils.options import (
    Option,
    check_for_remaining_options,
    for_name,
    get_flag,
    get_option,
    join_options,
    parse_number,
)
from .distance import DISTANCE_FUNCTIONS, EuclideanDistance, NormalizableDistance
from .neighbour_set import NeighbourSet

logger = logging.getLogger(__name__)


class NearestNeighbourSearch(ABC):
    """Finds the k nearest training instances of a query."""

    def __init__(self) -> None:
        self.instances: Optional[Dataset] = None

    def set_instances(self, data: Dataset) -> None:
        self.instances = data

    def update(self, x) -> None:
        """Account for ``x``, just appended to the training instances."""
        self.set_instances(self.instances)

    def _check_ready(self) -> Dataset:
        if self.instances is None:
            raise RuntimeError(f"{type(self).__name__} has no training instances set.")
        return self.instances

    @abstractmethod
    def k_nearest_neighbours(self, x, k: int, skip_index: Optional[int] = None) -> NeighbourSet:
        """Return at least ``k`` neighbours (all of them when fewer exist).

        Neighbours tied with the k-th distance are included. ``skip_index``
        excludes one training instance, which is how hold-one-out evaluation
        leaves the query itself out.
        """

    def list_options(self) -> List[Option]:
        return []

    def set_options(self, options: List[str]) -> None:
        check_for_remaining_options(options)

    def get_options(self) -> List[str]:
        return []

    def spec(self) -> str:
        options = self.get_options()
        if not options:
            return type(self).__name__
        return " ".join([type(self).__name__, join_options(options)])


class LinearNNSearch(NearestNeighbourSearch):
    """Brute force search over every training instance."""

    def __init__(
        self,
        distance_function: Optional[NormalizableDistance] = None,
        skip_identical: bool = False,
    ) -> None:
        super().__init__()
        self.distance_function = distance_function or EuclideanDistance()
        self.skip_identical = skip_identical

    def set_instances(self, data: Dataset) -> None:
        super().set_instances(data)
        self.distance_function.set_instances(data)

    def update(self, x) -> None:
        self._check_ready()
        self.distance_function.update(x)

    def k_nearest_neighbours(self, x, k: int, skip_index: Optional[int] = None) -> NeighbourSet:
        data = self._check_ready()
        distances = self.distance_function.distances(x, data.X)
        keep = np.ones(len(distances), dtype=bool)
        if skip_index is not None:
            keep[skip_index] = False
        if self.skip_identical:
            keep &= distances > 0
        candidates = np.flatnonzero(keep)
        order = candidates[np.argsort(distances[candidates], kind="stable")]
        return NeighbourSet.from_training(data, order, distances[order]).prune_to_k(k)

    def list_options(self) -> List[Option]:
        return [
            Option("\tDistance function to use.\n"
                   "\t(default: EuclideanDistance)", "A", 1, "-A <classname and options>"),
            Option("\tSkip identical instances (distances equal to zero).", "S", 0, "-S"),
        ]

    def set_options(self, options: List[str]) -> None:
        options = list(options)
        spec = get_option("A", options)
        if spec:
            distance_function = for_name(DISTANCE_FUNCTIONS, spec, "distance function")
        else:
            distance_function = EuclideanDistance()
        skip_identical = get_flag("S", options)
        check_for_remaining_options(options)
        self.distance_function = distance_function
        self.skip_identical = skip_identical

    def get_options(self) -> List[str]:
        options = ["-A", self.distance_function.spec()]
        if self.skip_identical:
            options.append("-S")
        return options


def _check_leaf_size(leaf_size) -> int:
    if isinstance(leaf_size, bool) or not isinstance(leaf_size, (int, np.integer)) or leaf_size < 1:
        raise ConfigurationError(f"leaf size must be a positive integer, got {leaf_size!r}")
    return int(leaf_size)


class BallTreeSearch(NearestNeighbourSearch):
    """scikit-learn ``BallTree`` over range-normalised features.

    Nominal attributes are one-hot encoded and scaled by ``1/sqrt(2)`` so a
    mismatch adds exactly 1 to the squared distance, matching
    :class:`EuclideanDistance`. Missing feature values are not supported.
    """

    def __init__(self, leaf_size: int = 40) -> None:
        super().__init__()
        self.leaf_size = _check_leaf_size(leaf_size)
        self._distance = EuclideanDistance()
        self._tree: Optional[BallTree] = None
        self._dirty = True

    def set_instances(self, data: Dataset) -> None:
        super().set_instances(data)
        self._distance.set_instances(data)
        self._dirty = True

    def update(self, x) -> None:
        self._check_ready()
        self._distance.update(x)
        self._dirty = True

    def _encode(self, X: np.ndarray) -> np.ndarray:
        data = self._check_ready()
        X = np.atleast_2d(np.asarray(X, dtype=float))[:, self._distance.active_attributes]
        if np.isnan(X).any():
            raise ValueError("BallTreeSearch does not support missing values")
        columns = []
        scaled = self._distance.normalise(X)
        for j, attribute_index in enumerate(self._distance.active_attributes):
            attribute = data.attributes[attribute_index]
            if attribute.is_nominal:
                onehot = np.zeros((len(X), len(attribute.values)))
                onehot[np.arange(len(X)), X[:, j].astype(int)] = np.sqrt(0.5)
                columns.append(onehot)
            else:
                columns.append(scaled[:, j:j + 1])
        if not columns:
            return np.zeros((len(X), 0))
        return np.hstack(columns)

    def _build(self) -> None:
        data = self._check_ready()
        if len(data) == 0:
            self._tree = None
        else:
            self._tree = BallTree(self._encode(data.X), leaf_size=self.leaf_size)
            logger.debug("Built BallTree over %d instances", len(data))
        self._dirty = False

    def k_nearest_neighbours(self, x, k: int, skip_index: Optional[int] = None) -> NeighbourSet:
        data = self._check_ready()
        if self._dirty:
            self._build()
        if self._tree is None:
            return NeighbourSet.empty()
        k = max(k, 1)
        query = self._encode(x)
        wanted = min(len(data), k + (0 if skip_index is None else 1))
        distances, indices = self._tree.query(query, k=wanted)
        distances, indices = distances[0], indices[0]
        if skip_index is not None:
            distances = distances[indices != skip_index]
        if len(distances) == 0:
            return NeighbourSet.empty()
        # widen to everything tied with the k-th distance
        radius = distances[min(k, len(distances)) - 1]
        radius += 1e-9 * max(1.0, radius)
        indices, distances = self._tree.query_radius(
            query, r=radius, return_distance=True, sort_results=True
        )
        indices, distances = indices[0], distances[0]
        if skip_index is not None:
            keep = indices != skip_index
            indices, distances = indices[keep], distances[keep]
        return NeighbourSet.from_training(data, indices, distances).prune_to_k(k)

    def list_options(self) -> List[Option]:
        return [Option("\tLeaf size of the ball tree.\n\t(default: 40)", "L", 1, "-L <leaf size>")]

    def set_options(self, options: List[str]) -> None:
        options = list(options)
        value = get_option("L", options)
        leaf_size = _check_leaf_size(parse_number("L", value, int) if value else 40)
        check_for_remaining_options(options)
        self.leaf_size = leaf_size
        self._dirty = True

    def get_options(self) -> List[str]:
        return ["-L", str(self.leaf_size)]


SEARCH_ALGORITHMS = {
    "LinearNNSearch": LinearNNSearch,
    "BallTreeSearch": BallTreeSearch,
}


def search_for_name(spec: str) -> NearestNeighbourSearch:
    """Build a search from ``"LinearNNSearch -A \\"EuclideanDistance -R first-last\\""``."""
    return for_name(SEARCH_ALGORITHMS, spec, "NearestNeighbourSearch algorithm")
