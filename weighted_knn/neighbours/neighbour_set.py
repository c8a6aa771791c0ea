# weighted_knn/neighbours/neighbour_set.py
from dataclasses import dataclass

import numpy as np

from ..data.dataset import Dataset


@dataclass(frozen=True)
class NeighbourSet:
    """Neighbours of one query, nearest first.

    ``distances`` are the raw distances of the search metric. ``class_values``
    and ``weights`` are copied from the training instances at ``indices``.
    """
    indices: np.ndarray
    distances: np.ndarray
    class_values: np.ndarray
    weights: np.ndarray

    @classmethod
    def from_training(cls, data: Dataset, indices, distances) -> "NeighbourSet":
        indices = np.asarray(indices, dtype=int)
        return cls(
            indices=indices,
            distances=np.asarray(distances, dtype=float),
            class_values=data.y[indices],
            weights=data.weights[indices],
        )

    @classmethod
    def empty(cls) -> "NeighbourSet":
        return cls(np.empty(0, dtype=int), np.empty(0), np.empty(0), np.empty(0))

    def __len__(self) -> int:
        return len(self.indices)

    def __getitem__(self, rows) -> "NeighbourSet":
        return NeighbourSet(
            self.indices[rows], self.distances[rows], self.class_values[rows], self.weights[rows]
        )

    def prune_to_k(self, k: int) -> "NeighbourSet":
        """Keep the first ``k`` neighbours plus any tied with the k-th distance."""
        k = max(k, 1)
        keep = k
        while keep < len(self) and self.distances[keep] == self.distances[keep - 1]:
            keep += 1
        if keep >= len(self):
            return self
        return self[:keep]
