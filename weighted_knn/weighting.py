# weighted_knn/weighting.py
"""Turn a query's neighbours into a class distribution.

Each raw distance ``d`` is first rescaled to ``sqrt(d*d / num_attributes)``
and then converted into a vote weight, either ``-ln(d + 1e-10)`` or a zero-mean
Gaussian density. Votes are scaled by the neighbours' instance weights and
accumulated per class (nominal target) or into a weighted sum (numeric
target).
"""
import math
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from .data.dataset import AttributeType
from .errors import ConfigurationError, MissingClassError
from .neighbours.neighbour_set import NeighbourSet

# Floor added to the distance so a zero distance gets a finite log weight
EPSILON = 1e-10


class Weighting(IntEnum):
    LOG = 8
    GAUSSIAN = 16

    @classmethod
    def parse(cls, value) -> "Weighting":
        """Accept a member, its tag value or its (case-insensitive) name."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigurationError(f"Unknown distance weighting '{value}'") from None
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown distance weighting {value!r}") from None


@dataclass(frozen=True)
class WeightingConfig:
    """Weighting settings captured for a single distribution build.

    ``mode`` may hold a value outside :class:`Weighting`; such a mode gives
    every neighbour the weight of a zero distance unless ``strict`` is set.
    """
    mode: int = Weighting.LOG
    sd: float = 1.0
    strict: bool = False


def gaussian(mean: float, sd: float, x):
    return np.exp(-((x - mean) * (x - mean)) / (2 * sd * sd)) / np.sqrt(2 * np.pi * sd * sd)


def adjust_distances(distances, num_attributes_used: float) -> np.ndarray:
    distances = np.asarray(distances, dtype=float)
    squared = distances * distances
    return np.sqrt(squared / num_attributes_used)


def vote_weights(adjusted: np.ndarray, config: WeightingConfig) -> np.ndarray:
    if config.mode == Weighting.LOG:
        return -np.log(adjusted + EPSILON)
    if config.mode == Weighting.GAUSSIAN:
        return gaussian(0.0, config.sd, adjusted)
    if config.strict:
        raise ConfigurationError(f"Unknown distance weighting {config.mode!r}")
    return np.full(adjusted.shape, -math.log(EPSILON))


def build_distribution(
    neighbours: NeighbourSet,
    config: WeightingConfig,
    num_classes: int,
    class_type: AttributeType,
    num_attributes_used: float,
    training_size: int,
) -> np.ndarray:
    """Distance-weighted class distribution of ``neighbours``.

    For a nominal class every slot starts from a ``1 / training_size`` prior
    and the result sums to 1. For a numeric class slot 0 holds the weighted
    mean of the neighbours' class values. When the accumulated weight is not
    positive the raw, unnormalised slots are returned.

    Raises:
        MissingClassError: if a neighbour has no usable class value.
        ConfigurationError: for an unknown mode when ``config.strict`` is set.
    """
    if neighbours is None:
        raise ValueError("neighbours must not be None")

    class_values = np.asarray(neighbours.class_values, dtype=float)
    if np.isnan(class_values).any():
        raise MissingClassError("Data has no class attribute!")

    weights = vote_weights(adjust_distances(neighbours.distances, num_attributes_used), config)
    weights = weights * neighbours.weights

    distribution = np.zeros(num_classes if class_type == AttributeType.NOMINAL else 1)
    total = 0.0
    if class_type == AttributeType.NOMINAL:
        # Laplace-style correction to the estimator
        distribution[:] = 1.0 / max(1, training_size)
        total = num_classes / max(1, training_size)
        labels = class_values.astype(int)
        if ((labels < 0) | (labels >= num_classes)).any():
            raise MissingClassError("Data has no class attribute!")
        np.add.at(distribution, labels, weights)
    else:
        distribution[0] = np.sum(class_values * weights)
    total += float(np.sum(weights))

    if total > 0:
        distribution /= total
    return distribution
