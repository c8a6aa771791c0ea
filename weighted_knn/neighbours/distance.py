# weighted_knn/neighbours/distance.py
import logging
import warnings
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from ..data.dataset import Dataset
from ..utils.options import (
    Option,
    check_for_remaining_options,
    get_flag,
    get_option,
    join_options,
    parse_range,
)

logger = logging.getLogger(__name__)


class NormalizableDistance(ABC):
    """Attribute-wise distance with optional min/max range normalisation.

    Nominal attributes differ by 0 or 1. Numeric attributes are scaled into
    the range seen in the training data unless ``dont_normalize`` is set.
    """

    def __init__(self, attribute_indices: str = "first-last", dont_normalize: bool = False) -> None:
        self.attribute_indices = attribute_indices
        self.dont_normalize = dont_normalize
        self._active: Optional[np.ndarray] = None
        self._nominal: Optional[np.ndarray] = None
        self._lo: Optional[np.ndarray] = None
        self._hi: Optional[np.ndarray] = None

    # ------------------------------------------------------------------
    # Training data

    def set_instances(self, data: Dataset) -> None:
        self._active = np.asarray(parse_range(self.attribute_indices, data.num_attributes), dtype=int)
        self._nominal = np.array([data.attributes[i].is_nominal for i in self._active], dtype=bool)
        values = data.X[:, self._active]
        if len(values) == 0:
            self._lo = np.full(len(self._active), np.nan)
            self._hi = np.full(len(self._active), np.nan)
        else:
            with warnings.catch_warnings():
                # all-missing columns keep a NaN range
                warnings.simplefilter("ignore", RuntimeWarning)
                self._lo = np.nanmin(values, axis=0)
                self._hi = np.nanmax(values, axis=0)
        logger.debug("%s ranges over %d attributes", type(self).__name__, len(self._active))

    def update(self, x) -> None:
        """Widen the attribute ranges to cover a newly added instance."""
        self._check_ready()
        values = np.asarray(x, dtype=float)[self._active]
        self._lo = np.fmin(self._lo, values)
        self._hi = np.fmax(self._hi, values)

    def _check_ready(self) -> None:
        if self._active is None:
            raise RuntimeError(f"{type(self).__name__} has no training instances set.")

    def normalise(self, values: np.ndarray) -> np.ndarray:
        """Scale active-attribute values into their training range."""
        if self.dont_normalize:
            return values
        width = self._hi - self._lo
        valid = np.isfinite(width) & (width != 0)
        safe = np.where(valid, width, 1.0)
        return np.where(valid, (values - self._lo) / safe, 0.0)

    @property
    def active_attributes(self) -> np.ndarray:
        self._check_ready()
        return self._active

    # ------------------------------------------------------------------
    # Distances

    def differences(self, x, X: np.ndarray) -> np.ndarray:
        """Per-attribute differences between ``x`` and every row of ``X``."""
        self._check_ready()
        q = np.asarray(x, dtype=float)[self._active]
        M = np.asarray(X, dtype=float)[:, self._active]
        q_missing = np.broadcast_to(np.isnan(q), M.shape)
        m_missing = np.isnan(M)

        qn = np.broadcast_to(self.normalise(q), M.shape)
        Mn = self.normalise(M)
        known = np.where(q_missing, Mn, qn)
        if not self.dont_normalize:
            known = np.where(known < 0.5, 1.0 - known, known)
        numeric = np.where(q_missing ^ m_missing, known, qn - Mn)
        numeric = np.where(q_missing & m_missing, 1.0, numeric)

        qb = np.broadcast_to(q, M.shape)
        nominal = np.where(q_missing | m_missing | (qb != M), 1.0, 0.0)
        return np.where(self._nominal, nominal, numeric)

    @abstractmethod
    def combine(self, differences: np.ndarray) -> np.ndarray:
        """Reduce an (n, attributes) difference matrix to n distances."""

    def distances(self, x, X: np.ndarray) -> np.ndarray:
        return self.combine(self.differences(x, X))

    def distance(self, a, b) -> float:
        return float(self.distances(a, np.asarray(b, dtype=float).reshape(1, -1))[0])

    # ------------------------------------------------------------------
    # Options

    def list_options(self) -> List[Option]:
        return [
            Option("\tTurns off the normalization of attribute values in distance calculation.",
                   "D", 0, "-D"),
            Option("\tSpecifies list of columns to used in the calculation of the\n"
                   "\tdistance. 'first' and 'last' are valid indices.\n"
                   "\t(default: first-last)", "R", 1, "-R <col1,col2-col4,...>"),
        ]

    def set_options(self, options: List[str]) -> None:
        options = list(options)
        dont_normalize = get_flag("D", options)
        attribute_indices = get_option("R", options) or "first-last"
        check_for_remaining_options(options)
        self.dont_normalize = dont_normalize
        self.attribute_indices = attribute_indices

    def get_options(self) -> List[str]:
        options = []
        if self.dont_normalize:
            options.append("-D")
        options += ["-R", self.attribute_indices]
        return options

    def spec(self) -> str:
        return " ".join([type(self).__name__, join_options(self.get_options())])


class EuclideanDistance(NormalizableDistance):

    def combine(self, differences: np.ndarray) -> np.ndarray:
        return np.sqrt(np.sum(differences * differences, axis=1))


class ManhattanDistance(NormalizableDistance):

    def combine(self, differences: np.ndarray) -> np.ndarray:
        return np.sum(np.abs(differences), axis=1)


DISTANCE_FUNCTIONS = {
    "EuclideanDistance": EuclideanDistance,
    "ManhattanDistance": ManhattanDistance,
}
