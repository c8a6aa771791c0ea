#models/ibk.py
import copy
import logging
import math
from abc import abstractmethod
from typing import Optional

import numpy as np
from tqdm import tqdm

from ..data.dataset import Dataset
from ..errors import ConfigurationError
from ..neighbours.neighbour_set import NeighbourSet
from ..neighbours.search import LinearNNSearch, NearestNeighbourSearch
from ..neighbours.window import TrainingWindow
from .base.base import BaseModel
from .zero_r import ZeroR

logger = logging.getLogger(__name__)


class InstanceBasedLearner(BaseModel):
    """k-nearest-neighbours learner without a vote weighting of its own.

    Handles the parts every IBk variant shares: the FIFO training window,
    the neighbour search, the ZeroR fallback for an empty training set,
    incremental updates and hold-one-out selection of k. Subclasses turn a
    :class:`NeighbourSet` into a distribution in ``_make_distribution``.

    Parameters
    ----------
    k : int, default=1
        Number of neighbours, or the upper bound of the search when
        ``cross_validate`` is set.
    window_size : int, default=0
        Maximum number of training instances kept, oldest dropped first.
        0 keeps everything.
    cross_validate : bool, default=False
        Select k between 1 and ``k`` by hold-one-out evaluation.
    mean_squared : bool, default=False
        Minimise squared rather than absolute error when cross-validating
        a numeric class.
    nn_search : NearestNeighbourSearch or None
        Search strategy; None means :class:`LinearNNSearch`.
    debug : bool, default=False
        Log per-k hold-one-out results and show a progress bar.
    """

    def __init__(
        self,
        *,
        k: int = 1,
        window_size: int = 0,
        cross_validate: bool = False,
        mean_squared: bool = False,
        nn_search: Optional[NearestNeighbourSearch] = None,
        debug: bool = False,
    ) -> None:
        self.k = k
        self.window_size = window_size
        self.cross_validate = cross_validate
        self.mean_squared = mean_squared
        self.nn_search = nn_search
        self.debug = debug

    # ------------------------------------------------------------------
    # Abstract API for subclasses

    @abstractmethod
    def _make_distribution(self, neighbours: NeighbourSet) -> np.ndarray:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Parameters

    def _check_params(self, params: Optional[dict] = None) -> None:
        params = params if params is not None else self.get_params(deep=False)
        k = params["k"]
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
            raise ConfigurationError(f"k must be a positive integer, got {k!r}")
        window_size = params["window_size"]
        if isinstance(window_size, bool) or not isinstance(window_size, (int, np.integer)) \
                or window_size < 0:
            raise ConfigurationError(f"window_size must be a non-negative integer, got {window_size!r}")
        nn_search = params["nn_search"]
        if nn_search is not None and not isinstance(nn_search, NearestNeighbourSearch):
            raise ConfigurationError(f"nn_search must be a NearestNeighbourSearch, got {nn_search!r}")

    def search_algorithm(self) -> NearestNeighbourSearch:
        return self.nn_search if self.nn_search is not None else LinearNNSearch()

    @property
    def train_(self) -> Dataset:
        self._check_fitted()
        return self.window_.data

    @property
    def neighbours_used(self) -> int:
        """k in use: the hold-one-out choice once made, otherwise ``k``."""
        if self.cross_validate and self._k_is_valid():
            return self.k_
        return self.k

    def _k_is_valid(self) -> bool:
        return getattr(self, "k_valid_", False) and self.k_upper_ == self.k

    # ------------------------------------------------------------------
    # Training

    def fit(self, data: Dataset) -> "InstanceBasedLearner":
        self._check_params()
        if data.num_attributes == 0:
            raise ValueError("Dataset has no attributes to measure distances on.")
        self._set_header(data)
        self.default_model_ = ZeroR().fit(data)

        train = data.without_missing_class()
        # Throw away initial instances until within the window size
        if self.window_size > 0 and len(train) > self.window_size:
            train = train.tail(self.window_size)
        self.num_attributes_used_ = float(data.num_attributes)
        self.window_ = TrainingWindow(train, self.window_size)
        self.search_ = copy.deepcopy(self.search_algorithm())
        self.search_.set_instances(train)

        self.k_ = self.k
        self.k_upper_ = self.k
        self.k_valid_ = False
        logger.info(
            "Trained %s on %d instances (%d dropped)",
            type(self).__name__, len(train), len(data) - len(train),
        )
        return self

    def update(self, x, y: float, weight: float = 1.0) -> "InstanceBasedLearner":
        """Add one training instance; a missing class value is ignored."""
        self._check_fitted()
        if y is None or np.isnan(y):
            return self
        self.window_.capacity = self.window_size
        if self.window_.add(x, y, weight):
            self.search_.set_instances(self.train_)
        else:
            self.search_.update(x)
        self.k_valid_ = False
        return self

    def _apply_window(self) -> None:
        # window_size may have been lowered after training
        self.window_.capacity = self.window_size
        if self.window_.shrink_to(self.window_size):
            self.search_.set_instances(self.train_)
            self.k_valid_ = False

    # ------------------------------------------------------------------
    # Prediction

    def distribution_for_instance(self, x) -> np.ndarray:
        self._check_fitted()
        if self.window_.size == 0:
            return self.default_model_.distribution_for_instance(x)
        self._apply_window()
        if self.cross_validate and not self._k_is_valid():
            self._cross_validate()
        neighbours = self.search_.k_nearest_neighbours(x, self.neighbours_used)
        return self._make_distribution(neighbours)

    def _cross_validate(self) -> None:
        """Pick the k in 1..``k`` with the lowest hold-one-out error.

        Ties go to the smallest k.
        """
        try:
            k_upper = self.k
            train = self.train_
            numeric = not self.header_.class_is_nominal
            errors = np.zeros(k_upper)
            squared_errors = np.zeros(k_upper)

            for i in tqdm(range(len(train)), desc="Cross validating", disable=not self.debug):
                actual = train.y[i]
                neighbours = self.search_.k_nearest_neighbours(train.X[i], k_upper, skip_index=i)
                for j in range(k_upper - 1, -1, -1):
                    distribution = self._make_distribution(neighbours)
                    if numeric:
                        err = distribution[0] - actual
                        squared_errors[j] += err * err
                        errors[j] += abs(err)
                    elif np.argmax(distribution) != actual:
                        errors[j] += 1
                    if j >= 1:
                        neighbours = neighbours.prune_to_k(j)

            n = len(train)
            for i in range(k_upper):
                if not numeric:
                    logger.debug("Hold-one-out performance of %d neighbors (%%ERR) = %s",
                                 i + 1, 100.0 * errors[i] / n)
                elif self.mean_squared:
                    logger.debug("Hold-one-out performance of %d neighbors (RMSE) = %s",
                                 i + 1, math.sqrt(squared_errors[i] / n))
                else:
                    logger.debug("Hold-one-out performance of %d neighbors (MAE) = %s",
                                 i + 1, errors[i] / n)

            search_stats = squared_errors if numeric and self.mean_squared else errors
            best_k = int(np.argmin(search_stats)) + 1
        except Exception as e:
            raise RuntimeError(f"Couldn't optimize by cross-validation: {e}") from e

        self.k_ = best_k
        self.k_upper_ = k_upper
        self.k_valid_ = True
        logger.info("Selected k = %d", best_k)
