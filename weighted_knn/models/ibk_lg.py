#models/ibk_lg.py
"""k-nearest-neighbours with log-distance or Gaussian vote weighting.

Can select k by hold-one-out evaluation. See D. Aha, D. Kibler (1991).
Instance-based learning algorithms. Machine Learning. 6:37-66.
"""
import logging
import math
from typing import List, Optional

import numpy as np

from ..errors import ConfigurationError
from ..neighbours.neighbour_set import NeighbourSet
from ..neighbours.search import LinearNNSearch, NearestNeighbourSearch, search_for_name
from ..utils.options import (
    Option,
    check_for_remaining_options,
    get_flag,
    get_option,
    parse_number,
)
from ..weighting import Weighting, WeightingConfig, build_distribution
from .ibk import InstanceBasedLearner

logger = logging.getLogger(__name__)


class IBkLG(InstanceBasedLearner):
    """Instance-based learner weighting neighbours by log(distance) or a Gaussian.

    Parameters
    ----------
    k : int, default=1
        Number of nearest neighbours (upper bound when ``cross_validate``).
    window_size : int, default=0
        Maximum number of training instances kept (0 = no window).
    weighting : Weighting, default=Weighting.LOG
        Vote weighting. Values outside :class:`Weighting` give every
        neighbour the weight of a zero distance.
    sd : float, default=1.0
        Standard deviation of the zero-mean Gaussian.
    cross_validate : bool, default=False
        Select k between 1 and ``k`` by hold-one-out evaluation.
    mean_squared : bool, default=False
        Minimise mean squared rather than mean absolute error in
        hold-one-out evaluation with a numeric class.
    nn_search : NearestNeighbourSearch or None
        Search strategy; None means :class:`LinearNNSearch`.
    strict_weighting : bool, default=False
        Raise :class:`ConfigurationError` for a weighting outside
        :class:`Weighting` instead of falling back.
    debug : bool, default=False
        Verbose hold-one-out output.
    """

    def __init__(
        self,
        k: int = 1,
        *,
        window_size: int = 0,
        weighting: int = Weighting.LOG,
        sd: float = 1.0,
        cross_validate: bool = False,
        mean_squared: bool = False,
        nn_search: Optional[NearestNeighbourSearch] = None,
        strict_weighting: bool = False,
        debug: bool = False,
    ) -> None:
        super().__init__(
            k=k,
            window_size=window_size,
            cross_validate=cross_validate,
            mean_squared=mean_squared,
            nn_search=nn_search,
            debug=debug,
        )
        self.weighting = weighting
        self.sd = sd
        self.strict_weighting = strict_weighting

    # ------------------------------------------------------------------
    # Weighting

    def get_distance_weighting(self) -> int:
        return self.weighting

    def set_distance_weighting(self, mode) -> None:
        """Set the weighting; values other than LOG or GAUSSIAN are ignored."""
        try:
            self.weighting = Weighting(mode)
        except ValueError:
            logger.warning("Ignoring unknown distance weighting %r", mode)

    def weighting_config(self) -> WeightingConfig:
        return WeightingConfig(mode=self.weighting, sd=float(self.sd), strict=self.strict_weighting)

    def _check_params(self, params: Optional[dict] = None) -> None:
        params = params if params is not None else self.get_params(deep=False)
        super()._check_params(params)
        sd = params["sd"]
        if isinstance(sd, bool) or not isinstance(sd, (int, float)) \
                or not math.isfinite(sd) or sd <= 0:
            raise ConfigurationError(f"sd must be a positive number, got {sd!r}")
        if params["strict_weighting"] and params["weighting"] not in set(Weighting):
            raise ConfigurationError(f"Unknown distance weighting {params['weighting']!r}")

    def _make_distribution(self, neighbours: NeighbourSet) -> np.ndarray:
        return build_distribution(
            neighbours,
            self.weighting_config(),
            num_classes=self.header_.num_classes,
            class_type=self.header_.class_attribute.type,
            num_attributes_used=self.num_attributes_used_,
            training_size=self.window_.size,
        )

    # ------------------------------------------------------------------
    # Option handling

    def list_options(self) -> List[Option]:
        return [
            Option("\tWeighted Neighbors by log (distance) ", "L", 0, "-L"),
            Option("\tWeighted Neighbors by gaussian (distance) ", "G", 0, "-G"),
            Option("\tStandard Deviation for gaussian.(Default = 1.0)\n", "S", 1, "-S <sd>"),
            Option("\tNumber of nearest neighbors (k) used in classification.\n"
                   "\t(Default = 1)", "K", 1, "-K <number of neighbors>"),
            Option("\tMinimise mean squared error rather than mean absolute\n"
                   "\terror when using -X option with numeric prediction.", "E", 0, "-E"),
            Option("\tMaximum number of training instances maintained.\n"
                   "\tTraining instances are dropped FIFO. (Default = no window)",
                   "W", 1, "-W <window size>"),
            Option("\tSelect the number of nearest neighbors between 1\n"
                   "\tand the k value specified using hold-one-out evaluation\n"
                   "\ton the training data (use when k > 1)", "X", 0, "-X"),
            Option("\tThe nearest neighbor search algorithm to use "
                   "(default: LinearNNSearch).\n", "A", 1, "-A <search spec>"),
            Option("\tOutput debug information.", "D", 0, "-D"),
        ]

    def set_options(self, options: List[str]) -> None:
        """Parse a flat option list; nothing is applied unless all of it is valid."""
        options = list(options)
        params = {}

        value = get_option("K", options)
        params["k"] = parse_number("K", value, int) if value else 1
        value = get_option("W", options)
        params["window_size"] = parse_number("W", value, int) if value else 0

        if get_flag("L", options):
            params["weighting"] = Weighting.LOG
        elif get_flag("G", options):
            params["weighting"] = Weighting.GAUSSIAN
        else:
            params["weighting"] = Weighting.LOG
        value = get_option("S", options)
        params["sd"] = parse_number("S", value, float) if value else 1.0

        params["cross_validate"] = get_flag("X", options)
        params["mean_squared"] = get_flag("E", options)

        spec = get_option("A", options)
        params["nn_search"] = search_for_name(spec) if spec else LinearNNSearch()
        params["debug"] = get_flag("D", options)

        check_for_remaining_options(options)
        merged = {**self.get_params(deep=False), **params}
        self._check_params(merged)
        self.set_params(**params)

    def get_options(self) -> List[str]:
        options = [
            "-K", str(self.k),
            "-W", str(self.window_size),
            "-S", str(float(self.sd)),
        ]
        if self.cross_validate:
            options.append("-X")
        if self.mean_squared:
            options.append("-E")
        if self.weighting == Weighting.LOG:
            options.append("-L")
        elif self.weighting == Weighting.GAUSSIAN:
            options.append("-G")
        options += ["-A", self.search_algorithm().spec()]
        if self.debug:
            options.append("-D")
        return options

    # ------------------------------------------------------------------
    # Description

    def __str__(self) -> str:
        if not self.is_fitted:
            return "IBk: No model built yet."

        if self.window_.size == 0:
            return "Warning: no training instances - ZeroR model used."

        if self.cross_validate and not self._k_is_valid():
            self._cross_validate()

        result = "IB1 instance-based classifier\nusing " + str(self.neighbours_used)
        if self.weighting == Weighting.LOG:
            result += " log-distance-weighted"
        elif self.weighting == Weighting.GAUSSIAN:
            result += f" gaussian-distance-weighted (Mean:0, SD:{float(self.sd)})"
        result += " nearest neighbor(s) for classification\n"

        if self.window_size != 0:
            result += f"using a maximum of {self.window_size} (windowed) training instances\n"
        return result
