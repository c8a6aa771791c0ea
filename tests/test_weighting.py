import math

import numpy as np
import pytest

from weighted_knn.data.dataset import AttributeType
from weighted_knn.errors import ConfigurationError, MissingClassError
from weighted_knn.neighbours.neighbour_set import NeighbourSet
from weighted_knn.weighting import (
    EPSILON,
    Weighting,
    WeightingConfig,
    adjust_distances,
    build_distribution,
    gaussian,
    vote_weights,
)

NOMINAL = AttributeType.NOMINAL
NUMERIC = AttributeType.NUMERIC


def neighbours(classes, distances, weights=None):
    n = len(classes)
    return NeighbourSet(
        indices=np.arange(n),
        distances=np.asarray(distances, dtype=float),
        class_values=np.asarray(classes, dtype=float),
        weights=np.ones(n) if weights is None else np.asarray(weights, dtype=float),
    )


class TestVoteWeights:

    def test_gaussian_at_mean(self):
        assert gaussian(0.0, 1.0, 0.0) == pytest.approx(1 / math.sqrt(2 * math.pi))
        assert gaussian(0.0, 1.0, 0.0) == pytest.approx(0.3989, abs=1e-4)

    def test_gaussian_spread(self):
        # Wider gaussian is flatter at the mean and heavier in the tail
        assert gaussian(0.0, 2.0, 0.0) < gaussian(0.0, 1.0, 0.0)
        assert gaussian(0.0, 2.0, 3.0) > gaussian(0.0, 1.0, 3.0)

    def test_zero_distance_log_weight_is_finite_maximum(self):
        weights = vote_weights(np.array([0.0, 0.01, 0.5]), WeightingConfig(Weighting.LOG))
        assert np.all(np.isfinite(weights))
        assert weights[0] == pytest.approx(-math.log(EPSILON))
        assert weights[0] > weights[1] > weights[2]

    def test_unknown_mode_ignores_distance(self):
        weights = vote_weights(np.array([0.0, 0.5, 3.0]), WeightingConfig(mode=3))
        assert weights == pytest.approx([-math.log(1e-10)] * 3)

    def test_unknown_mode_strict(self):
        with pytest.raises(ConfigurationError):
            vote_weights(np.array([0.1]), WeightingConfig(mode=3, strict=True))

    def test_weighting_parse(self):
        assert Weighting.parse("gaussian") is Weighting.GAUSSIAN
        assert Weighting.parse(8) is Weighting.LOG
        with pytest.raises(ConfigurationError):
            Weighting.parse("cubic")


class TestAdjustDistances:

    def test_normalises_by_attribute_count(self):
        assert adjust_distances([2.0], 4) == pytest.approx([1.0])

    def test_changes_with_attribute_count(self):
        adjusted = [adjust_distances([0.8], n)[0] for n in range(1, 6)]
        assert all(a > b for a, b in zip(adjusted, adjusted[1:]))

    def test_zero_distance_unchanged(self):
        assert adjust_distances([0.0], 1)[0] == adjust_distances([0.0], 7)[0] == 0.0


class TestBuildDistribution:

    def test_closer_majority_wins(self):
        dist = build_distribution(
            neighbours([0, 0, 1], [0.1, 0.2, 0.1]),
            WeightingConfig(Weighting.LOG),
            num_classes=2, class_type=NOMINAL, num_attributes_used=1, training_size=100,
        )
        assert dist[0] > dist[1]
        assert dist.sum() == pytest.approx(1.0)

    def test_numeric_equal_weights_average(self):
        dist = build_distribution(
            neighbours([10.0, 20.0], [0.5, 0.5]),
            WeightingConfig(Weighting.LOG),
            num_classes=1, class_type=NUMERIC, num_attributes_used=1, training_size=2,
        )
        assert dist == pytest.approx([15.0])

    def test_log_distribution_is_probability(self):
        rng = np.random.default_rng(0)
        for _ in range(20):
            num_attributes = int(rng.integers(1, 5))
            k = int(rng.integers(1, 8))
            distances = rng.uniform(0, math.sqrt(num_attributes), size=k)
            classes = rng.integers(0, 3, size=k)
            dist = build_distribution(
                neighbours(classes, distances),
                WeightingConfig(Weighting.LOG),
                num_classes=3, class_type=NOMINAL,
                num_attributes_used=num_attributes, training_size=50,
            )
            assert np.all(dist >= 0)
            assert dist.sum() == pytest.approx(1.0)

    def test_gaussian_distribution_is_probability(self):
        dist = build_distribution(
            neighbours([0, 1, 1], [0.0, 0.4, 2.0]),
            WeightingConfig(Weighting.GAUSSIAN, sd=0.5),
            num_classes=2, class_type=NOMINAL, num_attributes_used=1, training_size=10,
        )
        assert dist.sum() == pytest.approx(1.0)
        assert dist[0] > dist[1]

    def test_unknown_mode_equals_zero_distance_log(self):
        nbrs = neighbours([0, 1, 1], [0.05, 0.3, 0.9])
        fallback = build_distribution(
            nbrs, WeightingConfig(mode=99),
            num_classes=2, class_type=NOMINAL, num_attributes_used=1, training_size=10,
        )
        zero = build_distribution(
            neighbours([0, 1, 1], [0.0, 0.0, 0.0]), WeightingConfig(Weighting.LOG),
            num_classes=2, class_type=NOMINAL, num_attributes_used=1, training_size=10,
        )
        assert fallback == pytest.approx(zero)
        assert fallback[1] > fallback[0]

    def test_instance_weights_scale_votes(self):
        dist = build_distribution(
            neighbours([0, 1], [0.2, 0.2], weights=[3.0, 1.0]),
            WeightingConfig(Weighting.LOG),
            num_classes=2, class_type=NOMINAL, num_attributes_used=1, training_size=10,
        )
        assert dist[0] > dist[1]

    def test_prior_with_no_neighbours(self):
        dist = build_distribution(
            NeighbourSet.empty(), WeightingConfig(),
            num_classes=4, class_type=NOMINAL, num_attributes_used=2, training_size=0,
        )
        assert dist == pytest.approx([0.25] * 4)

    def test_zero_total_left_unnormalised(self):
        # the gaussian underflows to exactly zero this far from the mean
        dist = build_distribution(
            neighbours([5.0], [10.0]), WeightingConfig(Weighting.GAUSSIAN, sd=1e-3),
            num_classes=1, class_type=NUMERIC, num_attributes_used=1, training_size=1,
        )
        assert dist.tolist() == [0.0]

    def test_missing_class_is_fatal(self):
        with pytest.raises(MissingClassError):
            build_distribution(
                neighbours([0, np.nan], [0.1, 0.2]), WeightingConfig(),
                num_classes=2, class_type=NOMINAL, num_attributes_used=1, training_size=5,
            )

    def test_input_distances_untouched(self):
        nbrs = neighbours([0, 1], [0.3, 0.6])
        build_distribution(
            nbrs, WeightingConfig(),
            num_classes=2, class_type=NOMINAL, num_attributes_used=4, training_size=5,
        )
        assert nbrs.distances.tolist() == [0.3, 0.6]
