import numpy as np
import pytest

from weighted_knn.data.dataset import Attribute, AttributeType, Dataset


def _make_dataset(xs, ys, class_values=("a", "b"), weights=None):
    X = np.asarray(xs, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    attributes = [Attribute(f"x{i}") for i in range(X.shape[1])]
    if class_values is None:
        class_attribute = Attribute("target", AttributeType.NUMERIC)
    else:
        class_attribute = Attribute("class", AttributeType.NOMINAL, tuple(class_values))
    return Dataset(attributes, class_attribute, X, ys, weights)


@pytest.fixture
def make_dataset():
    return _make_dataset


@pytest.fixture
def clusters():
    """Two well separated groups on one numeric attribute."""
    return _make_dataset([0, 1, 2, 10, 11, 12], [0, 0, 0, 1, 1, 1])


@pytest.fixture
def noisy():
    """Class ``b`` noise point at 3.95 inside the ``a`` group.

    Hold-one-out errors with log weighting: 2 for k=1, 2 for k=2, 1 for k=3.
    """
    xs = [0, 0.3, 4, 4.3, 8, 8.3, 3.95, 20, 20.3, 24, 24.3]
    ys = [0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1]
    return _make_dataset(xs, ys)


@pytest.fixture
def numeric_line():
    """Numeric class equal to the attribute, with widening gaps."""
    xs = [0, 1, 3, 6, 10]
    return _make_dataset(xs, xs, class_values=None)
