#models/base/base.py
from pathlib import Path
from typing import List
from abc import ABC, abstractmethod
import joblib
import numpy as np

from sklearn.base import BaseEstimator

from ...data.dataset import Dataset


class BaseModel(BaseEstimator, ABC):
    """Template for learners: fit on a Dataset, return class distributions.

    Subclasses implement ``fit`` and ``distribution_for_instance``; prediction,
    label mapping and persistence are shared.
    """

    # ------------------------------------------------------------------
    # Abstract API for subclasses

    @abstractmethod
    def fit(self, data: Dataset) -> "BaseModel":
        raise NotImplementedError

    @abstractmethod
    def distribution_for_instance(self, x) -> np.ndarray:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Helpers

    def _set_header(self, data: Dataset) -> None:
        self.header_ = data.header()

    def _check_fitted(self) -> None:
        if getattr(self, "header_", None) is None:
            raise RuntimeError("Model not fitted.")

    @staticmethod
    def _as_matrix(X) -> np.ndarray:
        if isinstance(X, Dataset):
            return X.X
        return np.atleast_2d(np.asarray(X, dtype=float))

    # ------------------------------------------------------------------
    # Public API

    @property
    def is_fitted(self) -> bool:
        return getattr(self, "header_", None) is not None

    def distributions_for_instances(self, X) -> np.ndarray:
        self._check_fitted()
        rows = self._as_matrix(X)
        return np.vstack([self.distribution_for_instance(x) for x in rows]) if len(rows) \
            else np.empty((0, self.header_.num_classes))

    def classify_instance(self, x) -> float:
        """Class index (nominal) or value (numeric); NaN when undecided."""
        distribution = self.distribution_for_instance(x)
        if not self.header_.class_is_nominal:
            return float(distribution[0])
        if not len(distribution) or distribution.max() <= 0:
            return np.nan
        return float(np.argmax(distribution))

    def predict(self, X) -> np.ndarray:
        self._check_fitted()
        return np.array([self.classify_instance(x) for x in self._as_matrix(X)], dtype=float)

    def predict_labels(self, X) -> List[str]:
        # Convert class indices back to label strings
        return [self.header_.class_label(p) for p in self.predict(X)]

    def save(self, path: str | Path) -> Path:
        if not self.is_fitted:
            raise RuntimeError("Nothing to save. Fit the model first.")
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self, path, compress=3, protocol=5)
        return path

    @classmethod
    def load(cls, path: str | Path) -> "BaseModel":
        """Load a previously saved model."""
        obj = joblib.load(path)
        if not isinstance(obj, cls):
            raise TypeError(f"{path} holds a {type(obj).__name__}, not a {cls.__name__}")
        return obj
