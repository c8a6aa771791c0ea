#models/zero_r.py
import numpy as np

from ..data.dataset import Dataset
from .base.base import BaseModel


class ZeroR(BaseModel):
    """Predicts the class distribution (or mean) of the training data.

    Used by the instance-based learners when no training instances remain.
    """

    def fit(self, data: Dataset) -> "ZeroR":
        self._set_header(data)
        data = data.without_missing_class()
        if data.class_is_nominal:
            counts = np.ones(data.num_classes)
            np.add.at(counts, data.y.astype(int), data.weights)
            self.distribution_ = counts / counts.sum() if counts.sum() > 0 else counts
        else:
            total = data.weights.sum()
            mean = float(np.sum(data.y * data.weights) / total) if total > 0 else 0.0
            self.distribution_ = np.array([mean])
        return self

    def distribution_for_instance(self, x) -> np.ndarray:
        self._check_fitted()
        return self.distribution_.copy()

    def __str__(self) -> str:
        if not self.is_fitted:
            return "ZeroR: No model built yet."
        if self.header_.class_is_nominal:
            if not len(self.distribution_):
                return "ZeroR predicts class value: ?"
            label = self.header_.class_label(float(np.argmax(self.distribution_)))
        else:
            label = str(self.distribution_[0])
        return f"ZeroR predicts class value: {label}"
