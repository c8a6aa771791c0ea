# weighted_knn/data/dataset.py
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


class AttributeType(str, Enum):
    """Kinds of attribute a distance function knows how to compare."""
    NUMERIC = "numeric"
    NOMINAL = "nominal"


@dataclass(frozen=True)
class Attribute:
    name: str
    type: AttributeType = AttributeType.NUMERIC
    values: Tuple[str, ...] = ()

    @property
    def is_nominal(self) -> bool:
        return self.type is AttributeType.NOMINAL

    @property
    def is_numeric(self) -> bool:
        return self.type is AttributeType.NUMERIC


@dataclass
class Dataset:
    """Instances held as a float matrix with attribute metadata.

    Nominal features and a nominal class are stored as value indices, missing
    values as NaN. ``weights`` defaults to one per instance.
    """
    attributes: List[Attribute]
    class_attribute: Attribute
    X: np.ndarray
    y: np.ndarray
    weights: Optional[np.ndarray] = field(default=None)

    def __post_init__(self) -> None:
        self.attributes = list(self.attributes)
        X = np.asarray(self.X, dtype=float)
        if X.ndim == 1 and X.size == 0:
            X = X.reshape(0, len(self.attributes))
        if X.ndim != 2 or X.shape[1] != len(self.attributes):
            raise ValueError(
                f"X must have shape (n, {len(self.attributes)}), got {X.shape}"
            )
        y = np.asarray(self.y, dtype=float).reshape(-1)
        if len(y) != len(X):
            raise ValueError(f"Got {len(X)} rows but {len(y)} class values")
        if self.weights is None:
            weights = np.ones(len(X), dtype=float)
        else:
            weights = np.asarray(self.weights, dtype=float).reshape(-1)
            if len(weights) != len(X):
                raise ValueError(f"Got {len(X)} rows but {len(weights)} weights")
        self.X, self.y, self.weights = X, y, weights

    # ------------------------------------------------------------------
    # Header information

    @property
    def num_instances(self) -> int:
        return len(self.y)

    def __len__(self) -> int:
        return self.num_instances

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def class_is_nominal(self) -> bool:
        return self.class_attribute.is_nominal

    @property
    def num_classes(self) -> int:
        if self.class_is_nominal:
            return len(self.class_attribute.values)
        return 1

    def header(self) -> "Dataset":
        """An empty dataset with the same attributes."""
        return self.subset([])

    # ------------------------------------------------------------------
    # Row selection and mutation

    def subset(self, rows) -> "Dataset":
        return replace(
            self,
            X=self.X[rows].copy(),
            y=self.y[rows].copy(),
            weights=self.weights[rows].copy(),
        )

    def copy(self) -> "Dataset":
        return self.subset(slice(None))

    def tail(self, count: int) -> "Dataset":
        """The ``count`` most recently added instances."""
        start = max(0, self.num_instances - count)
        return self.subset(slice(start, None))

    def without_missing_class(self) -> "Dataset":
        return self.subset(~np.isnan(self.y))

    def append(self, x: Sequence[float], y: float, weight: float = 1.0) -> None:
        row = np.asarray(x, dtype=float).reshape(1, -1)
        if row.shape[1] != self.num_attributes:
            raise ValueError(
                f"Instance has {row.shape[1]} values, expected {self.num_attributes}"
            )
        self.X = np.vstack([self.X, row])
        self.y = np.append(self.y, float(y))
        self.weights = np.append(self.weights, float(weight))

    def delete_first(self, count: int = 1) -> None:
        self.X = self.X[count:]
        self.y = self.y[count:]
        self.weights = self.weights[count:]

    # ------------------------------------------------------------------
    # Class labels

    def class_label(self, value: float) -> str:
        if np.isnan(value):
            return "?"
        if self.class_is_nominal:
            return self.class_attribute.values[int(value)]
        return str(value)

    # ------------------------------------------------------------------
    # pandas conversion

    @staticmethod
    def _infer_attribute(name: str, series: pd.Series, nominal: bool = False) -> Attribute:
        if not nominal and pd.api.types.is_numeric_dtype(series) \
                and not pd.api.types.is_bool_dtype(series):
            return Attribute(name, AttributeType.NUMERIC)
        labels = sorted({str(v) for v in series.dropna()})
        return Attribute(name, AttributeType.NOMINAL, tuple(labels))

    @staticmethod
    def _encode_column(attribute: Attribute, series: pd.Series) -> np.ndarray:
        if attribute.is_numeric:
            return pd.to_numeric(series, errors="coerce").to_numpy(dtype=float)
        lookup: Dict[str, float] = {v: float(i) for i, v in enumerate(attribute.values)}
        return np.array(
            [np.nan if pd.isna(v) else lookup.get(str(v), np.nan) for v in series],
            dtype=float,
        )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        class_column: Optional[str] = None,
        *,
        weight_column: Optional[str] = None,
        nominal_columns: Iterable[str] = (),
    ) -> "Dataset":
        """Build a dataset from a DataFrame.

        The class defaults to the last column. Numeric columns become numeric
        attributes, everything else (and ``nominal_columns``) nominal.
        """
        if class_column is None:
            class_column = df.columns[-1]
        if class_column not in df.columns:
            raise KeyError(f"Class column '{class_column}' not in data")
        nominal = set(nominal_columns)
        feature_cols = [c for c in df.columns if c not in (class_column, weight_column)]
        attributes = [cls._infer_attribute(str(c), df[c], c in nominal) for c in feature_cols]
        class_attribute = cls._infer_attribute(
            str(class_column), df[class_column], class_column in nominal
        )
        header = cls(attributes, class_attribute, np.empty((0, len(attributes))), np.empty(0))
        return header.encode_frame(df, weight_column=weight_column)

    def encode_frame(self, df: pd.DataFrame, *, weight_column: Optional[str] = None) -> "Dataset":
        """Encode ``df`` with this dataset's header.

        Unknown nominal labels and a missing class column become NaN.
        """
        missing = [a.name for a in self.attributes if a.name not in df.columns]
        if missing:
            raise KeyError(f"Columns missing from data: {missing}")
        if self.attributes:
            X = np.column_stack([self._encode_column(a, df[a.name]) for a in self.attributes])
        else:
            X = np.empty((len(df), 0))
        if self.class_attribute.name in df.columns:
            y = self._encode_column(self.class_attribute, df[self.class_attribute.name])
        else:
            y = np.full(len(df), np.nan)
        weights = None
        if weight_column is not None:
            weights = pd.to_numeric(df[weight_column], errors="coerce").fillna(1.0).to_numpy(dtype=float)
        return replace(self, X=X, y=y, weights=weights)


def read_csv(
    path: str | Path,
    class_column: Optional[str] = None,
    *,
    weight_column: Optional[str] = None,
    nominal_columns: Iterable[str] = (),
) -> Dataset:
    df = pd.read_csv(path)
    return Dataset.from_frame(
        df, class_column, weight_column=weight_column, nominal_columns=nominal_columns
    )
