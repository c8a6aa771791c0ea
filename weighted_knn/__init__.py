"""k-nearest-neighbours with log-distance and Gaussian neighbour weighting."""
from .data import Attribute, AttributeType, Dataset, read_csv
from .errors import ConfigurationError, MissingClassError
from .models import IBkLG, ModelFactory, ZeroR
from .weighting import Weighting, WeightingConfig, build_distribution

__version__ = "0.1.0"

__all__ = [
    "Attribute",
    "AttributeType",
    "ConfigurationError",
    "Dataset",
    "IBkLG",
    "MissingClassError",
    "ModelFactory",
    "Weighting",
    "WeightingConfig",
    "ZeroR",
    "build_distribution",
    "read_csv",
]
