# weighted_knn/errors.py


class ConfigurationError(ValueError):
    """Raised when a learner, search or distance configuration is rejected."""


class MissingClassError(RuntimeError):
    """Raised when a training instance used as a neighbour has no class value.

    This signals malformed training data and is never retried.
    """
