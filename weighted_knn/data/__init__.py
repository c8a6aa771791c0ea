from .dataset import Attribute, AttributeType, Dataset, read_csv

__all__ = ["Attribute", "AttributeType", "Dataset", "read_csv"]
