from .base.base import BaseModel
from .base.factory import ModelFactory
from .ibk import InstanceBasedLearner
from .ibk_lg import IBkLG
from .zero_r import ZeroR

__all__ = ["BaseModel", "IBkLG", "InstanceBasedLearner", "ModelFactory", "ZeroR"]
