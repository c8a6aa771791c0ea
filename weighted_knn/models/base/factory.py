## models/base/factory.py

from typing import Dict, List, Optional, Type

from ..ibk_lg import IBkLG
from ..zero_r import ZeroR
from .base import BaseModel

_REGISTRY: Dict[str, Type[BaseModel]] = {
    "ibklg": IBkLG,
    "zeror": ZeroR,
}


class ModelFactory:
    @staticmethod
    def create(name: str, options: Optional[List[str]] = None, **kwargs) -> BaseModel:
        key = (name or "").lower()
        if key not in _REGISTRY:
            raise ValueError(f"Unknown model '{name}'. Try one of: {', '.join(sorted(_REGISTRY))}")
        model = _REGISTRY[key](**kwargs)
        if options:
            if not hasattr(model, "set_options"):
                raise ValueError(f"Model '{name}' takes no options")
            model.set_options(options)
        return model

    @staticmethod
    def choices() -> tuple[str, ...]:
        return tuple(sorted(_REGISTRY.keys()))
