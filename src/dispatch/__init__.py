from __future__ import annotations

from typing import Dict, Type

from .actions import ActionAccumulator
from .interface import Action, Dispatcher
from .scan import ScanDispatcher

__all__ = [
    "Action",
    "ActionAccumulator",
    "Dispatcher",
    "ScanDispatcher",
    "get_dispatcher",
]


DISPATCHER_REGISTRY: Dict[str, Type[Dispatcher]] = {
    "scan": ScanDispatcher,
}


def get_dispatcher(name: str, **kwargs) -> Dispatcher:
    cls = DISPATCHER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(DISPATCHER_REGISTRY)}")
    return cls(**kwargs)
