from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional

from .interface import Action


class ActionAccumulator:
    """Per-tick command slots, one per elevator.

    Slots are allocated once for the elevator ids known at construction and
    reused every tick. Writing a slot twice in the same tick is an error.
    """

    def __init__(self, elevator_ids: Iterable[int]) -> None:
        self._index: Dict[int, int] = {}
        for elevator_id in sorted(set(elevator_ids)):
            self._index[elevator_id] = len(self._index)
        self._slots: List[Optional[Action]] = [None] * len(self._index)

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def elevator_ids(self) -> FrozenSet[int]:
        return frozenset(self._index)

    def clear(self) -> None:
        for i in range(len(self._slots)):
            self._slots[i] = None

    def put(self, action: Action) -> None:
        slot = self._index.get(action.elevator_id)
        if slot is None:
            raise KeyError(f"No action slot for elevator {action.elevator_id}")
        if self._slots[slot] is not None:
            raise ValueError(f"Elevator {action.elevator_id} already has an action this tick")
        self._slots[slot] = action

    def get(self, elevator_id: int) -> Optional[Action]:
        slot = self._index.get(elevator_id)
        return None if slot is None else self._slots[slot]

    def actions(self) -> List[Action]:
        return [action for action in self._slots if action is not None]

    def __contains__(self, elevator_id: int) -> bool:
        return self.get(elevator_id) is not None

    def __len__(self) -> int:
        return sum(1 for action in self._slots if action is not None)
