from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Tuple

from simulation import Building, CommandKind


@dataclass(frozen=True)
class Action:
    """One command for one elevator in the current tick."""

    elevator_id: int
    kind: CommandKind
    passenger_ids: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.passenger_ids and not self.kind.carries_passengers:
            raise ValueError(f"{self.kind.value} does not take passenger ids")


class Dispatcher(Protocol):
    """Strategy interface turning the world view into this tick's commands."""

    def dispatch(self, building: Building) -> List[Action]:
        """
        Return at most one action per elevator, ordered by elevator id.

        Implementations may update the building's sweep directions and
        consume boarded passengers from its call pool.
        """
        ...
