from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import ElevatorConstraints
from .elevator import Elevator
from .floor import CallPool
from .passenger import Passenger
from .states import Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """World state delivered to the controller once per tick."""

    timestamp: int
    elevators: List[Elevator]
    calls: List[Passenger]
    is_end: bool = False


@dataclass
class Building:
    """The controller's view of the world: cars with their sweep directions plus hall calls."""

    constraints: ElevatorConstraints = field(default_factory=ElevatorConstraints)
    elevators: List[Elevator] = field(default_factory=list)
    calls: CallPool = field(default_factory=CallPool)
    timestamp: int = 0
    is_end: bool = False
    _known: Dict[int, Elevator] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.elevators = sorted(self.elevators, key=lambda e: e.elevator_id)
        self._known = {elevator.elevator_id: elevator for elevator in self.elevators}

    @classmethod
    def create(cls, elevator_count: int, constraints: Optional[ElevatorConstraints] = None) -> "Building":
        building = cls(
            constraints=constraints or ElevatorConstraints(),
            elevators=[Elevator(i) for i in range(elevator_count)],
        )
        building.assign_directions()
        return building

    @property
    def max_floor(self) -> int:
        return self.constraints.max_floor

    @property
    def max_carrying(self) -> int:
        return self.constraints.max_carrying

    def assign_directions(self) -> None:
        """Alternate sweep directions by index, starting with up."""
        if len(self._known) > 4:
            logger.info("Alternating directions across %d elevators", len(self._known))
        for index, elevator_id in enumerate(sorted(self._known)):
            self._known[elevator_id].direction = Direction.UP if index % 2 == 0 else Direction.DOWN

    def assign(self, elevator_id: int) -> Optional[Direction]:
        elevator = self._known.get(elevator_id)
        return elevator.direction if elevator else None

    def flip(self, elevator_id: int) -> Direction:
        direction = self._known[elevator_id].flip_direction()
        logger.info("Elevator %d now sweeping %s", elevator_id, direction.name)
        return direction

    def observe(self, snapshot: Snapshot) -> None:
        """Refresh cars and hall calls from a snapshot. Directions survive the refresh."""
        current: List[Elevator] = []
        for seen in snapshot.elevators:
            elevator = self._known.get(seen.elevator_id)
            if elevator is None:
                logger.warning("Snapshot reports unknown elevator %d", seen.elevator_id)
                elevator = self._known[seen.elevator_id] = Elevator(seen.elevator_id)
            elevator.observe(seen)
            current.append(elevator)
        self.elevators = sorted(current, key=lambda e: e.elevator_id)
        self.calls.ingest(snapshot.calls)
        self.timestamp = snapshot.timestamp
        self.is_end = snapshot.is_end

    def describe(self) -> str:
        lines = [f"timestamp={self.timestamp} is_end={self.is_end} waiting={len(self.calls)}"]
        for elevator in self.elevators:
            direction = elevator.direction.name if elevator.direction else "-"
            lines.append(
                f"  elevator {elevator.elevator_id}: {elevator.status.name} floor={elevator.floor} "
                f"carrying={elevator.load} sweep={direction}"
            )
        return "\n".join(lines)
