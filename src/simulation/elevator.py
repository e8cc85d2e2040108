from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .passenger import Passenger
from .states import Direction, ElevatorStatus


class InvalidCommandError(ValueError):
    """Raised when a command is not allowed in the car's current state."""


@dataclass
class Elevator:
    """A car as seen by both the controller and the local simulator.

    ``direction`` is the controller's committed sweep direction. It is
    ``None`` for cars the controller was never initialised with and is
    never part of a snapshot.
    """

    elevator_id: int
    floor: int = 1
    passengers: List[Passenger] = field(default_factory=list)
    status: ElevatorStatus = ElevatorStatus.STOPPED
    direction: Optional[Direction] = None

    @property
    def load(self) -> int:
        return len(self.passengers)

    def available_capacity(self, max_carrying: int) -> int:
        return max(0, max_carrying - self.load)

    def arrivals(self) -> List[Passenger]:
        """Passengers aboard whose destination is the current floor."""
        return [p for p in self.passengers if p.destination == self.floor]

    def flip_direction(self) -> Direction:
        if self.direction is None:
            raise ValueError(f"Elevator {self.elevator_id} has no direction to flip")
        self.direction = self.direction.flipped()
        return self.direction

    def observe(self, other: "Elevator") -> None:
        """Take floor, status and occupants from a fresh snapshot, keeping the direction."""
        self.floor = other.floor
        self.status = other.status
        self.passengers = list(other.passengers)

    # Mechanics applied by the simulator when a command executes.

    def stop(self) -> None:
        if self.status is ElevatorStatus.OPEN:
            raise InvalidCommandError(f"Elevator {self.elevator_id} cannot stop with doors open")
        self.status = ElevatorStatus.STOPPED

    def open_doors(self) -> None:
        if self.status.is_moving:
            raise InvalidCommandError(f"Elevator {self.elevator_id} must stop before opening")
        self.status = ElevatorStatus.OPEN

    def close_doors(self) -> None:
        if self.status is not ElevatorStatus.OPEN:
            raise InvalidCommandError(f"Elevator {self.elevator_id} doors are not open")
        self.status = ElevatorStatus.STOPPED

    def move(self, direction: Direction, max_floor: int) -> None:
        if direction is Direction.UP:
            allowed = (ElevatorStatus.STOPPED, ElevatorStatus.MOVING_UP)
            target, status = self.floor + 1, ElevatorStatus.MOVING_UP
        else:
            allowed = (ElevatorStatus.STOPPED, ElevatorStatus.MOVING_DOWN)
            target, status = self.floor - 1, ElevatorStatus.MOVING_DOWN
        if self.status not in allowed:
            raise InvalidCommandError(
                f"Elevator {self.elevator_id} cannot move {direction.name} while {self.status.name}"
            )
        if not 1 <= target <= max_floor:
            raise InvalidCommandError(f"Elevator {self.elevator_id} cannot leave floors 1..{max_floor}")
        self.floor = target
        self.status = status

    def board(self, boarding: List[Passenger], max_carrying: int) -> None:
        if self.status is not ElevatorStatus.OPEN:
            raise InvalidCommandError(f"Elevator {self.elevator_id} doors are not open")
        if self.load + len(boarding) > max_carrying:
            raise InvalidCommandError(f"Elevator {self.elevator_id} would exceed capacity {max_carrying}")
        self.passengers.extend(boarding)

    def alight(self, passenger_ids: Iterable[int]) -> List[Passenger]:
        if self.status is not ElevatorStatus.OPEN:
            raise InvalidCommandError(f"Elevator {self.elevator_id} doors are not open")
        ids = set(passenger_ids)
        leaving = [p for p in self.passengers if p.passenger_id in ids]
        if len(leaving) != len(ids):
            missing = ids - {p.passenger_id for p in leaving}
            raise InvalidCommandError(f"Passengers {sorted(missing)} are not in elevator {self.elevator_id}")
        early = [p.passenger_id for p in leaving if p.destination != self.floor]
        if early:
            raise InvalidCommandError(f"Passengers {early} have not reached their destination")
        self.passengers = [p for p in self.passengers if p.passenger_id not in ids]
        return leaving
