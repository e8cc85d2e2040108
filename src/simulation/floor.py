from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .passenger import Passenger
from .states import Direction


@dataclass
class Floor:
    """Passengers waiting at one floor, in arrival order."""

    number: int
    waiting: List[Passenger] = field(default_factory=list)

    def add_passenger(self, passenger: Passenger) -> None:
        self.waiting.append(passenger)

    def boardable(self, direction: Direction, capacity: int) -> List[Passenger]:
        """First ``capacity`` passengers heading in ``direction``. Does not remove them."""
        if capacity <= 0:
            return []
        selected: List[Passenger] = []
        for passenger in self.waiting:
            if passenger.direction is not direction:
                continue
            selected.append(passenger)
            if len(selected) >= capacity:
                break
        return selected

    def remove(self, passenger_ids: Iterable[int]) -> List[Passenger]:
        ids = set(passenger_ids)
        removed = [p for p in self.waiting if p.passenger_id in ids]
        self.waiting = [p for p in self.waiting if p.passenger_id not in ids]
        return removed

    def __len__(self) -> int:  # pragma: no cover - convenience
        return len(self.waiting)


class CallPool:
    """Hall calls grouped by origin floor.

    The pool is rebuilt from every snapshot, so the only mutation between
    two ingests is :meth:`consume` after a boarding decision.
    """

    def __init__(self, passengers: Iterable[Passenger] = ()) -> None:
        self._floors: Dict[int, Floor] = {}
        self.ingest(passengers)

    def ingest(self, passengers: Iterable[Passenger]) -> None:
        self._floors = {}
        for passenger in passengers:
            self.add(passenger)

    def add(self, passenger: Passenger) -> None:
        floor = self._floors.get(passenger.origin)
        if floor is None:
            floor = self._floors[passenger.origin] = Floor(passenger.origin)
        floor.add_passenger(passenger)

    def floor(self, number: int) -> Floor:
        floor = self._floors.get(number)
        return floor if floor is not None else Floor(number)

    def peek(self, floor: int) -> List[Passenger]:
        return list(self.floor(floor).waiting)

    def consume(self, floor: int, passenger_ids: Iterable[int]) -> List[Passenger]:
        entry = self._floors.get(floor)
        if entry is None:
            return []
        removed = entry.remove(passenger_ids)
        if not entry.waiting:
            del self._floors[floor]
        return removed

    def waiting(self) -> List[Passenger]:
        """Every waiting passenger, oldest first."""
        everyone = [p for floor in self._floors.values() for p in floor.waiting]
        return sorted(everyone, key=lambda p: (p.arrival_time, p.passenger_id))

    def __len__(self) -> int:
        return sum(len(floor.waiting) for floor in self._floors.values())
