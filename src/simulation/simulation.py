from __future__ import annotations

import copy
import logging
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Optional, Protocol, Sequence, Set

from .building import Snapshot
from .config import DispatchConfig, ElevatorConstraints, Scenario, get_scenario
from .elevator import Elevator, InvalidCommandError
from .floor import CallPool
from .passenger import Passenger
from .states import CommandKind, Direction

logger = logging.getLogger(__name__)


class Command(Protocol):
    elevator_id: int
    kind: CommandKind
    passenger_ids: Sequence[int]


@dataclass
class MetricsSnapshot:
    time_step: int
    delivered: int
    average_wait: float
    wait_p95: float
    average_ride: float
    ride_p95: float


class MetricsTracker:
    def __init__(self) -> None:
        self.wait_times: List[int] = []
        self.ride_times: List[int] = []

    def record_wait_time(self, passenger: Passenger) -> None:
        if passenger.wait_time is not None:
            self.wait_times.append(passenger.wait_time)

    def record_ride_time(self, passenger: Passenger) -> None:
        if passenger.ride_time is not None:
            self.ride_times.append(passenger.ride_time)

    @property
    def delivered(self) -> int:
        return len(self.ride_times)

    @staticmethod
    def _average(values: List[int]) -> float:
        return sum(values) / len(values) if values else 0.0

    @staticmethod
    def _percentile(values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        ordered = sorted(values)
        k = (len(ordered) - 1) * percentile
        low, high = math.floor(k), math.ceil(k)
        if low == high:
            return float(ordered[low])
        return float(ordered[low] * (high - k) + ordered[high] * (k - low))

    def snapshot(self, time_step: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            time_step=time_step,
            delivered=self.delivered,
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            average_ride=self._average(self.ride_times),
            ride_p95=self._percentile(self.ride_times, 0.95),
        )


class Simulation:
    """In-process stand-in for the scoring server.

    Passengers are generated up front and released into the hall calls when
    their arrival time is reached. Every call to :meth:`apply` executes one
    tick's commands and advances the clock by one.
    """

    def __init__(
        self,
        scenario: Scenario,
        elevator_count: int,
        max_carrying: int = 8,
        random_seed: Optional[int] = None,
        passengers: Optional[List[Passenger]] = None,
    ) -> None:
        if elevator_count < 1:
            raise ValueError(f"elevator_count must be positive, got {elevator_count}")
        self.scenario = scenario
        self.constraints = ElevatorConstraints(max_floor=scenario.max_floor, max_carrying=max_carrying)
        self.elevators = [Elevator(i) for i in range(elevator_count)]
        self.calls = CallPool()
        self.random = random.Random(random_seed)
        self.current_time: int = 0
        self.metrics = MetricsTracker()
        if passengers is None:
            passengers = self._generate_passengers()
        ordered = sorted(passengers, key=lambda p: (p.arrival_time, p.passenger_id))
        self._pending: Deque[Passenger] = deque(ordered)
        self.total_passengers = len(self._pending)
        self._release_arrivals()

    @classmethod
    def from_config(cls, config: DispatchConfig) -> "Simulation":
        return cls(
            scenario=get_scenario(config.problem_id),
            elevator_count=config.elevator_count,
            max_carrying=config.constraints.max_carrying,
            random_seed=config.random_seed,
        )

    @property
    def is_end(self) -> bool:
        return self.metrics.delivered >= self.total_passengers or self.current_time >= self.scenario.max_ticks

    def snapshot(self) -> Snapshot:
        return Snapshot(
            timestamp=self.current_time,
            elevators=copy.deepcopy(self.elevators),
            calls=copy.deepcopy(self.calls.waiting()),
            is_end=self.is_end,
        )

    def apply(self, commands: Iterable[Command]) -> None:
        """Execute one tick's commands atomically, then advance the clock."""
        if self.is_end:
            raise InvalidCommandError("The simulation has already ended")
        commands = list(commands)
        seen: Set[int] = set()
        for command in commands:
            if command.elevator_id in seen:
                raise InvalidCommandError(f"More than one command for elevator {command.elevator_id}")
            seen.add(command.elevator_id)

        elevators = copy.deepcopy(self.elevators)
        calls = copy.deepcopy(self.calls)
        boarded: List[Passenger] = []
        delivered: List[Passenger] = []
        for command in commands:
            self._execute(elevators, calls, command, boarded, delivered)

        self.elevators, self.calls = elevators, calls
        for passenger in boarded:
            self.metrics.record_wait_time(passenger)
        for passenger in delivered:
            self.metrics.record_ride_time(passenger)

        self.current_time += 1
        self._release_arrivals()
        if self.is_end:
            logger.info(
                "Simulation ended at t=%d with %d/%d delivered",
                self.current_time,
                self.metrics.delivered,
                self.total_passengers,
            )

    def _execute(
        self,
        elevators: List[Elevator],
        calls: CallPool,
        command: Command,
        boarded: List[Passenger],
        delivered: List[Passenger],
    ) -> None:
        elevator = self._get_elevator(elevators, command.elevator_id)
        kind = CommandKind(command.kind)
        ids = list(command.passenger_ids or ())
        if ids and not kind.carries_passengers:
            raise InvalidCommandError(f"{kind.value} does not take passenger ids")
        if kind.carries_passengers and not ids:
            raise InvalidCommandError(f"{kind.value} needs at least one passenger id")
        if len(set(ids)) != len(ids):
            raise InvalidCommandError(f"Duplicate passenger ids in {kind.value}")

        if kind is CommandKind.STOP:
            elevator.stop()
        elif kind is CommandKind.OPEN:
            elevator.open_doors()
        elif kind is CommandKind.CLOSE:
            elevator.close_doors()
        elif kind is CommandKind.UP:
            elevator.move(Direction.UP, self.constraints.max_floor)
        elif kind is CommandKind.DOWN:
            elevator.move(Direction.DOWN, self.constraints.max_floor)
        elif kind is CommandKind.ENTER:
            waiting = {p.passenger_id for p in calls.peek(elevator.floor)}
            absent = [pid for pid in ids if pid not in waiting]
            if absent:
                raise InvalidCommandError(f"Passengers {absent} are not waiting at floor {elevator.floor}")
            entering = [p for p in calls.peek(elevator.floor) if p.passenger_id in set(ids)]
            elevator.board(entering, self.constraints.max_carrying)
            calls.consume(elevator.floor, ids)
            for passenger in entering:
                passenger.record_boarding(self.current_time)
            boarded.extend(entering)
        elif kind is CommandKind.EXIT:
            leaving = elevator.alight(ids)
            for passenger in leaving:
                passenger.record_alighting(self.current_time)
            delivered.extend(leaving)

    def _get_elevator(self, elevators: List[Elevator], elevator_id: int) -> Elevator:
        for elevator in elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        raise InvalidCommandError(f"Unknown elevator {elevator_id}")

    def _release_arrivals(self) -> None:
        released = 0
        while self._pending and self._pending[0].arrival_time <= self.current_time:
            passenger = self._pending.popleft()
            self.calls.add(passenger)
            released += 1
        if released:
            logger.debug("t=%d: %d passengers arrived", self.current_time, released)

    def _generate_passengers(self) -> List[Passenger]:
        passengers: List[Passenger] = []
        time_step = 0
        while len(passengers) < self.scenario.passenger_count:
            arrivals = self._poisson(self.scenario.arrival_rate)
            for _ in range(min(arrivals, self.scenario.passenger_count - len(passengers))):
                origin = self.random.randint(1, self.scenario.max_floor)
                passengers.append(
                    Passenger(
                        passenger_id=len(passengers),
                        origin=origin,
                        destination=self._choose_destination(origin),
                        arrival_time=time_step,
                    )
                )
            time_step += 1
        return passengers

    def _choose_destination(self, origin: int) -> int:
        possible_floors = [f for f in range(1, self.scenario.max_floor + 1) if f != origin]
        return self.random.choice(possible_floors)

    def _poisson(self, lam: float) -> int:
        if lam <= 0:
            return 0
        threshold = math.exp(-lam)
        k = 0
        p = 1.0
        while p > threshold:
            k += 1
            p *= self.random.random()
        return k - 1
