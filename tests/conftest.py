"""
Shared pytest fixtures for LiftDispatch tests.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import pytest

from simulation import (
    Building,
    Elevator,
    ElevatorConstraints,
    Passenger,
    Scenario,
    Snapshot,
)


@pytest.fixture
def make_passenger():
    """Factory for passengers; arrival time defaults to the id so creation order is arrival order."""

    def _make(passenger_id: int, origin: int, destination: int, arrival_time: Optional[int] = None) -> Passenger:
        return Passenger(
            passenger_id=passenger_id,
            origin=origin,
            destination=destination,
            arrival_time=passenger_id if arrival_time is None else arrival_time,
        )

    return _make


@pytest.fixture
def constraints() -> ElevatorConstraints:
    return ElevatorConstraints(max_floor=25, max_carrying=8)


@pytest.fixture
def building(constraints) -> Building:
    """A single-car building: elevator 0 sweeping up."""
    return Building.create(1, constraints)


@pytest.fixture
def observe():
    """Feed one tick's snapshot into a building.

    Elevators are given as ``(elevator_id, floor, status, passengers)`` tuples.
    """

    def _observe(
        building: Building,
        elevators: Iterable[tuple],
        calls: Iterable[Passenger] = (),
        timestamp: int = 0,
    ) -> Building:
        seen: List[Elevator] = [
            Elevator(elevator_id=eid, floor=floor, status=status, passengers=list(passengers))
            for eid, floor, status, passengers in elevators
        ]
        building.observe(Snapshot(timestamp=timestamp, elevators=seen, calls=list(calls)))
        return building

    return _observe


@pytest.fixture
def small_scenario() -> Scenario:
    return Scenario(problem_id=99, max_floor=10, passenger_count=40, arrival_rate=0.5, max_ticks=3000)
