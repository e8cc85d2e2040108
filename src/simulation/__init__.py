"""Simulation primitives for LiftDispatch."""

from .building import Building, Snapshot
from .config import SCENARIOS, DispatchConfig, ElevatorConstraints, Scenario, get_scenario
from .elevator import Elevator, InvalidCommandError
from .floor import CallPool, Floor
from .passenger import Passenger
from .simulation import MetricsSnapshot, Simulation
from .states import CommandKind, Direction, ElevatorStatus

__all__ = [
    "Building",
    "CallPool",
    "CommandKind",
    "Direction",
    "DispatchConfig",
    "Elevator",
    "ElevatorConstraints",
    "ElevatorStatus",
    "Floor",
    "InvalidCommandError",
    "MetricsSnapshot",
    "Passenger",
    "SCENARIOS",
    "Scenario",
    "Simulation",
    "Snapshot",
    "get_scenario",
]
