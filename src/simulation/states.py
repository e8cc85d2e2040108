from __future__ import annotations

from enum import Enum


class ElevatorStatus(str, Enum):
    """Mechanical state of a car. Values are the scoring server's wire strings."""

    STOPPED = "STOPPED"
    OPEN = "OPENED"
    MOVING_UP = "UPWARD"
    MOVING_DOWN = "DOWNWARD"

    @property
    def is_moving(self) -> bool:
        return self in (ElevatorStatus.MOVING_UP, ElevatorStatus.MOVING_DOWN)


class Direction(Enum):
    """Committed sweep direction of an elevator."""

    UP = 1
    DOWN = -1

    def flipped(self) -> "Direction":
        return Direction.DOWN if self is Direction.UP else Direction.UP


class CommandKind(str, Enum):
    STOP = "STOP"
    OPEN = "OPEN"
    CLOSE = "CLOSE"
    UP = "UP"
    DOWN = "DOWN"
    ENTER = "ENTER"
    EXIT = "EXIT"

    @property
    def carries_passengers(self) -> bool:
        return self in (CommandKind.ENTER, CommandKind.EXIT)
