from __future__ import annotations

import logging
from typing import List, Optional

from simulation import Building, CommandKind, Direction, Elevator, ElevatorStatus

from .actions import ActionAccumulator
from .interface import Action
from .utils import enter_candidates, exit_candidates, validate

logger = logging.getLogger(__name__)


class ScanDispatcher:
    """Implements a continuous sweep (SCAN) per elevator.

    Every car keeps its committed direction, serves the calls heading that
    way as it passes their floor and reverses only once it has come to rest
    on the boundary floor. Each tick a car gets at most one command, picked
    in this order: stop, open, exit, enter, close, move.
    """

    def __init__(self) -> None:
        self._actions: Optional[ActionAccumulator] = None

    def dispatch(self, building: Building) -> List[Action]:
        actions = self._accumulator(building)
        actions.clear()
        for elevator in building.elevators:
            problem = validate(elevator, building)
            if problem is not None:
                logger.warning("Skipping elevator %d at t=%d: %s", elevator.elevator_id, building.timestamp, problem)
                continue
            action = self.step(elevator, building)
            if action is not None:
                actions.put(action)
        return actions.actions()

    def step(self, elevator: Elevator, building: Building) -> Optional[Action]:
        """Decide the next command for one elevator, consuming boarded calls from the pool."""

        exiting = exit_candidates(elevator)
        entering = enter_candidates(elevator, building)

        if exiting or entering:
            stop = self._request_stop(elevator)
            if stop is not None:
                return stop
            if elevator.status is not ElevatorStatus.OPEN:
                return self._action(elevator, CommandKind.OPEN)
            # Alighting always goes before boarding on the same floor.
            if exiting:
                return self._action(elevator, CommandKind.EXIT, [p.passenger_id for p in exiting])
            ids = [p.passenger_id for p in entering]
            building.calls.consume(elevator.floor, ids)
            return self._action(elevator, CommandKind.ENTER, ids)

        if elevator.status is ElevatorStatus.OPEN:
            return self._action(elevator, CommandKind.CLOSE)
        return self._move(elevator, building)

    def _move(self, elevator: Elevator, building: Building) -> Optional[Action]:
        if elevator.direction is Direction.UP:
            boundary, command = building.max_floor, CommandKind.UP
        else:
            boundary, command = 1, CommandKind.DOWN
        if elevator.floor != boundary:
            return self._action(elevator, command)

        # Reverse only once the car is seen at rest on the boundary floor.
        stop = self._request_stop(elevator)
        if stop is not None:
            return stop
        building.flip(elevator.elevator_id)
        return None

    def _request_stop(self, elevator: Elevator) -> Optional[Action]:
        """STOP for a moving car, None when it is already at rest."""
        if elevator.status in (ElevatorStatus.STOPPED, ElevatorStatus.OPEN):
            return None
        return self._action(elevator, CommandKind.STOP)

    def _action(self, elevator: Elevator, kind: CommandKind, passenger_ids: Optional[List[int]] = None) -> Action:
        action = Action(elevator.elevator_id, kind, tuple(passenger_ids or ()))
        logger.debug(
            "elevator %d %s floor=%d -> %s %s",
            elevator.elevator_id,
            elevator.status.name,
            elevator.floor,
            kind.value,
            list(action.passenger_ids) if action.passenger_ids else "",
        )
        return action

    def _accumulator(self, building: Building) -> ActionAccumulator:
        ids = {elevator.elevator_id for elevator in building.elevators}
        if self._actions is None or not ids <= self._actions.elevator_ids:
            self._actions = ActionAccumulator(ids)
        return self._actions
