"""Wire models for the scoring server protocol."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from dispatch import Action
from simulation import CommandKind, Elevator, ElevatorStatus, Passenger, Snapshot


class PassengerModel(BaseModel):
    id: int
    timestamp: int
    start: int
    end: int

    @classmethod
    def from_passenger(cls, passenger: Passenger) -> "PassengerModel":
        return cls(
            id=passenger.passenger_id,
            timestamp=passenger.arrival_time,
            start=passenger.origin,
            end=passenger.destination,
        )

    def to_passenger(self) -> Passenger:
        return Passenger(passenger_id=self.id, origin=self.start, destination=self.end, arrival_time=self.timestamp)


class ElevatorModel(BaseModel):
    id: int
    floor: int
    passengers: List[PassengerModel] = []
    status: ElevatorStatus

    @classmethod
    def from_elevator(cls, elevator: Elevator) -> "ElevatorModel":
        return cls(
            id=elevator.elevator_id,
            floor=elevator.floor,
            passengers=[PassengerModel.from_passenger(p) for p in elevator.passengers],
            status=elevator.status,
        )

    def to_elevator(self) -> Elevator:
        return Elevator(
            elevator_id=self.id,
            floor=self.floor,
            passengers=[p.to_passenger() for p in self.passengers],
            status=self.status,
        )


class StartResponse(BaseModel):
    token: str
    timestamp: int
    elevators: List[ElevatorModel]
    is_end: bool


class ActionResponse(StartResponse):
    pass


class OnCallsResponse(StartResponse):
    calls: List[PassengerModel] = []

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            timestamp=self.timestamp,
            elevators=[e.to_elevator() for e in self.elevators],
            calls=[p.to_passenger() for p in self.calls],
            is_end=self.is_end,
        )


class CommandModel(BaseModel):
    elevator_id: int
    command: CommandKind
    call_ids: Optional[List[int]] = None

    @classmethod
    def from_action(cls, action: Action) -> "CommandModel":
        call_ids = list(action.passenger_ids) if action.kind.carries_passengers else None
        return cls(elevator_id=action.elevator_id, command=action.kind, call_ids=call_ids)

    def to_action(self) -> Action:
        return Action(self.elevator_id, self.command, tuple(self.call_ids or ()))


class ActionRequest(BaseModel):
    commands: List[CommandModel] = []
