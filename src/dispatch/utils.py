from __future__ import annotations

from typing import List, Optional

from simulation import Building, Elevator, Passenger


def exit_candidates(elevator: Elevator) -> List[Passenger]:
    """Everyone aboard who has arrived. Alighting is never capacity bound."""
    return elevator.arrivals()


def enter_candidates(elevator: Elevator, building: Building) -> List[Passenger]:
    """Waiting passengers at the elevator's floor heading its way, oldest first, up to free capacity."""

    if elevator.direction is None:
        return []
    capacity = elevator.available_capacity(building.max_carrying)
    return building.calls.floor(elevator.floor).boardable(elevator.direction, capacity)


def validate(elevator: Elevator, building: Building) -> Optional[str]:
    """Return why the elevator cannot be dispatched this tick, or None."""

    if elevator.direction is None:
        return "no sweep direction assigned"
    if elevator.load > building.max_carrying:
        return f"carrying {elevator.load} over capacity {building.max_carrying}"
    if not 1 <= elevator.floor <= building.max_floor:
        return f"floor {elevator.floor} outside 1..{building.max_floor}"
    return None
