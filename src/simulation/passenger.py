from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .states import Direction


@dataclass
class Passenger:
    """Represents a rider moving between floors."""

    passenger_id: int
    origin: int
    destination: int
    arrival_time: int
    board_time: Optional[int] = None
    alight_time: Optional[int] = None

    @property
    def direction(self) -> Direction:
        """Up when the destination is above the origin, down otherwise."""
        return Direction.UP if self.destination > self.origin else Direction.DOWN

    def record_boarding(self, time_step: int) -> None:
        self.board_time = time_step

    def record_alighting(self, time_step: int) -> None:
        self.alight_time = time_step

    @property
    def wait_time(self) -> Optional[int]:
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_time is None or self.alight_time is None:
            return None
        return self.alight_time - self.board_time
