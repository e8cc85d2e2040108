from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class ElevatorConstraints:
    """Physical limits shared by the controller and the simulator."""

    max_floor: int = 25
    max_carrying: int = 8

    def __post_init__(self) -> None:
        if self.max_floor < 2:
            raise ValueError(f"max_floor must be at least 2, got {self.max_floor}")
        if self.max_carrying < 1:
            raise ValueError(f"max_carrying must be positive, got {self.max_carrying}")


@dataclass(frozen=True)
class Scenario:
    """Traffic preset identified by the scoring server's problem id."""

    problem_id: int
    max_floor: int
    passenger_count: int
    arrival_rate: float
    max_ticks: int


SCENARIOS: Dict[int, Scenario] = {
    0: Scenario(problem_id=0, max_floor=5, passenger_count=6, arrival_rate=0.5, max_ticks=500),
    1: Scenario(problem_id=1, max_floor=25, passenger_count=200, arrival_rate=1.0, max_ticks=2000),
    2: Scenario(problem_id=2, max_floor=25, passenger_count=500, arrival_rate=2.0, max_ticks=4000),
}


def get_scenario(problem_id: int) -> Scenario:
    scenario = SCENARIOS.get(problem_id)
    if scenario is None:
        raise ValueError(
            f"Unknown problem id {problem_id}. Available: {', '.join(str(k) for k in SCENARIOS)}"
        )
    return scenario


@dataclass
class DispatchConfig:
    """Startup parameters for one game."""

    elevator_count: int = 4
    problem_id: int = 1
    user: str = "tester"
    api_url: str = "http://localhost:8000"
    scheduler: str = "scan"
    random_seed: Optional[int] = None
    constraints: Optional[ElevatorConstraints] = None

    def __post_init__(self) -> None:
        if self.elevator_count < 1:
            raise ValueError(f"elevator_count must be positive, got {self.elevator_count}")
        building_floors = get_scenario(self.problem_id).max_floor
        if self.constraints is None:
            self.constraints = ElevatorConstraints(max_floor=building_floors)
        if self.constraints.max_floor != building_floors:
            raise ValueError(
                f"max_floor {self.constraints.max_floor} does not match problem {self.problem_id}'s "
                f"{building_floors} floors"
            )

    @property
    def scenario(self) -> Scenario:
        return get_scenario(self.problem_id)

    @classmethod
    def from_dict(cls, config: Dict) -> "DispatchConfig":
        constraints_cfg = dict(config.get("constraints", {}))
        problem_id = config.get("problem_id", 1)
        # Constraints default to the scenario's building when not given explicitly.
        constraints_cfg.setdefault("max_floor", get_scenario(problem_id).max_floor)
        return cls(
            elevator_count=config.get("elevator_count", 4),
            problem_id=problem_id,
            user=config.get("user", "tester"),
            api_url=config.get("api_url", "http://localhost:8000"),
            scheduler=config.get("scheduler", "scan"),
            random_seed=config.get("random_seed"),
            constraints=ElevatorConstraints(**constraints_cfg),
        )
