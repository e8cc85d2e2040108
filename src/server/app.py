"""Mock scoring server speaking the elevator game protocol over local simulations."""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, Optional

from fastapi import FastAPI, Header, HTTPException

from simulation import Simulation, get_scenario
from transport.models import (
    ActionRequest,
    ActionResponse,
    ElevatorModel,
    OnCallsResponse,
    PassengerModel,
    StartResponse,
)

logger = logging.getLogger(__name__)


class GameManager:
    def __init__(self, max_carrying: int = 8, random_seed: Optional[int] = None) -> None:
        self.max_carrying = max_carrying
        self.random_seed = random_seed
        self.games: Dict[str, Simulation] = {}
        self._lock = asyncio.Lock()

    async def start(self, user: str, problem_id: int, elevator_count: int) -> StartResponse:
        async with self._lock:
            simulation = Simulation(
                scenario=get_scenario(problem_id),
                elevator_count=elevator_count,
                max_carrying=self.max_carrying,
                random_seed=self.random_seed,
            )
            token = uuid.uuid4().hex
            self.games[token] = simulation
            logger.info("User %s started problem %d with %d elevators", user, problem_id, elevator_count)
            return StartResponse(token=token, **self._state(simulation))

    async def on_calls(self, token: Optional[str]) -> OnCallsResponse:
        async with self._lock:
            simulation = self._get_game(token)
            snapshot = simulation.snapshot()
            return OnCallsResponse(
                token=token,
                calls=[PassengerModel.from_passenger(p) for p in snapshot.calls],
                **self._state(simulation),
            )

    async def action(self, token: Optional[str], request: ActionRequest) -> ActionResponse:
        async with self._lock:
            simulation = self._get_game(token)
            simulation.apply([command.to_action() for command in request.commands])
            response = ActionResponse(token=token, **self._state(simulation))
            if simulation.is_end:
                # The final response is the last one a finished game serves.
                del self.games[token]
                logger.info("Game %s finished at t=%d and was released", token, simulation.current_time)
            return response

    def _get_game(self, token: Optional[str]) -> Simulation:
        simulation = self.games.get(token) if token else None
        if simulation is None:
            raise HTTPException(status_code=401, detail="Unknown or missing X-Auth-Token")
        return simulation

    def _state(self, simulation: Simulation) -> dict:
        return {
            "timestamp": simulation.current_time,
            "elevators": [ElevatorModel.from_elevator(e) for e in simulation.elevators],
            "is_end": simulation.is_end,
        }


manager = GameManager()
app = FastAPI(title="LiftDispatch Scoring API")


@app.post("/start/{user}/{problem_id}/{elevator_count}", response_model=StartResponse)
async def start_game(user: str, problem_id: int, elevator_count: int) -> StartResponse:
    try:
        return await manager.start(user, problem_id, elevator_count)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.get("/oncalls", response_model=OnCallsResponse)
async def on_calls(x_auth_token: Optional[str] = Header(None)) -> OnCallsResponse:
    return await manager.on_calls(x_auth_token)


@app.post("/action", response_model=ActionResponse)
async def submit_action(request: ActionRequest, x_auth_token: Optional[str] = Header(None)) -> ActionResponse:
    try:
        return await manager.action(x_auth_token, request)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
