from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from dispatch import Action
from simulation import Simulation, Snapshot

from .models import ActionRequest, ActionResponse, CommandModel, OnCallsResponse, StartResponse

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Auth-Token"


class TransportError(RuntimeError):
    """The scoring server could not be reached or answered with something unusable."""


class Session(Protocol):
    """Where snapshots come from and where a tick's commands go."""

    def on_calls(self) -> Snapshot:
        ...

    def action(self, actions: List[Action]) -> bool:
        """Submit the tick's commands. Returns whether the game has ended."""
        ...


class GameSession:
    """HTTP session against a scoring server. Failures are raised, never retried."""

    def __init__(self, token: str, client: httpx.Client, timestamp: int = 0, is_end: bool = False) -> None:
        self.token = token
        self.client = client
        self.timestamp = timestamp
        self.is_end = is_end

    @classmethod
    def start(
        cls,
        user: str,
        problem_id: int,
        elevator_count: int,
        base_url: str = "http://localhost:8000",
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> "GameSession":
        client = client or httpx.Client(base_url=base_url, timeout=timeout)
        data = _request(client, "POST", f"/start/{user}/{problem_id}/{elevator_count}")
        response = _parse(StartResponse, data)
        logger.info("Started problem %d with %d elevators, token %s", problem_id, elevator_count, response.token)
        return cls(response.token, client, response.timestamp, response.is_end)

    def on_calls(self) -> Snapshot:
        data = _request(self.client, "GET", "/oncalls", headers={TOKEN_HEADER: self.token})
        response = _parse(OnCallsResponse, data)
        self.timestamp = response.timestamp
        self.is_end = response.is_end
        return response.to_snapshot()

    def action(self, actions: List[Action]) -> bool:
        request = ActionRequest(commands=[CommandModel.from_action(a) for a in actions])
        data = _request(
            self.client,
            "POST",
            "/action",
            headers={TOKEN_HEADER: self.token},
            json=request.model_dump(mode="json"),
        )
        response = _parse(ActionResponse, data)
        self.timestamp = response.timestamp
        self.is_end = response.is_end
        return response.is_end

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class LocalSession:
    """The same session interface over an in-process simulation."""

    def __init__(self, simulation: Simulation) -> None:
        self.simulation = simulation

    def on_calls(self) -> Snapshot:
        return self.simulation.snapshot()

    def action(self, actions: List[Action]) -> bool:
        self.simulation.apply(actions)
        return self.simulation.is_end


def _request(client: httpx.Client, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
    try:
        response = client.request(method, path, **kwargs)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as exc:
        raise TransportError(
            f"{method} {path} failed with {exc.response.status_code}: {exc.response.text}"
        ) from exc
    except (httpx.HTTPError, ValueError) as exc:
        raise TransportError(f"{method} {path} failed: {exc}") from exc
    logger.debug("%s %s -> %s", method, path, data)
    return data


def _parse(model, data: Dict[str, Any]):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise TransportError(f"Malformed {model.__name__} payload: {exc}") from exc
