"""Plumbing between the dispatcher and a scoring server."""

from .loop import run_game
from .session import GameSession, LocalSession, Session, TransportError

__all__ = [
    "GameSession",
    "LocalSession",
    "Session",
    "TransportError",
    "run_game",
]
