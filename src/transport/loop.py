from __future__ import annotations

import logging
from typing import Optional

from dispatch import Dispatcher
from simulation import Building

from .session import Session

logger = logging.getLogger(__name__)


def run_game(
    session: Session,
    building: Building,
    dispatcher: Dispatcher,
    max_ticks: Optional[int] = None,
) -> int:
    """Fetch, dispatch and submit until the game ends. Returns the number of ticks played."""

    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        building.observe(session.on_calls())
        if building.is_end:
            break
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", building.describe())
        actions = dispatcher.dispatch(building)
        ticks += 1
        if session.action(actions):
            break
    logger.info("Game finished after %d ticks at t=%d", ticks, building.timestamp)
    return ticks
