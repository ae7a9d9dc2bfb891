from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from .board import Board
from .tile import PlayerID

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 7


def deal_board(
    width: int = DEFAULT_SIZE,
    height: int = DEFAULT_SIZE,
    players: Iterable[PlayerID] = (1, 2),
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Board:
    """Deals a fresh board. The same seed always deals the same board."""
    if rng is None:
        rng = random.Random(seed)
        logger.debug('Dealing %dx%d board with seed %s', width, height, seed)
    return Board(width, height, players, rng=rng)
