from __future__ import annotations

import enum
import logging
import random
from typing import Dict, Iterable, List, Optional, Set

from .board import Board, InsertionSlot
from .deal import DEFAULT_SIZE, deal_board
from .errors import IllegalMoveError, InvalidInsertionError
from .tile import Coord, Direction, PlayerID

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    INSERT = 'insert'
    MOVE = 'move'


class TurnController:
    """Drives a board through insert-then-move turns.

    Owns the token bookkeeping the board itself leaves to its caller: tokens
    riding a shifted lane travel with their tiles, and reaching a target
    scores a point and draws the next target.
    """

    def __init__(
        self,
        board: Board,
        rng: Optional[random.Random] = None,
        active_player: Optional[PlayerID] = None,
        phase: Phase = Phase.INSERT,
    ):
        self.board = board
        self.rng = rng if rng is not None else random.Random()
        order = self.players()
        if active_player is None and order:
            active_player = order[0]
        if active_player is not None and active_player not in board.player_tokens:
            raise IllegalMoveError(f'Unknown active player {active_player}')
        self.active_player = active_player
        self.phase = Phase(phase)

    @classmethod
    def new_game(
        cls,
        width: int = DEFAULT_SIZE,
        height: int = DEFAULT_SIZE,
        players: Iterable[PlayerID] = (1, 2),
        seed: Optional[int] = None,
    ) -> 'TurnController':
        rng = random.Random(seed)
        logger.info('New %dx%d game, seed %s', width, height, seed)
        board = deal_board(width, height, players, rng=rng)
        ctl = cls(board, rng=rng)
        for pid in ctl.players():
            ctl.assign_target(pid)
        return ctl

    def players(self) -> List[PlayerID]:
        return sorted(self.board.player_tokens)

    def next_player(self) -> Optional[PlayerID]:
        order = self.players()
        if self.active_player is None or not order:
            return None
        return order[(order.index(self.active_player) + 1) % len(order)]

    # ---------- Targets ----------

    def assign_target(self, player_id: PlayerID) -> Optional[Coord]:
        """Marks a fresh random grid tile as the player's target and returns its cell."""
        board = self.board
        if board.loose_tile.whose_target == player_id:
            board.loose_tile.whose_target = None
        for pos in board.coords():
            if board.at(*pos).whose_target == player_id:
                board.at(*pos).whose_target = None
        corners = set(board.corners())
        here = board.token(player_id).position
        candidates = [
            pos for pos in board.coords()
            if pos not in corners and pos != here and board.at(*pos).whose_target is None
        ]
        if not candidates:
            logger.warning('No free tile left for a target for player %s', player_id)
            return None
        pos = self.rng.choice(candidates)
        board.at(*pos).whose_target = player_id
        logger.debug('Player %s target at %s', player_id, pos)
        return pos

    # ---------- Insert phase ----------

    def _require(self, phase: Phase, err: type) -> None:
        if self.phase is not phase:
            raise err(f'Not allowed during the {self.phase.value} phase')

    def insertion_slots(self) -> List[InsertionSlot]:
        return self.board.insertion_slots()

    def rotate_loose_tile(self, quarter_turns: int = 1) -> None:
        self._require(Phase.INSERT, InvalidInsertionError)
        self.board.rotate_loose_tile(quarter_turns)

    def insert(self, direction: Direction, guide_index: int) -> None:
        """Shifts a lane with the loose tile and carries the tokens standing on it."""
        self._require(Phase.INSERT, InvalidInsertionError)
        board = self.board
        lane = board.lane(direction, guide_index)
        # Tiles move one cell toward the start of the lane; the first one wraps to the entry cell.
        carried: Dict[Coord, Coord] = {lane[k]: lane[k - 1] for k in range(1, len(lane))}
        carried[lane[0]] = lane[-1]
        board.stage_insertion(direction, guide_index)
        board.insert_loose_tile()
        for tok in board.player_tokens.values():
            if tok.position in carried:
                tok.position = carried[tok.position]
        board.clear_insertion()
        self.phase = Phase.MOVE

    # ---------- Move phase ----------

    def reachable(self) -> Set[Coord]:
        if self.active_player is None:
            return set()
        return self.board.reachable_coords(self.board.token(self.active_player).position)

    def move(self, dest: Coord) -> bool:
        """Moves the active token and ends the turn. Returns True if a target was reached."""
        self._require(Phase.MOVE, IllegalMoveError)
        if self.active_player is None:
            raise IllegalMoveError('No players on this board')
        pid = self.active_player
        dest = (int(dest[0]), int(dest[1]))
        self.board.move_token(pid, dest)
        scored = self.board.at(*dest).whose_target == pid
        if scored:
            tok = self.board.token(pid)
            tok.score += 1
            logger.info('Player %s reached a target, score %d', pid, tok.score)
            self.assign_target(pid)
        self.active_player = self.next_player()
        self.phase = Phase.INSERT
        return scored
