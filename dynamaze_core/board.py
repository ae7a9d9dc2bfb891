from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .errors import (
    BoardShapeError,
    DuplicatePlayerError,
    IllegalMoveError,
    InvalidInsertionError,
    OutOfBoundsError,
    TooManyPlayersError,
)
from .tile import Coord, Direction, PlayerID, Shape, Tile, random_tile

logger = logging.getLogger(__name__)

MAX_PLAYERS = 4

InsertionSlot = Tuple[Direction, int]  # (edge entered from, guide index)


@dataclass
class PlayerToken:
    """A player's piece on the grid."""
    player_id: PlayerID
    position: Coord  # (row, col)
    score: int = 0


def corner_tiles(width: int, height: int) -> Dict[Coord, Tile]:
    """The fixed L pieces whose two passages point into the board."""
    return {
        (0, 0): Tile(Shape.L, Direction.EAST),
        (0, width - 1): Tile(Shape.L, Direction.SOUTH),
        (height - 1, 0): Tile(Shape.L, Direction.NORTH),
        (height - 1, width - 1): Tile(Shape.L, Direction.WEST),
    }


def start_positions(width: int, height: int) -> List[Coord]:
    """Starting corners in seating order: top-left, bottom-right, top-right, bottom-left."""
    return [(0, 0), (height - 1, width - 1), (0, width - 1), (height - 1, 0)]


def guide_count(width: int, height: int, direction: Direction) -> int:
    """Number of insertion lanes along the edge entered from `direction`."""
    side = width if direction in (Direction.NORTH, Direction.SOUTH) else height
    return (side - 1) // 2


def check_shape(width: int, height: int) -> None:
    """Raises BoardShapeError unless both sides are odd and at least 5."""
    if width < 5 or height < 5 or width % 2 == 0 or height % 2 == 0:
        raise BoardShapeError(f'Board must be odd-sized and at least 5x5, got {width}x{height}')


class Board:
    """The maze grid, its single loose tile and the player tokens.

    Insertion shifts one odd-indexed row or column by a tile, pushing the far
    tile off to become the new loose tile. Reachability is the connected
    component of a cell under mutually matching passages.
    """

    def __init__(self, width: int, height: int, players: Iterable[PlayerID], rng: Optional[random.Random] = None):
        check_shape(width, height)
        player_ids = sorted(players)
        if len(set(player_ids)) != len(player_ids):
            raise DuplicatePlayerError(f'Player ids must be unique, got {player_ids}')
        if len(player_ids) > MAX_PLAYERS:
            raise TooManyPlayersError(f'At most {MAX_PLAYERS} players are supported, got {len(player_ids)}')
        rng = rng if rng is not None else random.Random()
        self._cells: List[List[Tile]] = [[random_tile(rng) for _ in range(width)] for _ in range(height)]
        for (r, c), tile in corner_tiles(width, height).items():
            self._cells[r][c] = tile
        self.loose_tile: Tile = random_tile(rng)
        self.loose_tile_position: Optional[InsertionSlot] = None
        starts = start_positions(width, height)
        self.player_tokens: Dict[PlayerID, PlayerToken] = {
            pid: PlayerToken(pid, starts[i]) for i, pid in enumerate(player_ids)
        }

    @classmethod
    def from_cells(
        cls,
        cells: Sequence[Sequence[Tile]],
        loose_tile: Tile,
        tokens: Iterable[PlayerToken] = (),
        loose_tile_position: Optional[InsertionSlot] = None,
    ) -> 'Board':
        """Builds a board from explicit contents, without dealing or fixing corners."""
        height = len(cells)
        width = len(cells[0]) if height else 0
        check_shape(width, height)
        if any(len(row) != width for row in cells):
            raise BoardShapeError('All rows must have the same width')
        board = cls.__new__(cls)
        board._cells = [[t.copy() for t in row] for row in cells]
        board.loose_tile = loose_tile.copy()
        board.loose_tile_position = None
        board.player_tokens = {}
        toks = sorted(tokens, key=lambda t: t.player_id)
        if len(toks) > MAX_PLAYERS:
            raise TooManyPlayersError(f'At most {MAX_PLAYERS} players are supported, got {len(toks)}')
        for tok in toks:
            if tok.player_id in board.player_tokens:
                raise DuplicatePlayerError(f'Two tokens for player {tok.player_id}')
            board._check_bounds(tok.position)
            board.player_tokens[tok.player_id] = PlayerToken(tok.player_id, tuple(tok.position), tok.score)
        if loose_tile_position is not None:
            board.stage_insertion(*loose_tile_position)
        return board

    # ---------- Geometry ----------

    def width(self) -> int:
        return len(self._cells[0])

    def height(self) -> int:
        return len(self._cells)

    def in_bounds(self, pos: Coord) -> bool:
        r, c = pos
        return 0 <= r < self.height() and 0 <= c < self.width()

    def _check_bounds(self, pos: Coord) -> None:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(f'{pos} is outside the {self.width()}x{self.height()} board')

    def get(self, col: int, row: int) -> Tile:
        """Tile at the given column and row (column first)."""
        self._check_bounds((row, col))
        return self._cells[row][col]

    def at(self, row: int, col: int) -> Tile:
        """Tile at the given (row, col)."""
        return self.get(col, row)

    def coords(self) -> Iterator[Coord]:
        for r in range(self.height()):
            for c in range(self.width()):
                yield (r, c)

    def corners(self) -> List[Coord]:
        h, w = self.height(), self.width()
        return [(0, 0), (0, w - 1), (h - 1, 0), (h - 1, w - 1)]

    def valid(self, pos: Coord, direction: Direction) -> bool:
        """True if one step from `pos` in `direction` stays on the board."""
        r, c = pos
        if direction is Direction.NORTH:
            return r > 0
        if direction is Direction.SOUTH:
            return r < self.height() - 1
        if direction is Direction.WEST:
            return c > 0
        return c < self.width() - 1

    def neighbor(self, pos: Coord, direction: Direction) -> Coord:
        """The adjacent cell; stepping off the grid is a contract breach."""
        self._check_bounds(pos)
        if not self.valid(pos, direction):
            raise OutOfBoundsError(f'Cannot step {direction.name} from {pos}')
        return direction.step(pos)

    def connects(self, pos: Coord, direction: Direction) -> bool:
        """True if a token at `pos` can cross into its neighbor in `direction`."""
        self._check_bounds(pos)
        if direction not in self._cells[pos[0]][pos[1]].paths() or not self.valid(pos, direction):
            return False
        nr, nc = direction.step(pos)
        return direction.opposite() in self._cells[nr][nc].paths()

    # ---------- Insertion ----------

    def insertion_slots(self) -> List[InsertionSlot]:
        """Every (direction, guide index) pair that addresses an insertion lane."""
        return [
            (d, g)
            for d in (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)
            for g in range(guide_count(self.width(), self.height(), d))
        ]

    def _check_slot(self, direction: Direction, guide_index: int) -> None:
        if not isinstance(direction, Direction):
            raise InvalidInsertionError(f'Not a direction: {direction!r}')
        n = guide_count(self.width(), self.height(), direction)
        if not (0 <= guide_index < n):
            raise InvalidInsertionError(f'Guide index {guide_index} out of range 0..{n - 1} for {direction.name}')

    def stage_insertion(self, direction: Direction, guide_index: int) -> None:
        """Chooses the edge slot the loose tile will enter through."""
        self._check_slot(direction, guide_index)
        self.loose_tile_position = (direction, guide_index)

    def clear_insertion(self) -> None:
        self.loose_tile_position = None

    def rotate_loose_tile(self, quarter_turns: int = 1) -> None:
        self.loose_tile.rotate(quarter_turns)

    def lane(self, direction: Direction, guide_index: int) -> List[Coord]:
        """Cells of the lane in rewrite order: the pushed-off cell first, the entry cell last."""
        self._check_slot(direction, guide_index)
        target_idx = 2 * guide_index + 1
        pos = self._lane_start(direction, target_idx)
        cells = [pos]
        while self.valid(pos, direction):
            pos = direction.step(pos)
            cells.append(pos)
        return cells

    def _lane_start(self, direction: Direction, target_idx: int) -> Coord:
        # The lane is rewritten from the edge opposite the one being entered.
        if direction is Direction.NORTH:
            return (self.height() - 1, target_idx)
        if direction is Direction.SOUTH:
            return (0, target_idx)
        if direction is Direction.WEST:
            return (target_idx, self.width() - 1)
        return (target_idx, 0)

    def insert_loose_tile(self) -> None:
        """Slides the loose tile into the staged lane; a no-op when nothing is staged."""
        if self.loose_tile_position is None:
            return
        direction, guide_index = self.loose_tile_position
        self._check_slot(direction, guide_index)
        j, i = self._lane_start(direction, 2 * guide_index + 1)
        next_loose_tile = self._cells[j][i]
        while self.valid((j, i), direction):
            next_j, next_i = direction.step((j, i))
            self._cells[j][i] = self._cells[next_j][next_i]
            j, i = next_j, next_i
        self._cells[j][i] = self.loose_tile
        self.loose_tile = next_loose_tile
        logger.debug('Inserted loose tile from %s at guide %d', direction.name, guide_index)

    # ---------- Reachability ----------

    def reachable_coords(self, start: Coord) -> Set[Coord]:
        """All cells connected to `start` through passages open on both sides."""
        self._check_bounds(start)
        result: Set[Coord] = {start}
        frontier: List[Coord] = [start]
        while frontier:
            current = frontier.pop()
            for d in self._cells[current[0]][current[1]].paths():
                if not self.valid(current, d):
                    continue
                nxt = d.step(current)
                if d.opposite() in self._cells[nxt[0]][nxt[1]].paths() and nxt not in result:
                    result.add(nxt)
                    frontier.append(nxt)
        return result

    # ---------- Tokens ----------

    def token(self, player_id: PlayerID) -> PlayerToken:
        try:
            return self.player_tokens[player_id]
        except KeyError:
            raise IllegalMoveError(f'No token for player {player_id}') from None

    def move_token(self, player_id: PlayerID, dest: Coord) -> None:
        """Moves a token to a cell reachable from where it stands."""
        tok = self.token(player_id)
        self._check_bounds(dest)
        if dest not in self.reachable_coords(tok.position):
            raise IllegalMoveError(f'{dest} is not reachable from {tok.position}')
        tok.position = dest

    def tokens_at(self, pos: Coord) -> List[PlayerToken]:
        return [t for t in self.player_tokens.values() if t.position == pos]

    def target_of(self, player_id: PlayerID) -> Optional[Coord]:
        """Grid cell holding the player's target tile, or None if it is loose or unassigned."""
        for pos in self.coords():
            if self._cells[pos[0]][pos[1]].whose_target == player_id:
                return pos
        return None

    # ---------- Display ----------

    def pretty(self, highlight: Optional[Set[Coord]] = None) -> str:
        """Text dump: one glyph per tile, token ids over tiles, '*' for shared cells."""
        marks = highlight or set()
        lines: List[str] = []
        for r in range(self.height()):
            row: List[str] = []
            for c in range(self.width()):
                toks = self.tokens_at((r, c))
                if len(toks) > 1:
                    cell = '*'
                elif toks:
                    cell = str(toks[0].player_id)
                else:
                    cell = self._cells[r][c].glyph()
                if (r, c) in marks:
                    cell = f'[{cell}]'
                else:
                    cell = f' {cell} '
                row.append(cell)
            lines.append(''.join(row))
        slot = self.loose_tile_position
        where = f'{slot[0].name} {slot[1]}' if slot else 'unstaged'
        lines.append(f'loose: {self.loose_tile.glyph()} ({where})')
        return '\n'.join(lines)
