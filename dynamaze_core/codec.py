from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from .board import Board, InsertionSlot, PlayerToken, corner_tiles
from .errors import DynamazeError
from .tile import Direction, Shape, Tile
from .turns import Phase, TurnController


class DecodeError(DynamazeError, ValueError):
    """A serialized board could not be read back."""


def tile_to_dict(t: Tile) -> Dict[str, Any]:
    return {'shape': t.shape.value, 'orientation': t.orientation.name, 'target': t.whose_target}


def tile_from_dict(obj: Dict[str, Any]) -> Tile:
    target = obj.get('target')
    return Tile(
        shape=Shape(obj['shape']),
        orientation=Direction[str(obj.get('orientation', 'NORTH')).upper()],
        whose_target=int(target) if target is not None else None,
    )


def slot_from_json(direction: Any, guide: Any) -> InsertionSlot:
    try:
        return Direction[str(direction).upper()], int(guide)
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f'Bad insertion slot: {direction!r}, {guide!r}') from exc


def board_to_dict(board: Board) -> Dict[str, Any]:
    slot = board.loose_tile_position
    return {
        'width': board.width(),
        'height': board.height(),
        'cells': [[tile_to_dict(board.at(r, c)) for c in range(board.width())] for r in range(board.height())],
        'looseTile': tile_to_dict(board.loose_tile),
        'loosePosition': [slot[0].name, slot[1]] if slot else None,
        'tokens': [
            {'player': t.player_id, 'position': [t.position[0], t.position[1]], 'score': t.score}
            for t in board.player_tokens.values()
        ],
    }


def board_from_dict(obj: Dict[str, Any]) -> Board:
    try:
        cells: List[List[Tile]] = [[tile_from_dict(t) for t in row] for row in obj['cells']]
        loose = tile_from_dict(obj['looseTile'])
        tokens = [
            PlayerToken(int(t['player']), (int(t['position'][0]), int(t['position'][1])), int(t.get('score', 0)))
            for t in obj.get('tokens', [])
        ]
        pos = obj.get('loosePosition')
        declared = (int(obj['width']), int(obj['height'])) if 'width' in obj and 'height' in obj else None
    except (AttributeError, KeyError, TypeError, ValueError, IndexError) as exc:
        raise DecodeError(f'Malformed board: {exc}') from exc
    ids = [t.player_id for t in tokens]
    if len(set(ids)) != len(ids):
        raise DecodeError(f'Duplicate player ids: {sorted(ids)}')
    if pos and (not isinstance(pos, (list, tuple)) or len(pos) != 2):
        raise DecodeError(f'Bad loosePosition: {pos!r}')
    slot: Optional[InsertionSlot] = slot_from_json(*pos) if pos else None
    board = Board.from_cells(cells, loose, tokens, slot)
    if declared is not None and declared != (board.width(), board.height()):
        raise DecodeError('Declared width/height do not match the cells')
    for corner, fixed in corner_tiles(board.width(), board.height()).items():
        tile = board.at(*corner)
        if (tile.shape, tile.orientation) != (fixed.shape, fixed.orientation):
            raise DecodeError(f'Corner {corner} must be {fixed.shape.value} facing {fixed.orientation.name}')
    return board


def controller_to_dict(ctl: TurnController) -> Dict[str, Any]:
    return {
        'board': board_to_dict(ctl.board),
        'phase': ctl.phase.value,
        'activePlayer': ctl.active_player,
    }


def controller_from_dict(obj: Dict[str, Any], rng: Optional[random.Random] = None) -> TurnController:
    try:
        board_obj = obj['board']
        phase = Phase(obj.get('phase', Phase.INSERT.value))
        active = obj.get('activePlayer')
        active = int(active) if active is not None else None
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f'Malformed game state: {exc}') from exc
    board = board_from_dict(board_obj)
    return TurnController(board, rng=rng, active_player=active, phase=phase)
