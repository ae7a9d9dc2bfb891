from __future__ import annotations

# Facade module that re-exports the Dynamaze core.
# Used by the Flask app and tests; single-responsibility modules live under dynamaze_core/*.

from dynamaze_core.tile import (  # noqa: F401
    CLOCKWISE,
    Coord,
    Direction,
    PlayerID,
    Shape,
    Tile,
    opposite,
    random_tile,
    step,
)
from dynamaze_core.board import (  # noqa: F401
    MAX_PLAYERS,
    Board,
    check_shape,
    InsertionSlot,
    PlayerToken,
    corner_tiles,
    guide_count,
    start_positions,
)
from dynamaze_core.errors import (  # noqa: F401
    BoardShapeError,
    DuplicatePlayerError,
    DynamazeError,
    IllegalMoveError,
    InvalidInsertionError,
    OutOfBoundsError,
    TooManyPlayersError,
)
from dynamaze_core.deal import DEFAULT_SIZE, deal_board  # noqa: F401
from dynamaze_core.turns import Phase, TurnController  # noqa: F401
from dynamaze_core.codec import (  # noqa: F401
    DecodeError,
    board_from_dict,
    board_to_dict,
    controller_from_dict,
    controller_to_dict,
    slot_from_json,
)


def main() -> None:
    # CLI driver delegated to dynamaze_core.cli
    from dynamaze_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
