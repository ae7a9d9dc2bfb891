from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

from .codec import slot_from_json
from .deal import DEFAULT_SIZE
from .errors import DynamazeError
from .tile import Coord
from .turns import TurnController


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Dynamaze: hot-seat tile-sliding maze in the terminal')
    parser.add_argument('--width', type=int, default=DEFAULT_SIZE, help='Board width (odd, >= 5)')
    parser.add_argument('--height', type=int, default=DEFAULT_SIZE, help='Board height (odd, >= 5)')
    parser.add_argument('--players', type=int, default=2, choices=[1, 2, 3, 4], help='Number of players')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--turns', type=int, default=None, help='Stop after this many turns')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')
    return parser.parse_args(argv)


def _parse_coord(text: str) -> Coord:
    sep = ',' if ',' in text else ' '
    r_s, c_s = [t for t in text.split(sep) if t != '']
    return int(r_s), int(c_s)


def _prompt_insert(ctl: TurnController) -> None:
    slots = ', '.join(f'{d.name[0]}{g}' for d, g in ctl.insertion_slots())
    print('Slots:', slots)
    while True:
        text = input('Rotate with "r", or insert at a slot (e.g. N0): ').strip().upper()
        if text == 'R':
            ctl.rotate_loose_tile()
            print('Loose tile now', ctl.board.loose_tile.glyph())
            continue
        names = {'N': 'NORTH', 'E': 'EAST', 'S': 'SOUTH', 'W': 'WEST'}
        try:
            direction, guide = slot_from_json(names.get(text[:1], text[:1]), text[1:])
            ctl.insert(direction, guide)
            return
        except DynamazeError as e:
            print(f'Could not insert: {e}')


def _prompt_move(ctl: TurnController) -> bool:
    reachable = ctl.reachable()
    print(ctl.board.pretty(highlight=reachable))
    while True:
        text = input('Move to r,c (empty to stay): ').strip()
        try:
            dest = _parse_coord(text) if text else ctl.board.token(ctl.active_player).position
            return ctl.move(dest)
        except (ValueError, DynamazeError) as e:
            print(f'Could not move: {e}')


def _scores(ctl: TurnController) -> List[str]:
    return [f'P{t.player_id}={t.score}' for t in ctl.board.player_tokens.values()]


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    try:
        ctl = TurnController.new_game(args.width, args.height, range(1, args.players + 1), seed=args.seed)
    except DynamazeError as e:
        print(f'error: {e}')
        return
    turn = 0
    try:
        while args.turns is None or turn < args.turns:
            pid = ctl.active_player
            print(f'\nPlayer {pid} (target at {ctl.board.target_of(pid)})')
            print(ctl.board.pretty())
            _prompt_insert(ctl)
            if _prompt_move(ctl):
                print(f'Player {pid} reached a target! Scores:', ' '.join(_scores(ctl)))
            turn += 1
    except (EOFError, KeyboardInterrupt):
        print()
    print('Final scores:', ' '.join(_scores(ctl)))


if __name__ == '__main__':
    main()
