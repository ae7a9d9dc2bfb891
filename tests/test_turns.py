import random
import unittest

from game import (
    Board,
    Direction,
    IllegalMoveError,
    InvalidInsertionError,
    Phase,
    PlayerToken,
    Shape,
    Tile,
    TurnController,
    controller_to_dict,
    corner_tiles,
)


def blocked_board(w=7, h=7, tokens=(), edits=None):
    cells = [[Tile(Shape.BLOCK) for _ in range(w)] for _ in range(h)]
    for (r, c), t in corner_tiles(w, h).items():
        cells[r][c] = t
    for (r, c), t in (edits or {}).items():
        cells[r][c] = t
    return Board.from_cells(cells, Tile(Shape.I), tokens)


class TestTurnController(unittest.TestCase):
    def test_given_seed_when_new_game_then_reproducible_with_targets(self):
        a = TurnController.new_game(7, 7, [1, 2, 3], seed=99)
        b = TurnController.new_game(7, 7, [1, 2, 3], seed=99)
        self.assertEqual(controller_to_dict(a), controller_to_dict(b))
        self.assertEqual(a.active_player, 1)
        self.assertIs(a.phase, Phase.INSERT)
        corners = set(a.board.corners())
        seen = set()
        for pid in (1, 2, 3):
            pos = a.board.target_of(pid)
            self.assertIsNotNone(pos)
            self.assertNotIn(pos, corners)
            self.assertNotEqual(pos, a.board.token(pid).position)
            seen.add(pos)
        self.assertEqual(len(seen), 3)

    def test_given_insert_phase_when_moving_then_rejected(self):
        ctl = TurnController.new_game(7, 7, [1, 2], seed=1)
        with self.assertRaises(IllegalMoveError):
            ctl.move((0, 0))
        ctl.rotate_loose_tile()
        ctl.insert(Direction.NORTH, 0)
        self.assertIs(ctl.phase, Phase.MOVE)
        self.assertIsNone(ctl.board.loose_tile_position)
        with self.assertRaises(InvalidInsertionError):
            ctl.insert(Direction.NORTH, 1)
        with self.assertRaises(InvalidInsertionError):
            ctl.rotate_loose_tile()

    def test_given_bad_slot_when_inserting_then_phase_unchanged(self):
        ctl = TurnController.new_game(5, 5, [1], seed=1)
        with self.assertRaises(InvalidInsertionError):
            ctl.insert(Direction.EAST, 2)
        self.assertIs(ctl.phase, Phase.INSERT)

    def test_given_tokens_in_lane_when_inserting_then_carried_and_wrapped(self):
        tokens = [PlayerToken(1, (2, 1)), PlayerToken(2, (6, 1)), PlayerToken(3, (2, 3))]
        marker = Tile(Shape.T, Direction.SOUTH)
        board = blocked_board(tokens=tokens, edits={(2, 1): marker})
        ctl = TurnController(board, rng=random.Random(0))
        ctl.insert(Direction.NORTH, 0)
        self.assertEqual(board.token(1).position, (3, 1))
        self.assertEqual(board.at(3, 1), marker)  # token stayed on its tile
        # The token on the pushed-off tile wraps to the entry cell
        self.assertEqual(board.token(2).position, (0, 1))
        self.assertEqual(board.at(0, 1), Tile(Shape.I))
        self.assertEqual(board.token(3).position, (2, 3))

    def test_given_tokens_in_row_when_inserting_from_east_then_carried_west(self):
        tokens = [PlayerToken(1, (1, 0)), PlayerToken(2, (1, 4))]
        board = blocked_board(tokens=tokens)
        ctl = TurnController(board, rng=random.Random(0))
        ctl.insert(Direction.EAST, 0)
        self.assertEqual(board.token(1).position, (1, 6))
        self.assertEqual(board.token(2).position, (1, 3))

    def test_given_target_in_reach_when_moving_then_scores_and_draws_new_target(self):
        board = blocked_board(
            5, 5,
            tokens=[PlayerToken(1, (0, 0)), PlayerToken(2, (4, 4))],
            edits={(0, 1): Tile(Shape.I, Direction.EAST, whose_target=1)},
        )
        ctl = TurnController(board, rng=random.Random(3), phase=Phase.MOVE)
        self.assertEqual(ctl.reachable(), {(0, 0), (0, 1)})
        self.assertTrue(ctl.move((0, 1)))
        self.assertEqual(board.token(1).score, 1)
        self.assertEqual(board.token(1).position, (0, 1))
        self.assertIsNone(board.at(0, 1).whose_target)
        new_target = board.target_of(1)
        self.assertIsNotNone(new_target)
        self.assertNotIn(new_target, board.corners())
        self.assertNotEqual(new_target, (0, 1))
        self.assertEqual(ctl.active_player, 2)
        self.assertIs(ctl.phase, Phase.INSERT)

    def test_given_unreachable_destination_when_moving_then_illegal_and_turn_kept(self):
        board = blocked_board(5, 5, tokens=[PlayerToken(1, (0, 0)), PlayerToken(2, (4, 4))])
        ctl = TurnController(board, rng=random.Random(0), phase=Phase.MOVE)
        with self.assertRaises(IllegalMoveError):
            ctl.move((2, 2))
        self.assertIs(ctl.phase, Phase.MOVE)
        self.assertEqual(ctl.active_player, 1)
        # Staying put is always legal
        self.assertFalse(ctl.move((0, 0)))
        self.assertEqual(ctl.active_player, 2)

    def test_given_three_players_when_turns_pass_then_ids_cycle_in_order(self):
        ctl = TurnController.new_game(7, 7, [5, 1, 3], seed=4)
        order = []
        for _ in range(4):
            order.append(ctl.active_player)
            ctl.insert(Direction.WEST, 1)
            ctl.move(ctl.board.token(ctl.active_player).position)
        self.assertEqual(order, [1, 3, 5, 1])

    def test_given_target_on_loose_tile_when_reassigning_then_cleared(self):
        board = blocked_board(5, 5, tokens=[PlayerToken(1, (0, 0))])
        board.loose_tile.whose_target = 1
        ctl = TurnController(board, rng=random.Random(0))
        pos = ctl.assign_target(1)
        self.assertIsNone(board.loose_tile.whose_target)
        self.assertEqual(board.target_of(1), pos)

    def test_given_unknown_active_player_when_constructing_then_error(self):
        board = blocked_board(5, 5, tokens=[PlayerToken(1, (0, 0))])
        with self.assertRaises(IllegalMoveError):
            TurnController(board, active_player=2)

    def test_given_no_players_when_moving_then_error(self):
        ctl = TurnController(blocked_board(5, 5), rng=random.Random(0), phase=Phase.MOVE)
        self.assertIsNone(ctl.active_player)
        self.assertEqual(ctl.reachable(), set())
        with self.assertRaises(IllegalMoveError):
            ctl.move((0, 0))


if __name__ == '__main__':
    unittest.main(verbosity=2)
