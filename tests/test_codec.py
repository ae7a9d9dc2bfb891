import json
import unittest

from game import (
    Direction,
    DecodeError,
    OutOfBoundsError,
    Phase,
    TooManyPlayersError,
    TurnController,
    board_from_dict,
    board_to_dict,
    controller_from_dict,
    controller_to_dict,
    deal_board,
)


class TestCodec(unittest.TestCase):
    def test_given_staged_board_when_encoded_through_json_then_exact_state_restored(self):
        b = deal_board(7, 5, [1, 2, 3], seed=17)
        b.player_tokens[2].score = 4
        b.at(1, 1).whose_target = 3
        b.stage_insertion(Direction.WEST, 1)
        obj = json.loads(json.dumps(board_to_dict(b)))
        self.assertEqual(obj['loosePosition'], ['WEST', 1])
        self.assertEqual(obj['cells'][1][1]['target'], 3)
        self.assertEqual(obj['tokens'][1], {'player': 2, 'position': [4, 6], 'score': 4})
        back = board_from_dict(obj)
        self.assertEqual(board_to_dict(back), board_to_dict(b))
        self.assertEqual(back.loose_tile_position, (Direction.WEST, 1))
        self.assertEqual(back.reachable_coords((2, 3)), b.reachable_coords((2, 3)))

    def test_given_controller_when_encoded_then_phase_and_active_player_kept(self):
        ctl = TurnController.new_game(7, 7, [1, 2], seed=6)
        ctl.insert(Direction.SOUTH, 2)
        obj = controller_to_dict(ctl)
        self.assertEqual(obj['phase'], 'move')
        self.assertEqual(obj['activePlayer'], 1)
        back = controller_from_dict(obj)
        self.assertIs(back.phase, Phase.MOVE)
        self.assertEqual(back.active_player, 1)
        self.assertEqual(back.reachable(), ctl.reachable())

    def test_given_malformed_payloads_when_decoding_then_errors(self):
        good = board_to_dict(deal_board(5, 5, [1], seed=0))
        with self.assertRaises(DecodeError):
            board_from_dict({'cells': 'nope'})
        bad_shape = json.loads(json.dumps(good))
        bad_shape['cells'][0][1]['shape'] = 'Q'
        with self.assertRaises(DecodeError):
            board_from_dict(bad_shape)
        bad_tok = json.loads(json.dumps(good))
        bad_tok['tokens'][0]['position'] = [9, 9]
        with self.assertRaises(OutOfBoundsError):
            board_from_dict(bad_tok)
        crowded = json.loads(json.dumps(good))
        crowded['tokens'] = [{'player': i, 'position': [0, 0], 'score': 0} for i in range(5)]
        with self.assertRaises(TooManyPlayersError):
            board_from_dict(crowded)
        bad_slot = json.loads(json.dumps(good))
        bad_slot['loosePosition'] = ['UP', 0]
        with self.assertRaises(DecodeError):
            board_from_dict(bad_slot)
        wrong_size = json.loads(json.dumps(good))
        wrong_size['width'] = 7
        with self.assertRaises(DecodeError):
            board_from_dict(wrong_size)
        with self.assertRaises(DecodeError):
            controller_from_dict({'board': good, 'phase': 'dance'})
        with self.assertRaises(DecodeError):
            controller_from_dict({'board': good, 'activePlayer': 'abc'})

    def test_given_tampered_corner_when_decoding_then_rejected(self):
        good = board_to_dict(deal_board(5, 5, [1], seed=0))
        blocked = json.loads(json.dumps(good))
        blocked['cells'][0][0]['shape'] = 'X'
        with self.assertRaises(DecodeError):
            board_from_dict(blocked)
        turned = json.loads(json.dumps(good))
        turned['cells'][4][4]['orientation'] = 'EAST'
        with self.assertRaises(DecodeError):
            board_from_dict(turned)
        # A target marker on a corner does not change its passages
        marked = json.loads(json.dumps(good))
        marked['cells'][0][4]['target'] = 1
        self.assertEqual(len(board_from_dict(marked).at(0, 4).paths()), 2)

    def test_given_repeated_player_id_when_decoding_then_rejected(self):
        obj = board_to_dict(deal_board(5, 5, [1, 2], seed=0))
        obj['tokens'][1]['player'] = 1
        with self.assertRaises(DecodeError):
            board_from_dict(obj)


if __name__ == '__main__':
    unittest.main(verbosity=2)
