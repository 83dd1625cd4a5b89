from __future__ import annotations

import unittest

from ludo_cross.board import Board
from ludo_cross.config import Config
from ludo_cross.types import Color, Move, Position, TokenId

RED0 = TokenId(Color.RED, 0)
RED1 = TokenId(Color.RED, 1)
RED2 = TokenId(Color.RED, 2)
RED3 = TokenId(Color.RED, 3)


def place(board: Board, color: Color, slot: int, position: Position) -> None:
    board.piece(TokenId(color, slot)).move_to(position)


class FiveExitsBaseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board()

    def test_occupied_start_prevents_exit(self) -> None:
        self.assertEqual(self.board.legal_moves(Color.RED, 5), [Move(RED0, 5)])

    def test_free_start_lets_every_base_token_exit(self) -> None:
        place(self.board, Color.RED, 0, Position.track(7))
        self.assertEqual(
            self.board.legal_moves(Color.RED, 5),
            [Move(RED1, 0), Move(RED2, 0), Move(RED3, 0), Move(RED0, 5)],
        )

    def test_enemy_on_start_prevents_exit(self) -> None:
        place(self.board, Color.RED, 0, Position.track(7))
        place(self.board, Color.BLUE, 0, Position.track(0))
        moves = self.board.legal_moves(Color.RED, 5)
        self.assertFalse(any(mv.is_exit for mv in moves))

    def test_other_rolls_never_exit(self) -> None:
        place(self.board, Color.RED, 0, Position.track(7))
        for roll in (1, 2, 3, 4, 6):
            moves = self.board.legal_moves(Color.RED, roll)
            self.assertFalse(any(mv.is_exit for mv in moves), roll)


class SixToSevenTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board()

    def test_six_stays_six_while_base_not_empty(self) -> None:
        self.assertEqual(self.board.legal_moves(Color.RED, 6), [Move(RED0, 6)])

    def test_six_becomes_seven_with_empty_base(self) -> None:
        place(self.board, Color.RED, 0, Position.track(3))
        place(self.board, Color.RED, 1, Position.track(15))
        place(self.board, Color.RED, 2, Position.track(25))
        place(self.board, Color.RED, 3, Position.home())
        moves = self.board.legal_moves(Color.RED, 6)
        self.assertEqual(moves, [Move(RED0, 7), Move(RED1, 7), Move(RED2, 7)])
        self.assertEqual(self.board.target_position(RED0, 7), Position.track(10))

    def test_seven_feeds_lane_entry(self) -> None:
        board = Board(config=Config(HOME_LANE_LENGTH=8))
        place(board, Color.RED, 0, Position.track(39))
        for slot in (1, 2, 3):
            place(board, Color.RED, slot, Position.home())
        self.assertEqual(board.legal_moves(Color.RED, 6), [Move(RED0, 7)])
        self.assertEqual(board.target_position(RED0, 7), Position.home_lane(6))

    def test_seven_overshooting_home_is_not_legal(self) -> None:
        place(self.board, Color.RED, 0, Position.track(39))
        for slot in (1, 2, 3):
            place(self.board, Color.RED, slot, Position.home())
        self.assertEqual(self.board.legal_moves(Color.RED, 6), [])


class BlockTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board()
        place(self.board, Color.RED, 0, Position.track(10))

    def test_cannot_cross_enemy_block(self) -> None:
        place(self.board, Color.BLUE, 0, Position.track(12))
        place(self.board, Color.BLUE, 1, Position.track(12))
        self.assertEqual(self.board.legal_moves(Color.RED, 3), [])
        self.assertFalse(self.board.is_movable(RED0, 3))
        self.assertEqual(self.board.legal_moves(Color.RED, 1), [Move(RED0, 1)])
        self.assertEqual(self.board.target_position(RED0, 1), Position.track(11))
        self.assertTrue(self.board.is_movable(RED0, 1))

    def test_cannot_land_on_block(self) -> None:
        place(self.board, Color.BLUE, 0, Position.track(12))
        place(self.board, Color.BLUE, 1, Position.track(12))
        self.assertIsNone(self.board.target_position(RED0, 2))
        self.assertEqual(self.board.legal_moves(Color.RED, 2), [])

    def test_mixed_pair_on_safe_cell_blocks(self) -> None:
        place(self.board, Color.RED, 0, Position.track(17))
        place(self.board, Color.BLUE, 0, Position.track(20))  # joins GREEN#0 on its start
        self.assertIsNone(self.board.target_position(RED0, 4))
        self.assertEqual(self.board.target_position(RED0, 2), Position.track(19))

    def test_mixed_pair_on_plain_cell_is_passable(self) -> None:
        place(self.board, Color.RED, 0, Position.track(11))
        place(self.board, Color.BLUE, 0, Position.track(13))
        place(self.board, Color.GREEN, 0, Position.track(13))
        self.assertEqual(self.board.target_position(RED0, 4), Position.track(15))
        # Two tokens already on 13
        self.assertIsNone(self.board.target_position(RED0, 2))

    def test_own_block_is_impassable_too(self) -> None:
        place(self.board, Color.RED, 1, Position.track(12))
        place(self.board, Color.RED, 2, Position.track(12))
        self.assertIsNone(self.board.target_position(RED0, 3))
        self.assertEqual(self.board.own_block_cells(Color.RED), {12})


class ForcedBlockExitTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board()
        place(self.board, Color.RED, 0, Position.track(5))
        place(self.board, Color.RED, 1, Position.track(5))
        place(self.board, Color.RED, 2, Position.track(15))

    def test_six_must_break_own_block(self) -> None:
        moves = self.board.legal_moves(Color.RED, 6)
        self.assertEqual(moves, [Move(RED0, 6), Move(RED1, 6)])

    def test_other_rolls_are_not_pruned(self) -> None:
        moves = self.board.legal_moves(Color.RED, 4)
        self.assertEqual(moves, [Move(RED0, 4), Move(RED1, 4), Move(RED2, 4)])

    def test_stuck_block_falls_back_to_other_moves(self) -> None:
        place(self.board, Color.BLUE, 0, Position.track(8))
        place(self.board, Color.BLUE, 1, Position.track(8))
        self.assertEqual(self.board.legal_moves(Color.RED, 6), [Move(RED2, 6)])


class ExactEntryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board()
        place(self.board, Color.RED, 0, Position.home_lane(2))

    def test_exact_roll_reaches_home(self) -> None:
        self.assertEqual(self.board.target_position(RED0, 2), Position.home())
        self.assertIn(Move(RED0, 2), self.board.legal_moves(Color.RED, 2))

    def test_short_roll_moves_along_lane(self) -> None:
        self.assertEqual(self.board.target_position(RED0, 1), Position.home_lane(3))

    def test_overshoot_has_no_move(self) -> None:
        for roll in (3, 4, 6):
            self.assertFalse(self.board.is_movable(RED0, roll), roll)

    def test_every_overshoot_distance_is_rejected(self) -> None:
        home = self.board.config.home_distance
        for distance in range(0, home):
            if distance < self.board.config.TRACK_LENGTH:
                pos = Position.track(distance) if distance else Position.start()
            else:
                pos = Position.home_lane(distance - self.board.config.TRACK_LENGTH)
            place(self.board, Color.RED, 0, pos)
            for steps in range(1, 8):
                target = self.board.target_position(RED0, steps)
                if distance + steps > home:
                    self.assertIsNone(target, (distance, steps))
                elif distance + steps == home:
                    self.assertEqual(target, Position.home(), (distance, steps))


class MiscLegalityTests(unittest.TestCase):
    def setUp(self) -> None:
        self.board = Board()

    def test_out_of_range_dice_yield_no_moves(self) -> None:
        self.assertEqual(self.board.legal_moves(Color.RED, 0), [])
        self.assertEqual(self.board.legal_moves(Color.RED, 7), [])

    def test_home_tokens_never_move(self) -> None:
        place(self.board, Color.RED, 0, Position.home())
        for roll in range(1, 7):
            moves = self.board.legal_moves(Color.RED, roll)
            self.assertFalse(any(mv.token == RED0 for mv in moves), roll)

    def test_has_any_legal_move(self) -> None:
        self.assertTrue(self.board.has_any_legal_move(Color.RED, 1))
        place(self.board, Color.RED, 0, Position.home())
        self.assertFalse(self.board.has_any_legal_move(Color.RED, 1))


if __name__ == "__main__":
    unittest.main()
