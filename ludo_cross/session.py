from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .board import Board
from .config import Config
from .dice import Dice
from .strategy import FirstMoveStrategy, Strategy
from .types import Color, Move, Position, TokenId, TurnRecord


@dataclass(slots=True)
class Session:
    """Roll / pick-a-token turn sequencing over a Board.

    The session never moves a piece itself; it only calls the board's public
    operations and keeps track of whose turn it is. Bonus steps granted by a
    capture or a home arrival are spent immediately on the move chosen by
    ``bonus_policy`` among ``Board.bonus_moves``.
    """

    board: Board
    dice: Dice = field(default_factory=Dice)
    bonus_policy: Strategy = field(default_factory=FirstMoveStrategy)
    current_index: int = 0
    pending_roll: Optional[int] = None
    legal_moves: List[Move] = field(default_factory=list)
    finished: bool = False
    winner: Optional[Color] = None
    message: str = "Roll the dice"
    last_record: Optional[TurnRecord] = None
    applied_moves: int = 0
    rolls: int = 0

    @classmethod
    def for_config(cls, config: Config, **kwargs) -> "Session":
        return cls(board=Board(config=config), **kwargs)

    @property
    def current_color(self) -> Color:
        return Color(self.board.config.PLAYERS[self.current_index])

    @property
    def status_text(self) -> str:
        return self.message

    def position(self, token: TokenId) -> Position:
        return self.board.position(token)

    def _next_player(self) -> None:
        self.current_index = (self.current_index + 1) % len(self.board.config.PLAYERS)

    def _move_for(self, token: TokenId) -> Optional[Move]:
        for mv in self.legal_moves:
            if mv.token == token:
                return mv
        return None

    def is_token_movable_now(self, token: TokenId) -> bool:
        if self.finished or self.pending_roll is None:
            return False
        if token.color != self.current_color:
            return False
        return self._move_for(token) is not None

    def roll(self) -> Optional[TurnRecord]:
        """Roll for the current color.

        Returns the finished TurnRecord when the roll is a forced pass, None
        when a token must now be selected (or the roll was refused).
        """
        if self.finished:
            return None
        if self.pending_roll is not None:
            self.message = "Choose a token to move first"
            return None

        color = self.current_color
        value = self.dice.roll()
        self.rolls += 1
        self.legal_moves = self.board.legal_moves(color, value)
        logger.debug(f"{color.name} rolled {value}, {len(self.legal_moves)} legal moves")

        if not self.legal_moves:
            # An unplayable six keeps the run of sixes going
            if value != 6:
                self.board.reset_consecutive_sixes(color)
            record = TurnRecord(color=color, dice_roll=value)
            self.last_record = record
            self.message = f"{color.name} rolled {value}, no legal moves"
            self._next_player()
            return record

        self.pending_roll = value
        self.message = f"{color.name} rolled {value}. Choose a token."
        return None

    def select(self, token: TokenId) -> Optional[TurnRecord]:
        """Move ``token`` with the pending roll, as a click on it would."""
        if self.finished:
            return None
        if self.pending_roll is None:
            self.message = "Roll the dice first"
            return None
        if token.color != self.current_color:
            self.message = f"It is {self.current_color.name}'s turn"
            return None
        move = self._move_for(token)
        if move is None:
            self.message = "That token cannot move"
            return None
        return self.play(move)

    def play(self, move: Move) -> Optional[TurnRecord]:
        if self.finished or self.pending_roll is None or move not in self.legal_moves:
            return None

        color = self.current_color
        value = self.pending_roll
        outcome = self.board.apply_move(color, value, move)
        self.applied_moves += 1
        record = TurnRecord(color=color, dice_roll=value, move=move, outcome=outcome)
        # A six always leaves the count at 1 or 2 unless the third one forfeited
        record.forfeited = value == 6 and self.board.consecutive_sixes(color) == 0

        if outcome.bonus_steps:
            self._apply_bonus(record, outcome.bonus_steps)

        self.pending_roll = None
        self.legal_moves = []
        self.last_record = record

        winner = self.board.winner_if_any()
        if winner is not None:
            self.finished = True
            self.winner = winner
            self.message = f"Winner: {winner.name}"
            logger.info(f"{winner.name} wins after {self.applied_moves} moves")
            return record

        if record.forfeited:
            self._next_player()
            self.message = f"Three sixes in a row, turn passes to {self.current_color.name}"
        elif value == 6:
            record.extra_turn = True
            self.message = f"{color.name}: extra turn (6). Roll the dice."
        else:
            self._next_player()
            self.message = f"{self.current_color.name} to move. Roll the dice."
        return record

    def _apply_bonus(self, record: TurnRecord, bonus_steps: int) -> None:
        candidates = self.board.bonus_moves(record.color, bonus_steps)
        if not candidates:
            logger.debug(f"{record.color.name} has no token able to use +{bonus_steps}")
            return
        choice = self.bonus_policy.select_move(candidates)
        if choice is None:
            return
        record.bonus_move = choice
        record.bonus_outcome = self.board.apply_bonus_move(record.color, choice)
        self.applied_moves += 1
        logger.debug(
            f"Bonus move {choice.token} +{bonus_steps} => {self.board.position(choice.token)}"
        )
