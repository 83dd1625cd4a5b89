from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from .board import Board
from .config import Config, default_config, sim_config
from .dice import Dice
from .session import Session
from .strategy import FirstMoveStrategy, Strategy
from .types import Color, GameResult, TurnRecord

# Rolls allowed per applied move before a stalled game is abandoned.
ROLL_LIMIT_FACTOR = 20


@dataclass(slots=True)
class Game:
    """Batch simulation: every color is driven by a move-choice Strategy."""

    config: Config = field(default_factory=default_config)
    strategies: Optional[Dict[Color, Strategy]] = None
    seed: Optional[int] = None
    bonus_policy: Optional[Strategy] = None
    session: Session = field(init=False)

    def __post_init__(self) -> None:
        if self.strategies is None:
            self.strategies = {Color(c): FirstMoveStrategy() for c in self.config.PLAYERS}
        missing = [Color(c).name for c in self.config.PLAYERS if c not in self.strategies]
        if missing:
            raise ValueError(f"No strategy for {', '.join(missing)}")
        self.session = Session(
            board=Board(config=self.config),
            dice=Dice(seed=self.seed),
            bonus_policy=self.bonus_policy or FirstMoveStrategy(),
        )

    @property
    def board(self) -> Board:
        return self.session.board

    def play_turn(self) -> TurnRecord:
        """Roll once for the current color and play the strategy's choice."""
        session = self.session
        color = session.current_color
        passed = session.roll()
        if passed is not None:
            return passed

        legal = list(session.legal_moves)
        choice = self.strategies[color].select_move(legal)
        record = session.play(choice) if choice is not None else None
        if record is None:
            logger.warning(
                f"Strategy for {color.name} returned an unplayable move, using first legal"
            )
            record = session.play(legal[0])
        return record

    def play_until_win(self, max_turns: Optional[int] = None) -> GameResult:
        limit = max_turns if max_turns is not None else sim_config.MAX_TURNS
        history: List[TurnRecord] = []
        session = self.session
        while (
            not session.finished
            and session.applied_moves < limit
            and session.rolls < limit * ROLL_LIMIT_FACTOR
        ):
            history.append(self.play_turn())

        if session.winner is None:
            logger.info(f"No winner after {session.applied_moves} moves")
        return GameResult(
            turns=session.applied_moves, winner=session.winner, history=history
        )
