from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import numpy as np
from loguru import logger

from .config import Config, default_config
from .piece import Piece
from .types import (
    EXIT_STEPS,
    MAX_STACK,
    TOKENS_PER_PLAYER,
    Color,
    Move,
    Position,
    PositionType,
    TokenId,
    TurnOutcome,
)

CAPTURE_BONUS = 20
HOME_BONUS = 10
FORFEIT_SIXES = 3


@dataclass(slots=True)
class Board:
    """Authoritative token store and rule engine.

    Pieces are kept in one fixed list of four per seated color, indexed by
    slot. Nothing outside this class should move a piece during play;
    ``apply_move`` and ``apply_bonus_move`` are the only mutating entry points.
    """

    config: Config = field(default_factory=default_config)
    pieces: Dict[Color, List[Piece]] = field(init=False)
    _consecutive_sixes: Dict[Color, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.pieces = {}
        self._consecutive_sixes = {}
        for color in self.config.PLAYERS:
            color = Color(color)
            row: List[Piece] = []
            for slot in range(TOKENS_PER_PLAYER):
                pos = (
                    Position.start()
                    if slot < self.config.TOKENS_ON_START
                    else Position.base()
                )
                row.append(Piece(token=TokenId(color, slot), position=pos))
            self.pieces[color] = row
            self._consecutive_sixes[color] = 0

    # --- Lookups ---
    def _row(self, color: Color) -> List[Piece]:
        """Map a color to its piece row; unseated colors are a programming error."""
        row = self.pieces.get(color)
        if row is None:
            raise IndexError(f"Color {color!r} is not seated on this board")
        return row

    def piece(self, token: TokenId) -> Piece:
        row = self._row(token.color)
        if not 0 <= token.slot < len(row):
            raise IndexError(f"Unknown token {token}")
        return row[token.slot]

    def tokens_of(self, color: Color) -> List[TokenId]:
        return [pc.token for pc in self._row(color)]

    def position(self, token: TokenId) -> Position:
        return self.piece(token).position

    def consecutive_sixes(self, color: Color) -> int:
        self._row(color)
        return self._consecutive_sixes[color]

    def finished_count(self, color: Color) -> int:
        return sum(1 for pc in self._row(color) if pc.kind is PositionType.HOME)

    def _cell_of(self, color: Color, pos: Position) -> int:
        """Absolute ring cell of a START/TRACK position owned by ``color``."""
        if pos.kind is PositionType.START:
            return self.config.start_index(color)
        if pos.kind is not PositionType.TRACK:
            raise ValueError(f"Not a ring position: {pos}")
        return pos.index % self.config.TRACK_LENGTH

    def cell_of(self, token: TokenId) -> Optional[int]:
        """Absolute ring cell of ``token``, or None when it is off the ring."""
        pos = self.position(token)
        return self._cell_of(token.color, pos) if pos.on_track else None

    def tokens_on_cell(self, cell: int) -> List[TokenId]:
        out: List[TokenId] = []
        for color, row in self.pieces.items():
            for pc in row:
                if pc.position.on_track and self._cell_of(color, pc.position) == cell:
                    out.append(pc.token)
        return out

    def track_occupancy(self) -> np.ndarray:
        """Return a (TRACK_LENGTH,) array with the number of tokens on each ring cell."""
        counts = np.zeros(self.config.TRACK_LENGTH, dtype=np.int64)
        for color, row in self.pieces.items():
            for pc in row:
                if pc.position.on_track:
                    counts[self._cell_of(color, pc.position)] += 1
        return counts

    def own_block_cells(self, color: Color) -> Set[int]:
        """Ring cells holding exactly two tokens, both of ``color``."""
        counts: Dict[int, int] = {}
        for pc in self._row(color):
            if pc.position.on_track:
                cell = self._cell_of(color, pc.position)
                counts[cell] = counts.get(cell, 0) + 1
        return {
            cell
            for cell, cnt in counts.items()
            if cnt == MAX_STACK and len(self.tokens_on_cell(cell)) == MAX_STACK
        }

    def _is_block(self, cell: int) -> bool:
        tokens = self.tokens_on_cell(cell)
        if len(tokens) < MAX_STACK:
            return False
        if tokens[0].color == tokens[1].color:
            return True
        # Mixed pairs only stop traffic on safe or start cells
        return cell in self.config.SAFE_CELLS or cell in self.config.start_cells

    # --- Target computation ---
    def distance_from_start(self, token: TokenId) -> Optional[int]:
        """Cells travelled from the owner's Start; None in Base or Home."""
        pos = self.position(token)
        length = self.config.TRACK_LENGTH
        if pos.on_track:
            start = self.config.start_index(token.color)
            return (self._cell_of(token.color, pos) - start + length) % length
        if pos.kind is PositionType.HOME_LANE:
            return length + pos.index
        return None

    def _path_blocked(self, start: int, distance: int, steps: int) -> bool:
        length = self.config.TRACK_LENGTH
        for k in range(1, steps + 1):
            if self._is_block((start + distance + k) % length):
                return True
        return False

    def target_position(self, token: TokenId, steps: int) -> Optional[Position]:
        """Where ``token`` would land after ``steps`` cells, or None if it cannot.

        Exact entry into Home is mandatory. Ring targets are rejected when the
        path crosses a block or the destination already holds two tokens.
        """
        distance = self.distance_from_start(token)
        if distance is None or steps <= 0:
            return None
        length = self.config.TRACK_LENGTH
        target = distance + steps
        if target > self.config.home_distance:
            return None
        if target == self.config.home_distance:
            return Position.home()
        if target >= length:
            return Position.home_lane(target - length)

        start = self.config.start_index(token.color)
        cell = (start + target) % length
        if self._path_blocked(start, distance, steps):
            return None
        if len(self.tokens_on_cell(cell)) >= MAX_STACK:
            return None
        if cell == start:
            return Position.start()
        return Position.track(cell)

    # --- Legality ---
    def legal_moves(self, color: Color, dice_roll: int) -> List[Move]:
        row = self._row(color)
        if not 1 <= dice_roll <= 6:
            logger.warning(f"Dice value {dice_roll} outside 1..6 for {Color(color).name}")
            return []

        moves: List[Move] = []
        start = self.config.start_index(color)
        if dice_roll == 5 and not self.tokens_on_cell(start):
            moves.extend(
                Move(pc.token, EXIT_STEPS) for pc in row if pc.kind is PositionType.BASE
            )

        steps = dice_roll
        if dice_roll == 6 and not any(pc.kind is PositionType.BASE for pc in row):
            steps = 7
        for pc in row:
            if self.target_position(pc.token, steps) is not None:
                moves.append(Move(pc.token, steps))

        if dice_roll == 6:
            blocked = self.own_block_cells(color)
            if blocked:
                forced = [
                    mv
                    for mv in moves
                    if self.position(mv.token).on_track
                    and self._cell_of(color, self.position(mv.token)) in blocked
                ]
                if forced:
                    return forced
        return moves

    def has_any_legal_move(self, color: Color, dice_roll: int) -> bool:
        return bool(self.legal_moves(color, dice_roll))

    def is_movable(self, token: TokenId, dice_roll: int) -> bool:
        return any(mv.token == token for mv in self.legal_moves(token.color, dice_roll))

    def bonus_moves(self, color: Color, bonus_steps: int) -> List[Move]:
        """Moves that can spend a capture/home bonus, under ordinary targeting rules."""
        row = self._row(color)
        if bonus_steps <= 0:
            return []
        return [
            Move(pc.token, bonus_steps)
            for pc in row
            if self.target_position(pc.token, bonus_steps) is not None
        ]

    # --- Applying moves ---
    def apply_move(self, color: Color, dice_roll: int, move: Move) -> TurnOutcome:
        """Apply a move chosen from ``legal_moves(color, dice_roll)``.

        A move that is not currently legal leaves the board untouched and
        returns an empty outcome.
        """
        piece = self.piece(move.token)
        if move not in self.legal_moves(color, dice_roll):
            logger.warning(
                f"Rejected illegal move {move.token} +{move.steps} on roll {dice_roll}"
            )
            return TurnOutcome.no_effect()

        if dice_roll == 6:
            self._consecutive_sixes[color] += 1
        else:
            self._consecutive_sixes[color] = 0

        if self._consecutive_sixes[color] >= FORFEIT_SIXES:
            self._forfeit(piece)
            self._consecutive_sixes[color] = 0
            return TurnOutcome.no_effect()

        if move.is_exit:
            piece.move_to(Position.start())
            logger.debug(f"{piece.token} leaves base")
            return TurnOutcome(winner=self.winner_if_any())
        return self._advance(color, piece, move.steps)

    def apply_bonus_move(self, color: Color, move: Move) -> TurnOutcome:
        """Spend a bonus on ``move``; the consecutive-six count is not touched."""
        piece = self.piece(move.token)
        if move not in self.bonus_moves(color, move.steps):
            logger.warning(f"Rejected illegal bonus move {move.token} +{move.steps}")
            return TurnOutcome.no_effect()
        return self._advance(color, piece, move.steps)

    def _forfeit(self, piece: Piece) -> None:
        logger.debug(f"Third six in a row: {piece.token} forfeits from {piece.position}")
        if piece.kind is PositionType.HOME_LANE:
            piece.move_to(Position.home_lane(0))
        elif piece.position.on_track:
            piece.send_to_base()

    def _lone_enemy(self, color: Color, cell: int) -> Optional[Piece]:
        tokens = self.tokens_on_cell(cell)
        if len(tokens) != 1 or tokens[0].color == color:
            return None
        return self.piece(tokens[0])

    def _advance(self, color: Color, piece: Piece, steps: int) -> TurnOutcome:
        # Recomputed against the live board, never cached from the legality pass
        target = self.target_position(piece.token, steps)
        if target is None:
            logger.warning(f"{piece.token} cannot move {steps} from {piece.position}")
            return TurnOutcome.no_effect()

        capture = False
        if target.on_track:
            cell = self._cell_of(color, target)
            cfg = self.config
            victim = None
            if cell not in cfg.SAFE_CELLS and cell != cfg.start_index(color):
                victim = self._lone_enemy(color, cell)
            # A token on its own start cell is never captured
            if victim is not None and cell != cfg.start_index(victim.token.color):
                logger.debug(f"{piece.token} captures {victim.token} on cell {cell}")
                victim.send_to_base()
                capture = True

        old = piece.position
        piece.move_to(target)
        reached_home = target.kind is PositionType.HOME
        logger.debug(f"{piece.token} {old} -> {target}")

        if capture:
            bonus = CAPTURE_BONUS
        elif reached_home:
            bonus = HOME_BONUS
        else:
            bonus = 0
        return TurnOutcome(
            capture=capture,
            reached_home=reached_home,
            bonus_steps=bonus,
            winner=self.winner_if_any(),
        )

    # --- Game end ---
    def winner_if_any(self) -> Optional[Color]:
        for color in self.config.PLAYERS:
            if all(pc.kind is PositionType.HOME for pc in self._row(Color(color))):
                return Color(color)
        return None

    def reset_consecutive_sixes(self, color: Color) -> None:
        self._row(color)
        self._consecutive_sixes[color] = 0
