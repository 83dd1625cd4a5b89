from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional

# Step count reserved for "leave Base onto Start".
EXIT_STEPS = 0
TOKENS_PER_PLAYER = 4
# Most tokens a single ring cell may hold (a block).
MAX_STACK = 2


class Color(IntEnum):
    RED = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3


class PositionType(Enum):
    BASE = "base"
    START = "start"
    TRACK = "track"
    HOME_LANE = "home_lane"
    HOME = "home"


@dataclass(frozen=True, slots=True)
class Position:
    """Where a token sits.

    ``index`` is only meaningful for TRACK (absolute ring cell) and
    HOME_LANE (lane cell); it is 0 for every other kind.
    """

    kind: PositionType
    index: int = 0

    @classmethod
    def base(cls) -> "Position":
        return cls(PositionType.BASE)

    @classmethod
    def start(cls) -> "Position":
        return cls(PositionType.START)

    @classmethod
    def track(cls, index: int) -> "Position":
        return cls(PositionType.TRACK, index)

    @classmethod
    def home_lane(cls, index: int) -> "Position":
        return cls(PositionType.HOME_LANE, index)

    @classmethod
    def home(cls) -> "Position":
        return cls(PositionType.HOME)

    @property
    def on_track(self) -> bool:
        """True for START and TRACK, the two kinds living on the shared ring."""
        return self.kind in (PositionType.START, PositionType.TRACK)

    def __str__(self) -> str:
        if self.kind in (PositionType.TRACK, PositionType.HOME_LANE):
            return f"{self.kind.name}({self.index})"
        return self.kind.name


@dataclass(frozen=True, slots=True)
class TokenId:
    color: Color
    slot: int  # 0..3 per player

    def __str__(self) -> str:
        return f"{Color(self.color).name}#{self.slot}"


@dataclass(frozen=True, slots=True)
class Move:
    token: TokenId
    steps: int

    @property
    def is_exit(self) -> bool:
        return self.steps == EXIT_STEPS


@dataclass(frozen=True, slots=True)
class TurnOutcome:
    capture: bool = False
    reached_home: bool = False
    bonus_steps: int = 0
    winner: Optional[Color] = None

    @classmethod
    def no_effect(cls) -> "TurnOutcome":
        return cls()


@dataclass(slots=True)
class TurnRecord:
    """One roll as seen by an orchestrator."""

    color: Color
    dice_roll: int
    move: Optional[Move] = None
    outcome: Optional[TurnOutcome] = None
    bonus_move: Optional[Move] = None
    bonus_outcome: Optional[TurnOutcome] = None
    forfeited: bool = False
    extra_turn: bool = False


@dataclass(slots=True)
class GameResult:
    turns: int  # applied token movements, bonus moves included
    winner: Optional[Color] = None
    history: List[TurnRecord] = field(default_factory=list)
