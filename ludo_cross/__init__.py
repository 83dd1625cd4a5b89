from .board import Board
from .config import Config, ConfigError, PlayerStart, default_config
from .dice import Dice
from .game import Game
from .piece import Piece
from .session import Session
from .types import (
    Color,
    GameResult,
    Move,
    Position,
    PositionType,
    TokenId,
    TurnOutcome,
    TurnRecord,
)

__all__ = [
    "Board",
    "Color",
    "Config",
    "ConfigError",
    "default_config",
    "Dice",
    "Game",
    "GameResult",
    "Move",
    "Piece",
    "PlayerStart",
    "Position",
    "PositionType",
    "Session",
    "TokenId",
    "TurnOutcome",
    "TurnRecord",
]
