import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .types import MAX_STACK, Color

load_dotenv()


class ConfigError(ValueError):
    """Malformed board configuration."""


@dataclass(frozen=True, slots=True)
class PlayerStart:
    """Seat of one color.

    Movement is measured from ``start_index``; ``lane_entry_index`` is
    informational and not used when computing targets.
    """

    color: Color
    start_index: int  # ring cell a token lands on when leaving Base
    lane_entry_index: int  # last ring cell before the colored lane


def _default_starts() -> tuple[PlayerStart, ...]:
    return (
        PlayerStart(Color.RED, 0, 39),
        PlayerStart(Color.BLUE, 10, 9),
        PlayerStart(Color.GREEN, 20, 19),
        PlayerStart(Color.YELLOW, 30, 29),
    )


@dataclass(frozen=True, slots=True)
class Config:
    TRACK_LENGTH: int = 40
    HOME_LANE_LENGTH: int = 4
    SAFE_CELLS: frozenset[int] = field(
        default_factory=lambda: frozenset({0, 10, 20, 30})
    )
    STARTS: tuple[PlayerStart, ...] = field(default_factory=_default_starts)
    # Turn order
    PLAYERS: tuple[Color, ...] = field(
        default_factory=lambda: (Color.RED, Color.BLUE, Color.GREEN, Color.YELLOW)
    )
    # Slots 0..TOKENS_ON_START-1 begin on Start, the rest in Base
    TOKENS_ON_START: int = 1

    def __post_init__(self) -> None:
        if self.TRACK_LENGTH <= 0:
            raise ConfigError("TRACK_LENGTH must be positive")
        if self.HOME_LANE_LENGTH <= 0:
            raise ConfigError("HOME_LANE_LENGTH must be positive")
        for cell in self.SAFE_CELLS:
            if not 0 <= cell < self.TRACK_LENGTH:
                raise ConfigError(f"Safe cell {cell} is outside the track")
        if not 2 <= len(self.PLAYERS) <= 4:
            raise ConfigError("PLAYERS must hold between 2 and 4 colors")
        if len(set(self.PLAYERS)) != len(self.PLAYERS):
            raise ConfigError("PLAYERS must not repeat a color")
        if not 0 <= self.TOKENS_ON_START <= MAX_STACK:
            raise ConfigError(
                f"TOKENS_ON_START must be between 0 and {MAX_STACK}"
            )
        for ps in self.STARTS:
            for name, idx in (
                ("start", ps.start_index),
                ("lane entry", ps.lane_entry_index),
            ):
                if not 0 <= idx < self.TRACK_LENGTH:
                    raise ConfigError(
                        f"{Color(ps.color).name} {name} index {idx} is outside the track"
                    )
        # Every seated color needs complete start data
        for color in self.PLAYERS:
            self._entry(color)
        if len(self.start_cells) != len(self.PLAYERS):
            raise ConfigError("Seated colors must not share a start cell")

    def _entry(self, color: Color) -> PlayerStart:
        for ps in self.STARTS:
            if ps.color == color:
                return ps
        raise ConfigError(f"No start entry for color {Color(color).name}")

    def start_index(self, color: Color) -> int:
        return self._entry(color).start_index

    def lane_entry_index(self, color: Color) -> int:
        return self._entry(color).lane_entry_index

    @property
    def home_distance(self) -> int:
        """Distance from a color's Start at which a token is Home."""
        return self.TRACK_LENGTH + self.HOME_LANE_LENGTH

    @property
    def start_cells(self) -> frozenset[int]:
        return frozenset(self.start_index(c) for c in self.PLAYERS)


def default_config() -> Config:
    """Four-player board: 40-cell ring, 4-cell lanes, symmetric safe cells."""
    return Config()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else None


@dataclass(slots=True)
class SimulationConfig:
    MAX_TURNS: int = int(os.getenv("MAX_TURNS", 2000))
    SEED: Optional[int] = _optional_int("SEED")
    STRATEGY: str = os.getenv("STRATEGY", "first")
    NUM_GAMES: int = int(os.getenv("NUM_GAMES", 1))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        if self.MAX_TURNS <= 0:
            raise ConfigError("MAX_TURNS must be positive")
        if self.NUM_GAMES <= 0:
            raise ConfigError("NUM_GAMES must be positive")


sim_config = SimulationConfig()
