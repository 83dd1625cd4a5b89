from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Sequence, Type

from .types import Move


class Strategy(Protocol):
    name: str

    def select_move(self, legal_moves: Sequence[Move]) -> Move | None:
        ...


@dataclass(slots=True)
class FirstMoveStrategy:
    """Always plays the first legal move (exit moves first, then slot order)."""

    name: str = "first"

    def select_move(self, legal_moves: Sequence[Move]) -> Move | None:
        return next(iter(legal_moves), None)


@dataclass(slots=True)
class RandomStrategy:
    name: str = "random"
    rng_seed: int | None = None
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.rng_seed)

    def select_move(self, legal_moves: Sequence[Move]) -> Move | None:
        if not legal_moves:
            return None
        return self._rng.choice(list(legal_moves))


STRATEGY_REGISTRY: Dict[str, Type] = {
    "first": FirstMoveStrategy,
    "random": RandomStrategy,
}


def create(strategy_name: str, seed: Optional[int] = None) -> Strategy:
    cls = STRATEGY_REGISTRY.get(strategy_name.lower())
    if cls is None:
        raise KeyError(f"Unknown strategy '{strategy_name}'.")
    if cls is RandomStrategy:
        return RandomStrategy(rng_seed=seed)
    return cls()


def available() -> Dict[str, Type]:
    return dict(STRATEGY_REGISTRY)
