from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class Dice:
    """Six-sided die over an injected, seedable random source."""

    seed: Optional[int] = None
    rng: Optional[random.Random] = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = random.Random(self.seed)

    def roll(self) -> int:
        return self.rng.randint(1, 6)
