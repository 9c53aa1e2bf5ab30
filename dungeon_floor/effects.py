"""
Floor effects attached to EFFECT tiles.

The grid and generator treat effects as opaque handles. What an effect does
when stepped on is decided by the game code that reads it back.
"""

import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

import numpy as np


@dataclass(frozen=True)
class TileEffect:
    """Describes what happens when an entity steps on an effect tile."""

    name: str
    description: str = ""
    health_change: int = 0  # positive heals, negative damages
    affects_player: bool = True
    affects_enemies: bool = True
    activation_message: str = ""


DEFAULT_EFFECT = TileEffect(
    name="Healing Spring",
    description="Restores health",
    health_change=10,
    affects_player=True,
    affects_enemies=False,
    activation_message="You feel refreshed! +10 HP",
)


class EffectProvider(Protocol):
    """Supplies effect handles to the generator."""

    def random_effect(self, rng: np.random.Generator) -> Optional[Any]:
        ...


class EffectCatalog:
    """
    A fixed list of effects to draw from.

    An empty catalog is a configuration mistake; it warns and hands out
    DEFAULT_EFFECT so generation can still finish.
    """

    def __init__(self, effects: Sequence[TileEffect] = ()) -> None:
        self.effects: List[TileEffect] = list(effects)

    def random_effect(self, rng: np.random.Generator) -> TileEffect:
        if not self.effects:
            print("Warning: EffectCatalog is empty, using default effect", file=sys.stderr)
            return DEFAULT_EFFECT
        return self.effects[int(rng.integers(len(self.effects)))]
