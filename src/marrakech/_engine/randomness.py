# Area: Engine
"""
marrakech._engine.randomness — Injectable randomness provider
=============================================================

Dice rolls, turn-order shuffles and id generation all draw from a
RandomSource so a session can be replayed from a seed.
"""

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Seedable randomness used by the engine and orchestrator.

    Args:
        seed: Optional seed; None draws from system entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def choice(self, items: Sequence[T]) -> T:
        return items[self._rng.randrange(len(items))]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a Fisher-Yates shuffled copy of items."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            result[i], result[j] = result[j], result[i]
        return result

    def token_hex(self, nbytes: int = 12) -> str:
        return f"{self._rng.getrandbits(nbytes * 8):0{nbytes * 2}x}"
