"""Injectable source of randomness for workout generation."""

import random
from typing import Any, MutableSequence, Protocol


class RandomSource(Protocol):
    """Anything that can shuffle a list in place, e.g. ``random.Random``."""

    def shuffle(self, x: MutableSequence[Any]) -> None:
        ...


def default_random() -> RandomSource:
    return random.SystemRandom()
