from __future__ import annotations

import hashlib
import logging
import random
from typing import Callable, Union

logger = logging.getLogger(__name__)

RandomFunction = Callable[[], float]
Seed = Union[int, str]

DEFAULT_SEED = "zone"


def derive_seed(source: str) -> int:
    """Derive a 64-bit integer seed from an arbitrary string using SHA256."""
    digest = hashlib.sha256(source.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def random_function(seed: Seed) -> RandomFunction:
    """Return a deterministic ``() -> float in [0, 1)`` stream for ``seed``.

    Each call builds a fresh, private random.Random so two functions created
    from the same seed produce identical sequences and never share state with
    the global ``random`` module.
    """
    if isinstance(seed, bool) or not isinstance(seed, (int, str)):
        seed = str(seed)
    value = seed & 0xFFFFFFFFFFFFFFFF if isinstance(seed, int) else derive_seed(seed)
    logger.debug("Random source for seed %r -> %d", seed, value)
    return random.Random(value).random
