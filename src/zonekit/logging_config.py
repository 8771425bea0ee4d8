import logging
import os
from typing import Mapping, Optional

ENV_LOG_LEVEL = "ZONEKIT_LOG_LEVEL"

# -v, -vv on the command line
_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def level_for_verbosity(verbosity: int) -> int:
    return _VERBOSITY_LEVELS[max(0, min(verbosity, len(_VERBOSITY_LEVELS) - 1))]


def configure_logging(
    default_level: int = logging.INFO,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """Set up root logging for the zonekit CLI and return the level applied.

    ZONEKIT_LOG_LEVEL (a level name such as DEBUG) wins over ``default_level``;
    unknown names fall back to the default.
    """
    env = os.environ if env is None else env
    level = default_level
    name = env.get(ENV_LOG_LEVEL, "").strip().upper()
    if name:
        candidate = logging.getLevelName(name)
        if isinstance(candidate, int):
            level = candidate
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)-7s %(name)s: %(message)s")
    return level
