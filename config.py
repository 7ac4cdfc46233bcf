"""
config.py — Runtime Settings
=============================
One frozen Settings object is built at start-up and handed to the
session, the playback controller and the snapshot store.  Nothing in
the core reads module-level state.

Every field can be overridden from the environment:

    SORTVIZ_BASE_DELAY_MS=300 SORTVIZ_LOOP=true python main.py

Accepted formats: ints, floats, booleans (1/true/yes/on, 0/false/no/off)
and comma-separated integer lists for tuple fields.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional, Tuple

from errors import InvalidArgumentError

ENV_PREFIX = "SORTVIZ_"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    # playback
    base_delay_ms:         int   = 600      # delay between auto-advances at 1.0x
    loop_restart_delay_ms: int   = 1000     # pause on the last step before looping
    min_speed:             float = 0.1
    max_speed:             float = 5.0
    default_speed:         float = 1.0
    auto_play:             bool  = False
    loop:                  bool  = False

    # time travel
    max_snapshots:         int   = 100

    # input
    max_input_length:      int   = 20
    default_algorithm:     str   = "bubble_sort"
    default_data:          Tuple[int, ...] = (64, 34, 25, 12, 22, 11, 90)

    log_level:             str   = "INFO"

    def __post_init__(self):
        if self.base_delay_ms <= 0 or self.loop_restart_delay_ms < 0:
            raise InvalidArgumentError("Delays must be positive")
        if not (0 < self.min_speed <= self.default_speed <= self.max_speed):
            raise InvalidArgumentError(
                f"default_speed {self.default_speed} must lie in "
                f"[{self.min_speed}, {self.max_speed}]"
            )
        if self.max_snapshots < 1:
            raise InvalidArgumentError("max_snapshots must be at least 1")
        if self.max_input_length < 1:
            raise InvalidArgumentError("max_input_length must be at least 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Defaults, overridden by any SORTVIZ_* variables present."""
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            overrides[f.name] = _coerce(f.name, raw, getattr(cls, f.name))
        return replace(cls(), **overrides)


def _coerce(name: str, raw: str, default):
    text = raw.strip()
    try:
        if isinstance(default, bool):
            lowered = text.lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(text)
        if isinstance(default, int):
            return int(text)
        if isinstance(default, float):
            return float(text)
        if isinstance(default, tuple):
            return tuple(int(part) for part in text.split(",") if part.strip())
    except ValueError:
        raise InvalidArgumentError(f"{ENV_PREFIX}{name.upper()}: invalid value {raw!r}") from None
    return text


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


__all__ = ["Settings", "configure_logging", "ENV_PREFIX"]
