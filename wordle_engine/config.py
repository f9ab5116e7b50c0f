"""
config.py

Engine settings and logging setup shared by the CLIs.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

RANKING_METHODS = ("frequency", "entropy")
DEVIATION_MODES = ("clamped", "raw", "normalized")
OPTIMAL_UNIVERSES = ("pool", "allowed")


@dataclass(frozen=True)
class EngineConfig:
    word_length: int = 5
    max_guesses: int = 6
    ranking: str = "frequency"
    entropy_workers: int = 1
    deviation_mode: str = "clamped"
    optimal_universe: str = "pool"
    track_optimal: bool = True
    allow_off_list: bool = True
    suggestion_limit: int = 10

    def __post_init__(self) -> None:
        if self.word_length != 5:
            raise ValueError("only 5-letter words are supported")
        if self.max_guesses <= 0:
            raise ValueError("max_guesses must be a positive integer")
        if self.ranking not in RANKING_METHODS:
            raise ValueError(f"ranking must be one of {RANKING_METHODS}")
        if self.entropy_workers <= 0:
            raise ValueError("entropy_workers must be a positive integer")
        if self.deviation_mode not in DEVIATION_MODES:
            raise ValueError(f"deviation_mode must be one of {DEVIATION_MODES}")
        if self.optimal_universe not in OPTIMAL_UNIVERSES:
            raise ValueError(f"optimal_universe must be one of {OPTIMAL_UNIVERSES}")
        if self.suggestion_limit <= 0:
            raise ValueError("suggestion_limit must be a positive integer")

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, prefix: str = "WORDLE_") -> "EngineConfig":
        """
        Build a config from environment variables, e.g. WORDLE_MAX_GUESSES=8
        or WORDLE_RANKING=entropy. Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(prefix + f.name.upper())
            if raw is None:
                continue
            if f.type in ("bool", bool):
                overrides[f.name] = raw.strip().lower() in ("1", "true", "yes", "on")
            elif f.type in ("int", int):
                overrides[f.name] = int(raw)
            else:
                overrides[f.name] = raw.strip().lower()
        return cls(**overrides)

    def with_overrides(self, **kwargs) -> "EngineConfig":
        """Return a copy with the non-None keyword values applied."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})


def configure_logging(verbosity: int = 0) -> None:
    """0 -> WARNING, 1 -> INFO, 2+ -> DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
