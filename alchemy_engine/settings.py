"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .raster import DEFAULT_MAX_DIMENSION
from .utils import getenv_flag, getenv_int


@dataclass(frozen=True)
class AlchemySettings:
    magick_binary: str = "convert"
    max_dimension: int = DEFAULT_MAX_DIMENSION
    retro: bool = True
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "AlchemySettings":
        binary = (os.getenv("ALCHEMY_MAGICK_BINARY") or "").strip() or "convert"
        raw_seed = (os.getenv("ALCHEMY_SEED") or "").strip()
        seed = int(raw_seed) if raw_seed.lstrip("-").isdigit() else None
        return cls(
            magick_binary=binary,
            max_dimension=max(1, getenv_int("ALCHEMY_MAX_DIMENSION", DEFAULT_MAX_DIMENSION)),
            retro=getenv_flag("ALCHEMY_RETRO", True),
            seed=seed,
        )
