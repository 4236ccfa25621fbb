"""Dry-run command source (offline)."""

from __future__ import annotations

import random
from typing import Iterator

from ..grammar.splitter import split_command
from ..presets import READY_EFFECTS
from .base import GenerationRequest


class DryRunSource:
    name = "dryrun"

    def __init__(self, seed: int | None = None, chunk_size: int = 12) -> None:
        self._rng = random.Random(seed)
        self.chunk_size = max(1, chunk_size)

    def stream(self, request: GenerationRequest) -> Iterator[str]:
        commands = sorted(READY_EFFECTS.values())
        within = [command for command in commands if len(split_command(command)) <= request.max_operations]
        command = self._rng.choice(within or commands)
        for start in range(0, len(command), self.chunk_size):
            yield command[start : start + self.chunk_size]
