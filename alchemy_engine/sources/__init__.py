"""Command source registry."""

from __future__ import annotations

from .base import CommandSource, GenerationRequest, SourceRegistry
from .dryrun import DryRunSource


def default_registry(seed: int | None = None) -> SourceRegistry:
    return SourceRegistry([DryRunSource(seed=seed)])
