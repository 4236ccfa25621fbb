"""Text-generation source interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol

from ..presets import SAFETY_SETTINGS, SYSTEM_PROMPT


@dataclass(frozen=True)
class GenerationRequest:
    vibe: str
    system_prompt: str = SYSTEM_PROMPT
    max_tokens: int = SAFETY_SETTINGS["max_tokens"]
    temperature: float = SAFETY_SETTINGS["temperature"]
    max_operations: int = SAFETY_SETTINGS["max_operations"]


class CommandSource(Protocol):
    name: str

    def stream(self, request: GenerationRequest) -> Iterator[str]:
        ...


class SourceRegistry:
    def __init__(self, sources: Iterable[CommandSource]) -> None:
        self._sources = {source.name: source for source in sources}

    def get(self, name: str) -> CommandSource | None:
        return self._sources.get(name)

    def list(self) -> list[str]:
        return sorted(self._sources.keys())
